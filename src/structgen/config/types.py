"""Configuration data types: resolve once, freeze, then flow.

`ResolvedConfig` is the audited result of merging every source.
`FrozenConfig` is the only configuration object handed to executors and
adapters.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

from structgen.constants import (
    DEFAULT_PROVIDER,
    MAX_OUTPUT_TOKENS,
    NETWORK_TIMEOUT,
    STAGE_TIMEOUT,
)

ConfigOrigin = Literal["programmatic", "env", "file", "default"]
SourceMap = Mapping[str, ConfigOrigin]

_SECRET = "[REDACTED]"


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing."""

    provider: str
    api_key: str | None
    base_url: str | None
    model: str | None
    request_timeout: float
    stage_timeout: float
    max_output_tokens: int
    seed: int | None

    # Where each field value came from
    origin: SourceMap

    def __repr__(self) -> str:
        """Repr with the credential redacted."""
        return (
            f"ResolvedConfig(provider={self.provider!r}, "
            f"api_key={_SECRET if self.api_key else None!r}, "
            f"base_url={self.base_url!r}, model={self.model!r}, "
            f"request_timeout={self.request_timeout!r}, "
            f"stage_timeout={self.stage_timeout!r}, "
            f"max_output_tokens={self.max_output_tokens!r}, seed={self.seed!r}, "
            f"origin={dict(self.origin)!r})"
        )

    __str__ = __repr__

    def to_frozen(self) -> "FrozenConfig":
        """Drop audit metadata and return the immutable pipeline config."""
        values = self._asdict()
        values.pop("origin")
        return FrozenConfig(**values)

    def with_overrides(self, **overrides: object) -> "ResolvedConfig":
        """Return a copy with known fields overridden and marked programmatic."""
        values = self._asdict()
        origin = dict(self.origin)
        for field, value in overrides.items():
            if field in values and field != "origin":
                values[field] = value
                origin[field] = "programmatic"
        values["origin"] = origin
        return ResolvedConfig(**values)

    def audit(self) -> str:
        """Redacted, line-per-field report of value origins."""
        from .audit import generate_redacted_audit

        return generate_redacted_audit(self._asdict(), self.origin)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration passed explicitly into each executor call."""

    provider: str = DEFAULT_PROVIDER
    api_key: str | None = None
    base_url: str | None = None
    model: str | None = None
    request_timeout: float = NETWORK_TIMEOUT
    stage_timeout: float = STAGE_TIMEOUT
    max_output_tokens: int = MAX_OUTPUT_TOKENS
    seed: int | None = None

    def __repr__(self) -> str:
        """Repr with the credential redacted."""
        return (
            f"FrozenConfig(provider={self.provider!r}, "
            f"api_key={_SECRET if self.api_key else None!r}, "
            f"base_url={self.base_url!r}, model={self.model!r}, "
            f"request_timeout={self.request_timeout!r}, "
            f"stage_timeout={self.stage_timeout!r}, "
            f"max_output_tokens={self.max_output_tokens!r}, seed={self.seed!r})"
        )

    __str__ = __repr__
