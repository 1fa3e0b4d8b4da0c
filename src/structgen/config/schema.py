"""Configuration schema and validation using Pydantic.

`StructGenSettings` validates and coerces values gathered from programmatic
overrides, the environment and TOML files. Environment variables use the
``STRUCTGEN_`` prefix.
"""

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from structgen.constants import (
    DEFAULT_PROVIDER,
    MAX_OUTPUT_TOKENS,
    NETWORK_TIMEOUT,
    STAGE_TIMEOUT,
)

ProviderName = Literal[
    "google", "deepseek", "moonshot", "aliyun", "zhipu", "openai", "custom"
]

FIELD_ORDER: tuple[str, ...] = (
    "provider",
    "api_key",
    "base_url",
    "model",
    "request_timeout",
    "stage_timeout",
    "max_output_tokens",
    "seed",
)


class StructGenSettings(BaseSettings):
    """Pydantic settings schema for structgen configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STRUCTGEN_",
        env_file=None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: ProviderName = Field(
        default=DEFAULT_PROVIDER,
        description="Backend family; selects the adapter and its defaults",
    )

    api_key: str | None = Field(
        default=None,
        description="Credential for the selected provider",
    )

    base_url: str | None = Field(
        default=None,
        description="API root; required for the 'custom' provider",
    )

    model: str | None = Field(
        default=None,
        description="Model identifier; None means the provider default",
    )

    request_timeout: float = Field(
        default=NETWORK_TIMEOUT,
        description="Per-HTTP-request timeout in seconds",
        gt=0,
    )

    stage_timeout: float = Field(
        default=STAGE_TIMEOUT,
        description="Upper bound in seconds for one pipeline stage",
        gt=0,
    )

    max_output_tokens: int = Field(
        default=MAX_OUTPUT_TOKENS,
        description="Generation length limit forwarded to the backend",
        ge=1,
    )

    seed: int | None = Field(
        default=None,
        description="Determinism seed for backends that accept one",
    )

    # --- Validation Rules ---

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: Any) -> Any:
        """Accept provider names case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("api_key", "base_url", "model", "seed", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty or whitespace-only strings as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    def to_dict(self) -> dict[str, Any]:
        """Return field values in display order."""
        return {name: getattr(self, name) for name in FIELD_ORDER}
