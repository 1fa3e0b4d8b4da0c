"""Source tracking and redacted audit output for resolved configuration."""

from collections import Counter
from collections.abc import Mapping
from typing import Any

from .schema import FIELD_ORDER
from .types import ConfigOrigin, SourceMap

SENSITIVE_FIELDS = frozenset({"api_key"})


class SourceTracker:
    """Records where each configuration value came from during resolution."""

    def __init__(self) -> None:  # noqa: D107
        self._origins: dict[str, ConfigOrigin] = {}

    def set_origin(self, field: str, origin: ConfigOrigin) -> None:
        """Record the origin of a configuration field."""
        self._origins[field] = origin

    def set_multiple(self, fields: Mapping[str, Any], origin: ConfigOrigin) -> None:
        """Record the same origin for several fields."""
        for field in fields:
            self._origins[field] = origin

    def get_source_map(self) -> SourceMap:
        """Return a copy of the collected origins."""
        return dict(self._origins)


def generate_telemetry_summary(source_map: SourceMap) -> dict[str, int]:
    """Count fields per origin, e.g. ``{"env": 2, "default": 6}``."""
    return dict(Counter(source_map.values()))


def generate_redacted_audit(config_dict: Mapping[str, Any], source_map: SourceMap) -> str:
    """Render one ``field: origin:value`` line per field, hiding secrets.

    Example:
        provider: env:STRUCTGEN_PROVIDER=deepseek
        api_key: env:STRUCTGEN_API_KEY
        model: default:None
    """
    lines = []
    for field in FIELD_ORDER:
        if field not in source_map:
            continue
        origin = source_map[field]
        env_var = f"STRUCTGEN_{field.upper()}"
        if field in SENSITIVE_FIELDS:
            if config_dict.get(field) is None:
                shown = f"{origin}:None"
            elif origin == "env":
                shown = f"env:{env_var}"
            else:
                shown = f"{origin}:<redacted>"
        else:
            value = config_dict.get(field, "<missing>")
            shown = f"env:{env_var}={value}" if origin == "env" else f"{origin}:{value}"
        lines.append(f"{field}: {shown}")
    return "\n".join(lines)
