"""Environment variable configuration loading.

Reads ``STRUCTGEN_*`` variables (optionally seeded from a ``.env`` file)
and returns only the fields that are actually set, validated through
`StructGenSettings`.
"""

import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .schema import FIELD_ORDER, StructGenSettings

ENV_PREFIX = "STRUCTGEN_"
ENV_VARS: dict[str, str] = {f"{ENV_PREFIX}{name.upper()}": name for name in FIELD_ORDER}


class EnvironmentConfigLoader:
    """Loads configuration from ``STRUCTGEN_*`` environment variables."""

    def load_env_config(self, env_file: str | Path | None = None) -> dict[str, Any]:
        """Return the configuration fields set in the environment.

        Args:
            env_file: Optional ``.env`` file loaded first. Existing
                environment variables win over values in the file.

        Raises:
            ValueError: If a variable holds a value that fails validation.
            FileNotFoundError: If `env_file` does not exist.
        """
        if env_file:
            self._load_env_file(env_file)

        env_values = {
            field: os.environ[var] for var, field in ENV_VARS.items() if var in os.environ
        }
        if not env_values:
            return {}

        try:
            parsed = StructGenSettings.model_validate(env_values)
        except ValidationError as e:
            shown = ", ".join(
                f"{var}=<redacted>" if "API_KEY" in var else f"{var}={os.environ[var]}"
                for var, field in ENV_VARS.items()
                if field in env_values
            )
            raise ValueError(f"Invalid environment variable values: {shown}. Error: {e}") from e

        return {field: getattr(parsed, field) for field in env_values}

    def _load_env_file(self, env_file: str | Path) -> None:
        env_path = Path(env_file)
        if not env_path.exists():
            raise FileNotFoundError(f"Environment file not found: {env_path}")

        with env_path.open(encoding="utf-8") as f:
            for line_num, raw in enumerate(f, 1):
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    raise ValueError(
                        f"Invalid format at line {line_num}: {line}. Expected KEY=VALUE."
                    )
                key, value = (part.strip() for part in line.split("=", 1))
                if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                    value = value[1:-1]
                os.environ.setdefault(key, value)

    def get_env_summary(self) -> dict[str, str]:
        """Return the set ``STRUCTGEN_*`` variables with secrets redacted."""
        return {
            var: "<redacted>" if "API_KEY" in var else os.environ[var]
            for var in ENV_VARS
            if var in os.environ
        }
