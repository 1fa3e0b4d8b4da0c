"""Configuration resolution with precedence handling.

Programmatic > Environment > Project file > Home file > Defaults
"""

import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .audit import SourceTracker
from .env_loader import EnvironmentConfigLoader
from .file_loader import ConfigFileError, FileConfigLoader
from .schema import FIELD_ORDER, StructGenSettings
from .types import ConfigOrigin, ResolvedConfig

log = logging.getLogger(__name__)


class ConfigResolver:
    """Merges configuration from every source in precedence order."""

    def __init__(self) -> None:  # noqa: D107
        self.file_loader = FileConfigLoader()
        self.env_loader = EnvironmentConfigLoader()

    def resolve(
        self,
        programmatic: dict[str, Any] | None = None,
        *,
        profile: str | None = None,
        use_env_file: str | Path | None = None,
        project_root: Path | None = None,
    ) -> ResolvedConfig:
        """Resolve configuration from all sources.

        Args:
            programmatic: Overrides with the highest precedence. Unknown keys
                are ignored.
            profile: File profile to load; defaults to ``STRUCTGEN_PROFILE``.
            use_env_file: Optional ``.env`` file read before the environment.
            project_root: Where to start looking for ``pyproject.toml``.

        Raises:
            ValueError: If the merged values fail validation or the
                environment holds invalid values.
            ConfigFileError: If the project file is malformed, or a
                requested profile exists nowhere.
        """
        tracker = SourceTracker()
        merged: dict[str, Any] = StructGenSettings.model_construct().to_dict()
        tracker.set_multiple(merged, "default")

        if profile is None:
            profile = os.getenv("STRUCTGEN_PROFILE") or None

        def apply(values: dict[str, Any], origin: ConfigOrigin) -> None:
            for field, value in values.items():
                if field in merged:
                    merged[field] = value
                    tracker.set_origin(field, origin)

        available = self.file_loader.list_available_profiles(project_root)
        if profile is not None and not any(profile in names for names in available.values()):
            raise ConfigFileError(
                self.file_loader.home_config_path(),
                f"Profile '{profile}' not found. Available profiles: {available}",
            )

        # Home file errors never block resolution.
        try:
            apply(self.file_loader.load_home_config(profile=profile), "file")
        except ConfigFileError as e:
            log.debug("Skipping home configuration: %s", e)

        try:
            apply(
                self.file_loader.load_project_config(
                    project_root=project_root, profile=profile
                ),
                "file",
            )
        except ConfigFileError:
            # A profile missing from the project file lives in the home file.
            if profile is None or profile in available["project"]:
                raise

        try:
            apply(self.env_loader.load_env_config(env_file=use_env_file), "env")
        except (ValueError, FileNotFoundError) as e:
            raise ValueError(f"Environment configuration error: {e}") from e

        if programmatic:
            apply(programmatic, "programmatic")

        try:
            settings = StructGenSettings.model_validate(merged)
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}") from e

        values = settings.to_dict()
        return ResolvedConfig(
            **{name: values[name] for name in FIELD_ORDER},
            origin=tracker.get_source_map(),
        )

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """Return profile names found in the project and home files."""
        return self.file_loader.list_available_profiles(project_root)
