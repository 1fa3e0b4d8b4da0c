"""TOML configuration files with profile support.

Two files are consulted:

- project: ``[tool.structgen]`` in the nearest ``pyproject.toml``, with
  named profiles under ``[tool.structgen.profiles.<name>]``;
- home: ``~/.config/structgen.toml`` (or ``$STRUCTGEN_CONFIG_HOME/structgen.toml``),
  with profiles under ``[profiles.<name>]``.
"""

import os
from pathlib import Path
import tomllib
from typing import Any

HOME_CONFIG_NAME = "structgen.toml"


class ConfigFileError(Exception):
    """Raised when a configuration file cannot be loaded."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with the offending file, a message and the cause."""
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


class FileConfigLoader:
    """Loads configuration sections from project and home TOML files."""

    def load_project_config(
        self, project_root: Path | None = None, profile: str | None = None
    ) -> dict[str, Any]:
        """Load ``[tool.structgen]`` (or one of its profiles) from pyproject.

        Returns an empty dict when there is no pyproject or no section.

        Raises:
            ConfigFileError: If the file is malformed or `profile` is unknown.
        """
        path = self._find_pyproject_toml(project_root)
        if path is None:
            return {}
        section = self._read(path).get("tool", {}).get("structgen", {})
        return self._select(path, section, profile)

    def load_home_config(self, profile: str | None = None) -> dict[str, Any]:
        """Load the home configuration file (or one of its profiles).

        Raises:
            ConfigFileError: If the file is malformed or `profile` is unknown.
        """
        path = self.home_config_path()
        if not path.exists():
            return {}
        return self._select(path, self._read(path), profile)

    def list_available_profiles(
        self, project_root: Path | None = None
    ) -> dict[str, list[str]]:
        """Return profile names found in the project and home files."""
        found: dict[str, list[str]] = {"project": [], "home": []}

        path = self._find_pyproject_toml(project_root)
        if path is not None:
            try:
                section = self._read(path).get("tool", {}).get("structgen", {})
                found["project"] = list(section.get("profiles", {}))
            except ConfigFileError:
                pass

        home = self.home_config_path()
        if home.exists():
            try:
                found["home"] = list(self._read(home).get("profiles", {}))
            except ConfigFileError:
                pass

        return found

    @staticmethod
    def home_config_path() -> Path:
        """Location of the per-user configuration file."""
        base = os.getenv("STRUCTGEN_CONFIG_HOME")
        if base:
            return Path(base) / HOME_CONFIG_NAME
        return Path.home() / ".config" / HOME_CONFIG_NAME

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        try:
            with path.open(mode="rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigFileError(path, f"Failed to parse TOML: {e}", cause=e) from e

    @staticmethod
    def _select(path: Path, section: dict[str, Any], profile: str | None) -> dict[str, Any]:
        if not section:
            if profile:
                raise ConfigFileError(path, f"Profile '{profile}' not found. Available profiles: []")
            return {}
        profiles = section.get("profiles", {})
        if profile:
            if profile not in profiles:
                raise ConfigFileError(
                    path,
                    f"Profile '{profile}' not found. Available profiles: {list(profiles)}",
                )
            return dict(profiles[profile])
        config = dict(section)
        config.pop("profiles", None)
        return config

    @staticmethod
    def _find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
        current = Path(start_dir or Path.cwd()).resolve()
        for directory in (current, *current.parents):
            candidate = directory / "pyproject.toml"
            if candidate.exists():
                return candidate
        return None
