"""Public API for the configuration system."""

from pathlib import Path
from typing import Any

from .resolver import ConfigResolver
from .types import ResolvedConfig

_resolver = ConfigResolver()


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    profile: str | None = None,
    use_env_file: str | Path | None = None,
    project_root: Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Programmatic > Environment > Project file > Home file > Defaults

    Args:
        programmatic: Overrides with the highest precedence.
        profile: Profile to load from configuration files. Defaults to the
            ``STRUCTGEN_PROFILE`` environment variable.
        use_env_file: Optional ``.env`` file loaded before reading the
            environment.
        project_root: Directory to search for ``pyproject.toml``.

    Returns:
        ResolvedConfig with merged values and per-field origins.

    Example:
        cfg = resolve_config({"provider": "deepseek"}).to_frozen()
    """
    return _resolver.resolve(
        programmatic=programmatic,
        profile=profile,
        use_env_file=use_env_file,
        project_root=project_root,
    )


def list_available_profiles(project_root: Path | None = None) -> dict[str, list[str]]:
    """List profile names from the project and home files."""
    return _resolver.list_available_profiles(project_root)


def check_environment() -> dict[str, str]:
    """Return the ``STRUCTGEN_*`` variables currently set, secrets redacted."""
    return _resolver.env_loader.get_env_summary()
