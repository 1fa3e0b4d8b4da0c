"""Configuration for structgen: resolve once, freeze, then flow.

Key components:
- ResolvedConfig: merged configuration with per-field origins
- FrozenConfig: immutable configuration passed into executors
- ProviderConfig: per-call provider view with defaults filled in
"""

from .api import check_environment, list_available_profiles, resolve_config
from .audit import SourceTracker, generate_redacted_audit, generate_telemetry_summary
from .file_loader import ConfigFileError, FileConfigLoader
from .providers import (
    BUILTIN_PROVIDERS,
    ProviderConfig,
    ProviderConfigRegistry,
    ProviderSpec,
    build_provider_config,
    get_provider_registry,
    list_registered_providers,
    register_provider,
)
from .resolver import ConfigResolver
from .schema import StructGenSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [  # noqa: RUF022
    # Resolution
    "resolve_config",
    "list_available_profiles",
    "check_environment",
    "ConfigResolver",
    "StructGenSettings",
    # Types
    "ResolvedConfig",
    "FrozenConfig",
    "ConfigOrigin",
    "SourceMap",
    # Audit
    "SourceTracker",
    "generate_redacted_audit",
    "generate_telemetry_summary",
    # Files
    "ConfigFileError",
    "FileConfigLoader",
    # Providers
    "BUILTIN_PROVIDERS",
    "ProviderConfig",
    "ProviderConfigRegistry",
    "ProviderSpec",
    "build_provider_config",
    "get_provider_registry",
    "list_registered_providers",
    "register_provider",
]
