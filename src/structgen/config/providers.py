"""Per-call provider selection.

Each backend family is described by a `ProviderSpec`: its default endpoint,
default model and whether it supports native schema-constrained output.
`build_provider_config` turns the frozen core configuration into the
concrete `ProviderConfig` an adapter is constructed from, failing fast on
missing credentials before any network call.
"""

from dataclasses import dataclass

from structgen.constants import DEFAULT_MODEL, GEMINI_BASE_URL
from structgen.core.exceptions import ConfigurationError, MissingCredentialError

from .types import FrozenConfig


@dataclass(frozen=True, slots=True)
class ProviderSpec:
    """Static description of one backend family."""

    name: str
    default_base_url: str | None
    default_model: str | None
    native_schema: bool = False


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Everything an adapter needs, with defaults already filled in."""

    provider: str
    api_key: str
    base_url: str
    model: str
    native_schema: bool
    request_timeout: float
    max_output_tokens: int
    seed: int | None = None

    def __repr__(self) -> str:
        """Repr with the credential redacted."""
        return (
            f"ProviderConfig(provider={self.provider!r}, api_key='[REDACTED]', "
            f"base_url={self.base_url!r}, model={self.model!r}, "
            f"native_schema={self.native_schema!r})"
        )


class ProviderConfigRegistry:
    """Registry of known provider families."""

    def __init__(self) -> None:  # noqa: D107
        self._specs: dict[str, ProviderSpec] = {}

    def register(self, spec: ProviderSpec) -> None:
        """Register (or replace) a provider family."""
        self._specs[spec.name] = spec

    def unregister(self, name: str) -> bool:
        """Remove a provider family; return whether it was registered."""
        return self._specs.pop(name, None) is not None

    def get(self, name: str) -> ProviderSpec:
        """Look up a provider family.

        Raises:
            ConfigurationError: If `name` is not registered.
        """
        try:
            return self._specs[name]
        except KeyError:
            raise ConfigurationError(
                f"Provider '{name}' not registered. "
                f"Available providers: {self.list_providers()}"
            ) from None

    def is_registered(self, name: str) -> bool:  # noqa: D102
        return name in self._specs

    def list_providers(self) -> list[str]:  # noqa: D102
        return list(self._specs)

    def build(self, base_config: FrozenConfig) -> ProviderConfig:
        """Resolve `base_config` into a concrete provider configuration.

        Raises:
            MissingCredentialError: If no API key is configured.
            ConfigurationError: If the provider is unknown or has no endpoint.
        """
        spec = self.get(base_config.provider)

        api_key = (base_config.api_key or "").strip()
        if not api_key:
            raise MissingCredentialError(
                f"API key missing for provider '{spec.name}'. Set STRUCTGEN_API_KEY, "
                "provide it in a config file, or pass it programmatically."
            )

        base_url = base_config.base_url or spec.default_base_url
        if not base_url:
            raise ConfigurationError(
                f"base_url is required for provider '{spec.name}'. "
                "Set STRUCTGEN_BASE_URL or pass it programmatically."
            )

        model = base_config.model or spec.default_model
        if not model:
            raise ConfigurationError(
                f"model is required for provider '{spec.name}'. "
                "Set STRUCTGEN_MODEL or pass it programmatically."
            )

        return ProviderConfig(
            provider=spec.name,
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            model=model,
            native_schema=spec.native_schema,
            request_timeout=base_config.request_timeout,
            max_output_tokens=base_config.max_output_tokens,
            seed=base_config.seed,
        )


BUILTIN_PROVIDERS: tuple[ProviderSpec, ...] = (
    ProviderSpec("google", GEMINI_BASE_URL, DEFAULT_MODEL, native_schema=True),
    ProviderSpec("deepseek", "https://api.deepseek.com", "deepseek-chat"),
    ProviderSpec("moonshot", "https://api.moonshot.cn/v1", "moonshot-v1-8k"),
    ProviderSpec(
        "aliyun", "https://dashscope.aliyuncs.com/compatible-mode/v1", "qwen-plus"
    ),
    ProviderSpec("zhipu", "https://open.bigmodel.cn/api/paas/v4", "glm-4"),
    ProviderSpec("openai", "https://api.openai.com/v1", "gpt-4o"),
    ProviderSpec("custom", None, None),
)

_global_registry = ProviderConfigRegistry()
for _spec in BUILTIN_PROVIDERS:
    _global_registry.register(_spec)


def get_provider_registry() -> ProviderConfigRegistry:
    """Return the process-wide provider registry."""
    return _global_registry


def register_provider(spec: ProviderSpec) -> None:
    """Register a provider family with the global registry."""
    _global_registry.register(spec)


def build_provider_config(base_config: FrozenConfig) -> ProviderConfig:
    """Build the provider configuration for one call via the global registry."""
    return _global_registry.build(base_config)


def list_registered_providers() -> list[str]:
    """List globally registered provider families."""
    return _global_registry.list_providers()
