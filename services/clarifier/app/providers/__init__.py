from .clients import GenerationResult, ProviderClientError, generate_text, make_provider_client
from .registry import ProviderRegistry, ProviderStatus, build_default_registry

__all__ = [
    "ProviderRegistry",
    "ProviderStatus",
    "build_default_registry",
    "GenerationResult",
    "ProviderClientError",
    "generate_text",
    "make_provider_client",
]
