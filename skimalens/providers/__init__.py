from skimalens.providers.registry import (
    PROVIDER_REGISTRY,
    find_provider_config,
    get_provider_config,
)
from skimalens.providers.types import ProviderConfig

__all__ = [
    "PROVIDER_REGISTRY",
    "ProviderConfig",
    "find_provider_config",
    "get_provider_config",
]
