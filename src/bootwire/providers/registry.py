"""Registry of named service providers."""

import logging
from typing import Callable, Dict, List, Type

from ..container import Container
from ..exceptions import UnknownProviderError
from .base import ServiceProvider

logger = logging.getLogger(__name__)

PROVIDERS: Dict[str, Type[ServiceProvider]] = {}


def register_provider(name: str) -> Callable[[Type[ServiceProvider]], Type[ServiceProvider]]:
    """Class decorator adding a provider to the registry under ``name``."""

    def decorator(provider_class: Type[ServiceProvider]) -> Type[ServiceProvider]:
        PROVIDERS[name] = provider_class
        logger.debug(f"Registered provider: {name}")
        return provider_class

    return decorator


def list_providers() -> List[str]:
    """Get list of registered provider names."""
    return list(PROVIDERS.keys())


def get_provider(name: str, container: Container) -> ServiceProvider:
    """
    Instantiate a registered provider.

    Args:
        name: Provider name
        container: Container the provider registers into

    Returns:
        Provider instance

    Raises:
        UnknownProviderError: If no provider is registered under ``name``
    """
    if name not in PROVIDERS:
        raise UnknownProviderError(
            f"Provider '{name}' not registered. Available: {list_providers()}"
        )
    return PROVIDERS[name](container)
