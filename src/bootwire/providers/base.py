"""Base class for service providers."""

import logging
from abc import ABC, abstractmethod

from ..container import Container
from ..exceptions import EmptyServiceNameError

logger = logging.getLogger(__name__)


class ServiceProvider(ABC):
    """Registration unit that binds a named service into the container."""

    def __init__(self, container: Container):
        self.container = container

    @abstractmethod
    def name(self) -> str:
        """Name of the service."""
        pass

    @abstractmethod
    def register(self) -> None:
        """Register the service."""
        pass

    def boot(self) -> None:
        """Hook run right after registration. Override in subclasses."""
        pass


def install(provider: ServiceProvider) -> ServiceProvider:
    """
    Register a provider's service and boot it.

    Raises:
        EmptyServiceNameError: If the provider reports an empty name
    """
    name = provider.name()
    if not name:
        raise EmptyServiceNameError(
            f"Service provider {provider.__class__.__name__} has an empty name"
        )

    provider.register()
    provider.boot()
    logger.debug(f"Installed service provider: {name}")
    return provider
