"""Minimal dependency injection container."""

import logging
from typing import Any, Dict, List

from .exceptions import ServiceNotFoundError

logger = logging.getLogger(__name__)


class _Definition:
    __slots__ = ('value', 'shared', 'resolved', 'instance')

    def __init__(self, value: Any, shared: bool):
        self.value = value
        self.shared = shared
        self.resolved = False
        self.instance = None


class Container:
    """
    Registry of named services.

    A definition is either a plain value, returned as-is, or a callable
    factory invoked with the container followed by any arguments passed to
    :meth:`get`. Shared definitions are resolved once and reused.
    """

    def __init__(self):
        self._services: Dict[str, _Definition] = {}

    def set(self, name: str, definition: Any) -> None:
        """Register a service that is rebuilt on every lookup."""
        self._services[name] = _Definition(definition, shared=False)
        logger.debug(f"Registered service: {name}")

    def set_shared(self, name: str, definition: Any) -> None:
        """Register a service resolved once and shared afterwards."""
        self._services[name] = _Definition(definition, shared=True)
        logger.debug(f"Registered shared service: {name}")

    def has(self, name: str) -> bool:
        return name in self._services

    def remove(self, name: str) -> None:
        self._services.pop(name, None)

    def names(self) -> List[str]:
        return list(self._services.keys())

    def get(self, name: str, *args: Any) -> Any:
        """
        Resolve a service.

        Args:
            name: Service name
            *args: Extra arguments passed to the factory

        Returns:
            The service instance

        Raises:
            ServiceNotFoundError: If the service is not registered
        """
        if name not in self._services:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")

        definition = self._services[name]

        if definition.shared and definition.resolved:
            return definition.instance

        instance = self._build(definition.value, args)

        if definition.shared:
            definition.instance = instance
            definition.resolved = True

        return instance

    def _build(self, value: Any, args: tuple) -> Any:
        if callable(value) and not isinstance(value, type):
            return value(self, *args)
        return value

    def __contains__(self, name: str) -> bool:
        return self.has(name)
