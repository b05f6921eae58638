"""Service providers and the provider registry."""

from .base import ServiceProvider, install
from .registry import PROVIDERS, get_provider, list_providers, register_provider

# Built-in providers register themselves on import
from .error_handler import ErrorHandler, ErrorHandlerServiceProvider
from .events import EventsManager, EventsManagerServiceProvider, Listener
from .logger import LoggerServiceProvider
from .services import (
    ConfigServiceProvider,
    DatabaseServiceProvider,
    EnvironmentServiceProvider,
    FilesystemServiceProvider,
)

__all__ = [
    "PROVIDERS",
    "ConfigServiceProvider",
    "DatabaseServiceProvider",
    "EnvironmentServiceProvider",
    "ErrorHandler",
    "ErrorHandlerServiceProvider",
    "EventsManager",
    "EventsManagerServiceProvider",
    "FilesystemServiceProvider",
    "Listener",
    "LoggerServiceProvider",
    "ServiceProvider",
    "get_provider",
    "install",
    "list_providers",
    "register_provider",
]
