"""Application bootstrap: builds the container and installs service providers."""

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Protocol, runtime_checkable

import yaml

from .container import Container
from .environment import ENVIRONMENT_VARIABLE, Environment, load_environment
from .exceptions import UnknownApplicationError, UnknownProviderError
from .navigator import Navigator
from .providers import EnvironmentServiceProvider, get_provider, install
from .providers.logger import detach_handler

logger = logging.getLogger(__name__)

PROVIDERS_FILE = 'providers.yaml'
SERVICES_FILE = 'services.yaml'


@runtime_checkable
class Application(Protocol):
    """Application handler registered as the ``application`` service."""

    def handle(self) -> Any:
        ...


class Bootstrap:
    """Wires the container, environment and service providers of a project."""

    def __init__(
        self,
        navigator: Navigator,
        environment: Optional[str] = None,
        environment_variable: str = ENVIRONMENT_VARIABLE
    ):
        """
        Bootstrap a project.

        Args:
            navigator: Project layout
            environment: Explicit environment name, overriding the variable
            environment_variable: Variable naming the environment
        """
        self.navigator = navigator
        self.container = Container()

        self.container.set_shared('bootstrap', self)
        self.container.set_shared('navigator', navigator)

        self.setup_environment(environment, environment_variable)
        self.install('logger')
        self.install('error_handler')
        self.install('events_manager')
        self.setup_services()

    def install(self, name: str) -> None:
        install(get_provider(name, self.container))

    def run(self) -> str:
        """
        Run the application.

        Returns:
            Content produced by the application handler

        Raises:
            UnknownApplicationError: If no application service is registered
        """
        if self.container.has('application'):
            application = self.container.get('application')
            if isinstance(application, Application):
                return str(application.handle())

        raise UnknownApplicationError('The application service is not defined')

    def close(self) -> None:
        """Release the handlers, hooks and connections the providers acquired."""
        if self.container.has('logger'):
            detach_handler()
        if self.container.has('error_handler'):
            self.container.get('error_handler').uninstall()
        if self.container.has('database'):
            self.container.get('database').close_all()

    def setup_environment(self, name: Optional[str], variable: str) -> None:
        """Load the ``.env`` files and register the environment they resolved."""
        try:
            environment = load_environment(self.navigator.root_dir(), variable=variable, name=name)
        except OSError as e:
            logger.warning(f"Failed to load environment files: {e}")
            environment = Environment(name) if name else Environment()

        install(EnvironmentServiceProvider(self.container, environment))

    def setup_services(self) -> None:
        """Install the built-in services, then those declared by the project."""
        events = self.container.get('events_manager')
        events.fire('bootstrap:beforeServices', self)

        self.setup_builtin_services()

        filesystem = self.container.get('filesystem', self.navigator.config_dir())

        providers = self._read_document(filesystem, PROVIDERS_FILE)
        if isinstance(providers, list):
            self.setup_service_providers(providers)
        elif providers is not None:
            logger.warning(f"Ignoring {PROVIDERS_FILE}: expected a list of provider names")

        services = self._read_document(filesystem, SERVICES_FILE)
        if isinstance(services, Mapping):
            self.set_raw_services(services)
        elif services is not None:
            logger.warning(f"Ignoring {SERVICES_FILE}: expected a mapping of services")

        events.fire('bootstrap:afterServices', self)

    def setup_builtin_services(self) -> None:
        self.install('filesystem')
        self.install('config')
        self.install('database')

    def setup_service_providers(self, providers: List[Any]) -> None:
        for name in providers:
            if not isinstance(name, str):
                logger.warning(f"Skipping invalid provider entry: {name!r}")
                continue
            try:
                self.install(name)
            except UnknownProviderError as e:
                logger.warning(f"Skipping provider: {e}")

    def set_raw_services(self, services: Mapping) -> None:
        for name, service in services.items():
            self.container.set_shared(str(name), service)

    def _read_document(self, filesystem, filename: str) -> Any:
        if not filesystem.has(filename):
            return None

        try:
            document = yaml.safe_load(filesystem.read(filename))
        except (yaml.YAMLError, IOError) as e:
            logger.warning(f"Failed to read {filename}: {e}")
            return None

        return document
