"""Built-in service providers: environment, filesystem, config and database."""

import logging
from typing import Optional

from ..config import ConfigFactory, FilesystemLoader
from ..database import ConnectionPool
from ..environment import DEFAULT_ENVIRONMENT, ENVIRONMENT_VARIABLE, Environment, env
from ..filesystem import Filesystem, make_filesystem
from .base import ServiceProvider
from .registry import register_provider

logger = logging.getLogger(__name__)


@register_provider('environment')
class EnvironmentServiceProvider(ServiceProvider):
    """Registers the ``environment`` service, resolved by the bootstrap when given."""

    def __init__(self, container, environment: Optional[Environment] = None):
        super().__init__(container)
        self.environment = environment

    def name(self) -> str:
        return 'environment'

    def register(self) -> None:
        if self.environment is not None:
            self.container.set_shared(self.name(), self.environment)
            return

        self.container.set_shared(
            self.name(),
            lambda container: Environment(
                str(env(ENVIRONMENT_VARIABLE, DEFAULT_ENVIRONMENT) or DEFAULT_ENVIRONMENT)
            )
        )


@register_provider('filesystem')
class FilesystemServiceProvider(ServiceProvider):
    """Registers a ``filesystem`` factory taking the location to open."""

    def name(self) -> str:
        return 'filesystem'

    def register(self) -> None:
        self.container.set(self.name(), self._make_filesystem)

    def _make_filesystem(self, container, location: Optional[str] = None) -> Filesystem:
        if location is None:
            location = container.get('navigator').root_dir()
        return make_filesystem(location)


@register_provider('config')
class ConfigServiceProvider(ServiceProvider):
    """Loads every ``.yaml`` fragment of the config directory into one config."""

    factory_name = 'global'

    def name(self) -> str:
        return 'config'

    def register(self) -> None:
        self.container.set_shared(self.name(), self._make_config)

    def make_factory(self, container) -> ConfigFactory:
        navigator = container.get('navigator')
        loader = FilesystemLoader(container.get('filesystem', navigator.config_dir()))
        cache = container.get('filesystem', navigator.config_cache_dir())

        return ConfigFactory(
            self.factory_name,
            loader,
            cache,
            container.get('environment'),
            strict=bool(env('BOOTWIRE_CONFIG_STRICT', False))
        )

    def _make_config(self, container):
        factory = self.make_factory(container)
        config = factory.load(factory.loader.names())
        logger.debug(f"Loaded configuration with sections: {list(config.keys())}")
        return config


@register_provider('database')
class DatabaseServiceProvider(ServiceProvider):

    def name(self) -> str:
        return 'database'

    def register(self) -> None:
        self.container.set_shared(self.name(), lambda container: ConnectionPool())
