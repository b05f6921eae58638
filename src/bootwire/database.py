"""Database connection pool configured from environment variables."""

import logging
import os
import sqlite3
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from .exceptions import DatabaseConfigError, UnknownAdapterError

logger = logging.getLogger(__name__)

# Registry of connection factories keyed by adapter name
ADAPTERS: Dict[str, Callable[["DatabaseConfig"], Any]] = {}


class DatabaseConfig(BaseModel):
    """Connection settings for a single named database."""

    adapter: str = Field(
        description="Adapter name used to pick the connection factory (e.g. sqlite)"
    )
    host: Optional[str] = Field(default=None, description="Database server host")
    port: Optional[int] = Field(default=None, description="Database server port")
    dbname: Optional[str] = Field(
        default=None,
        description="Database name, or file path for sqlite"
    )
    username: Optional[str] = Field(default=None, description="Login user")
    password: Optional[str] = Field(default=None, description="Login password")
    charset: Optional[str] = Field(default=None, description="Connection character set")
    options: Dict[str, str] = Field(
        default_factory=dict,
        description="Adapter-specific options (SERVICE_DATABASE_<NAME>_OPTION_<KEY>)"
    )


def register_adapter(name: str, factory: Callable[[DatabaseConfig], Any]) -> None:
    """Register a connection factory for an adapter name."""
    ADAPTERS[name.lower()] = factory
    logger.debug(f"Registered database adapter: {name}")


def _connect_sqlite(config: DatabaseConfig) -> sqlite3.Connection:
    return sqlite3.connect(config.dbname or ':memory:')


register_adapter('sqlite', _connect_sqlite)


class ConnectionPool:
    """Lazily opens and caches one connection per database name."""

    PREFIX = 'SERVICE_DATABASE_'
    OPTION_PREFIX = 'OPTION_'

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize the pool.

        Args:
            environ: Variables to read settings from (defaults to os.environ)
        """
        self.environ = environ if environ is not None else os.environ
        self._connections: Dict[str, Any] = {}

    def get_prefix(self, name: str) -> str:
        return f"{self.PREFIX}{name.upper()}_"

    def names(self) -> List[str]:
        """Database names that declare an adapter in the environment."""
        names = set()
        for key in self.environ:
            if key.startswith(self.PREFIX) and key.endswith('_ADAPTER'):
                name = key[len(self.PREFIX):-len('_ADAPTER')]
                if name:
                    names.add(name.lower())
        return sorted(names)

    def config_for(self, name: str) -> DatabaseConfig:
        """
        Collect the settings for a database from the environment.

        Raises:
            DatabaseConfigError: If settings are missing or invalid
        """
        prefix = self.get_prefix(name)
        values: Dict[str, Any] = {}
        options: Dict[str, str] = {}

        for key, value in self.environ.items():
            if not key.startswith(prefix):
                continue
            field = key[len(prefix):]
            if field.startswith(self.OPTION_PREFIX):
                options[field[len(self.OPTION_PREFIX):].lower()] = value
            else:
                values[field.lower()] = value

        if options:
            values['options'] = options

        try:
            return DatabaseConfig(**values)
        except ValidationError as e:
            raise DatabaseConfigError(f"Invalid settings for database '{name}': {e}") from e

    def make_connection(self, config: DatabaseConfig) -> Any:
        adapter = config.adapter.lower()
        if adapter not in ADAPTERS:
            raise UnknownAdapterError(
                f"Database adapter '{config.adapter}' not supported. Available: {sorted(ADAPTERS)}"
            )
        return ADAPTERS[adapter](config)

    def get(self, name: str) -> Any:
        """Return the connection for ``name``, opening it on first use."""
        key = name.lower()
        if key not in self._connections:
            self._connections[key] = self.make_connection(self.config_for(key))
            logger.info(f"Opened database connection '{key}'")
        return self._connections[key]

    def close(self, name: str) -> bool:
        connection = self._connections.pop(name.lower(), None)
        if connection is None:
            return False
        connection.close()
        return True

    def close_all(self) -> None:
        for name in list(self._connections):
            self.close(name)
