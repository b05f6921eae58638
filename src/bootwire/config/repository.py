"""Merged configuration object exposed to the application."""

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Dict, Iterator, Optional

from .merge import deep_merge


class Config(Mapping):
    """Read-mostly mapping over a nested configuration dictionary."""

    def __init__(self, data: Optional[Mapping] = None):
        self._data: Dict[str, Any] = deep_merge({}, data or {})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Config({self._data!r})"

    def get_value(self, path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            path: Dot-separated path to config value (e.g. 'database.host')
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        value: Any = self._data

        for key in path.split('.'):
            if isinstance(value, Mapping) and key in value:
                value = value[key]
            else:
                return default

        return value

    def merge(self, other: Mapping) -> "Config":
        """Deep merge another mapping into this config and return self."""
        self._data = deep_merge(self._data, other)
        return self

    def mount(self, key: str, data: Mapping) -> "Config":
        """Place a mapping under a single top-level key, replacing what was there."""
        self._data[key] = deep_merge({}, data)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Return a deep copy of the configuration as plain dictionaries."""
        return deepcopy(self._data)
