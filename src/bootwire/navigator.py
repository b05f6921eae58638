"""Project directory layout."""

from pathlib import Path
from typing import Union


class Navigator:
    """Resolves the well-known directories of a project."""

    def __init__(
        self,
        root_dir: Union[str, Path],
        config_dirname: str = 'config',
        cache_dirname: str = 'var/cache/config'
    ):
        self._root = Path(root_dir).resolve()
        self._config = self._root / config_dirname
        self._cache = self._root / cache_dirname

    def root_dir(self, *parts: str) -> str:
        return str(self._root.joinpath(*parts))

    def config_dir(self, *parts: str) -> str:
        return str(self._config.joinpath(*parts))

    def config_cache_dir(self, *parts: str) -> str:
        return str(self._cache.joinpath(*parts))

    def __repr__(self) -> str:
        return f"Navigator(root_dir={str(self._root)!r})"
