"""Merge configuration fragments and cache the result."""

import io
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional

from botocore.exceptions import BotoCoreError, ClientError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..environment import Environment
from ..exceptions import MalformedFragmentError
from ..filesystem import Filesystem
from .loader import FragmentLoader, FragmentResult, FragmentStatus
from .repository import Config

logger = logging.getLogger(__name__)

CACHE_HEADER = '# !! PLEASE DO NOT EDIT THIS FILE DIRECTLY !!\n'


class ConfigFactory:
    """Build a :class:`Config` from named fragments, reusing a cached artifact."""

    # Fragment merged at the top level instead of under its own name
    ROOT_FRAGMENT = 'config'

    prefix = '__'
    suffix = '__'
    extension = '.yaml'

    def __init__(
        self,
        name: str,
        loader: FragmentLoader,
        cache: Filesystem,
        environment: Environment,
        strict: bool = False
    ):
        """
        Initialize the factory.

        Args:
            name: Factory name, used to derive the cache artifact filename
            loader: Source of configuration fragments
            cache: Filesystem the cache artifact is written to
            environment: Current environment; the cache is bypassed in development
            strict: Raise on malformed fragments instead of skipping them
        """
        self.name = f"{self.prefix}{name}{self.suffix}"
        self.loader = loader
        self.cache = cache
        self.environment = environment
        self.strict = strict

    @property
    def cache_file(self) -> str:
        return f"{self.name}{self.extension}"

    def load(self, names: Iterable[str] = ()) -> Config:
        """
        Load all fragments and return the merged config.

        Outside development an existing cache artifact is returned as-is and
        no fragment is read. Otherwise the fragments are merged in order and
        the artifact is (re)written.

        Args:
            names: Fragment names in merge order

        Returns:
            Merged configuration
        """
        if not self.environment.is_development:
            cached = self._read_cache()
            if cached is not None:
                logger.debug(f"Using cached configuration {self.cache_file}")
                return Config(cached)

        config = Config()
        for name in names:
            self._merge(config, self.loader.load(name))

        self._dump(config.to_dict())
        return config

    def clear_cache(self) -> bool:
        """Delete the cache artifact. Returns whether one existed."""
        removed = self.cache.delete(self.cache_file)
        if removed:
            logger.info(f"Removed configuration cache {self.cache_file}")
        return removed

    def _merge(self, config: Config, fragment: FragmentResult) -> Config:
        if fragment.status is FragmentStatus.MISSING:
            logger.debug(f"Fragment '{fragment.name}' not found at {fragment.path}")
            return config

        if fragment.status is FragmentStatus.MALFORMED:
            if self.strict:
                raise MalformedFragmentError(
                    f"Malformed configuration fragment {fragment.path}: {fragment.error}"
                )
            logger.warning(f"Skipping malformed fragment {fragment.path}: {fragment.error}")
            return config

        if fragment.name == self.ROOT_FRAGMENT:
            return config.merge(fragment.data)
        return config.mount(fragment.name, fragment.data)

    def _read_cache(self) -> Optional[Dict[str, Any]]:
        try:
            if not self.cache.has(self.cache_file):
                return None
            data = YAML(typ='safe').load(self.cache.read(self.cache_file))
        except (YAMLError, IOError, ClientError, BotoCoreError) as e:
            logger.warning(f"Ignoring unreadable configuration cache {self.cache_file}: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, Mapping):
            logger.warning(f"Ignoring configuration cache {self.cache_file}: not a mapping")
            return None
        return dict(data)

    def _dump(self, data: Dict[str, Any]) -> None:
        yaml = YAML()
        yaml.default_flow_style = False

        stream = io.StringIO()
        stream.write(CACHE_HEADER)
        yaml.dump(data, stream)

        self.cache.put(self.cache_file, stream.getvalue())
        logger.debug(f"Wrote configuration cache {self.cache_file}")
