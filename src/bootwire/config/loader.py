"""Fragment loaders: resolve a fragment name to its configuration mapping."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from botocore.exceptions import BotoCoreError, ClientError

from ..filesystem import Filesystem

logger = logging.getLogger(__name__)


class FragmentStatus(Enum):
    LOADED = 'loaded'
    MISSING = 'missing'
    MALFORMED = 'malformed'


@dataclass
class FragmentResult:
    """Outcome of loading a single configuration fragment."""
    name: str
    status: FragmentStatus
    path: str
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FragmentStatus.LOADED


class FragmentLoader(ABC):
    """Base class for fragment sources."""

    def __init__(self, extension: str = '.yaml'):
        self.extension = extension

    @abstractmethod
    def path_of(self, name: str) -> str:
        """Return the location of the fragment called ``name``."""
        pass

    @abstractmethod
    def read(self, name: str) -> str:
        """Return the raw text of a fragment, raising FileNotFoundError if absent."""
        pass

    @abstractmethod
    def list_files(self) -> List[str]:
        pass

    def names(self) -> List[str]:
        """Fragment names available to this loader, sorted."""
        return sorted(
            name[:-len(self.extension)]
            for name in self.list_files()
            if name.endswith(self.extension)
        )

    def load(self, name: str) -> FragmentResult:
        """
        Load and parse a fragment.

        Args:
            name: Fragment name, without extension

        Returns:
            FragmentResult describing the outcome; never raises for a
            missing or malformed fragment
        """
        path = self.path_of(name)

        try:
            text = self.read(name)
        except FileNotFoundError:
            return FragmentResult(name, FragmentStatus.MISSING, path)
        except (IOError, UnicodeDecodeError) as e:
            return FragmentResult(name, FragmentStatus.MALFORMED, path, error=str(e))

        try:
            value = yaml.safe_load(text)
        except yaml.YAMLError as e:
            return FragmentResult(name, FragmentStatus.MALFORMED, path, error=str(e))

        if value is None:
            value = {}

        if not isinstance(value, Mapping):
            return FragmentResult(
                name,
                FragmentStatus.MALFORMED,
                path,
                error=f"expected a mapping, got {type(value).__name__}"
            )

        logger.debug(f"Loaded fragment '{name}' from {path}")
        return FragmentResult(name, FragmentStatus.LOADED, path, data=dict(value))


class LocalDirectoryLoader(FragmentLoader):
    """Load fragments from ``<directory>/<name><extension>`` files."""

    def __init__(self, directory: Union[str, Path], extension: str = '.yaml'):
        super().__init__(extension)
        self.directory = Path(directory)

    def path_of(self, name: str) -> str:
        return str(self.directory / f"{name}{self.extension}")

    def read(self, name: str) -> str:
        with open(self.path_of(name), 'r', encoding='utf-8') as f:
            return f.read()

    def list_files(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        return [entry.name for entry in self.directory.iterdir() if entry.is_file()]


class FilesystemLoader(FragmentLoader):
    """Load fragments through a :class:`Filesystem` (local or S3)."""

    def __init__(self, filesystem: Filesystem, extension: str = '.yaml'):
        super().__init__(extension)
        self.filesystem = filesystem

    def path_of(self, name: str) -> str:
        return f"{self.filesystem.path_prefix}/{name}{self.extension}"

    def read(self, name: str) -> str:
        filename = f"{name}{self.extension}"
        try:
            if not self.filesystem.has(filename):
                raise FileNotFoundError(self.path_of(name))
            return self.filesystem.read(filename)
        except (ClientError, BotoCoreError) as e:
            # Denied or unreachable objects are unreadable, not absent
            raise IOError(f"Failed to read {self.path_of(name)}: {e}") from e

    def list_files(self) -> List[str]:
        return self.filesystem.list_files()
