"""Configuration system: fragment loading, merging and caching."""

from .factory import ConfigFactory
from .loader import (
    FilesystemLoader,
    FragmentLoader,
    FragmentResult,
    FragmentStatus,
    LocalDirectoryLoader,
)
from .merge import deep_merge
from .repository import Config

__all__ = [
    "Config",
    "ConfigFactory",
    "FilesystemLoader",
    "FragmentLoader",
    "FragmentResult",
    "FragmentStatus",
    "LocalDirectoryLoader",
    "deep_merge",
]
