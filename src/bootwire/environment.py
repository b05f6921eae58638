"""Layered ``.env`` loading and the environment name."""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENVIRONMENT_VARIABLE = 'BOOTWIRE_ENVIRONMENT'
DEFAULT_ENVIRONMENT = 'development'

_LITERALS = {
    'true': True,
    '(true)': True,
    'false': False,
    '(false)': False,
    'null': None,
    '(null)': None,
    'empty': '',
    '(empty)': '',
}


class Environment:
    """Name of the environment the process runs in (development, production, ...)."""

    def __init__(self, name: str = DEFAULT_ENVIRONMENT):
        self.name = name

    def contains(self, *names: str) -> bool:
        """Check whether the environment is one of ``names``."""
        return self.name in names

    @property
    def is_development(self) -> bool:
        return self.contains(DEFAULT_ENVIRONMENT)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Environment):
            return self.name == other.name
        if isinstance(other, str):
            return self.name == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Environment({self.name!r})"


def env(key: str, default: Any = None) -> Any:
    """
    Read an environment variable, converting literal keywords.

    ``true``/``false``/``null``/``empty`` (optionally in parentheses) become
    ``True``/``False``/``None``/``''``. Surrounding double quotes are stripped.

    Args:
        key: Variable name
        default: Value returned when the variable is not set

    Returns:
        Converted value or default
    """
    value = os.environ.get(key)
    if value is None:
        return default

    lowered = value.lower()
    if lowered in _LITERALS:
        return _LITERALS[lowered]

    if len(value) > 1 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]

    return value


def _load_file(path: Path) -> bool:
    if not path.is_file():
        logger.debug(f"Environment file not found: {path}")
        return False

    load_dotenv(path, override=True)
    logger.debug(f"Loaded environment file {path}")
    return True


def load_environment(
    root_dir: Union[str, Path],
    variable: str = ENVIRONMENT_VARIABLE,
    default: str = DEFAULT_ENVIRONMENT,
    name: Optional[str] = None
) -> Environment:
    """
    Load ``.env`` and ``.env.<environment>`` from the project root.

    Both files override variables already present in the process. Missing
    files are ignored.

    Args:
        root_dir: Directory holding the ``.env`` files
        variable: Variable naming the environment
        default: Environment used when the variable is unset or empty
        name: Explicit environment name, taking precedence over the variable

    Returns:
        The resolved Environment
    """
    root = Path(root_dir)
    _load_file(root / '.env')

    if name:
        os.environ[variable] = name

    resolved = env(variable, default) or default
    environment = Environment(str(resolved))

    _load_file(root / f".env.{environment.name}")

    logger.info(f"Running in '{environment}' environment")
    return environment
