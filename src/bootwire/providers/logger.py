"""Logging service provider."""

import logging
import sys
from typing import Optional, Tuple

from ..environment import env
from ..exceptions import UnknownStreamError
from .base import ServiceProvider
from .registry import register_provider

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Logger and handler attached by the provider, replaced on every bootstrap
_attached: Optional[Tuple[logging.Logger, logging.Handler]] = None


def make_handler(stream: str) -> logging.Handler:
    """
    Build a log handler from a stream setting.

    Args:
        stream: ``stderr``, ``stdout`` or ``file:<path>``

    Returns:
        Configured handler

    Raises:
        UnknownStreamError: If the stream setting is not recognised
    """
    if stream == 'stderr':
        return logging.StreamHandler(sys.stderr)
    if stream == 'stdout':
        return logging.StreamHandler(sys.stdout)
    if stream.startswith('file:') and len(stream) > len('file:'):
        return logging.FileHandler(stream[len('file:'):], encoding='utf-8')

    raise UnknownStreamError(f"Unknown log stream: {stream!r}")


def detach_handler() -> None:
    """Remove and close the handler attached by the logger provider, if any."""
    global _attached

    if _attached is None:
        return

    target, handler = _attached
    target.removeHandler(handler)
    handler.close()
    target.propagate = True
    _attached = None


@register_provider('logger')
class LoggerServiceProvider(ServiceProvider):
    """Configures the ``bootwire`` logger from BOOTWIRE_LOG_* variables."""

    logger_name = 'bootwire'

    def name(self) -> str:
        return 'logger'

    def register(self) -> None:
        self.container.set_shared(self.name(), self._make_logger)

    def boot(self) -> None:
        self.container.get(self.name())

    def _make_logger(self, container) -> logging.Logger:
        global _attached

        logger = logging.getLogger(self.logger_name)
        stream = env('BOOTWIRE_LOG_STREAM')
        handler = make_handler(str(stream or 'stderr'))
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        detach_handler()
        root = logging.getLogger()
        if not root.handlers:
            root.addHandler(handler)
            _attached = (root, handler)
        elif stream:
            # Root handlers belong to the host; bootwire records go to the requested stream only
            logger.addHandler(handler)
            logger.propagate = False
            _attached = (logger, handler)
        else:
            handler.close()

        level: Optional[str] = env('BOOTWIRE_LOG_LEVEL')
        if level:
            logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
        return logger
