"""Error handler service provider: logs uncaught exceptions."""

import logging
import sys
from types import TracebackType
from typing import Callable, Optional, Type

from .base import ServiceProvider
from .registry import register_provider

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Installs a ``sys.excepthook`` that logs uncaught exceptions."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
        self._previous: Optional[Callable] = None

    @property
    def installed(self) -> bool:
        return self._previous is not None

    def install(self) -> None:
        if self.installed:
            return
        self._previous = sys.excepthook
        sys.excepthook = self.handle

    def uninstall(self) -> None:
        if not self.installed:
            return
        sys.excepthook = self._previous
        self._previous = None

    def handle(
        self,
        exc_type: Type[BaseException],
        exc_value: BaseException,
        traceback: Optional[TracebackType]
    ) -> None:
        previous = self._previous or sys.__excepthook__

        if issubclass(exc_type, KeyboardInterrupt):
            previous(exc_type, exc_value, traceback)
            return

        self.log.critical(
            f"Uncaught exception: {exc_value}",
            exc_info=(exc_type, exc_value, traceback)
        )


@register_provider('error_handler')
class ErrorHandlerServiceProvider(ServiceProvider):

    def name(self) -> str:
        return 'error_handler'

    def register(self) -> None:
        self.container.set_shared(self.name(), lambda container: ErrorHandler())

    def boot(self) -> None:
        self.container.get(self.name()).install()
