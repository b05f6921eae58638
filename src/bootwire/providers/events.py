"""Events manager service provider."""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Protocol, Tuple, Union, runtime_checkable

from .base import ServiceProvider
from .registry import register_provider

logger = logging.getLogger(__name__)


@runtime_checkable
class Listener(Protocol):
    """Object listening to events fired through the :class:`EventsManager`."""

    def handle(self, event: str, source: Any, data: Any = None) -> Any:
        ...


ListenerType = Union[Listener, Callable[[str, Any, Any], Any]]


class EventsManager:
    """
    Dispatches ``type:name`` events to attached listeners.

    Listeners attached to ``type`` alone, or to ``type:*``, receive every
    event of that type. Listeners with a higher priority run first.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Tuple[int, int, ListenerType]]] = defaultdict(list)
        self._counter = 0

    def attach(self, event: str, listener: ListenerType, priority: int = 100) -> None:
        if event.endswith(':*'):
            event = event[:-2]
        self._counter += 1
        self._listeners[event].append((-priority, self._counter, listener))
        self._listeners[event].sort(key=lambda entry: entry[:2])

    def detach(self, event: str, listener: ListenerType) -> bool:
        if event.endswith(':*'):
            event = event[:-2]
        entries = self._listeners.get(event, [])
        remaining = [entry for entry in entries if entry[2] is not listener]
        self._listeners[event] = remaining
        return len(remaining) != len(entries)

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners.get(event))

    def fire(self, event: str, source: Any, data: Any = None) -> List[Any]:
        """
        Fire an event.

        Args:
            event: Event name in ``type:name`` form
            source: Object that fired the event
            data: Optional payload

        Returns:
            Results returned by each listener, in call order
        """
        event_type = event.split(':', 1)[0]

        entries = list(self._listeners.get(event_type, []))
        if event != event_type:
            entries += self._listeners.get(event, [])
        entries.sort(key=lambda entry: entry[:2])

        results = []
        for _, _, listener in entries:
            if isinstance(listener, Listener):
                results.append(listener.handle(event, source, data))
            else:
                results.append(listener(event, source, data))

        logger.debug(f"Fired {event} to {len(entries)} listener(s)")
        return results


@register_provider('events_manager')
class EventsManagerServiceProvider(ServiceProvider):

    def name(self) -> str:
        return 'events_manager'

    def register(self) -> None:
        self.container.set_shared(self.name(), lambda container: EventsManager())
