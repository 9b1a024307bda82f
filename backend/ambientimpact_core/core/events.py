"""
Event dispatcher for alter hooks and markup processing
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, TypeVar

import structlog

logger = structlog.get_logger(__name__)

COMPONENT_INFO_ALTER = "ambientimpact.component_info_alter"
LIBRARY_INFO_ALTER = "ambientimpact.library_info_alter"
MARKUP_PROCESS = "ambientimpact.markup_process"

E = TypeVar("E")


class EventDispatcher:
    """Registry of listeners keyed by event name."""

    def __init__(self):
        self._listeners: Dict[str, List[tuple[int, Callable[[Any], None]]]] = defaultdict(list)
        self.logger = logger

    def add_listener(self, event_name: str, listener: Callable[[Any], None], priority: int = 0) -> None:
        """Register a listener; higher priority listeners run first."""
        self._listeners[event_name].append((priority, listener))
        self._listeners[event_name].sort(key=lambda entry: -entry[0])
        self.logger.debug("Listener registered", event_name=event_name, priority=priority)

    def remove_listener(self, event_name: str, listener: Callable[[Any], None]) -> None:
        self._listeners[event_name] = [
            entry for entry in self._listeners[event_name] if entry[1] != listener
        ]

    def has_listeners(self, event_name: str) -> bool:
        return bool(self._listeners.get(event_name))

    def get_listeners(self, event_name: str) -> List[Callable[[Any], None]]:
        return [listener for _, listener in self._listeners.get(event_name, [])]

    def dispatch(self, event: E, event_name: str) -> E:
        """Call each listener with the event object and return the event."""
        for listener in self.get_listeners(event_name):
            listener(event)
        return event
