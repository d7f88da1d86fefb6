"""Event bus — synchronous publish/subscribe between lists and their listeners.

Lists emit events when they change; the session, the MRU tracker and any
extension registered through ``Harpoon.extend`` subscribe to them. Dispatch is
synchronous and in registration order. Handler exceptions propagate to the
caller of ``emit``.
"""

from __future__ import annotations

import enum
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping

if TYPE_CHECKING:
    from harpoon.codec import ListItem
    from harpoon.list import HarpoonList

logger = logging.getLogger(__name__)


class EventName(str, enum.Enum):
    """Every event the bus knows about."""

    ADD = "ADD"
    REMOVE = "REMOVE"
    REPLACE = "REPLACE"
    REORDER = "REORDER"
    LIST_CHANGE = "LIST_CHANGE"
    POSITION_UPDATED = "POSITION_UPDATED"
    SELECT = "SELECT"
    NAVIGATE = "NAVIGATE"
    LIST_READ = "LIST_READ"
    LIST_CREATED = "LIST_CREATED"
    SETUP_CALLED = "SETUP_CALLED"


@dataclass
class ItemEvent:
    """Payload for ADD / REMOVE / REPLACE / SELECT / NAVIGATE."""

    list: HarpoonList
    item: ListItem | None
    idx: int | None = None
    options: Any = None


@dataclass
class ListEvent:
    """Payload for REORDER / LIST_CHANGE / LIST_READ / LIST_CREATED."""

    list: HarpoonList


@dataclass
class PositionEvent:
    list: HarpoonList
    item: ListItem
    row: int
    col: int


@dataclass
class SetupEvent:
    config: Any


Handler = Callable[[Any], Any]


class EventBus:
    """Registry of handlers keyed by ``EventName``.

    Registrations accumulate: adding a second handler for an event never
    replaces the first.
    """

    def __init__(self) -> None:
        self._listeners: dict[EventName, list[Handler]] = defaultdict(list)

    def add_listener(self, handlers: Mapping[EventName | str, Handler]) -> None:
        for name, handler in handlers.items():
            self._listeners[EventName(name)].append(handler)

    def emit(self, name: EventName | str, data: Any = None) -> None:
        event = EventName(name)
        handlers = list(self._listeners.get(event, ()))
        logger.debug("emit %s -> %d handler(s)", event.value, len(handlers))
        for handler in handlers:
            handler(data)

    def listener_count(self, name: EventName | str) -> int:
        return len(self._listeners.get(EventName(name), ()))
