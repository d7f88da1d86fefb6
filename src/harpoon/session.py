"""Harpoon session — owns the store, the event bus and the list cache.

Responsibilities:
1. Materialize lists per (project key, name), decoding them from the store once
2. Persist every list on change (sync on ADD/REMOVE/REORDER/LIST_CHANGE/POSITION_UPDATED)
3. Track the MRU from SELECT events
4. Install host lifecycle hooks once, syncing on exit

Construct one ``Harpoon`` per process and pass it to whatever needs it.
Handlers must not re-enter the mutation they are reacting to; nothing guards
against the resulting recursion.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from harpoon.config import DEFAULT_LIST, MRU_KEY, HarpoonConfig, get_config, merge_config
from harpoon.data import FileMedium, Medium, Store
from harpoon.events import EventBus, EventName, Handler, ListEvent, SetupEvent
from harpoon.hooks import Host, HostEvent, ProcessHost
from harpoon.list import HarpoonList
from harpoon.mru import MRUTracker
from harpoon.ui import HarpoonUI

logger = logging.getLogger(__name__)

_SYNC_EVENTS = (
    EventName.ADD,
    EventName.REMOVE,
    EventName.REORDER,
    EventName.LIST_CHANGE,
    EventName.POSITION_UPDATED,
)


class Harpoon:
    def __init__(
        self,
        config: HarpoonConfig | None = None,
        host: Host | None = None,
        medium: Medium | None = None,
        render: Callable[[HarpoonList, list[str]], None] | None = None,
    ) -> None:
        self.config = config or HarpoonConfig()
        self.host = host or ProcessHost()
        self._medium = medium
        self.data = Store(self._build_medium())
        self.bus = EventBus()
        self.ui = HarpoonUI(self.config.settings, render=render, on_close=self.sync)
        self.lists: dict[str, dict[str, HarpoonList]] = {}
        self.hooks_setup = False
        self.mru = MRUTracker(self)

        self.bus.add_listener({event: self._sync_on_change for event in _SYNC_EVENTS})
        self.mru.attach()

    def _build_medium(self) -> Medium:
        if self._medium is not None:
            return self._medium
        return FileMedium(self.config.data_dir)

    def _sync_on_change(self, _event: Any) -> None:
        self.sync()

    # ── Lists ────────────────────────────────────────────────

    def list(self, name: str | None = None) -> HarpoonList:
        """The list ``name`` for the current project, decoded from the store on first use."""
        name = name or DEFAULT_LIST
        if name == MRU_KEY:
            raise ValueError(f"{MRU_KEY!r} is reserved for the MRU; use toggle_mru_menu()")
        key = self.config.settings.key()
        lists = self.lists.setdefault(key, {})

        existing = lists.get(name)
        if existing is not None:
            self.bus.emit(EventName.LIST_READ, ListEvent(list=existing))
            return existing

        list_config = get_config(self.config, name)
        lst = HarpoonList.decode(self.bus, list_config, name, self.data.data(key, name))
        logger.debug("Created list %s for %s (%d items)", name, key, len(lst))
        self.bus.emit(EventName.LIST_CREATED, ListEvent(list=lst))
        lists[name] = lst
        return lst

    def _for_each_list(self, cb: Callable[[HarpoonList, str], None]) -> None:
        key = self.config.settings.key()
        for name, lst in list(self.lists.get(key, {}).items()):
            cb(lst, name)

    def sync(self) -> None:
        """Encode every cached list of the current project and flush the store.

        Raises ``PersistenceError`` if the store could not be written; the
        in-memory lists are left as they are.
        """
        key = self.config.settings.key()

        def write(lst: HarpoonList, name: str) -> None:
            if not lst.config.encode_enabled:
                return
            self.data.update(key, name, lst.encode())

        self._for_each_list(write)
        self.data.sync()

    # ── Menus ────────────────────────────────────────────────

    def toggle_quick_menu(self, lst: HarpoonList | None, options: Any = None) -> None:
        self.ui.toggle_quick_menu(lst, options)

    def toggle_mru_menu(self, options: Any = None) -> HarpoonList | None:
        """Show the MRU (minus the current file). Does nothing when that leaves it empty."""
        virtual = self.mru.virtual_list()
        if not virtual.items:
            return None
        self.ui.toggle_quick_menu(virtual, options)
        if self.ui.active_list is not virtual:
            return None
        self.ui.cursor = 0
        return virtual

    # ── Extension & setup ────────────────────────────────────

    def extend(self, listeners: Mapping[EventName | str, Handler]) -> None:
        self.bus.add_listener(listeners)

    def setup(self, partial_config: dict[str, Any] | None = None) -> Harpoon:
        """Merge ``partial_config`` into the active configuration.

        Lists cached so far are dropped and rebuilt from the store with the new
        configuration on next access. Entries the old store never managed to
        write are carried into the new one. Host hooks are installed only once.
        """
        self.config = merge_config(partial_config, self.config)
        previous = self.data
        self.data = Store(self._build_medium())
        for key, lists in previous.pending().items():
            for name, values in lists.items():
                self.data.update(key, name, values)
        self.lists = {}
        self.ui.configure(self.config.settings)
        self.bus.emit(EventName.SETUP_CALLED, SetupEvent(config=self.config))

        if not self.hooks_setup:
            self.host.on([HostEvent.BUF_LEAVE, HostEvent.EXIT], self._on_host_event)
            self.hooks_setup = True
            logger.info("Host hooks registered")

        return self

    def _on_host_event(self, event: HostEvent) -> None:
        def run(lst: HarpoonList, _name: str) -> None:
            cb = lst.config.on_buf_leave if event == HostEvent.BUF_LEAVE else lst.config.on_exit
            if cb is not None:
                cb(event, lst)

        self._for_each_list(run)
        if event == HostEvent.EXIT:
            self.sync()

    # ── Introspection ────────────────────────────────────────

    def info(self) -> dict[str, Any]:
        return {"paths": self.data.info(), "default_list_name": DEFAULT_LIST}

    def dump(self) -> dict[str, dict[str, list[str]]]:
        """Raw store contents. Debugging only."""
        return self.data.dump()
