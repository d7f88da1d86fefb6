"""Most-recently-used tracking.

The MRU is kept in the store under the reserved list name ``__mru`` as encoded
entries, most recent first, at most ``settings.mru_limit`` long. It is fed by
SELECT events from every list. When the user edits the MRU menu itself
(the active menu list is named ``MRU``), LIST_CHANGE writes the edit back.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from harpoon.codec import ListItem, safe_decode
from harpoon.config import MRU_KEY, MRU_LIST, ListConfig, get_config
from harpoon.events import EventName, ItemEvent, ListEvent
from harpoon.list import HarpoonList
from harpoon.utils import normalize_path

if TYPE_CHECKING:
    from harpoon.session import Harpoon

logger = logging.getLogger(__name__)


class MRUTracker:
    def __init__(self, harpoon: Harpoon) -> None:
        self.harpoon = harpoon

    def attach(self) -> None:
        self.harpoon.bus.add_listener(
            {
                EventName.SELECT: self._on_select,
                EventName.LIST_CHANGE: self._on_list_change,
            }
        )

    @property
    def config(self) -> ListConfig:
        """The MRU's list config; never persisted as an ordinary list."""
        return dataclasses.replace(
            get_config(self.harpoon.config, MRU_LIST), encode_enabled=False
        )

    @property
    def limit(self) -> int:
        return self.harpoon.config.settings.mru_limit

    def current_file(self) -> str:
        path = self.harpoon.host.current_file()
        if not path:
            return ""
        return normalize_path(path, self.config.get_root_dir())

    def _decoded_value(self, raw: str) -> str | None:
        item = safe_decode(self.config.codec, raw)
        return item.value if item is not None else None

    # ── Write side ───────────────────────────────────────────

    def _on_select(self, event: ItemEvent) -> None:
        self.update(event.item)

    def update(self, item: ListItem | None) -> None:
        """Move ``item`` to the front of the MRU, evicting the oldest past the limit."""
        if item is None or item.value is None:
            return

        key = self.harpoon.config.settings.key()
        mru = self.harpoon.data.data(key, MRU_KEY)

        for i, raw in enumerate(mru):
            if self._decoded_value(raw) == item.value:
                del mru[i]
                break

        mru.insert(0, self.config.codec.encode(item))
        del mru[self.limit :]

        self.harpoon.data.update(key, MRU_KEY, mru)
        self.harpoon.sync()

    def _on_list_change(self, event: ListEvent) -> None:
        active = self.harpoon.ui.active_list
        if active is None or active.name != MRU_LIST:
            return
        self.rebuild(active)

    def rebuild(self, edited: HarpoonList) -> None:
        """Replace the MRU with the contents of an edited MRU menu.

        The current file is hidden from the menu, so it is carried over from
        the old MRU at the front when it was there.
        """
        key = self.harpoon.config.settings.key()
        codec = self.config.codec
        current = self.current_file()

        new_mru: list[str] = []
        for raw in self.harpoon.data.data(key, MRU_KEY):
            if current and self._decoded_value(raw) == current:
                new_mru.append(raw)
                break

        for item in edited.items:
            if item is not None and item.value is not None:
                new_mru.append(codec.encode(item))

        if len(new_mru) > self.limit:
            logger.info("Edited MRU has %d entries, keeping %d", len(new_mru), self.limit)
            del new_mru[self.limit :]

        self.harpoon.data.update(key, MRU_KEY, new_mru)
        self.harpoon.sync()

    # ── Read side ────────────────────────────────────────────

    def items(self, exclude_current: bool = True) -> list[ListItem]:
        """Decoded MRU entries, most recent first, malformed ones skipped."""
        key = self.harpoon.config.settings.key()
        current = self.current_file() if exclude_current else ""
        result = []
        for raw in self.harpoon.data.data(key, MRU_KEY):
            item = safe_decode(self.config.codec, raw)
            if item is None:
                continue
            if current and item.value == current:
                continue
            result.append(item)
        return result

    def virtual_list(self) -> HarpoonList:
        """A presentation-only ``MRU`` list, without the current file."""
        return HarpoonList(self.harpoon.bus, self.config, MRU_LIST, self.items())
