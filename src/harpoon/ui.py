"""Headless quick menu.

The menu shows one line per item (``list.display()``). The host edits those
lines and hands them back through ``save``; selecting a row selects the item.
Rendering is left to the ``render`` callback supplied by the host.
"""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from harpoon.codec import ListItem
    from harpoon.config import Settings
    from harpoon.list import HarpoonList

logger = logging.getLogger(__name__)


class HarpoonUI:
    def __init__(
        self,
        settings: Settings,
        render: Callable[[HarpoonList, list[str]], None] | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self.settings = settings
        self.render = render
        self.on_close = on_close
        self._win_ids = itertools.count(1)
        self.active_list: HarpoonList | None = None
        self.win_id: int | None = None
        self.lines: list[str] = []
        self.cursor = 0

    def configure(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def is_open(self) -> bool:
        return self.win_id is not None

    def toggle_quick_menu(self, lst: HarpoonList | None, options: Any = None) -> None:
        """Open the menu for ``lst``, or close it if a menu is already open."""
        if lst is None or self.is_open:
            self.close_menu()
            return

        self.active_list = lst
        self.win_id = next(self._win_ids)
        self.lines = lst.display()
        self.cursor = 0
        logger.debug("Opened menu %d for %s (%d items)", self.win_id, lst.name, len(lst))
        if self.render is not None:
            self.render(lst, list(self.lines))

    def save(self, lines: list[str] | None = None) -> None:
        """Write the (possibly edited) menu lines back to the active list."""
        if self.active_list is None:
            return
        if lines is not None:
            self.lines = list(lines)
        self.active_list.resolve_displayed(self.lines)

    def select_menu_item(self, row: int | None = None, options: Any = None) -> ListItem | None:
        if self.active_list is None:
            return None
        lst = self.active_list
        index = self.cursor if row is None else row
        self.close_menu()
        return lst.select(index, options)

    def close_menu(self) -> None:
        if not self.is_open:
            return
        if self.settings.save_on_toggle:
            self.save()
        self.active_list = None
        self.win_id = None
        self.lines = []
        if self.settings.sync_on_ui_close and self.on_close is not None:
            self.on_close()
