"""Ordered, named collection of marks.

Every mutation emits its specific event (ADD, REMOVE, REPLACE, REORDER,
POSITION_UPDATED) followed by LIST_CHANGE. Indices are 0-based; operations on
an index outside the list are no-ops.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Iterator, Sequence

from harpoon.codec import ListItem, safe_decode
from harpoon.events import EventBus, EventName, ItemEvent, ListEvent, PositionEvent

if TYPE_CHECKING:
    from harpoon.config import ListConfig


class HarpoonList:
    def __init__(
        self,
        bus: EventBus,
        config: ListConfig,
        name: str,
        items: Iterable[ListItem] | None = None,
    ) -> None:
        self.bus = bus
        self.config = config
        self.name = name
        self.items: list[ListItem] = list(items or [])
        self._index = 0

    def __repr__(self) -> str:
        return f"HarpoonList(name={self.name!r}, length={len(self.items)})"

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ListItem]:
        return iter(list(self.items))

    def length(self) -> int:
        return len(self.items)

    # ── Lookup ───────────────────────────────────────────────

    def get(self, index: int) -> ListItem | None:
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def index_of(self, item: ListItem) -> int:
        for i, existing in enumerate(self.items):
            if self.config.equals(existing, item):
                return i
        return -1

    def get_by_value(self, value: str) -> tuple[ListItem | None, int]:
        for i, item in enumerate(self.items):
            if item.value == value:
                return item, i
        return None, -1

    def _to_item(self, item: ListItem | str) -> ListItem:
        if isinstance(item, ListItem):
            return item
        return self.config.create_list_item(self.config, item)

    # ── Mutation ─────────────────────────────────────────────

    def add(self, item: ListItem | str, idx: int | None = None) -> HarpoonList:
        """Insert ``item`` at ``idx`` (append when omitted). Existing values are kept once."""
        item = self._to_item(item)
        if self.index_of(item) != -1:
            return self

        if idx is None or idx >= len(self.items):
            idx = len(self.items)
        idx = max(idx, 0)
        self.items.insert(idx, item)
        self.bus.emit(EventName.ADD, ItemEvent(list=self, item=item, idx=idx))
        self._changed()
        return self

    def append(self, item: ListItem | str) -> HarpoonList:
        return self.add(item)

    def prepend(self, item: ListItem | str) -> HarpoonList:
        return self.add(item, 0)

    def remove_at(self, idx: int) -> HarpoonList:
        if not 0 <= idx < len(self.items):
            return self
        item = self.items.pop(idx)
        if self._index >= len(self.items):
            self._index = max(len(self.items) - 1, 0)
        self.bus.emit(EventName.REMOVE, ItemEvent(list=self, item=item, idx=idx))
        self._changed()
        return self

    def remove(self, item: ListItem | str) -> HarpoonList:
        """Remove the first item equal to ``item``."""
        idx = self.index_of(self._to_item(item))
        if idx == -1:
            return self
        return self.remove_at(idx)

    def replace_at(self, idx: int, item: ListItem | str) -> HarpoonList:
        if not 0 <= idx < len(self.items):
            return self
        item = self._to_item(item)
        self.items[idx] = item
        self.bus.emit(EventName.REPLACE, ItemEvent(list=self, item=item, idx=idx))
        self._changed()
        return self

    def reorder(self, permutation: Sequence[int]) -> HarpoonList:
        """Rearrange items so that position ``i`` holds the old item ``permutation[i]``."""
        if sorted(permutation) != list(range(len(self.items))):
            raise ValueError(
                f"{list(permutation)!r} is not a permutation of {len(self.items)} items"
            )
        self.items = [self.items[i] for i in permutation]
        self.bus.emit(EventName.REORDER, ListEvent(list=self))
        self._changed()
        return self

    def clear(self) -> HarpoonList:
        self.items = []
        self._index = 0
        self._changed()
        return self

    def update_position(self, item: ListItem, row: int, col: int) -> None:
        item.context["row"] = row
        item.context["col"] = col
        self.bus.emit(
            EventName.POSITION_UPDATED, PositionEvent(list=self, item=item, row=row, col=col)
        )

    def _changed(self) -> None:
        self.bus.emit(EventName.LIST_CHANGE, ListEvent(list=self))

    # ── Selection & navigation ───────────────────────────────

    def select(self, index: int, options: Any = None) -> ListItem | None:
        item = self.get(index)
        if item is None and not self.config.select_with_nil:
            return None
        if item is not None:
            self._index = index

        self.bus.emit(
            EventName.SELECT, ItemEvent(list=self, item=item, idx=index, options=options)
        )
        if self.config.select is not None:
            self.config.select(item, self, options)
        return item

    def next(self, ui_nav_wraparound: bool = False, options: Any = None) -> ListItem | None:
        if not self.items:
            return None
        index = self._index + 1
        if index >= len(self.items):
            index = 0 if ui_nav_wraparound else len(self.items) - 1
        self._index = index
        self.bus.emit(EventName.NAVIGATE, ItemEvent(list=self, item=self.items[index], idx=index))
        return self.select(index, options)

    def prev(self, ui_nav_wraparound: bool = False, options: Any = None) -> ListItem | None:
        if not self.items:
            return None
        index = self._index - 1
        if index < 0:
            index = len(self.items) - 1 if ui_nav_wraparound else 0
        self._index = index
        self.bus.emit(EventName.NAVIGATE, ItemEvent(list=self, item=self.items[index], idx=index))
        return self.select(index, options)

    # ── Menu round trip ──────────────────────────────────────

    def display(self) -> list[str]:
        return [self.config.display(item) for item in self.items]

    def resolve_displayed(self, displayed: Iterable[str]) -> None:
        """Apply an edited menu back onto the list.

        Lines are matched to existing items by their displayed text; unknown
        lines become new items, missing ones are removed. Blank and repeated
        lines are dropped. LIST_CHANGE fires once at the end.
        """
        by_display = {self.config.display(item): item for item in self.items}
        old_order = list(self.items)
        new_items: list[ListItem] = []
        seen: set[str] = set()

        for line in displayed:
            text = line.strip()
            if not text or text in seen:
                continue
            seen.add(text)
            item = by_display.get(text)
            if item is None:
                item = self.config.create_list_item(self.config, text)
                self.bus.emit(
                    EventName.ADD, ItemEvent(list=self, item=item, idx=len(new_items))
                )
            new_items.append(item)

        kept = {id(item) for item in new_items}
        for idx, item in enumerate(old_order):
            if id(item) not in kept:
                self.bus.emit(EventName.REMOVE, ItemEvent(list=self, item=item, idx=idx))

        self.items = new_items
        self._index = min(self._index, max(len(new_items) - 1, 0))

        old_ids = {id(item) for item in old_order}
        before = [id(item) for item in old_order if id(item) in kept]
        after = [id(item) for item in new_items if id(item) in old_ids]
        if before != after:
            self.bus.emit(EventName.REORDER, ListEvent(list=self))
        self._changed()

    # ── Persistence ──────────────────────────────────────────

    def encode(self) -> list[str]:
        return [self.config.codec.encode(item) for item in self.items]

    @classmethod
    def decode(
        cls, bus: EventBus, config: ListConfig, name: str, raw_items: Iterable[str]
    ) -> HarpoonList:
        """Build a list from stored entries, skipping any that fail to decode."""
        decoded = (safe_decode(config.codec, raw) for raw in raw_items)
        items = [item for item in decoded if item is not None]
        return cls(bus, config, name, items)
