"""Tests for HarpoonList and the default codec."""

from __future__ import annotations

import pytest

from harpoon.codec import JsonCodec, ListItem, safe_decode
from harpoon.config import ListConfig
from harpoon.events import EventBus, EventName
from harpoon.list import HarpoonList


class Recorder:
    def __init__(self, bus: EventBus) -> None:
        self.events: list[tuple[EventName, object]] = []
        bus.add_listener({name: self._make(name) for name in EventName})

    def _make(self, name):
        return lambda data: self.events.append((name, data))

    def names(self) -> list[EventName]:
        return [name for name, _ in self.events]


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def config(tmp_path) -> ListConfig:
    return ListConfig(get_root_dir=lambda: str(tmp_path))


@pytest.fixture
def lst(bus: EventBus, config: ListConfig) -> HarpoonList:
    return HarpoonList(bus, config, "files")


def values(lst: HarpoonList) -> list[str | None]:
    return [item.value for item in lst.items]


class TestCodec:
    def test_decode_encoded(self):
        codec = JsonCodec()
        item = ListItem("a.py", {"row": 3, "col": 1})
        assert codec.decode(codec.encode(item)) == item

    def test_missing_context_defaults_empty(self):
        assert JsonCodec().decode('{"value": "a.py"}') == ListItem("a.py", {})

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"value": "a", "context": 3}', None])
    def test_safe_decode_skips_malformed(self, raw):
        assert safe_decode(JsonCodec(), raw) is None


class TestAdd:
    def test_add_appends_and_emits(self, lst: HarpoonList, bus: EventBus):
        rec = Recorder(bus)
        lst.add("a.py").add("b.py")
        assert values(lst) == ["a.py", "b.py"]
        assert rec.names() == [
            EventName.ADD,
            EventName.LIST_CHANGE,
            EventName.ADD,
            EventName.LIST_CHANGE,
        ]
        assert rec.events[2][1].idx == 1

    def test_add_path_is_root_relative(self, lst: HarpoonList, tmp_path):
        lst.add(str(tmp_path / "src" / "main.py"))
        assert values(lst) == ["src/main.py"]

    def test_add_at_index(self, lst: HarpoonList):
        lst.add("a.py").add("c.py").add("b.py", 1)
        assert values(lst) == ["a.py", "b.py", "c.py"]

    def test_prepend(self, lst: HarpoonList):
        lst.add("a.py").prepend("b.py")
        assert values(lst) == ["b.py", "a.py"]

    def test_duplicate_value_ignored(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py")
        rec = Recorder(bus)
        lst.add(ListItem("a.py", {"row": 9}))
        assert len(lst) == 1
        assert rec.events == []

    def test_add_without_path_fails(self, lst: HarpoonList):
        with pytest.raises(ValueError):
            lst.add("")


class TestRemove:
    def test_remove_by_value(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py").add("b.py").add("c.py")
        rec = Recorder(bus)
        lst.remove("b.py")
        assert values(lst) == ["a.py", "c.py"]
        assert rec.names() == [EventName.REMOVE, EventName.LIST_CHANGE]
        assert rec.events[0][1].idx == 1

    def test_remove_at(self, lst: HarpoonList):
        lst.add("a.py").add("b.py")
        lst.remove_at(0)
        assert values(lst) == ["b.py"]

    def test_remove_missing_is_noop(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py")
        rec = Recorder(bus)
        lst.remove("zzz.py").remove_at(5).remove_at(-1)
        assert values(lst) == ["a.py"]
        assert rec.events == []

    def test_replace_at(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py").add("b.py")
        rec = Recorder(bus)
        lst.replace_at(1, "c.py")
        assert values(lst) == ["a.py", "c.py"]
        assert rec.names() == [EventName.REPLACE, EventName.LIST_CHANGE]

    def test_clear(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py")
        rec = Recorder(bus)
        lst.clear()
        assert len(lst) == 0
        assert rec.names() == [EventName.LIST_CHANGE]


class TestReorder:
    def test_reorder(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py").add("b.py").add("c.py")
        rec = Recorder(bus)
        lst.reorder([2, 0, 1])
        assert values(lst) == ["c.py", "a.py", "b.py"]
        assert rec.names() == [EventName.REORDER, EventName.LIST_CHANGE]

    def test_reorder_rejects_non_permutation(self, lst: HarpoonList):
        lst.add("a.py").add("b.py")
        with pytest.raises(ValueError):
            lst.reorder([0, 0])
        assert values(lst) == ["a.py", "b.py"]


class TestSelect:
    def test_select_emits_item(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py").add("b.py")
        rec = Recorder(bus)
        item = lst.select(1, options={"vsplit": True})
        assert item.value == "b.py"
        assert rec.names() == [EventName.SELECT]
        assert rec.events[0][1].options == {"vsplit": True}

    def test_select_out_of_range_is_noop(self, lst: HarpoonList, bus: EventBus):
        rec = Recorder(bus)
        assert lst.select(3) is None
        assert rec.events == []

    def test_select_with_nil(self, bus: EventBus, config: ListConfig):
        config.select_with_nil = True
        lst = HarpoonList(bus, config, "files")
        rec = Recorder(bus)
        lst.select(0)
        assert rec.names() == [EventName.SELECT]
        assert rec.events[0][1].item is None

    def test_config_select_called(self, bus: EventBus, config: ListConfig):
        opened = []
        config.select = lambda item, lst, options: opened.append(item.value)
        HarpoonList(bus, config, "files").add("a.py").select(0)
        assert opened == ["a.py"]

    def test_next_and_prev(self, lst: HarpoonList):
        lst.add("a.py").add("b.py").add("c.py")
        assert lst.next().value == "b.py"
        assert lst.next().value == "c.py"
        assert lst.next().value == "c.py"
        assert lst.next(ui_nav_wraparound=True).value == "a.py"
        assert lst.prev(ui_nav_wraparound=True).value == "c.py"
        assert lst.prev().value == "b.py"

    def test_next_on_empty(self, lst: HarpoonList):
        assert lst.next() is None


class TestResolveDisplayed:
    def test_edit_round_trip(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py").add("b.py").add("c.py")
        rec = Recorder(bus)
        lst.resolve_displayed(["c.py", "", "a.py", "d.py", "a.py"])

        assert values(lst) == ["c.py", "a.py", "d.py"]
        names = rec.names()
        assert names.count(EventName.ADD) == 1
        assert names.count(EventName.REMOVE) == 1
        assert EventName.REORDER in names
        assert names[-1] == EventName.LIST_CHANGE
        assert names.count(EventName.LIST_CHANGE) == 1

    def test_unchanged_menu_only_signals_change(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py").add("b.py")
        rec = Recorder(bus)
        lst.resolve_displayed(lst.display())
        assert rec.names() == [EventName.LIST_CHANGE]

    def test_existing_items_keep_context(self, lst: HarpoonList):
        lst.add(ListItem("a.py", {"row": 7, "col": 2}))
        lst.resolve_displayed(["a.py"])
        assert lst.items[0].context == {"row": 7, "col": 2}


class TestPersistence:
    def test_encode_decode_preserves_order(self, lst: HarpoonList, bus, config):
        lst.add("a.py").add("b.py").add("c.py").add("d.py")
        lst.remove("b.py")
        lst.reorder([2, 0, 1])
        lst.add("e.py", 1)

        rebuilt = HarpoonList.decode(bus, config, "files", lst.encode())
        assert values(rebuilt) == values(lst) == ["d.py", "e.py", "a.py", "c.py"]

    def test_decode_skips_malformed(self, bus, config):
        codec = JsonCodec()
        raw = [codec.encode(ListItem("a.py")), "{broken", codec.encode(ListItem("b.py"))]
        lst = HarpoonList.decode(bus, config, "files", raw)
        assert values(lst) == ["a.py", "b.py"]

    def test_update_position(self, lst: HarpoonList, bus: EventBus):
        lst.add("a.py")
        rec = Recorder(bus)
        lst.update_position(lst.items[0], 10, 4)
        assert lst.items[0].context == {"row": 10, "col": 4}
        assert rec.names() == [EventName.POSITION_UPDATED]
