"""Configuration loading from environment variables and harpoon.toml."""

from __future__ import annotations

import dataclasses
import os
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

from harpoon.codec import Codec, JsonCodec, ListItem
from harpoon.utils import normalize_path

if TYPE_CHECKING:
    from harpoon.hooks import HostEvent
    from harpoon.list import HarpoonList

DEFAULT_LIST = "__harpoon_files"
MRU_LIST = "MRU"
MRU_KEY = "__mru"

_DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "harpoon"
_CONFIG_FILENAME = "harpoon.toml"

ListCallback = Callable[["HostEvent", "HarpoonList"], None]


def default_create_list_item(config: ListConfig, name: str | None = None) -> ListItem:
    if not name:
        raise ValueError("a path is required to create a list item")
    return ListItem(
        value=normalize_path(name, config.get_root_dir()),
        context={"row": 1, "col": 0},
    )


def default_display(item: ListItem) -> str:
    return item.value or ""


def default_equals(a: ListItem | None, b: ListItem | None) -> bool:
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    return a.value == b.value


@dataclass
class Settings:
    """Session-wide settings."""

    save_on_toggle: bool = False
    sync_on_ui_close: bool = False
    key: Callable[[], str] = os.getcwd
    mru_limit: int = 20


@dataclass
class ListConfig:
    """Per-list behaviour. ``DEFAULT`` overrides apply to every list."""

    codec: Codec = field(default_factory=JsonCodec)
    encode_enabled: bool = True
    select_with_nil: bool = False
    get_root_dir: Callable[[], str] = os.getcwd
    create_list_item: Callable[[ListConfig, str | None], ListItem] = default_create_list_item
    display: Callable[[ListItem], str] = default_display
    equals: Callable[[ListItem | None, ListItem | None], bool] = default_equals
    select: Callable[[ListItem | None, HarpoonList, Any], None] | None = None
    on_buf_leave: ListCallback | None = None
    on_exit: ListCallback | None = None


@dataclass
class HarpoonConfig:
    """Top-level Harpoon configuration."""

    settings: Settings = field(default_factory=Settings)
    default: ListConfig = field(default_factory=ListConfig)
    lists: dict[str, dict[str, Any]] = field(default_factory=dict)
    data_dir: Path = _DEFAULT_DATA_DIR
    log_level: str = "INFO"


def _field_names(cls: type) -> set[str]:
    return {f.name for f in dataclasses.fields(cls)}


def _checked(cls: type, values: dict[str, Any], where: str) -> dict[str, Any]:
    unknown = set(values) - _field_names(cls)
    if unknown:
        raise ValueError(f"Unknown {where} option(s): {sorted(unknown)}")
    return values


def merge_config(partial: dict[str, Any] | None, latest: HarpoonConfig) -> HarpoonConfig:
    """Merge a partial configuration mapping over ``latest``; ``latest`` is untouched.

    Recognised keys are ``settings``, ``default``, ``data_dir`` and
    ``log_level``. Any other key names a list and holds overrides for it.
    """
    partial = partial or {}
    settings = latest.settings
    default = latest.default
    lists = {name: dict(values) for name, values in latest.lists.items()}
    data_dir = latest.data_dir
    log_level = latest.log_level

    for key, value in partial.items():
        if key == "settings":
            settings = dataclasses.replace(settings, **_checked(Settings, value, "settings"))
        elif key == "default":
            default = dataclasses.replace(default, **_checked(ListConfig, value, "list"))
        elif key == "data_dir":
            data_dir = Path(value).expanduser()
        elif key == "log_level":
            log_level = str(value)
        else:
            lists.setdefault(key, {}).update(_checked(ListConfig, value, "list"))

    return HarpoonConfig(
        settings=settings,
        default=default,
        lists=lists,
        data_dir=data_dir,
        log_level=log_level,
    )


def get_config(config: HarpoonConfig, name: str) -> ListConfig:
    """Resolve the effective configuration for list ``name``."""
    overrides = config.lists.get(name)
    if not overrides:
        return config.default
    return dataclasses.replace(config.default, **overrides)


def load_config(config_path: Path | None = None) -> HarpoonConfig:
    """Load configuration from environment variables and optional harpoon.toml.

    Priority: environment variables > harpoon.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        for candidate in [
            Path.cwd() / _CONFIG_FILENAME,
            Path.home() / ".config" / "harpoon" / _CONFIG_FILENAME,
        ]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    settings_data = file_data.get("settings", {})
    lists_data = file_data.get("lists", {})

    partial: dict[str, Any] = {
        "settings": {
            "save_on_toggle": bool(settings_data.get("save_on_toggle", False)),
            "sync_on_ui_close": bool(settings_data.get("sync_on_ui_close", False)),
            "mru_limit": int(
                os.getenv("HARPOON_MRU_LIMIT", settings_data.get("mru_limit", 20))
            ),
        },
        "data_dir": os.getenv(
            "HARPOON_DATA_DIR", file_data.get("data_dir", str(_DEFAULT_DATA_DIR))
        ),
        "log_level": os.getenv("HARPOON_LOG_LEVEL", file_data.get("log_level", "INFO")),
    }
    for name, values in lists_data.items():
        partial[name] = {
            k: bool(v) for k, v in values.items() if k in ("encode_enabled", "select_with_nil")
        }

    return merge_config(partial, HarpoonConfig())
