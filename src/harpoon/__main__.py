"""Entry point: python -m harpoon <command> [args]

- add <path>      Mark a file in the default list
- rm <path>       Remove a mark
- list [name]     Show a list (default list when omitted)
- select <n>      Select the n-th mark (1-based), recording it in the MRU
- mru             Show recently used files, minus HARPOON_CURRENT_FILE
- info            Show where data is stored
"""

from __future__ import annotations

import logging
import os
import sys

from harpoon.config import load_config
from harpoon.hooks import ProcessHost
from harpoon.list import HarpoonList
from harpoon.session import Harpoon


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _render(lst: HarpoonList, lines: list[str]) -> None:
    if not lines:
        print(f"({lst.name} is empty)")
    for i, line in enumerate(lines, start=1):
        print(f"{i:>3}  {line}")


def _build() -> Harpoon:
    config = load_config()
    _setup_logging(config.log_level)
    host = ProcessHost(current=os.getenv("HARPOON_CURRENT_FILE", ""))
    return Harpoon(config, host=host, render=_render).setup()


def _usage() -> None:
    print("Usage: python -m harpoon <add|rm|list|select|mru|info> [args]")
    print("  add <path>    — Mark a file")
    print("  rm <path>     — Remove a mark")
    print("  list [name]   — Show a list")
    print("  select <n>    — Select the n-th mark")
    print("  mru           — Show recently used files")
    print("  info          — Show data location")


def main() -> None:
    args = sys.argv[1:]
    cmd = args[0] if args else "list"
    rest = args[1:]

    if cmd in ("add", "rm", "select") and not rest:
        _usage()
        sys.exit(1)

    if cmd == "add":
        harpoon = _build()
        harpoon.list().add(rest[0])
    elif cmd == "rm":
        harpoon = _build()
        harpoon.list().remove(rest[0])
    elif cmd == "list":
        harpoon = _build()
        harpoon.toggle_quick_menu(harpoon.list(rest[0] if rest else None))
    elif cmd == "select":
        harpoon = _build()
        try:
            index = int(rest[0]) - 1
        except ValueError:
            print(f"Not a number: {rest[0]}", file=sys.stderr)
            sys.exit(1)
        item = harpoon.list().select(index)
        if item is None:
            print(f"No mark at {rest[0]}", file=sys.stderr)
            sys.exit(1)
        print(item.value)
    elif cmd == "mru":
        harpoon = _build()
        if harpoon.toggle_mru_menu() is None:
            print("(no recent files)")
    elif cmd == "info":
        harpoon = _build()
        info = harpoon.info()
        print(f"data path:    {info['paths']['data_path']}")
        print(f"default list: {info['default_list_name']}")
    else:
        _usage()
        sys.exit(1)


if __name__ == "__main__":
    main()
