"""Harpoon — named, per-project lists of file marks with MRU tracking.

    from harpoon.session import Harpoon

    harpoon = Harpoon().setup({"settings": {"save_on_toggle": True}})
    harpoon.list().add("src/app.py")
    harpoon.list().select(0)          # also moves app.py to the front of the MRU

State is stored per project key (the working directory by default) under
``~/.local/share/harpoon/<sha256(key)>.json``.
"""
