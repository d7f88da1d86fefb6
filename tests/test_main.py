"""Tests for the command line entry point."""

from __future__ import annotations

import sys

import pytest
from pathlib import Path

from harpoon.__main__ import main


@pytest.fixture(autouse=True)
def env(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("HARPOON_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("HARPOON_CURRENT_FILE", raising=False)
    monkeypatch.setattr("harpoon.hooks.atexit.register", lambda *a: None)
    monkeypatch.setattr("harpoon.hooks.signal.signal", lambda *a: None)


def run(monkeypatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["harpoon", *args])
    main()


class TestCLI:
    def test_add_and_list(self, monkeypatch, capsys):
        run(monkeypatch, "add", "a.py")
        run(monkeypatch, "add", "b.py")
        capsys.readouterr()

        run(monkeypatch, "list")
        out = capsys.readouterr().out
        assert "1  a.py" in out
        assert "2  b.py" in out

    def test_rm(self, monkeypatch, capsys):
        run(monkeypatch, "add", "a.py")
        run(monkeypatch, "rm", "a.py")
        run(monkeypatch, "list")
        assert "is empty" in capsys.readouterr().out

    def test_select_then_mru(self, monkeypatch, capsys):
        run(monkeypatch, "add", "a.py")
        run(monkeypatch, "add", "b.py")
        run(monkeypatch, "select", "2")
        run(monkeypatch, "select", "1")
        assert capsys.readouterr().out.split() == ["b.py", "a.py"]

        monkeypatch.setenv("HARPOON_CURRENT_FILE", "a.py")
        run(monkeypatch, "mru")
        out = capsys.readouterr().out
        assert "b.py" in out
        assert "a.py" not in out

    def test_mru_empty(self, monkeypatch, capsys):
        run(monkeypatch, "mru")
        assert "no recent files" in capsys.readouterr().out

    def test_select_missing(self, monkeypatch):
        with pytest.raises(SystemExit):
            run(monkeypatch, "select", "4")

    def test_info(self, monkeypatch, capsys, tmp_path: Path):
        run(monkeypatch, "info")
        out = capsys.readouterr().out
        assert str(tmp_path / "data") in out
        assert "__harpoon_files" in out

    def test_unknown_command(self, monkeypatch):
        with pytest.raises(SystemExit):
            run(monkeypatch, "frobnicate")
