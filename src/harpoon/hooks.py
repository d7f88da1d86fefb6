"""Host lifecycle — the signals the session listens to from its host process.

The session asks the host to call it back when the user leaves a buffer and
when the process is about to exit. ``ProcessHost`` is the plain-Python host:
exit is wired to ``atexit`` and SIGTERM, buffer changes are reported by the
caller through ``enter()``.
"""

from __future__ import annotations

import atexit
import enum
import logging
import signal
import sys
from typing import Callable, Iterable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class HostEvent(str, enum.Enum):
    BUF_LEAVE = "BufLeave"
    EXIT = "VimLeavePre"


HostCallback = Callable[[HostEvent], None]


@runtime_checkable
class Host(Protocol):
    """Protocol every host integration implements."""

    def on(self, events: Iterable[HostEvent], callback: HostCallback) -> None:
        """Call ``callback`` whenever one of ``events`` happens."""
        ...

    def current_file(self) -> str:
        """Path of the buffer the user is looking at ("" when none)."""
        ...


class ProcessHost:
    """Host backed by the running Python process."""

    def __init__(self, current: str = "", install_exit_hooks: bool = True) -> None:
        self._current = current
        self._install_exit_hooks = install_exit_hooks
        self._callbacks: dict[HostEvent, list[HostCallback]] = {e: [] for e in HostEvent}
        self._exit_installed = False
        self._exited = False

    def on(self, events: Iterable[HostEvent], callback: HostCallback) -> None:
        for event in events:
            self._callbacks[HostEvent(event)].append(callback)
            if event == HostEvent.EXIT:
                self._install_exit()

    def current_file(self) -> str:
        return self._current

    def enter(self, path: str) -> None:
        """Switch the current buffer, firing BUF_LEAVE for the one being left."""
        if self._current:
            self.fire(HostEvent.BUF_LEAVE)
        self._current = path

    def fire(self, event: HostEvent) -> None:
        if event == HostEvent.EXIT:
            if self._exited:
                return
            self._exited = True
        for callback in list(self._callbacks[event]):
            callback(event)

    # ── Process exit ─────────────────────────────────────────

    def _install_exit(self) -> None:
        if self._exit_installed or not self._install_exit_hooks:
            return
        atexit.register(self.fire, HostEvent.EXIT)
        try:
            signal.signal(signal.SIGTERM, self._handle_signal)
        except ValueError:
            # Not in the main thread; atexit still covers normal exit.
            logger.debug("SIGTERM handler not installed (not main thread)")
        self._exit_installed = True
        logger.info("Exit hooks installed")

    def _handle_signal(self, signum: int, frame) -> None:
        logger.info("Received %s, syncing before exit...", signal.Signals(signum).name)
        self.fire(HostEvent.EXIT)
        sys.exit(128 + signum)
