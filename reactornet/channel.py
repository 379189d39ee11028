"""A channel binds a file descriptor to the callbacks run for its I/O events."""

from __future__ import annotations

import enum
import select
import sys
import weakref
from typing import Any, Callable, Optional

EventCallback = Callable[[], None]


class EventFlag(enum.IntFlag):
    """Poll event bits as reported for a descriptor."""

    NONE = 0
    IN = getattr(select, "POLLIN", 0x001)
    PRI = getattr(select, "POLLPRI", 0x002)
    OUT = getattr(select, "POLLOUT", 0x004)
    ERR = getattr(select, "POLLERR", 0x008)
    HUP = getattr(select, "POLLHUP", 0x010)
    NVAL = getattr(select, "POLLNVAL", 0x020)
    RDHUP = getattr(select, "POLLRDHUP", 0x2000)
    READ = IN | PRI
    WRITE = OUT


_IS_LINUX = sys.platform.startswith("linux")
_IS_WINDOWS = sys.platform == "win32"


class Channel:
    """Dispatches the events that occur on one descriptor to its callbacks.

    The callbacks are plain attributes: ``read_callback``, ``write_callback``,
    ``close_callback``, ``error_callback`` and ``event_callback``. When
    ``event_callback`` is set, it replaces all the others.
    """

    NONE_EVENT = EventFlag.NONE
    READ_EVENT = EventFlag.READ
    WRITE_EVENT = EventFlag.WRITE

    def __init__(self, loop: Any, fd: Any) -> None:
        self._loop = loop
        self._fd = fd if isinstance(fd, int) else fd.fileno()
        self._events = EventFlag.NONE
        self._revents = EventFlag.NONE
        self.index = -1
        self.added_to_loop = False
        self.read_callback: Optional[EventCallback] = None
        self.write_callback: Optional[EventCallback] = None
        self.close_callback: Optional[EventCallback] = None
        self.error_callback: Optional[EventCallback] = None
        self.event_callback: Optional[EventCallback] = None
        self._tie: Optional[weakref.ref] = None

    def fd(self) -> int:
        return self._fd

    def events(self) -> EventFlag:
        return self._events

    def revents(self) -> EventFlag:
        return self._revents

    def set_revents(self, revents: int) -> EventFlag:
        self._revents = EventFlag(revents)
        return self._revents

    def is_none_event(self) -> bool:
        return self._events == EventFlag.NONE

    def owner_loop(self) -> Any:
        return self._loop

    def _update(self) -> None:
        self._loop.update_channel(self)

    def disable_all(self) -> None:
        self._events = EventFlag.NONE
        self._update()

    def remove(self) -> None:
        """Take the descriptor out of the loop's poller; all events must be disabled."""
        if self._events != EventFlag.NONE:
            raise RuntimeError("cannot remove a channel that still has events enabled")
        self.added_to_loop = False
        self._loop.remove_channel(self)

    def enable_reading(self) -> None:
        self._events |= EventFlag.READ
        self._update()

    def disable_reading(self) -> None:
        self._events &= ~EventFlag.READ
        self._update()

    def enable_writing(self) -> None:
        self._events |= EventFlag.WRITE
        self._update()

    def disable_writing(self) -> None:
        self._events &= ~EventFlag.WRITE
        self._update()

    def is_writing(self) -> bool:
        return bool(self._events & EventFlag.WRITE)

    def is_reading(self) -> bool:
        return bool(self._events & EventFlag.READ)

    def update_events(self, events: int) -> None:
        self._events = EventFlag(events)
        self._update()

    def tie(self, obj: object) -> None:
        """Only dispatch events while ``obj`` is alive; it is held weakly."""
        self._tie = weakref.ref(obj)

    def handle_event(self) -> None:
        if self._events == EventFlag.NONE:
            return
        if self._tie is not None:
            guard = self._tie()
            if guard is None:
                return
            self._handle_event_safely()
        else:
            self._handle_event_safely()

    def _handle_event_safely(self) -> None:
        if self.event_callback is not None:
            self.event_callback()
            return
        revents = self._revents
        if (revents & EventFlag.HUP) and not (revents & EventFlag.IN):
            if self.close_callback is not None:
                self.close_callback()
        if revents & (EventFlag.NVAL | EventFlag.ERR):
            if self.error_callback is not None:
                self.error_callback()
        read_mask = EventFlag.IN | EventFlag.PRI
        if _IS_LINUX:
            read_mask |= EventFlag.RDHUP
        if revents & read_mask:
            if self.read_callback is not None:
                self.read_callback()
        writable = bool(revents & EventFlag.OUT)
        if _IS_WINDOWS and revents & EventFlag.HUP:
            writable = False
        if writable and self.write_callback is not None:
            self.write_callback()

    def __repr__(self) -> str:
        return f"Channel(fd={self._fd}, events={self._events!r})"