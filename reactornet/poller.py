"""I/O multiplexing over the channels of one event loop."""

from __future__ import annotations

import selectors
import time
from typing import Dict, List

from reactornet.channel import Channel, EventFlag

_NEW = -1
_ADDED = 1
_DELETED = 2


def _selector_mask(events: int) -> int:
    mask = 0
    if events & EventFlag.READ:
        mask |= selectors.EVENT_READ
    if events & EventFlag.WRITE:
        mask |= selectors.EVENT_WRITE
    return mask


class Poller:
    """Waits for I/O on registered channels using the best selector available."""

    def __init__(self) -> None:
        self._selector = selectors.DefaultSelector()
        self._channels: Dict[int, Channel] = {}

    def poll(self, timeout_ms: int) -> List[Channel]:
        """Wait up to ``timeout_ms`` (negative: forever) and return active channels."""
        timeout = None if timeout_ms < 0 else timeout_ms / 1000.0
        if not self._selector.get_map():
            if timeout is not None and timeout > 0:
                time.sleep(timeout)
            return []
        active = []
        for key, mask in self._selector.select(timeout):
            channel = self._channels.get(key.fd)
            if channel is None:
                continue
            revents = EventFlag.NONE
            if mask & selectors.EVENT_READ:
                revents |= EventFlag.IN
            if mask & selectors.EVENT_WRITE:
                revents |= EventFlag.OUT
            channel.set_revents(revents)
            active.append(channel)
        return active

    def update_channel(self, channel: Channel) -> None:
        fd = channel.fd()
        mask = _selector_mask(channel.events())
        if channel.index == _NEW or fd not in self._channels:
            self._channels[fd] = channel
            if mask:
                self._selector.register(fd, mask)
                channel.index = _ADDED
            else:
                channel.index = _DELETED
            return
        if channel.index == _ADDED:
            if mask:
                self._selector.modify(fd, mask)
            else:
                self._selector.unregister(fd)
                channel.index = _DELETED
        elif mask:
            self._selector.register(fd, mask)
            channel.index = _ADDED

    def remove_channel(self, channel: Channel) -> None:
        if not channel.is_none_event():
            raise RuntimeError("cannot remove a channel that still has events enabled")
        fd = channel.fd()
        if self._channels.get(fd) is not channel:
            raise KeyError(f"channel for fd {fd} is not registered")
        if channel.index == _ADDED:
            self._selector.unregister(fd)
        del self._channels[fd]
        channel.index = _NEW

    def close(self) -> None:
        self._selector.close()
        self._channels.clear()

    def __enter__(self) -> Poller:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()