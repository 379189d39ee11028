"""Host name resolution on a shared worker pool, with a process-wide cache."""

from __future__ import annotations

import logging
import os
import socket
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Tuple

from reactornet.inet_address import InetAddress
from reactornet.task_queue import Task, TaskQueue

_log = logging.getLogger(__name__)

ResolverCallback = Callable[[InetAddress], None]
ResolverResultsCallback = Callable[[List[InetAddress]], None]

DEFAULT_TIMEOUT = 60
_QUEUE_NAME = "Dns Queue"
_MIN_WORKERS = 8


def _run_logged(task: Task) -> None:
    try:
        task()
    except Exception:
        _log.exception("resolver task failed")


class _ConcurrentTaskQueue(TaskQueue):
    """Runs tasks on a pool of worker threads."""

    def __init__(self, workers: int, name: str) -> None:
        self._name = name
        self._executor = ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix=name.replace(" ", "_")
        )

    def run_task_in_queue(self, task: Task) -> None:
        self._executor.submit(_run_logged, task)

    def name(self) -> str:
        return self._name


_queue: Optional[_ConcurrentTaskQueue] = None
_queue_lock = threading.Lock()


def _task_queue() -> _ConcurrentTaskQueue:
    global _queue
    with _queue_lock:
        if _queue is None:
            _queue = _ConcurrentTaskQueue(max(_MIN_WORKERS, os.cpu_count() or 1), _QUEUE_NAME)
        return _queue


class Resolver:
    """Resolves host names with the system resolver.

    Results are cached for every resolver in the process; an entry is
    used for ``timeout`` seconds, or for ever when ``timeout`` is 0.
    Callbacks run on a worker thread, or on the calling thread when the
    answer comes from the cache.
    """

    _cache: Dict[str, Tuple[InetAddress, float]] = {}
    _cache_lock = threading.Lock()

    def __init__(self, timeout: int = DEFAULT_TIMEOUT) -> None:
        if timeout < 0:
            raise ValueError("timeout must not be negative")
        self._timeout = timeout

    @property
    def timeout(self) -> int:
        return self._timeout

    @staticmethod
    def is_c_ares_used() -> bool:
        return False

    @classmethod
    def clear_cache(cls) -> None:
        """Forget every cached resolution."""
        with cls._cache_lock:
            cls._cache.clear()

    def _cached(self, hostname: str) -> Optional[InetAddress]:
        with self._cache_lock:
            entry = self._cache.get(hostname)
        if entry is None:
            return None
        addr, stamp = entry
        if self._timeout == 0 or stamp + self._timeout > time.monotonic():
            return addr
        return None

    def resolve(self, hostname: str, callback: ResolverCallback) -> None:
        """Resolve ``hostname`` and pass the first address found to ``callback``.

        On failure the callback receives the default address 0.0.0.0:0,
        and nothing is cached.
        """
        cached = self._cached(hostname)
        if cached is not None:
            callback(cached)
            return
        _task_queue().run_task_in_queue(lambda: self._lookup(hostname, callback))

    def resolve_all(self, hostname: str, callback: ResolverResultsCallback) -> None:
        """Resolve ``hostname`` and pass a list of the addresses found to ``callback``."""
        self.resolve(hostname, lambda addr: callback([addr]))

    def _lookup(self, hostname: str, callback: ResolverCallback) -> None:
        cached = self._cached(hostname)
        if cached is not None:
            callback(cached)
            return
        try:
            infos: List[Any] = socket.getaddrinfo(
                hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM, 0, socket.AI_PASSIVE
            )
        except (OSError, UnicodeError) as exc:
            _log.error("InetAddress::resolve %s: %s", hostname, exc)
            callback(InetAddress())
            return
        if not infos:
            _log.error("InetAddress::resolve %s: no result", hostname)
            callback(InetAddress())
            return
        family, _, _, _, sockaddr = infos[0]
        if family in (socket.AF_INET, socket.AF_INET6):
            addr = InetAddress.from_sockaddr(family, sockaddr)
        else:
            addr = InetAddress()
        callback(addr)
        with self._cache_lock:
            self._cache[hostname] = (addr, time.monotonic())

    def __repr__(self) -> str:
        return f"Resolver(timeout={self._timeout})"


def new_resolver(loop: Any = None, timeout: int = DEFAULT_TIMEOUT) -> Resolver:
    """Create a resolver; the system resolver needs no event loop."""
    return Resolver(timeout)