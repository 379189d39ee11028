"""Reactor-style networking blocks: endpoints, channels, poller, sockets, buffer nodes, resolver."""

__version__ = "1.5.26"

__all__ = [
    "buffer_nodes",
    "channel",
    "inet_address",
    "poller",
    "resolver",
    "sockets",
    "task_queue",
]