# reactornet

Building blocks for reactor-style, non-blocking TCP networking. Each piece does
one job. `InetAddress` describes an endpoint. `Channel` ties a file descriptor
to its event callbacks. `Poller` waits for readiness on those channels.
`Socket` wraps a TCP socket. The buffer nodes hold outgoing data, and
`Resolver` turns host names into addresses.

## Installation

```
pip install .
```

## Modules

- `reactornet.inet_address.InetAddress` holds an IPv4 or IPv6 endpoint.
  - Construct it as `InetAddress(port, loopback_only, ipv6)` for the wildcard or
    loopback address, as `InetAddress.from_ip(ip, port, ipv6)` from text, or as
    `InetAddress.from_sockaddr(family, sockaddr)` from a `socket` module address
    tuple.
  - If the IP text does not parse, the endpoint is marked unspecified
    (`is_unspecified()`).
  - It formats the endpoint with `to_ip` and `to_ip_port`, and returns the
    network-order bytes with `to_ip_net_endian` and `to_ip_port_net_endian`.
  - `is_loopback_ip` and `is_intranet_ip` classify the address. Intranet means
    the 10/8, 172.16/12 and 192.168/16 ranges, loopback, IPv6 site- and
    link-local addresses, and the IPv4-mapped forms of these.
  - `sockaddr()` returns the tuple that `socket.bind` and `socket.connect`
    accept.
- `reactornet.channel`:
  - `EventFlag` is the set of poll event bits.
  - `Channel` holds the interest set of one descriptor: `enable_reading`,
    `enable_writing`, `disable_*` and `update_events`.
  - It also holds the callbacks, as the attributes `read_callback`,
    `write_callback`, `close_callback`, `error_callback` and `event_callback`.
    When `event_callback` is set, it replaces all the others.
  - `handle_event()` dispatches the events recorded by `set_revents`.
  - `tie(obj)` stops dispatch once `obj` has been garbage-collected.
- `reactornet.poller.Poller` registers channels with the platform's best
  `selectors` implementation. `poll(timeout_ms)` returns the channels that are
  ready, with their `revents` set. A negative timeout waits forever.
- `reactornet.sockets.Socket` owns a socket.
  - It binds (`bind_address`), listens, and accepts. `accept` returns a
    non-blocking socket and the peer's `InetAddress`.
  - It sets `TCP_NODELAY`, `SO_REUSEADDR`, `SO_REUSEPORT` and `SO_KEEPALIVE`,
    and reads the pending socket error.
  - Its static helpers are `create_nonblocking`, `connect` (returns 0 or an
    errno), `get_local_addr`, `get_peer_addr` and `is_self_connect`.
- `reactornet.buffer_nodes` provides send-queue nodes. Each has `get_data`,
  `retrieve` and `remaining_bytes`.
  - `MemBufferNode` holds appended bytes.
  - `FileBufferNode(file_name, offset, length)` sends a region of a file in
    chunks of up to 16 KiB. A `length` of 0 means up to the end of the file. A
    negative offset or a region past the end raises `ValueError`.
  - `StreamBufferNode(callback)` calls `callback(max_bytes)` until the callback
    returns empty bytes. On `close` it calls `callback(0)` once.
  - `AsyncStreamBufferNode` holds data appended later by a producer.
  - The factories are `new_mem_buffer_node`, `new_file_buffer_node`,
    `new_stream_buffer_node` and `new_async_stream_buffer_node`.
- `reactornet.task_queue.TaskQueue` is the abstract base of task queues.
  Subclasses implement `run_task_in_queue`. `sync_task_in_queue(task)` waits for
  the task to finish, then returns its result or raises its exception.
- `reactornet.resolver`:
  - `Resolver` runs the system resolver on a shared pool of worker threads. The
    pool has at least 8 workers.
  - The results are cached for the whole process. An entry is used for `timeout`
    seconds, or forever when `timeout` is 0.
  - `resolve(hostname, callback)` passes the first address to the callback.
    `resolve_all` passes a one-element list.
  - Failures are reported as `InetAddress()`, which is `0.0.0.0:0`, and are not
    cached.
  - An answer from the cache is delivered on the calling thread. Any other
    answer is delivered on a worker thread.
  - `Resolver.clear_cache()` empties the cache. `new_resolver(loop, timeout)`
    creates a resolver; the `loop` argument is ignored.

## Examples

Endpoints:

```python
from reactornet.inet_address import InetAddress

addr = InetAddress.from_ip("127.0.0.1", 8080)
print(addr.to_ip_port())      # 127.0.0.1:8080
print(addr.is_loopback_ip())  # True
```

Polling a channel. A channel calls `update_channel` and `remove_channel` on its
owner, so a `Poller` can be passed as the owner directly:

```python
import socket
from reactornet.channel import Channel
from reactornet.poller import Poller

a, b = socket.socketpair()
with Poller() as poller:
    channel = Channel(poller, a)
    channel.read_callback = lambda: print(a.recv(100))
    channel.enable_reading()
    b.send(b"hello")
    for active in poller.poll(1000):
        active.handle_event()
    channel.disable_all()
    channel.remove()
a.close()
b.close()
```

Resolving a host name:

```python
import threading
from reactornet.resolver import new_resolver

done = threading.Event()
resolver = new_resolver(None, 60)
resolver.resolve("localhost", lambda addr: (print(addr.to_ip()), done.set()))
done.wait(5)
```

## What the package does not do

There is no event loop in this package, and therefore:

- no timers;
- no cross-thread function queue;
- no loop threads or thread pools;
- no listening acceptor;
- no reconnecting connector;
- no TCP server or client.

`Channel` only needs an owner with `update_channel` and `remove_channel`
methods. The caller drives `Poller.poll` and calls `handle_event` on each
channel it returns. `TaskQueue` is an interface only; `Resolver` carries the one
implementation it uses internally. TLS is not provided.

## Running the tests

```
pip install .[test]
pytest
```