import pytest

from reactornet.channel import Channel, EventFlag


class _Loop:
    def __init__(self):
        self.updated = []
        self.removed = []

    def update_channel(self, channel):
        self.updated.append(channel.events())

    def remove_channel(self, channel):
        self.removed.append(channel)


class _Owner:
    pass


def _recording_channel():
    loop = _Loop()
    channel = Channel(loop, 7)
    calls = []
    channel.read_callback = lambda: calls.append("read")
    channel.write_callback = lambda: calls.append("write")
    channel.close_callback = lambda: calls.append("close")
    channel.error_callback = lambda: calls.append("error")
    return loop, channel, calls


def test_new_channel_has_no_events():
    loop = _Loop()
    channel = Channel(loop, 3)
    assert channel.fd() == 3
    assert channel.is_none_event()
    assert channel.owner_loop() is loop
    assert channel.index == -1


def test_fd_taken_from_object_with_fileno():
    class _FileLike:
        def fileno(self):
            return 11

    assert Channel(_Loop(), _FileLike()).fd() == 11


def test_enable_and_disable_reading_updates_loop():
    loop, channel, _ = _recording_channel()
    channel.enable_reading()
    assert channel.is_reading()
    assert not channel.is_writing()
    assert channel.events() == EventFlag.READ
    channel.disable_reading()
    assert not channel.is_reading()
    assert loop.updated == [EventFlag.READ, EventFlag.NONE]


def test_enable_writing_and_disable_all():
    loop, channel, _ = _recording_channel()
    channel.enable_reading()
    channel.enable_writing()
    assert channel.events() == EventFlag.READ | EventFlag.WRITE
    channel.disable_writing()
    assert channel.events() == EventFlag.READ
    channel.disable_all()
    assert channel.is_none_event()
    assert len(loop.updated) == 4


def test_update_events_sets_mask():
    loop, channel, _ = _recording_channel()
    channel.update_events(EventFlag.WRITE)
    assert channel.is_writing()
    assert loop.updated[-1] == EventFlag.WRITE


def test_read_event_is_in_and_pri_write_event_is_out():
    _, channel, _ = _recording_channel()
    channel.enable_reading()
    assert channel.events() == EventFlag.IN | EventFlag.PRI
    channel.disable_reading()
    channel.enable_writing()
    assert channel.events() == EventFlag.OUT


def test_remove_requires_no_events():
    loop, channel, _ = _recording_channel()
    channel.enable_reading()
    with pytest.raises(RuntimeError):
        channel.remove()
    channel.disable_all()
    channel.remove()
    assert loop.removed == [channel]
    assert channel.added_to_loop is False


def test_handle_event_dispatches_read():
    _, channel, calls = _recording_channel()
    channel.enable_reading()
    channel.set_revents(EventFlag.IN)
    channel.handle_event()
    assert calls == ["read"]


def test_handle_event_dispatches_write():
    _, channel, calls = _recording_channel()
    channel.enable_writing()
    channel.set_revents(EventFlag.OUT)
    channel.handle_event()
    assert calls == ["write"]


def test_hangup_without_input_closes():
    _, channel, calls = _recording_channel()
    channel.enable_reading()
    channel.set_revents(EventFlag.HUP)
    channel.handle_event()
    assert calls == ["close"]


def test_hangup_with_input_reads_instead_of_closing():
    _, channel, calls = _recording_channel()
    channel.enable_reading()
    channel.set_revents(EventFlag.HUP | EventFlag.IN)
    channel.handle_event()
    assert calls == ["read"]


def test_error_then_read_order():
    _, channel, calls = _recording_channel()
    channel.enable_reading()
    channel.set_revents(EventFlag.ERR | EventFlag.IN)
    channel.handle_event()
    assert calls == ["error", "read"]


def test_event_callback_replaces_others():
    _, channel, calls = _recording_channel()
    channel.event_callback = lambda: calls.append("event")
    channel.enable_reading()
    channel.set_revents(EventFlag.IN | EventFlag.OUT)
    channel.handle_event()
    assert calls == ["event"]


def test_no_dispatch_without_enabled_events():
    _, channel, calls = _recording_channel()
    channel.set_revents(EventFlag.IN)
    channel.handle_event()
    assert calls == []


def test_tied_channel_dispatches_while_owner_alive():
    _, channel, calls = _recording_channel()
    owner = _Owner()
    channel.tie(owner)
    channel.enable_reading()
    channel.set_revents(EventFlag.IN)
    channel.handle_event()
    assert calls == ["read"]


def test_tied_channel_skips_after_owner_gone():
    _, channel, calls = _recording_channel()
    owner = _Owner()
    channel.tie(owner)
    del owner
    channel.enable_reading()
    channel.set_revents(EventFlag.IN)
    channel.handle_event()
    assert calls == []


def test_set_revents_returns_value():
    _, channel, _ = _recording_channel()
    assert channel.set_revents(EventFlag.OUT) == EventFlag.OUT
    assert channel.revents() == EventFlag.OUT