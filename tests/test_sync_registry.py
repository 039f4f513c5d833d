import itertools

from wiremix.sync_registry import SyncRegistry


class _Core:
    def __init__(self):
        self._counter = itertools.count(1)
        self.issued = []

    def sync(self, id_):
        seq = next(self._counter)
        self.issued.append(seq)
        return seq


class _FailingCore:
    def sync(self, id_):
        raise OSError("sync failed")


def test_done_only_after_all_pending():
    registry = SyncRegistry()
    core = _Core()
    registry.sync(core)
    registry.sync(core)
    first, second = core.issued
    assert registry.done(first) is False
    assert registry.done(second) is True


def test_done_reported_only_once():
    registry = SyncRegistry()
    core = _Core()
    registry.sync(core)
    (seq,) = core.issued
    assert registry.done(seq) is True
    assert registry.done(seq) is False


def test_no_new_syncs_after_done():
    registry = SyncRegistry()
    core = _Core()
    registry.sync(core)
    registry.done(core.issued[0])
    registry.sync(core)
    assert len(core.issued) == 1


def test_unknown_seq_does_not_complete():
    registry = SyncRegistry()
    core = _Core()
    registry.sync(core)
    assert registry.done(core.issued[0] + 100) is False
    assert registry.done(core.issued[0]) is True


def test_failed_sync_registers_nothing():
    registry = SyncRegistry()
    registry.sync(_FailingCore())
    assert registry.done(0) is True