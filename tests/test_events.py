from __future__ import annotations

from dronesafe.core.events import EventLog


def test_unbounded_log_keeps_everything():
    log = EventLog()
    log.extend(range(1000))
    assert len(log) == 1000
    assert log.dropped == 0
    assert log.total == 1000


def test_capped_log_evicts_oldest():
    log = EventLog(max_entries=3)
    log.extend(range(5))
    assert log.entries == (2, 3, 4)
    assert log.dropped == 2
    assert log.total == 5
    assert list(log) == [2, 3, 4]
