from __future__ import annotations

import pytest

from dronesafe.core.config import AnalysisConfig
from dronesafe.core.playback import PlaybackSession
from dronesafe.core.proximity import CollisionEvent
from dronesafe.core.timeline import TimelineStore


@pytest.fixture
def session(crossing_dataset) -> PlaybackSession:
    return PlaybackSession(TimelineStore.from_source(crossing_dataset), AnalysisConfig())


def test_initial_state(session):
    assert session.state.current_time == 0.0
    assert session.state.is_playing is False
    assert session.state.max_time == pytest.approx(2.0)
    assert session.frame_period == pytest.approx(0.1)
    assert len(session.collisions) == 0
    assert len(session.speed_violations) == 0


def test_tick_resolves_positions_and_collisions(session):
    result = session.tick(0.5)
    assert result.time == 0.5
    assert set(result.positions) == {0, 1, 2}
    assert tuple(result.positions[0]) == pytest.approx((0.5, 0.0, 0.0))
    assert tuple(result.positions[1]) == pytest.approx((1.5, 0.0, 0.0))
    assert result.collisions == (CollisionEvent(0, 1, 0.5),)
    assert result.speed_violations == ()
    assert session.state.current_time == 0.5
    assert session.last_result is result


def test_start_separation_equals_threshold(session):
    # drones 0 and 1 start exactly 2 m apart
    assert session.tick(0.0).collisions == ()


def test_drones_past_their_last_waypoint_are_skipped(session):
    result = session.tick(2.0)
    assert dict(result.positions) == {}
    assert result.collisions == ()


def test_same_tick_twice_logs_twice(session):
    session.tick(0.5)
    session.tick(0.5)
    assert len(session.collisions) == 2
    assert session.collisions[0] == session.collisions[1]


def test_jump_without_seek_is_read_as_speed(session):
    session.tick(0.1)
    result = session.tick(1.9)
    # 1.8 m within one assumed frame period → 18 m/s for drones 0 and 1
    assert [v.agent_id for v in result.speed_violations] == [0, 1]
    assert result.speed_violations[0].speed == pytest.approx(18.0)
    assert session.speed_lines()[0] == "Drone 0 at 1.90s (18.00 m/s)"


def test_seek_clears_baselines_but_keeps_logs(session):
    session.tick(0.1)
    session.seek(1.9)
    result = session.tick()
    assert result.time == pytest.approx(1.9)
    assert result.speed_violations == ()
    assert len(session.collisions) == 2


def test_seek_is_clamped(session):
    assert session.seek(-3) == 0.0
    assert session.seek(10) == pytest.approx(2.0)


def test_scrub_maps_percent_to_time(session):
    assert session.seek_scrub(50) == pytest.approx(1.0)
    assert session.scrub_position == pytest.approx(50.0)
    assert session.seek_scrub(150) == pytest.approx(2.0)
    assert session.scrub_position == pytest.approx(100.0)
    assert session.seek_scrub(-1) == 0.0


def test_reset_keeps_cumulative_logs(session):
    session.play()
    session.tick(0.5)
    session.tick(0.6)
    session.reset()
    assert session.state.current_time == 0.0
    assert session.state.is_playing is False
    assert session.last_result is None
    assert all(rt.last_position is None for rt in session.motion.runtimes.values())
    assert len(session.collisions) == 2


def test_advance_runs_to_the_end_and_stops(session):
    session.play()
    ticks = 0
    while session.state.is_playing and ticks < 100:
        session.advance()
        ticks += 1
    assert session.finished
    assert session.state.current_time == pytest.approx(2.0)
    assert ticks in (20, 21)
    # every tick strictly inside (0, 2) s sees drones 0 and 1 closer than 2 m
    assert len(session.collisions) == 19
    assert len(session.speed_violations) == 0


def test_toggle(session):
    assert session.toggle() is True
    assert session.toggle() is False


def test_tick_result_is_read_only(session):
    result = session.tick(0.5)
    with pytest.raises(TypeError):
        result.positions[5] = result.positions[0]  # type: ignore[index]


def test_collision_lines(session):
    session.tick(0.5)
    session.tick(1.25)
    assert session.collision_lines() == [
        "Drone 0 and Drone 1 at 0.50s",
        "Drone 0 and Drone 1 at 1.25s",
    ]


def test_capped_logs(crossing_dataset):
    store = TimelineStore.from_source(crossing_dataset)
    session = PlaybackSession(store, AnalysisConfig(max_log_entries=3))
    for t in (0.1, 0.2, 0.3, 0.4, 0.5):
        session.tick(t)
    assert [c.time for c in session.collisions] == [0.3, 0.4, 0.5]
    assert session.collisions.dropped == 2


def test_late_starting_drone_is_not_scanned(make_dataset):
    store = TimelineStore.from_source(make_dataset([
        [(0, 0.0), (20, 0.0)],
        [(10, 50.0), (20, 50.0)],
    ]))
    session = PlaybackSession(store)
    result = session.tick(0.5)
    assert set(result.positions) == {0}
    assert result.collisions == ()
    assert session.tick(1.0).collisions == (CollisionEvent(0, 1, 1.0),)


def test_session_requires_loaded_store():
    with pytest.raises(ValueError):
        PlaybackSession(TimelineStore())
