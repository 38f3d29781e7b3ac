from __future__ import annotations

from dronesafe.core.events import EventLog
from dronesafe.core.proximity import CollisionEvent, ProximityDetector
from dronesafe.core.timeline import Vector3


def test_close_pair_is_reported():
    detector = ProximityDetector(collision_radius=1)
    events = detector.scan_all({0: Vector3(0, 0, 0), 1: Vector3(1, 0, 0)}, 2.5)
    assert events == [CollisionEvent(0, 1, 2.5)]


def test_distant_pair_is_not_reported():
    detector = ProximityDetector(collision_radius=1)
    assert detector.scan_all({0: Vector3(0, 0, 0), 1: Vector3(3, 0, 0)}, 2.5) == []


def test_exact_threshold_is_not_a_collision():
    detector = ProximityDetector(collision_radius=1)
    assert detector.threshold == 2.0
    assert detector.scan_all({0: Vector3(0, 0, 0), 1: Vector3(0, 2, 0)}, 0.0) == []


def test_pairs_are_ordered_by_id():
    detector = ProximityDetector(collision_radius=1)
    positions = {7: Vector3(0, 0, 0), 2: Vector3(0, 0, 1), 4: Vector3(0, 1, 0), 9: Vector3(50, 0, 0)}
    events = detector.scan_all(positions, 1.0)
    assert [(e.agent_a, e.agent_b) for e in events] == [(2, 4), (2, 7), (4, 7)]


def test_every_pair_of_a_cluster_is_reported_once():
    detector = ProximityDetector(collision_radius=0.5)
    positions = {i: Vector3(0.1 * i, 0, 0) for i in range(4)}
    events = detector.scan_all(positions, 0.0)
    assert len(events) == 6
    assert len({(e.agent_a, e.agent_b) for e in events}) == 6


def test_fewer_than_two_drones():
    detector = ProximityDetector(collision_radius=1)
    assert detector.scan_all({}, 0.0) == []
    assert detector.scan_all({0: Vector3(0, 0, 0)}, 0.0) == []


def test_repeated_scan_is_logged_again():
    detector = ProximityDetector(collision_radius=1)
    positions = {0: Vector3(0, 0, 0), 1: Vector3(1, 0, 0)}
    log = EventLog()
    log.extend(detector.scan_all(positions, 4.0))
    log.extend(detector.scan_all(positions, 4.0))
    assert len(log) == 2
    assert log[0] == log[1] == CollisionEvent(0, 1, 4.0)
    assert log[0] is not log[1]
