"""Tests for the in-process metrics log"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from api.models.reading import EPOCH_ZERO, Reading
from services.metrics_store import MetricsStore


def test_store_starts_with_zero_reading():
    """Test the log is never empty"""
    store = MetricsStore()
    assert len(store) == 1
    assert store.latest() == Reading(EPOCH_ZERO, 0, 0)


def test_append_and_snapshot_order():
    """Test readings keep append order"""
    store = MetricsStore()
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    store.append(Reading(now, 1, 2))
    store.append(Reading(now, 3, 4))

    snapshot = store.snapshot()
    assert [(r.demand, r.price) for r in snapshot] == [(0, 0), (1, 2), (3, 4)]


def test_snapshot_is_a_copy():
    """Test later appends do not change an earlier snapshot"""
    store = MetricsStore()
    snapshot = store.snapshot()
    store.record_demand(10)
    assert len(snapshot) == 1
    assert len(store) == 2


def test_carry_forward():
    """Test demand and price carry forward independently"""
    store = MetricsStore()
    store.record_price(797)
    store.record_demand(5944)
    store.record_demand(6000)
    store.record_price(800)

    readings = [(r.demand, r.price) for r in store.snapshot()]
    assert readings == [(0, 0), (0, 797), (5944, 797), (6000, 797), (6000, 800)]


def test_record_uses_given_time():
    """Test explicit reading time is kept"""
    store = MetricsStore()
    when = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    reading = store.record_demand(1, when)
    assert reading.time == when
    assert store.latest() is reading


def test_concurrent_appends_are_not_lost():
    """Test N concurrent recorders produce exactly N new readings"""
    store = MetricsStore()
    workers = 50
    barrier = threading.Barrier(workers)

    def record(i):
        barrier.wait()
        store.record_demand(i + 1)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        list(executor.map(record, range(workers)))

    readings = store.snapshot()
    assert len(readings) == workers + 1
    assert sorted(r.demand for r in readings[1:]) == list(range(1, workers + 1))
    assert all(r.price == 0 for r in readings)


def test_reading_round_trip_dict():
    """Test JSON dict form of a reading"""
    reading = Reading(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc), 5944, 797)
    data = reading.to_dict()
    assert data == {'time': '2024-01-02T03:04:05+00:00', 'demand': 5944, 'price': 797}
    assert Reading.from_dict(data) == reading
