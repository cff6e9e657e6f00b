"""Unit tests for the bounded activity log."""

import pytest

from backend.src.services.activity_log import ActivityLogService
from backend.src.services.authorization import Principal
from backend.src.services.clock import elapsed_ms
from backend.src.services.container import Services, build_services
from backend.src.services.errors import ValidationFailure
from backend.src.services.events import ActivityEvent


def test_append_beyond_capacity_evicts_oldest(services: Services, clock) -> None:
    log = services.activity_log
    for i in range(105):
        log.append("mutation", f"op-{i}")
        clock.advance(1)

    entries = log.list()

    assert len(entries) == 100
    operations = [entry.operation for entry in entries]
    assert operations[0] == "op-104"
    assert operations[-1] == "op-5"
    assert not {f"op-{i}" for i in range(5)} & set(operations)


def test_eviction_uses_insertion_order_for_equal_timestamps(services: Services) -> None:
    log = services.activity_log
    for i in range(103):
        log.append("query", f"op-{i}")

    operations = [entry.operation for entry in log.list()]

    assert len(operations) == 100
    assert operations[0] == "op-102"
    assert "op-2" not in operations
    assert "op-3" in operations


@pytest.mark.parametrize("count", [0, 1, 99, 100, 101])
def test_length_is_min_of_appended_and_capacity(services: Services, count: int) -> None:
    for i in range(count):
        services.activity_log.append("mutation", f"op-{i}")

    assert len(services.activity_log.list()) == min(count, 100)


def test_small_capacity_is_enforced_in_storage(services: Services) -> None:
    log = ActivityLogService(services.db, users=services.users, capacity=3)
    for i in range(5):
        log.append("mutation", f"op-{i}")

    conn = services.db.connect()
    try:
        stored = conn.execute("SELECT COUNT(*) FROM activity_log").fetchone()[0]
    finally:
        conn.close()
    assert stored == 3


def test_capacity_must_be_positive(services: Services) -> None:
    with pytest.raises(ValueError):
        ActivityLogService(services.db, capacity=0)


def test_entries_round_trip_fields(services: Services, clock) -> None:
    services.activity_log.append(
        "error", "ai.generateRandomNote", user_id="alice", data={"topic": "x"}, execution_time=12
    )

    entry = services.activity_log.list()[0]

    assert entry.type == "error"
    assert entry.user_id == "alice"
    assert entry.data == {"topic": "x"}
    assert entry.timestamp == clock.now
    assert entry.execution_time == 12


def test_stats_aggregate_window(services: Services) -> None:
    log = services.activity_log
    log.append("query", "q1", execution_time=10)
    log.append("query", "q2")
    log.append("mutation", "m1", execution_time=30)
    log.append("error", "e1", execution_time=5)
    log.append("subscription", "s1")

    stats = log.stats()

    assert stats.total_queries == 2
    assert stats.total_mutations == 1
    assert stats.average_execution_time == pytest.approx(15.0)
    assert stats.active_connections == 0


def test_stats_without_durations_average_zero(services: Services) -> None:
    services.activity_log.append("query", "q1")

    assert services.activity_log.stats().average_execution_time == 0


def test_stats_count_active_users_across_workspaces(services: Services) -> None:
    services.users.login("alice", "teamA")
    services.users.login("bob", "teamB")
    services.users.login("carol", "teamB")
    services.users.logout("carol")

    assert services.activity_log.stats().active_connections == 2


def test_clear_leaves_single_notice(services: Services) -> None:
    for i in range(7):
        services.activity_log.append("mutation", f"op-{i}")

    deleted = services.activity_log.clear()

    entries = services.activity_log.list()
    assert deleted == 7
    assert len(entries) == 1
    assert entries[0].operation == "logs.clearLogs"
    assert entries[0].type == "mutation"
    assert entries[0].user_id is None
    assert entries[0].data == {"message": "All logs cleared", "deletedCount": 7}


def test_clear_on_empty_log(services: Services) -> None:
    assert services.activity_log.clear() == 0
    assert len(services.activity_log.list()) == 1


def test_record_event_appends(services: Services) -> None:
    services.activity_log.record_event(
        ActivityEvent(type="subscription", operation="notes.listNotes", data={"n": 1})
    )

    entry = services.activity_log.list()[0]
    assert entry.type == "subscription"
    assert entry.data == {"n": 1}


def test_unknown_type_is_rejected(services: Services) -> None:
    with pytest.raises(ValidationFailure, match="Unknown log type"):
        services.activity_log.append("debug", "notes.listNotes")

    assert services.activity_log.list() == []


class SteppedBackClock:
    """Wall clock that jumps five seconds into the past after the first read."""

    def __init__(self) -> None:
        self.reads = 0

    def __call__(self) -> int:
        self.reads += 1
        return 1_700_000_010_000 if self.reads == 1 else 1_700_000_005_000


def test_elapsed_ms_never_negative() -> None:
    clock = SteppedBackClock()
    started = clock()

    assert elapsed_ms(clock, started) == 0


def test_clock_stepping_back_keeps_log_readable(app_config) -> None:
    services = build_services(app_config, clock=SteppedBackClock())
    try:
        services.notes.create(Principal("alice", "teamA"), "T", "C")

        entries = services.activity_log.list()
        stats = services.activity_log.stats()
    finally:
        services.close()

    assert [entry.operation for entry in entries] == ["notes.createNote"]
    assert entries[0].execution_time == 0
    assert stats.average_execution_time == 0
