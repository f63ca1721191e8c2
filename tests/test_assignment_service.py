from __future__ import annotations

from datetime import timedelta

import pytest

from dishduty.exceptions import DependencyError, InvalidStatus, NoWorkersAvailable, NotFoundError
from dishduty.models.action_log import ActionLogEntry, ActionType
from dishduty.models.assignment import Assignment
from dishduty.services.assignment_service import AssignmentService
from dishduty.services.queue_service import QueueService
from tests.utils import TODAY, make_assignment, make_queue_entry, make_worker


def logged_types(db) -> list[str]:
    return [e.action_type for e in db.query(ActionLogEntry).order_by(ActionLogEntry.id)]


def test_rotation_assigns_never_assigned_worker(db) -> None:
    make_worker(db, "B", last_assigned_date=TODAY - timedelta(days=3))
    make_worker(db, "A")
    result = AssignmentService(db).resolve_today(TODAY)

    assert result["source"] == "rotation"
    assert result["worker"].name == "A"
    assert result["worker"].last_assigned_date == TODAY
    assert ActionType.RANDOMLY_ASSIGNED.value in logged_types(db)


def test_resolve_is_idempotent(db) -> None:
    make_worker(db, "A")
    make_worker(db, "B")
    service = AssignmentService(db)
    first = service.resolve_today(TODAY)
    second = service.resolve_today(TODAY)

    assert second["source"] == "existing"
    assert second["assignment"].id == first["assignment"].id
    assert second["assignment"].status == "assigned"
    assert db.query(Assignment).count() == 1


def test_done_assignment_is_kept(db) -> None:
    worker = make_worker(db, "A")
    make_worker(db, "B")
    done = make_assignment(db, worker, TODAY, status="done")
    result = AssignmentService(db).resolve_today(TODAY)
    assert result["assignment"].id == done.id
    assert result["assignment"].status == "done"


def test_not_done_today_is_resolved_again(db) -> None:
    a = make_worker(db, "A", last_assigned_date=TODAY)
    make_worker(db, "B", last_assigned_date=TODAY - timedelta(days=4))
    make_assignment(db, a, TODAY, status="not_done")

    result = AssignmentService(db).resolve_today(TODAY)

    assert result["source"] == "rotation"
    assert result["worker"].name == "B"
    assigned = db.query(Assignment).filter(Assignment.date == TODAY).one()
    assert assigned.status == "assigned"


def test_due_queue_entry_assigns_whole_span(db) -> None:
    a = make_worker(db, "A")
    b = make_worker(db, "B")
    make_queue_entry(db, b, TODAY, 3, order=1)

    result = AssignmentService(db).resolve_today(TODAY)

    assert result["source"] == "queue"
    assert result["duration_days"] == 3
    days = db.query(Assignment).order_by(Assignment.date).all()
    assert [d.date for d in days] == [TODAY + timedelta(days=i) for i in range(3)]
    assert {d.worker_id for d in days} == {b.id}
    assert b.last_assigned_date == TODAY + timedelta(days=2)
    assert a.last_assigned_date is None
    assert QueueService(db).get_all_entries() == []
    assert ActionType.QUEUE_PROCESSED.value in logged_types(db)


def test_overdue_queue_entry_starts_today(db) -> None:
    b = make_worker(db, "B")
    make_queue_entry(db, b, TODAY - timedelta(days=5), 2, order=1)

    AssignmentService(db).resolve_today(TODAY)

    dates = [a.date for a in db.query(Assignment).order_by(Assignment.date)]
    assert dates == [TODAY, TODAY + timedelta(days=1)]


def test_queue_overwrites_existing_day_in_span(db) -> None:
    a = make_worker(db, "A")
    b = make_worker(db, "B")
    make_assignment(db, a, TODAY + timedelta(days=1))
    make_queue_entry(db, b, TODAY, 2, order=1)

    AssignmentService(db).resolve_today(TODAY)

    tomorrow = db.query(Assignment).filter(Assignment.date == TODAY + timedelta(days=1)).one()
    assert tomorrow.worker_id == b.id
    assert db.query(Assignment).count() == 2


def test_queue_consumed_in_fifo_order(db) -> None:
    a = make_worker(db, "A")
    b = make_worker(db, "B")
    queue = QueueService(db)
    queue.enqueue(a, 2, TODAY)
    queue.enqueue(b, 1, TODAY)

    service = AssignmentService(db)
    for offset in range(3):
        service.resolve_today(TODAY + timedelta(days=offset))

    by_date = {x.date: x.worker_id for x in db.query(Assignment)}
    assert by_date == {
        TODAY: a.id,
        TODAY + timedelta(days=1): a.id,
        TODAY + timedelta(days=2): b.id,
    }
    assert queue.get_all_entries() == []


def test_empty_roster_logs_failure(db) -> None:
    with pytest.raises(NoWorkersAvailable):
        AssignmentService(db).resolve_today(TODAY)
    assert logged_types(db) == [ActionType.RANDOM_ASSIGNMENT_FAILED.value]


def test_concurrent_insert_returns_existing(db, monkeypatch) -> None:
    a = make_worker(db, "A")
    b = make_worker(db, "B")
    winner = make_assignment(db, b, TODAY)
    service = AssignmentService(db)

    # 第一次查詢看不到另一個請求剛寫入的指派
    real_get_by_date = service.get_by_date
    calls = []

    def stale_get_by_date(day):
        calls.append(day)
        return None if len(calls) == 1 else real_get_by_date(day)

    monkeypatch.setattr(service, "get_by_date", stale_get_by_date)
    result = service.resolve_today(TODAY)

    assert result["source"] == "existing"
    assert result["assignment"].id == winner.id
    assert db.query(Assignment).count() == 1
    assert a.last_assigned_date is None


def test_database_failure_becomes_dependency_error(db, monkeypatch) -> None:
    from sqlalchemy.exc import OperationalError

    make_worker(db, "A")
    service = AssignmentService(db)

    def broken(today):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(service.queue, "next_due", broken)
    with pytest.raises(DependencyError):
        service.resolve_today(TODAY)
    assert ActionType.DAILY_ASSIGNMENT_ERROR.value in logged_types(db)


def test_set_status_updates_and_logs(db) -> None:
    worker = make_worker(db, "A")
    assignment = make_assignment(db, worker, TODAY)
    service = AssignmentService(db)

    assert service.set_status(assignment.id, "done").status == "done"
    assert service.set_status(assignment.id, "not_done").status == "not_done"
    assert service.set_status(assignment.id, "assigned").status == "assigned"
    assert logged_types(db) == [
        ActionType.STATUS_UPDATED.value,
        ActionType.MARKED_NOT_DONE.value,
        ActionType.STATUS_UPDATED.value,
    ]


def test_set_status_does_not_cascade(db) -> None:
    a = make_worker(db, "A")
    b = make_worker(db, "B")
    yesterday = make_assignment(db, a, TODAY - timedelta(days=1))
    make_assignment(db, b, TODAY)

    AssignmentService(db).set_status(yesterday.id, "not_done")

    today = db.query(Assignment).filter(Assignment.date == TODAY).one()
    assert today.worker_id == b.id
    assert db.query(Assignment).count() == 2


def test_set_status_rejects_unknown_status(db) -> None:
    worker = make_worker(db, "A")
    assignment = make_assignment(db, worker, TODAY)
    with pytest.raises(InvalidStatus):
        AssignmentService(db).set_status(assignment.id, "maybe")
    db.refresh(assignment)
    assert assignment.status == "assigned"


def test_set_status_missing_assignment(db) -> None:
    with pytest.raises(NotFoundError):
        AssignmentService(db).set_status(999, "done")
