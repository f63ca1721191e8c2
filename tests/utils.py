from __future__ import annotations

from datetime import date

from dishduty.models.assignment import Assignment
from dishduty.models.queue_entry import QueueEntry
from dishduty.models.worker import Worker

ADMIN_PASSWORD = "secret"
TODAY = date(2024, 2, 2)


def make_worker(db, name: str, last_assigned_date: date | None = None) -> Worker:
    worker = Worker(name=name, last_assigned_date=last_assigned_date)
    db.add(worker)
    db.commit()
    db.refresh(worker)
    return worker


def make_assignment(db, worker: Worker, day: date, status: str = "assigned") -> Assignment:
    assignment = Assignment(worker_id=worker.id, date=day, status=status)
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return assignment


def make_queue_entry(db, worker: Worker, start: date, duration_days: int, order: int) -> QueueEntry:
    entry = QueueEntry(worker_id=worker.id, start_date=start, duration_days=duration_days, order=order)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry
