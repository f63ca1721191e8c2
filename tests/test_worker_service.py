from __future__ import annotations

import pytest

from dishduty.exceptions import ConflictError, InvalidInputError, NotFoundError
from dishduty.services.worker_service import WorkerService
from tests.utils import make_worker


def test_seed_roster_skips_existing(db) -> None:
    make_worker(db, "Keromag")
    created = WorkerService(db).seed_roster(["keromag", "megatorg", "baby-ch"])
    assert [w.name for w in created] == ["megatorg", "baby-ch"]
    assert [w.name for w in WorkerService(db).get_all_workers()] == ["Keromag", "baby-ch", "megatorg"]


def test_create_worker_rejects_blank_and_duplicates(db) -> None:
    service = WorkerService(db)
    service.create_worker("amy")
    with pytest.raises(InvalidInputError):
        service.create_worker("   ")
    with pytest.raises(ConflictError):
        service.create_worker("AMY")


def test_resolve_worker_by_id_or_name(db) -> None:
    worker = make_worker(db, "Amy")
    service = WorkerService(db)
    assert service.resolve_worker(worker_id=worker.id) is worker
    assert service.resolve_worker(worker_name=" amy ") is worker
    with pytest.raises(NotFoundError):
        service.resolve_worker(worker_name="bob")
    with pytest.raises(InvalidInputError):
        service.resolve_worker()
