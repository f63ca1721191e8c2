import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dishduty.exceptions import ConflictError, InvalidInputError, NotFoundError
from dishduty.models.action_log import ActionType
from dishduty.models.worker import Worker
from dishduty.services.action_log_service import ActionLogService

log = logging.getLogger(__name__)


class WorkerService:
    """值日生名單服務"""

    def __init__(self, db: Session):
        self.db = db
        self.action_log = ActionLogService(db)

    def get_all_workers(self) -> list[Worker]:
        """取得所有值日生（依名稱排序）"""
        return self.db.query(Worker).order_by(Worker.name).all()

    def get_rotation_roster(self) -> list[Worker]:
        """取得所有值日生（依建立順序，供輪值使用）"""
        return self.db.query(Worker).order_by(Worker.id).all()

    def get_worker(self, worker_id: int) -> Worker:
        """
        取得值日生

        Raises:
            NotFoundError: 找不到值日生
        """
        worker = self.db.query(Worker).filter(Worker.id == worker_id).first()
        if not worker:
            raise NotFoundError(f"Worker {worker_id} not found.")
        return worker

    def find_by_name(self, name: str) -> Optional[Worker]:
        """以名稱查詢（不分大小寫）"""
        return self.db.query(Worker).filter(
            func.lower(Worker.name) == name.strip().lower()
        ).first()

    def resolve_worker(self, worker_id: int = None, worker_name: str = None) -> Worker:
        """依 ID 或名稱找出值日生（ID 優先）"""
        if worker_id is not None:
            return self.get_worker(worker_id)
        if worker_name:
            worker = self.find_by_name(worker_name)
            if not worker:
                raise NotFoundError(f"Worker {worker_name!r} not found.")
            return worker
        raise InvalidInputError("worker_id or worker_name is required.")

    def create_worker(self, name: str) -> Worker:
        """
        新增值日生

        Raises:
            InvalidInputError: 名稱為空
            ConflictError: 名稱已存在（不分大小寫）
        """
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Worker name is required.")
        if self.find_by_name(name):
            raise ConflictError(f"Worker {name!r} already exists.")

        worker = Worker(name=name)
        self.db.add(worker)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Worker {name!r} already exists.") from e
        self.db.refresh(worker)

        log.info("Worker %r created (id=%s)", worker.name, worker.id)
        self.action_log.log_action(ActionType.WORKER_CREATED, {
            "worker_id": worker.id,
            "worker_name": worker.name,
        })
        return worker

    def seed_roster(self, names: list[str]) -> list[Worker]:
        """
        建立初始名單（已存在的名稱略過）

        Returns:
            本次新建立的值日生
        """
        created = []
        for name in names:
            if self.find_by_name(name):
                log.info("Worker %r already exists. Skipping.", name)
                continue
            created.append(self.create_worker(name))
        return created
