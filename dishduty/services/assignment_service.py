import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from dishduty.exceptions import (
    ConflictError, DependencyError, InvalidInputError, InvalidStatus,
    NoWorkersAvailable, NotFoundError,
)
from dishduty.models.action_log import ActionType
from dishduty.models.assignment import Assignment, AssignmentStatus
from dishduty.models.queue_entry import QueueEntry
from dishduty.models.worker import Worker
from dishduty.services.action_log_service import ActionLogService
from dishduty.services.queue_service import QueueService
from dishduty.services.rotation import select_next_worker
from dishduty.services.worker_service import WorkerService
from dishduty.utils.date_utils import date_range, format_ymd, today_utc

log = logging.getLogger(__name__)

# 今天已有這些狀態的指派時視為已決定
RESOLVED_STATUSES = (AssignmentStatus.ASSIGNED.value, AssignmentStatus.DONE.value)


class AssignmentService:
    """每日值日指派服務"""

    def __init__(self, db: Session):
        self.db = db
        self.action_log = ActionLogService(db)
        self.queue = QueueService(db)
        self.workers = WorkerService(db)

    # ===== 查詢 =====

    def get_assignment(self, assignment_id: int) -> Assignment:
        """
        取得指派

        Raises:
            NotFoundError: 找不到指派
        """
        assignment = self.db.query(Assignment).filter(Assignment.id == assignment_id).first()
        if not assignment:
            raise NotFoundError(f"Assignment {assignment_id} not found.")
        return assignment

    def get_by_date(self, day: date) -> Optional[Assignment]:
        """取得指定日期的指派"""
        return self.db.query(Assignment).filter(Assignment.date == day).first()

    def get_in_range(self, start_date: date, end_date: date) -> list[Assignment]:
        """取得日期範圍內的指派（依日期排序）"""
        if start_date > end_date:
            raise InvalidInputError("start_date must not be after end_date.")
        return self.db.query(Assignment).filter(
            Assignment.date >= start_date,
            Assignment.date <= end_date
        ).order_by(Assignment.date).all()

    # ===== 每日指派 =====

    def resolve_today(self, today: date = None) -> dict:
        """
        決定今天的值日生（可重複呼叫）

        1. 今天已有 assigned / done 的指派：直接回傳
           今天的指派是 not_done：刪除後重新指派
        2. 佇列有到期項目：依項目天數連續指派，並移出佇列
        3. 否則依輪值規則挑選一人指派今天

        Returns:
            {"message", "source", "assignment", "worker", "duration_days"}

        Raises:
            NoWorkersAvailable: 名單為空
            DependencyError: 資料庫寫入失敗
        """
        today = today or today_utc()

        existing = self.get_by_date(today)
        if existing:
            if existing.status in RESOLVED_STATUSES:
                log.info("Worker %s already assigned for %s. No action needed.",
                         existing.worker_id, format_ymd(today))
                return self._result(existing, "existing", "Assignment already exists for today.")

            log.info("Assignment for %s is not_done; resolving again.", format_ymd(today))
            self.db.delete(existing)
            self.db.commit()

        try:
            entry = self.queue.next_due(today)
            if entry:
                return self._assign_from_queue(entry, today)
            return self._assign_by_rotation(today)
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("Daily assignment failed for %s", format_ymd(today))
            self.action_log.log_action(ActionType.DAILY_ASSIGNMENT_ERROR, {
                "date": format_ymd(today),
                "error": str(e),
            })
            raise DependencyError("Failed to persist today's assignment.") from e

    def _assign_from_queue(self, entry: QueueEntry, today: date) -> dict:
        """處理到期的排隊項目"""
        worker = entry.worker
        duration = entry.duration_days

        # 過期的項目從今天開始，不回補過去的日期
        effective_start = max(entry.start_date, today)
        days = date_range(effective_start, duration)

        for day in days:
            self.assign_day(day, worker)

        worker.last_assigned_date = days[-1]
        self.db.commit()

        self.queue.consume(entry)

        log.info("Assigned %s for %d days starting %s from queue.",
                 worker.name, duration, format_ymd(effective_start))
        self.action_log.log_action(ActionType.QUEUE_PROCESSED, {
            "worker_id": worker.id,
            "worker_name": worker.name,
            "duration_days": duration,
            "start_date": format_ymd(effective_start),
        })

        result = self._result(self.get_by_date(today), "queue", "Worker assigned from queue.")
        result["duration_days"] = duration
        return result

    def _assign_by_rotation(self, today: date) -> dict:
        """依輪值規則指派今天"""
        try:
            worker = select_next_worker(self.workers.get_rotation_roster())
        except NoWorkersAvailable:
            log.warning("No workers available for rotation.")
            self.action_log.log_action(ActionType.RANDOM_ASSIGNMENT_FAILED, {
                "date": format_ymd(today),
                "reason": "No workers in the system.",
            })
            raise

        assignment = Assignment(
            worker_id=worker.id,
            date=today,
            status=AssignmentStatus.ASSIGNED.value
        )
        self.db.add(assignment)
        try:
            self.db.commit()
        except IntegrityError:
            # 其他請求已先寫入今天的指派
            self.db.rollback()
            existing = self.get_by_date(today)
            if not existing:
                raise
            log.info("Assignment for %s was created concurrently.", format_ymd(today))
            return self._result(existing, "existing", "Assignment already exists for today.")
        self.db.refresh(assignment)

        worker.last_assigned_date = today
        self.db.commit()

        log.info("Rotation assigned %s for %s.", worker.name, format_ymd(today))
        self.action_log.log_action(ActionType.RANDOMLY_ASSIGNED, {
            "worker_id": worker.id,
            "worker_name": worker.name,
            "date": format_ymd(today),
        })
        return self._result(assignment, "rotation", "Worker assigned by rotation.")

    def assign_day(self, day: date, worker: Worker) -> Assignment:
        """
        建立或更新某一天的指派（status = assigned）

        同一天已有指派時直接改寫，不會產生第二筆。
        """
        assignment = self.get_by_date(day)
        if assignment is None:
            assignment = Assignment(
                worker_id=worker.id,
                date=day,
                status=AssignmentStatus.ASSIGNED.value
            )
            self.db.add(assignment)
            try:
                self.db.commit()
                return assignment
            except IntegrityError:
                self.db.rollback()
                assignment = self.get_by_date(day)
                if assignment is None:
                    raise ConflictError(f"Could not create assignment for {format_ymd(day)}.")

        if assignment.worker_id != worker.id:
            log.info("Reassigning %s from worker %s to %s.",
                     format_ymd(day), assignment.worker_id, worker.id)
        assignment.worker_id = worker.id
        assignment.status = AssignmentStatus.ASSIGNED.value
        self.db.commit()
        return assignment

    def _result(self, assignment: Assignment, source: str, message: str) -> dict:
        return {
            "message": message,
            "source": source,
            "assignment": assignment,
            "worker": assignment.worker,
            "duration_days": 1,
        }

    # ===== 狀態更新 =====

    def set_status(self, assignment_id: int, status: str) -> Assignment:
        """
        更新指派狀態（任何狀態之間都可以互轉）

        只改狀態本身；要讓未完成的人今天補做並順延後續排程，請用 UndoneService。

        Raises:
            InvalidStatus: 狀態不合法
            NotFoundError: 找不到指派
        """
        valid_statuses = [s.value for s in AssignmentStatus]
        if status not in valid_statuses:
            raise InvalidStatus(f"status must be one of {', '.join(valid_statuses)}.")

        assignment = self.get_assignment(assignment_id)
        original_status = assignment.status
        assignment.status = status
        self.db.commit()
        self.db.refresh(assignment)

        details = {
            "assignment_id": assignment.id,
            "date": format_ymd(assignment.date),
            "worker_id": assignment.worker_id,
            "worker_name": assignment.worker.name,
            "original_status": original_status,
            "status": status,
        }
        if status == AssignmentStatus.NOT_DONE.value:
            self.action_log.log_action(ActionType.MARKED_NOT_DONE, details)
        else:
            self.action_log.log_action(ActionType.STATUS_UPDATED, details)

        log.info("Assignment %s (%s) status %s -> %s",
                 assignment.id, format_ymd(assignment.date), original_status, status)
        return assignment
