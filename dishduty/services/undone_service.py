import logging
from datetime import date, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dishduty.exceptions import InvalidInputError, NotFoundError
from dishduty.models.action_log import ActionType
from dishduty.models.assignment import Assignment, AssignmentStatus
from dishduty.models.queue_entry import QueueEntry
from dishduty.services.action_log_service import ActionLogService
from dishduty.services.assignment_service import AssignmentService
from dishduty.utils.date_utils import format_ymd, today_utc

log = logging.getLogger(__name__)


class UndoneService:
    """
    未完成處理

    某天的值日被標記為未完成時，同一人今天補做，
    今天之後的指派與排隊項目全部順延一天。
    """

    def __init__(self, db: Session):
        self.db = db
        self.action_log = ActionLogService(db)
        self.assignments = AssignmentService(db)

    def mark_not_done(self, target_date: date, today: date = None) -> dict:
        """
        將 target_date 的指派標記為 not_done 並重新安排

        步驟 1–3 失敗會直接拋出；順延（步驟 4）逐筆處理，單筆失敗只記 log。

        Raises:
            InvalidInputError: target_date 在今天之後
            NotFoundError: target_date 沒有指派
        """
        today = today or today_utc()
        if target_date > today:
            raise InvalidInputError("Cannot mark a future assignment as not done.")

        # 1. 標記未完成
        assignment = self.assignments.get_by_date(target_date)
        if not assignment:
            raise NotFoundError(f"No assignment found for date {format_ymd(target_date)}.")

        original_status = assignment.status
        failed_worker = assignment.worker
        assignment.status = AssignmentStatus.NOT_DONE.value
        self.db.commit()

        # 2. 今天若是別人，取消該指派
        displaced = None
        today_assignment = self.assignments.get_by_date(today)
        if today_assignment and today_assignment.worker_id != failed_worker.id:
            displaced = {"worker_id": today_assignment.worker_id}
            log.info("Cancelling assignment of worker %s on %s to reassign to %s",
                     today_assignment.worker_id, format_ymd(today), failed_worker.name)
            self.db.delete(today_assignment)
            self.db.commit()
            self.action_log.log_action(ActionType.ASSIGNMENT_CANCELLED_FOR_REASSIGNMENT, {
                "date": format_ymd(today),
                "cancelled_worker_id": displaced["worker_id"],
                "reassigned_to_worker_id": failed_worker.id,
            })
            today_assignment = None

        # 3. 今天改由未完成的人補做
        reassigned_today = False
        if today_assignment is None:
            self.db.add(Assignment(
                worker_id=failed_worker.id,
                date=today,
                status=AssignmentStatus.ASSIGNED.value
            ))
            failed_worker.last_assigned_date = today
            self.db.commit()
            reassigned_today = True
            self.action_log.log_action(ActionType.ASSIGNED, {
                "worker_id": failed_worker.id,
                "worker_name": failed_worker.name,
                "date": format_ymd(today),
                "reason": "reassigned_after_not_done",
            })

        # 4. 順延
        shifted_assignments = self.shift_assignments_after(today)
        shifted_queue_entries = self.shift_queue_entries_from(today)
        if displaced:
            self._reschedule_displaced(displaced, today + timedelta(days=1))

        # 5. 記錄
        self.action_log.log_action(ActionType.MARKED_NOT_DONE, {
            "date": format_ymd(target_date),
            "original_status": original_status,
            "failed_worker_id": failed_worker.id,
            "failed_worker_name": failed_worker.name,
            "reassigned_today": reassigned_today,
            "today_reassigned_to": failed_worker.id if reassigned_today else None,
            "shifted_assignments": shifted_assignments,
            "shifted_queue_entries": shifted_queue_entries,
        })

        return {
            "message": (
                f"Assignment for {format_ymd(target_date)} marked 'not_done'. "
                f"Worker {failed_worker.name} has been reassigned for {format_ymd(today)} "
                f"if they weren't already. Subsequent assignments shifted."
            ),
            "date": target_date,
            "failed_worker": failed_worker,
            "reassigned_today": reassigned_today,
            "shifted_assignments": shifted_assignments,
            "shifted_queue_entries": shifted_queue_entries,
        }

    def shift_assignments_after(self, day: date) -> int:
        """
        day 之後的指派全部往後一天

        從最遠的日期往回處理、每筆各自 commit，過程中不會出現同一天兩筆。

        Returns:
            成功順延的筆數
        """
        future = self.db.query(Assignment).filter(
            Assignment.date > day
        ).order_by(Assignment.date.desc()).all()

        shifted = 0
        for assignment in future:
            old_date = assignment.date
            try:
                assignment.date = old_date + timedelta(days=1)
                self.db.commit()
                shifted += 1
            except SQLAlchemyError as e:
                self.db.rollback()
                log.warning("Failed to shift assignment %s from %s: %s",
                            assignment.id, format_ymd(old_date), e)
        return shifted

    def shift_queue_entries_from(self, day: date) -> int:
        """start_date 在 day（含）之後的排隊項目往後一天"""
        entries = self.db.query(QueueEntry).filter(
            QueueEntry.start_date >= day
        ).order_by(QueueEntry.order).all()

        shifted = 0
        for entry in entries:
            old_start = entry.start_date
            try:
                entry.start_date = old_start + timedelta(days=1)
                self.db.commit()
                shifted += 1
            except SQLAlchemyError as e:
                self.db.rollback()
                log.warning("Failed to shift queue entry %s from %s: %s",
                            entry.id, format_ymd(old_start), e)
        return shifted

    def _reschedule_displaced(self, displaced: dict, day: date) -> None:
        """被取消的人改到隔天（其後的指派已先順延），未來的日期一律是 assigned"""
        try:
            self.db.add(Assignment(
                worker_id=displaced["worker_id"],
                date=day,
                status=AssignmentStatus.ASSIGNED.value
            ))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.warning("Failed to move worker %s to %s: %s",
                        displaced["worker_id"], format_ymd(day), e)
            return

        worker = self.assignments.workers.get_worker(displaced["worker_id"])
        if worker.last_assigned_date is None or worker.last_assigned_date < day:
            worker.last_assigned_date = day
            self.db.commit()
