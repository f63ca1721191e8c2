import logging
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dishduty.exceptions import ConflictError, InvalidDuration
from dishduty.models.action_log import ActionType
from dishduty.models.assignment import Assignment
from dishduty.models.queue_entry import QueueEntry, MIN_DURATION_DAYS, MAX_DURATION_DAYS
from dishduty.models.worker import Worker
from dishduty.services.action_log_service import ActionLogService
from dishduty.utils.date_utils import format_ymd, today_utc

log = logging.getLogger(__name__)


def validate_duration(duration_days) -> int:
    """檢查排隊天數（1–7 的整數）"""
    if isinstance(duration_days, bool) or not isinstance(duration_days, int):
        raise InvalidDuration(
            f"duration_days must be an integer between {MIN_DURATION_DAYS} and {MAX_DURATION_DAYS}."
        )
    if not MIN_DURATION_DAYS <= duration_days <= MAX_DURATION_DAYS:
        raise InvalidDuration(
            f"duration_days must be between {MIN_DURATION_DAYS} and {MAX_DURATION_DAYS}."
        )
    return duration_days


class QueueService:
    """值日排隊服務"""

    def __init__(self, db: Session):
        self.db = db
        self.action_log = ActionLogService(db)

    def get_all_entries(self) -> list[QueueEntry]:
        """取得所有排隊項目（依 order）"""
        return self.db.query(QueueEntry).order_by(QueueEntry.order).all()

    def get_last_entry(self) -> Optional[QueueEntry]:
        """取得 order 最大的排隊項目"""
        return self.db.query(QueueEntry).order_by(QueueEntry.order.desc()).first()

    def compute_start_date(self, today: date) -> date:
        """
        計算新排隊項目的開始日期

        - 佇列不為空：最後一個項目結束的隔天
        - 佇列為空、最新指派在今天或之後：最新指派的隔天
        - 其他情況：今天
        結果早於今天時一律改為今天（不會排到過去）。
        """
        last_entry = self.get_last_entry()
        if last_entry:
            start_date = last_entry.end_date + timedelta(days=1)
        else:
            latest_assignment = self.db.query(Assignment).order_by(Assignment.date.desc()).first()
            if latest_assignment and latest_assignment.date >= today:
                start_date = latest_assignment.date + timedelta(days=1)
            else:
                start_date = today

        if start_date < today:
            start_date = today
        return start_date

    def next_order(self) -> int:
        """下一個 order 值"""
        last_entry = self.get_last_entry()
        return last_entry.order + 1 if last_entry else 1

    def enqueue(self, worker: Worker, duration_days: int, today: date = None) -> QueueEntry:
        """
        將值日生排入佇列

        Args:
            worker: 值日生
            duration_days: 連續值日天數（1–7）
            today: 今天（預設為 UTC 今天）

        Raises:
            InvalidDuration: 天數超出範圍
            ConflictError: 同時有其他排隊寫入，order 衝突
        """
        validate_duration(duration_days)
        today = today or today_utc()

        entry = QueueEntry(
            worker_id=worker.id,
            start_date=self.compute_start_date(today),
            duration_days=duration_days,
            order=self.next_order(),
        )
        self.db.add(entry)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Queue changed while adding; please retry.") from e
        self.db.refresh(entry)

        log.info(
            "Queued %s for %d days starting %s (order=%d)",
            worker.name, duration_days, format_ymd(entry.start_date), entry.order,
        )
        self.action_log.log_action(ActionType.ADDED_TO_QUEUE, {
            "worker_id": worker.id,
            "worker_name": worker.name,
            "duration_days": duration_days,
            "start_date": format_ymd(entry.start_date),
            "order": entry.order,
        })
        return entry

    def next_due(self, today: date = None) -> Optional[QueueEntry]:
        """取得已到期（start_date <= 今天）且 order 最小的項目"""
        today = today or today_utc()
        return self.db.query(QueueEntry).filter(
            QueueEntry.start_date <= today
        ).order_by(QueueEntry.order).first()

    def consume(self, entry: QueueEntry) -> None:
        """移除已處理的排隊項目"""
        self.db.delete(entry)
        self.db.commit()
