from datetime import date, timedelta

from sqlalchemy.orm import Session

from dishduty.exceptions import InvalidInputError
from dishduty.models.assignment import Assignment
from dishduty.services.assignment_service import AssignmentService
from dishduty.services.queue_service import QueueService
from dishduty.utils.date_utils import format_ymd, today_utc


class CalendarService:
    """月曆資料（實際指派 + 佇列預估）"""

    def __init__(self, db: Session):
        self.db = db
        self.assignments = AssignmentService(db)
        self.queue = QueueService(db)

    def build_calendar(self, start_date: date, end_date: date, today: date = None) -> list[dict]:
        """
        取得日期範圍內的月曆事件

        先列出實際指派，再把佇列依序往後推算：
        起點為今天，或今天之後最後一筆指派的隔天；
        每個項目從 max(項目 start_date, 起點) 開始，佔 duration_days 天。
        """
        if start_date > end_date:
            raise InvalidInputError("start_date must not be after end_date.")
        today = today or today_utc()

        events = []
        for assignment in self.assignments.get_in_range(start_date, end_date):
            events.append({
                "title": assignment.worker.name,
                "start": format_ymd(assignment.date),
                "extendedProps": {
                    "worker_id": assignment.worker_id,
                    "assignment_id": assignment.id,
                    "status": assignment.status,
                    "type": "assignment",
                },
            })

        cursor = today
        latest = self.db.query(Assignment).filter(
            Assignment.date >= today
        ).order_by(Assignment.date.desc()).first()
        if latest:
            cursor = latest.date + timedelta(days=1)

        for entry in self.queue.get_all_entries():
            projected_start = max(entry.start_date, cursor)
            for i in range(entry.duration_days):
                day = projected_start + timedelta(days=i)
                if day > end_date:
                    break
                if day < start_date:
                    continue
                events.append({
                    "title": f"{entry.worker.name} (queued)",
                    "start": format_ymd(day),
                    "extendedProps": {
                        "worker_id": entry.worker_id,
                        "status": "queued",
                        "type": "queue_projection",
                        "queue_item_id": entry.id,
                        "queue_order": entry.order,
                    },
                })
            cursor = projected_start + timedelta(days=entry.duration_days)

        return events
