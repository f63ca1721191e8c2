from sqlalchemy import Column, Integer, String, DateTime, Text
from dishduty.database import Base
import enum
import json


class ActionType(str, enum.Enum):
    """操作類型"""
    ASSIGNED = "assigned"
    ADDED_TO_QUEUE = "added_to_queue"
    MARKED_NOT_DONE = "marked_not_done"
    RANDOMLY_ASSIGNED = "randomly_assigned"
    QUEUE_PROCESSED = "queue_processed"
    STATUS_UPDATED = "status_updated"
    WORKER_CREATED = "worker_created"
    # 錯誤 / 取消
    RANDOM_ASSIGNMENT_FAILED = "random_assignment_failed"
    DAILY_ASSIGNMENT_ERROR = "daily_assignment_error"
    ASSIGNMENT_CANCELLED_FOR_REASSIGNMENT = "assignment_cancelled_for_reassignment"


class ActionLogEntry(Base):
    """操作記錄表（只新增，不修改、不刪除）"""
    __tablename__ = "action_log"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    action_type = Column(String(50), nullable=False)
    details = Column(Text, nullable=True)  # JSON

    def __repr__(self):
        return f"<ActionLogEntry(id={self.id}, action_type={self.action_type}, timestamp={self.timestamp})>"

    def get_details(self) -> dict:
        """取得詳細內容"""
        if not self.details:
            return {}
        try:
            return json.loads(self.details)
        except (json.JSONDecodeError, TypeError):
            return {}

    def set_details(self, details: dict) -> None:
        """設定詳細內容"""
        self.details = json.dumps(details, ensure_ascii=False, default=str)
