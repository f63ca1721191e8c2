import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dishduty.models.action_log import ActionLogEntry, ActionType

log = logging.getLogger(__name__)


class ActionLogService:
    """操作記錄服務"""

    def __init__(self, db: Session):
        self.db = db

    def log_action(self, action_type: ActionType, details: dict = None) -> Optional[ActionLogEntry]:
        """
        寫入一筆操作記錄

        寫入失敗只記 log，不影響主要操作；呼叫端應在主要資料 commit 之後才呼叫。

        Returns:
            新建立的記錄，寫入失敗時為 None
        """
        entry = ActionLogEntry(
            timestamp=datetime.now(timezone.utc),
            action_type=ActionType(action_type).value,
        )
        if details is not None:
            entry.set_details(details)

        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.warning("Failed to write action log %r: %s", entry.action_type, e)
            return None

        return entry

    def get_recent(self, limit: int = 50) -> list[ActionLogEntry]:
        """取得最新的操作記錄（最新在前）"""
        return self.db.query(ActionLogEntry).order_by(
            ActionLogEntry.timestamp.desc(),
            ActionLogEntry.id.desc()
        ).limit(limit).all()
