from pydantic import BaseModel
from datetime import datetime


class ActionLogResponse(BaseModel):
    """操作記錄回應格式"""
    id: int
    timestamp: datetime
    action_type: str
    details: dict

    @classmethod
    def from_model(cls, entry) -> "ActionLogResponse":
        return cls(
            id=entry.id,
            timestamp=entry.timestamp,
            action_type=entry.action_type,
            details=entry.get_details(),
        )
