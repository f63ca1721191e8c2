from pydantic import BaseModel
from typing import Optional
from datetime import date


class QueueAddRequest(BaseModel):
    """排入佇列（worker_id 或 worker_name 擇一）"""
    worker_id: Optional[int] = None
    worker_name: Optional[str] = None
    duration_days: int
    admin_password: str = ""


class QueueEntryResponse(BaseModel):
    """排隊項目回應格式"""
    id: int
    worker_id: int
    worker_name: str
    start_date: date
    end_date: date
    duration_days: int
    order: int

    @classmethod
    def from_model(cls, entry) -> "QueueEntryResponse":
        return cls(
            id=entry.id,
            worker_id=entry.worker_id,
            worker_name=entry.worker.name,
            start_date=entry.start_date,
            end_date=entry.end_date,
            duration_days=entry.duration_days,
            order=entry.order,
        )


class QueueAddResponse(BaseModel):
    """排入佇列結果"""
    message: str
    data: QueueEntryResponse
