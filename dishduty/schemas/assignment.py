from pydantic import BaseModel
from typing import Optional
from datetime import date


class AssignmentResponse(BaseModel):
    """值日指派回應格式"""
    id: int
    worker_id: int
    worker_name: str
    date: date
    status: str

    @classmethod
    def from_model(cls, assignment) -> "AssignmentResponse":
        return cls(
            id=assignment.id,
            worker_id=assignment.worker_id,
            worker_name=assignment.worker.name,
            date=assignment.date,
            status=assignment.status,
        )


class StatusUpdateRequest(BaseModel):
    """更新指派狀態"""
    status: str
    admin_password: str = ""


class CurrentAssigneeResponse(BaseModel):
    """今日值日生"""
    date: date
    assignment_id: int
    worker_id: int
    worker_name: str
    status: str
    message: Optional[str] = None


class ResolutionResponse(BaseModel):
    """每日指派執行結果"""
    message: str
    source: str  # existing / queue / rotation
    date: date
    assigned_worker_id: int
    assigned_worker_name: str
    duration_days: int


class MarkNotDoneRequest(BaseModel):
    """標記未完成（通常是昨天）"""
    date: str
    admin_password: str = ""


class MarkNotDoneResponse(BaseModel):
    """標記未完成結果"""
    message: str
    date: date
    failed_worker_id: int
    failed_worker_name: str
    reassigned_today: bool
    shifted_assignments: int
    shifted_queue_entries: int
