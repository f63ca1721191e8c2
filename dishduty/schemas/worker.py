from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime


class WorkerBase(BaseModel):
    """值日生基礎欄位"""
    name: str


class WorkerCreate(WorkerBase):
    """新增值日生時的資料"""
    admin_password: str = ""


class WorkerResponse(WorkerBase):
    """值日生回應格式"""
    id: int
    last_assigned_date: Optional[date] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
