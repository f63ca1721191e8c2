"""
值日 API

公開查詢：名單、佇列、今日值日生、指派、月曆
Admin 操作：新增值日生、排入佇列、更新狀態、標記未完成、操作記錄
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session

from dishduty.config import get_settings
from dishduty.database import get_db
from dishduty.schemas.action_log import ActionLogResponse
from dishduty.schemas.assignment import (
    AssignmentResponse, CurrentAssigneeResponse, MarkNotDoneRequest,
    MarkNotDoneResponse, StatusUpdateRequest,
)
from dishduty.schemas.calendar import CalendarEvent
from dishduty.schemas.queue import QueueAddRequest, QueueAddResponse, QueueEntryResponse
from dishduty.schemas.worker import WorkerCreate, WorkerResponse
from dishduty.services.action_log_service import ActionLogService
from dishduty.services.assignment_service import AssignmentService
from dishduty.services.auth_service import AuthService, get_auth_service
from dishduty.services.calendar_service import CalendarService
from dishduty.services.queue_service import QueueService, validate_duration
from dishduty.services.undone_service import UndoneService
from dishduty.services.worker_service import WorkerService
from dishduty.utils.date_utils import parse_ymd, today_utc

router = APIRouter(prefix="/api/dishduty", tags=["值日"])


def get_today() -> date:
    """今天（UTC），測試時可覆寫"""
    return today_utc()


def parse_date_range(start_date: str, end_date: str) -> tuple[date, date]:
    """檢查日期查詢參數（YYYY-MM-DD）"""
    return parse_ymd(start_date), parse_ymd(end_date)


# ===== 值日生 =====

@router.get("/workers", response_model=List[WorkerResponse])
async def list_workers(db: Session = Depends(get_db)):
    """取得值日生名單（依名稱排序）"""
    return WorkerService(db).get_all_workers()


@router.post("/workers", response_model=WorkerResponse, status_code=201)
async def create_worker(
    request: WorkerCreate,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service)
):
    """新增值日生"""
    auth.require_admin(request.admin_password)
    return WorkerService(db).create_worker(request.name)


# ===== 佇列 =====

@router.get("/queue", response_model=List[QueueEntryResponse])
async def list_queue(db: Session = Depends(get_db)):
    """取得排隊中的項目（依 order）"""
    return [QueueEntryResponse.from_model(e) for e in QueueService(db).get_all_entries()]


@router.post("/queue/add", response_model=QueueAddResponse, status_code=201)
async def add_to_queue(
    request: QueueAddRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
    today: date = Depends(get_today)
):
    """將值日生排入佇列（連續 1–7 天）"""
    auth.require_admin(request.admin_password)
    validate_duration(request.duration_days)

    worker = WorkerService(db).resolve_worker(request.worker_id, request.worker_name)
    entry = QueueService(db).enqueue(worker, request.duration_days, today)

    return QueueAddResponse(
        message="Worker added to queue.",
        data=QueueEntryResponse.from_model(entry)
    )


# ===== 指派 =====

@router.get("/current-assignee", response_model=CurrentAssigneeResponse)
async def get_current_assignee(
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    """取得今日值日生（尚未決定時會先執行每日指派）"""
    result = AssignmentService(db).resolve_today(today)
    assignment = result["assignment"]

    return CurrentAssigneeResponse(
        date=today,
        assignment_id=assignment.id,
        worker_id=assignment.worker_id,
        worker_name=assignment.worker.name,
        status=assignment.status,
        message=result["message"]
    )


@router.get("/assignments", response_model=List[AssignmentResponse])
async def list_assignments(
    start_date: str,
    end_date: str,
    db: Session = Depends(get_db)
):
    """取得日期範圍內的指派"""
    start, end = parse_date_range(start_date, end_date)
    assignments = AssignmentService(db).get_in_range(start, end)
    return [AssignmentResponse.from_model(a) for a in assignments]


@router.patch("/assignments/{assignment_id}/status", response_model=AssignmentResponse)
async def update_assignment_status(
    assignment_id: int,
    request: StatusUpdateRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service)
):
    """
    更新指派狀態

    只改狀態；要讓未完成的人今天補做並順延排程，請呼叫 /mark-not-done。
    """
    auth.require_admin(request.admin_password)
    assignment = AssignmentService(db).set_status(assignment_id, request.status)
    return AssignmentResponse.from_model(assignment)


@router.post("/mark-not-done", response_model=MarkNotDoneResponse)
async def mark_not_done(
    request: MarkNotDoneRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
    today: date = Depends(get_today)
):
    """標記某天未完成：同一人今天補做，之後的排程順延一天"""
    auth.require_admin(request.admin_password)
    target_date = parse_ymd(request.date)

    result = UndoneService(db).mark_not_done(target_date, today)
    failed_worker = result["failed_worker"]

    return MarkNotDoneResponse(
        message=result["message"],
        date=target_date,
        failed_worker_id=failed_worker.id,
        failed_worker_name=failed_worker.name,
        reassigned_today=result["reassigned_today"],
        shifted_assignments=result["shifted_assignments"],
        shifted_queue_entries=result["shifted_queue_entries"]
    )


# ===== 月曆 / 記錄 =====

@router.get("/calendar", response_model=List[CalendarEvent])
async def get_calendar(
    start_date: str,
    end_date: str,
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    """月曆資料：實際指派 + 佇列預估"""
    start, end = parse_date_range(start_date, end_date)
    return CalendarService(db).build_calendar(start, end, today)


@router.get("/action-log", response_model=List[ActionLogResponse])
async def get_action_log(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    x_admin_password: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service)
):
    """取得最新的操作記錄（最新在前）"""
    auth.require_admin(x_admin_password)
    limit = limit or get_settings().action_log_limit
    entries = ActionLogService(db).get_recent(limit)
    return [ActionLogResponse.from_model(e) for e in entries]
