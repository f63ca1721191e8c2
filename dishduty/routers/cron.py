from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session

from dishduty.config import get_settings
from dishduty.database import get_db
from dishduty.routers.dishduty import get_today
from dishduty.schemas.assignment import ResolutionResponse
from dishduty.services.assignment_service import AssignmentService

router = APIRouter(prefix="/api/dishduty", tags=["排程任務"])


def verify_cron_secret(x_cron_secret: Optional[str] = Header(None)):
    """
    驗證 Cron Job 的密鑰（可選）

    如果設定了 CRON_SECRET 環境變數，則需要驗證
    """
    settings = get_settings()
    cron_secret = getattr(settings, 'cron_secret', None)

    if cron_secret and x_cron_secret != cron_secret:
        raise HTTPException(status_code=403, detail="Invalid cron secret")


@router.post("/trigger-daily-assignment", response_model=ResolutionResponse)
async def trigger_daily_assignment(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    _: None = Depends(verify_cron_secret)
):
    """
    執行每日指派

    可由外部排程定期呼叫；同一天重複呼叫不會產生第二筆指派。
    """
    result = AssignmentService(db).resolve_today(today)
    assignment = result["assignment"]

    return ResolutionResponse(
        message=result["message"],
        source=result["source"],
        date=today,
        assigned_worker_id=assignment.worker_id,
        assigned_worker_name=assignment.worker.name,
        duration_days=result["duration_days"]
    )
