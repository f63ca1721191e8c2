import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from dishduty.config import get_settings
from dishduty.database import SessionLocal
from dishduty.exceptions import DishDutyError, DependencyError
from dishduty.routers import dishduty_router, cron_router
from dishduty.services.assignment_service import AssignmentService

log = logging.getLogger(__name__)

# 取得設定
settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


def resolve_today_once():
    """啟動時執行一次每日指派（獨立 Session）"""
    db = SessionLocal()
    try:
        result = AssignmentService(db).resolve_today()
        log.info("Startup assignment: %s (%s)", result["message"], result["worker"].name)
    except DishDutyError as e:
        log.warning("Startup assignment skipped: %s", e.message)
    except OperationalError:
        log.exception("Startup assignment failed: database unavailable")
    finally:
        db.close()


async def delayed_startup_assignment(delay: float):
    await asyncio.sleep(delay)
    await asyncio.to_thread(resolve_today_once)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """應用程式生命週期管理"""
    # 資料表由 dishduty.scripts.migrate 事先建立，這裡不處理 schema
    task = None
    if settings.startup_assignment_enabled:
        task = asyncio.create_task(
            delayed_startup_assignment(settings.startup_assignment_delay_seconds)
        )

    yield

    if task and not task.done():
        task.cancel()
    log.info("Application shutting down")


# 建立 FastAPI 應用程式
app = FastAPI(
    title="Dish Duty",
    description="每日洗碗值日生輪值、排隊與未完成順延",
    version="1.0.0",
    lifespan=lifespan,
)

# 設定 CORS（跨域請求）
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DishDutyError)
async def dishduty_error_handler(request: Request, exc: DishDutyError):
    """領域錯誤轉為 HTTP 回應"""
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(OperationalError)
async def operational_error_handler(request: Request, exc: OperationalError):
    """資料庫無法連線"""
    log.error("%s %s: database unavailable: %s", request.method, request.url.path, exc)
    error = DependencyError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """缺少欄位或型別錯誤一律視為 400"""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# 註冊路由
app.include_router(dishduty_router)
app.include_router(cron_router)


@app.get("/health")
async def health():
    """健康檢查端點"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dishduty.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
