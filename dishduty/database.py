import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dishduty.config import get_settings

log = logging.getLogger(__name__)

settings = get_settings()

# 建立資料庫引擎（根據資料庫類型設定不同參數）
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}  # SQLite 需要這個設定

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    pool_pre_ping=True  # 自動檢查連線是否有效
)

# 建立 Session 工廠
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 建立 Base 類別
Base = declarative_base()

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def get_db():
    """取得資料庫 Session（依賴注入用）"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def run_migrations(database_url: str = None, revision: str = "head"):
    """
    執行 Alembic 資料庫遷移

    只在服務接受流量之前執行一次（見 dishduty.scripts.migrate），
    請求處理流程不會建立或修改資料表。
    """
    from alembic import command
    from alembic.config import Config

    config = Config(str(ALEMBIC_INI))
    config.set_main_option("script_location", str(ALEMBIC_INI.parent / "alembic"))
    # configparser 會把 % 當作插值符號
    url = (database_url or settings.database_url).replace("%", "%%")
    config.set_main_option("sqlalchemy.url", url)

    log.info("Running migrations up to %s", revision)
    command.upgrade(config, revision)
