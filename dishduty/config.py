from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """應用程式設定"""

    # 資料庫設定
    database_url: str = "sqlite:///./dishduty.db"

    # 應用程式設定
    debug: bool = False
    log_level: str = "INFO"

    # Admin 共用密碼（未設定時所有管理操作一律拒絕）
    admin_pass: str = ""

    # Cron Job 設定（可選，用於驗證排程請求）
    cron_secret: str = ""

    # 初始值日生名單（由 migrate 腳本寫入）
    seed_workers: list[str] = ["keromag", "megatorg", "baby-ch"]

    # 啟動後延遲執行一次每日指派
    startup_assignment_enabled: bool = True
    startup_assignment_delay_seconds: float = 5.0

    # 操作記錄預設筆數
    action_log_limit: int = 50

    cors_allow_origins: list[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """取得設定（使用快取）"""
    return Settings()
