"""認證服務"""
import hmac
import logging

from dishduty.config import get_settings
from dishduty.exceptions import UnauthorizedError

log = logging.getLogger(__name__)


class AuthService:
    """Admin 認證服務（共用密碼）"""

    def __init__(self, admin_password: str):
        self.admin_password = admin_password or ""

    def verify_password(self, password: str) -> bool:
        """驗證密碼；未設定 Admin 密碼時一律拒絕"""
        if not self.admin_password:
            log.warning("ADMIN_PASS is not set. Admin actions are blocked.")
            return False
        if not password:
            return False
        return hmac.compare_digest(password.encode("utf-8"), self.admin_password.encode("utf-8"))

    def require_admin(self, password: str) -> None:
        """
        驗證失敗時丟出例外

        Raises:
            UnauthorizedError: 密碼錯誤或未設定
        """
        if not self.verify_password(password):
            raise UnauthorizedError("Forbidden: Invalid admin password.")


def get_auth_service() -> AuthService:
    """取得認證服務實例"""
    return AuthService(get_settings().admin_pass)
