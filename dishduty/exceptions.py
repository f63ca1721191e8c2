"""
錯誤分類

服務層只丟出這裡定義的例外，由 main.py 註冊的 handler 轉成 HTTP 回應。
"""


class DishDutyError(Exception):
    """所有領域錯誤的基底類別"""
    status_code = 500

    def __init__(self, message: str = None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class NotFoundError(DishDutyError):
    """Referenced record not found"""
    status_code = 404


class NoWorkersAvailable(NotFoundError):
    """No workers available"""


class InvalidInputError(DishDutyError):
    """Invalid input"""
    status_code = 400


class InvalidDateFormat(InvalidInputError):
    """Date must be in YYYY-MM-DD format"""


class InvalidDuration(InvalidInputError):
    """duration_days must be between 1 and 7"""


class InvalidStatus(InvalidInputError):
    """status must be one of assigned, done, not_done"""


class UnauthorizedError(DishDutyError):
    """Forbidden: Invalid admin password"""
    status_code = 403


class ConflictError(DishDutyError):
    """Conflicting record already exists"""
    status_code = 409


class DependencyError(DishDutyError):
    """Record store unavailable"""
    status_code = 503
