from dishduty.services.action_log_service import ActionLogService
from dishduty.services.worker_service import WorkerService
from dishduty.services.queue_service import QueueService
from dishduty.services.assignment_service import AssignmentService
from dishduty.services.undone_service import UndoneService
from dishduty.services.calendar_service import CalendarService
from dishduty.services.auth_service import AuthService, get_auth_service

__all__ = [
    "ActionLogService",
    "WorkerService",
    "QueueService",
    "AssignmentService",
    "UndoneService",
    "CalendarService",
    "AuthService",
    "get_auth_service",
]
