from dishduty.schemas.worker import WorkerCreate, WorkerResponse
from dishduty.schemas.assignment import (
    AssignmentResponse,
    StatusUpdateRequest,
    CurrentAssigneeResponse,
    ResolutionResponse,
    MarkNotDoneRequest,
    MarkNotDoneResponse,
)
from dishduty.schemas.queue import QueueAddRequest, QueueEntryResponse, QueueAddResponse
from dishduty.schemas.action_log import ActionLogResponse
from dishduty.schemas.calendar import CalendarEvent

__all__ = [
    "WorkerCreate",
    "WorkerResponse",
    "AssignmentResponse",
    "StatusUpdateRequest",
    "CurrentAssigneeResponse",
    "ResolutionResponse",
    "MarkNotDoneRequest",
    "MarkNotDoneResponse",
    "QueueAddRequest",
    "QueueEntryResponse",
    "QueueAddResponse",
    "ActionLogResponse",
    "CalendarEvent",
]
