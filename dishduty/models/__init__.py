from dishduty.models.worker import Worker
from dishduty.models.assignment import Assignment, AssignmentStatus
from dishduty.models.queue_entry import QueueEntry
from dishduty.models.action_log import ActionLogEntry, ActionType

__all__ = [
    "Worker",
    "Assignment",
    "AssignmentStatus",
    "QueueEntry",
    "ActionLogEntry",
    "ActionType",
]
