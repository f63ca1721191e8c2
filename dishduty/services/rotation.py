"""輪值規則：沒有到期的排隊項目時，挑選最久沒值日的人"""
from datetime import date

from dishduty.exceptions import NoWorkersAvailable
from dishduty.models.worker import Worker


def rotation_key(worker: Worker) -> tuple:
    """
    排序鍵

    從未值日（last_assigned_date 為 NULL）的人最優先，
    其次是 last_assigned_date 最早的人；同日期依建立順序（id）。
    """
    never_assigned = worker.last_assigned_date is None
    return (
        0 if never_assigned else 1,
        worker.last_assigned_date or date.min,
        worker.id,
    )


def select_next_worker(workers: list[Worker]) -> Worker:
    """
    選出下一位值日生

    Raises:
        NoWorkersAvailable: 名單為空
    """
    if not workers:
        raise NoWorkersAvailable("No workers available for rotation.")
    return min(workers, key=rotation_key)
