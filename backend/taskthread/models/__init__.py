from taskthread.models.task import Task, TaskStatus, as_utc, utc_now

__all__ = ["Task", "TaskStatus", "as_utc", "utc_now"]
