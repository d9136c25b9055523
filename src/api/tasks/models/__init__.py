"""Tasks models package."""
from src.api.tasks.models.work_category import WorkCategory
from src.api.tasks.models.time_entry import TimeEntry
from src.api.tasks.models.task import Task

__all__ = ["WorkCategory", "TimeEntry", "Task"]
