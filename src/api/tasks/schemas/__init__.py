# Import schema classes directly
from src.api.tasks.schemas.task import (
    WorkCategoryBase, WorkCategoryCreate, WorkCategoryRead, WorkCategoryUpdate,
    TaskBase, TaskCreate, TaskRead, TaskUpdate,
    TimeEntryBase, TimeEntryCreate, TimeEntryRead, TimeEntryUpdate
)

# Export all schema classes
__all__ = [
    "WorkCategoryBase", "WorkCategoryCreate", "WorkCategoryRead", "WorkCategoryUpdate",
    "TaskBase", "TaskCreate", "TaskRead", "TaskUpdate",
    "TimeEntryBase", "TimeEntryCreate", "TimeEntryRead", "TimeEntryUpdate"
]
