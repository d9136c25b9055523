from typing import TYPE_CHECKING, Optional
from datetime import date
from sqlmodel import Field, Relationship
from sqlalchemy import CheckConstraint
from src.api.common.models.base import BaseModel, TimestampMixin

if TYPE_CHECKING:
    from src.api.tasks.models.task import Task


class TimeEntry(BaseModel, TimestampMixin, table=True):
    """
    Logged time on a task. Durations are integer minutes with day precision.
    """
    __table_args__ = (
        CheckConstraint("duration_minutes > 0", name="ck_timeentry_duration_positive"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    task_id: int = Field(foreign_key="task.id", index=True)
    task: "Task" = Relationship(back_populates="time_entries")

    entry_date: date = Field(index=True)
    duration_minutes: int
    note: Optional[str] = None

    class Config:
        from_attributes = True
