from datetime import date
from typing import Iterable, List, Optional
from fastapi.logger import logger
from sqlalchemy import func
from sqlmodel import Session, select
from src.api.common.exceptions import InvalidTimeEntryError, NotFoundError
from src.api.tasks.models.task import Task
from src.api.tasks.models.time_entry import TimeEntry
from src.api.tasks.schemas.task import TimeEntryCreate, TimeEntryUpdate


def validate_duration(duration_minutes) -> int:
    """Durations are positive integer minutes; anything else is rejected, never coerced."""
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int) \
            or duration_minutes <= 0:
        raise InvalidTimeEntryError("Duration must be a positive integer (minutes)")
    return duration_minutes


def clean_note(note: Optional[str]) -> Optional[str]:
    if note is None:
        return None
    return note.strip() or None


class TimeEntryService:
    def __init__(self, db: Session):
        self.db = db

    def create_entry(self, entry_data: TimeEntryCreate) -> TimeEntry:
        """
        Create a manual time entry.

        Raises:
            NotFoundError: if the task does not exist
            InvalidTimeEntryError: if the task cannot take time or the duration is invalid
        """
        task = self.db.get(Task, entry_data.task_id)
        if not task:
            raise NotFoundError("Task", entry_data.task_id)
        if task.is_archived:
            raise InvalidTimeEntryError("Cannot log time on an archived task")
        if task.project_id is None:
            raise InvalidTimeEntryError("Task must have a project before logging time")

        entry = TimeEntry(
            task_id=task.id,
            entry_date=entry_data.entry_date,
            duration_minutes=validate_duration(entry_data.duration_minutes),
            note=clean_note(entry_data.note),
        )

        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        logger.info(f"Task {task.id}: logged {entry.duration_minutes}m on {entry.entry_date}")
        return entry

    def get_entry(self, entry_id: int) -> Optional[TimeEntry]:
        """Get a time entry by ID"""
        return self.db.get(TimeEntry, entry_id)

    def get_entries_by_task(self, task_id: int) -> List[TimeEntry]:
        """Get all time entries for a task, newest first"""
        return self.db.exec(
            select(TimeEntry)
            .where(TimeEntry.task_id == task_id)
            .order_by(TimeEntry.entry_date.desc(), TimeEntry.id.desc())
        ).all()

    def get_entries_by_tasks(self, task_ids: Iterable[int]) -> List[TimeEntry]:
        """Get all time entries for several tasks, oldest first"""
        task_ids = list(task_ids)
        if not task_ids:
            return []
        return self.db.exec(
            select(TimeEntry)
            .where(TimeEntry.task_id.in_(task_ids))
            .order_by(TimeEntry.entry_date, TimeEntry.id)
        ).all()

    def get_project_minutes_between(self, project_id: int, start: date, end: date) -> int:
        """Sum of minutes logged on any task of the project between two dates, both inclusive"""
        statement = (
            select(func.coalesce(func.sum(TimeEntry.duration_minutes), 0))
            .join(Task, Task.id == TimeEntry.task_id)
            .where(
                Task.project_id == project_id,
                TimeEntry.entry_date >= start,
                TimeEntry.entry_date <= end,
            )
        )
        return int(self.db.exec(statement).one())

    def update_entry(self, entry_id: int, entry_data: TimeEntryUpdate) -> Optional[TimeEntry]:
        """Update a time entry"""
        entry = self.db.get(TimeEntry, entry_id)
        if not entry:
            return None

        entry_data_dict = entry_data.model_dump(exclude_unset=True)
        if "duration_minutes" in entry_data_dict:
            entry.duration_minutes = validate_duration(entry_data_dict["duration_minutes"])
        if entry_data_dict.get("entry_date") is not None:
            entry.entry_date = entry_data_dict["entry_date"]
        if "note" in entry_data_dict:
            entry.note = clean_note(entry_data_dict["note"])

        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def delete_entry(self, entry_id: int) -> bool:
        """Delete a time entry"""
        entry = self.db.get(TimeEntry, entry_id)
        if not entry:
            return False

        self.db.delete(entry)
        self.db.commit()
        return True
