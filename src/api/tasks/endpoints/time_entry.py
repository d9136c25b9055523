from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from src.api.common.exceptions import InvalidTimeEntryError, NotFoundError
from src.api.common.utils.database import get_db
from src.api.tasks.schemas.task import TimeEntryCreate, TimeEntryRead, TimeEntryUpdate
from src.api.tasks.services.time_entry_service import TimeEntryService

router = APIRouter(tags=["time-entries"])


def get_time_entry_service(db: Session = Depends(get_db)) -> TimeEntryService:
    return TimeEntryService(db)


@router.post("/time-entries", response_model=TimeEntryRead)
def create_entry(
    entry_data: TimeEntryCreate,
    time_entry_service: TimeEntryService = Depends(get_time_entry_service)
):
    """Log time on a task"""
    try:
        return time_entry_service.create_entry(entry_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTimeEntryError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/tasks/{task_id}/time-entries", response_model=List[TimeEntryRead])
def get_entries_by_task(
    task_id: int,
    time_entry_service: TimeEntryService = Depends(get_time_entry_service)
):
    """Get all time entries for a task, newest first"""
    return time_entry_service.get_entries_by_task(task_id)


@router.put("/time-entries/{entry_id}", response_model=TimeEntryRead)
def update_entry(
    entry_id: int,
    entry_data: TimeEntryUpdate,
    time_entry_service: TimeEntryService = Depends(get_time_entry_service)
):
    """Update a time entry"""
    try:
        entry = time_entry_service.update_entry(entry_id, entry_data)
    except InvalidTimeEntryError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if not entry:
        raise HTTPException(status_code=404, detail="Time entry not found")
    return entry


@router.delete("/time-entries/{entry_id}", response_model=bool)
def delete_entry(
    entry_id: int,
    time_entry_service: TimeEntryService = Depends(get_time_entry_service)
):
    """Delete a time entry"""
    if not time_entry_service.delete_entry(entry_id):
        raise HTTPException(status_code=404, detail="Time entry not found")
    return True
