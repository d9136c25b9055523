from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, StrictInt


class WorkCategoryBase(BaseModel):
    """Base schema for work category data"""
    name: str

    model_config = ConfigDict(from_attributes=True)


class WorkCategoryCreate(WorkCategoryBase):
    """Schema for creating a new work category"""
    pass


class WorkCategoryRead(WorkCategoryBase):
    """Schema for reading work category data"""
    id: int
    is_archived: bool


class WorkCategoryUpdate(BaseModel):
    """Schema for updating a work category"""
    name: Optional[str] = None
    is_archived: Optional[bool] = None


class TaskBase(BaseModel):
    """Base schema for task data"""
    title: str
    project_id: Optional[int] = None
    client_update_text: Optional[str] = None
    work_category_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class TaskCreate(TaskBase):
    """Schema for creating a new task"""
    pass


class TaskRead(TaskBase):
    """Schema for reading task data"""
    id: int
    is_archived: bool
    created_at: datetime
    updated_at: datetime


class TaskUpdate(BaseModel):
    """Schema for updating task data"""
    title: Optional[str] = None
    project_id: Optional[int] = None
    client_update_text: Optional[str] = None
    work_category_id: Optional[int] = None
    is_archived: Optional[bool] = None


class TimeEntryBase(BaseModel):
    """Base schema for time entry data"""
    entry_date: date
    duration_minutes: StrictInt
    note: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class TimeEntryCreate(TimeEntryBase):
    """Schema for creating a new time entry"""
    task_id: int


class TimeEntryRead(TimeEntryBase):
    """Schema for reading time entry data"""
    id: int
    task_id: int
    created_at: datetime


class TimeEntryUpdate(BaseModel):
    """Schema for updating a time entry. An explicit null note clears it."""
    entry_date: Optional[date] = None
    duration_minutes: Optional[StrictInt] = None
    note: Optional[str] = None
