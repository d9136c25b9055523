from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from src.api.common.exceptions import NotFoundError
from src.api.common.utils.database import get_db
from src.api.tasks.schemas.task import TaskCreate, TaskRead, TaskUpdate
from src.api.tasks.services.task_service import TaskService

router = APIRouter(tags=["tasks"])


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.post("/tasks", response_model=TaskRead)
def create_task(
    task_data: TaskCreate,
    task_service: TaskService = Depends(get_task_service)
):
    """Create a new task"""
    try:
        return task_service.create_task(task_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/tasks/{task_id}", response_model=TaskRead)
def get_task(
    task_id: int,
    task_service: TaskService = Depends(get_task_service)
):
    """Get a task by ID"""
    task = task_service.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.get("/projects/{project_id}/tasks", response_model=List[TaskRead])
def get_tasks_by_project(
    project_id: int,
    include_archived: bool = False,
    task_service: TaskService = Depends(get_task_service)
):
    """Get all tasks for a project"""
    return task_service.get_tasks_by_project(project_id, include_archived)


@router.put("/tasks/{task_id}", response_model=TaskRead)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    task_service: TaskService = Depends(get_task_service)
):
    """Update a task"""
    try:
        task = task_service.update_task(task_id, task_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task
