from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from src.api.common.exceptions import BillingTypeError, NotFoundError
from src.api.common.utils.database import get_db
from src.api.projects.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from src.api.projects.services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(db: Session = Depends(get_db)) -> ProjectService:
    return ProjectService(db)


@router.post("", response_model=ProjectRead)
def create_project(
    project_data: ProjectCreate,
    project_service: ProjectService = Depends(get_project_service)
):
    """Create a new project"""
    try:
        return project_service.create_project(project_data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=List[ProjectRead])
def get_projects(
    client_id: Optional[int] = None,
    include_archived: bool = False,
    project_service: ProjectService = Depends(get_project_service)
):
    """Get projects, optionally filtered by client"""
    return project_service.get_projects(client_id, include_archived)


@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: int,
    project_service: ProjectService = Depends(get_project_service)
):
    """Get a project by ID"""
    project = project_service.get_project(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.put("/{project_id}", response_model=ProjectRead)
def update_project(
    project_id: int,
    project_data: ProjectUpdate,
    project_service: ProjectService = Depends(get_project_service)
):
    """Update a project"""
    try:
        project = project_service.update_project(project_id, project_data)
    except BillingTypeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("/{project_id}/toggle-retainer-status", response_model=ProjectRead)
def toggle_retainer_status(
    project_id: int,
    project_service: ProjectService = Depends(get_project_service)
):
    """Toggle a retainer project between active and inactive"""
    try:
        return project_service.toggle_retainer_status(project_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except BillingTypeError as e:
        raise HTTPException(status_code=400, detail=str(e))
