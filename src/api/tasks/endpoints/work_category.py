from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session
from src.api.common.utils.database import get_db
from src.api.tasks.schemas.task import WorkCategoryCreate, WorkCategoryRead, WorkCategoryUpdate
from src.api.tasks.services.work_category_service import WorkCategoryService

router = APIRouter(prefix="/work-categories", tags=["work-categories"])


def get_work_category_service(db: Session = Depends(get_db)) -> WorkCategoryService:
    return WorkCategoryService(db)


@router.post("", response_model=WorkCategoryRead)
def create_category(
    category_data: WorkCategoryCreate,
    category_service: WorkCategoryService = Depends(get_work_category_service)
):
    """Create a new work category"""
    return category_service.create_category(category_data)


@router.get("", response_model=List[WorkCategoryRead])
def get_categories(
    include_archived: bool = False,
    category_service: WorkCategoryService = Depends(get_work_category_service)
):
    """Get all work categories"""
    return category_service.get_categories(include_archived)


@router.put("/{category_id}", response_model=WorkCategoryRead)
def update_category(
    category_id: int,
    category_data: WorkCategoryUpdate,
    category_service: WorkCategoryService = Depends(get_work_category_service)
):
    """Update a work category"""
    category = category_service.update_category(category_id, category_data)
    if not category:
        raise HTTPException(status_code=404, detail="Work category not found")
    return category
