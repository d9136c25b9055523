from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.logger import logger
from sqlmodel import Session

from src.api.common.exceptions import BillingTypeError, NotFoundError
from src.api.common.utils.database import get_db
from src.api.common.utils.datetime import parse_year_month
from src.api.retainers.schemas import (
    RetainerComputedView,
    RetainerFilterOptions,
    RetainerPeriodHistory,
    RetainerPeriodRead,
    RetainerUsage,
)
from src.api.retainers.services.retainer_period_service import RetainerPeriodService
from src.api.retainers.services.retainer_view_service import RetainerViewService

router = APIRouter(prefix="/retainers", tags=["retainers"])


def get_retainer_period_service(db: Session = Depends(get_db)) -> RetainerPeriodService:
    return RetainerPeriodService(db)


def get_retainer_view_service(db: Session = Depends(get_db)) -> RetainerViewService:
    return RetainerViewService(db)


def _check_year_month(year_month: Optional[str], name: str = "year_month") -> None:
    if year_month is None:
        return
    try:
        parse_year_month(year_month)
    except ValueError as e:
        raise HTTPException(status_code=422,
                            detail=f"{name}: {e}")


def _raise_http(error: Exception):
    if isinstance(error, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, BillingTypeError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    logger.error(f"Unexpected retainer ledger error: {str(error)}")
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                        detail=f"Retainer ledger failed: {str(error)}")


@router.post("/projects/{project_id}/periods/{year_month}", response_model=RetainerPeriodRead)
def get_or_create_period(
    project_id: int,
    year_month: str,
    period_service: RetainerPeriodService = Depends(get_retainer_period_service)
):
    """
    Get the ledger period of a month, creating it on first access.
    Rollover is computed once, from the three previous persisted periods.
    """
    _check_year_month(year_month)
    try:
        return period_service.get_or_create_for_month(project_id, year_month)
    except Exception as e:
        _raise_http(e)


@router.get("/projects/{project_id}/usage", response_model=RetainerUsage)
def get_usage(
    project_id: int,
    year_month: str = Query(..., description="Month to report on (YYYY-MM)"),
    period_service: RetainerPeriodService = Depends(get_retainer_period_service)
):
    """Live usage, overage and warnings of a month"""
    _check_year_month(year_month)
    try:
        return period_service.get_usage(project_id, year_month)
    except Exception as e:
        _raise_http(e)


@router.get("/projects/{project_id}/history", response_model=List[RetainerPeriodHistory])
def get_history(
    project_id: int,
    period_service: RetainerPeriodService = Depends(get_retainer_period_service)
):
    """All persisted periods of a project, newest first"""
    try:
        return period_service.get_history(project_id)
    except Exception as e:
        _raise_http(e)


@router.get("/projects/{project_id}/view", response_model=RetainerComputedView)
def get_computed_view(
    project_id: int,
    date_range_start: Optional[str] = Query(None, description="First month to return (YYYY-MM)"),
    date_range_end: Optional[str] = Query(None, description="Last month to return (YYYY-MM)"),
    category_ids: Optional[List[int]] = Query(None, description="Work categories to list"),
    view_service: RetainerViewService = Depends(get_retainer_view_service)
):
    """
    Month-by-month retainer statement.

    Filters narrow what is shown; balances are always computed over the
    whole contract history and all categories.
    """
    _check_year_month(date_range_start, "date_range_start")
    _check_year_month(date_range_end, "date_range_end")
    try:
        return view_service.get_computed_view(
            project_id,
            date_range_start=date_range_start,
            date_range_end=date_range_end,
            category_filter=category_ids,
        )
    except Exception as e:
        _raise_http(e)


@router.get("/projects/{project_id}/filter-options", response_model=RetainerFilterOptions)
def get_filter_options(
    project_id: int,
    view_service: RetainerViewService = Depends(get_retainer_view_service)
):
    """Months and categories available to the statement filters"""
    try:
        return view_service.get_filter_options(project_id)
    except Exception as e:
        _raise_http(e)
