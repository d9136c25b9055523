from datetime import date
from typing import Dict, Iterable, List, Optional
from sqlmodel import Session

from src.api.common.constants.billing import DEFAULT_CLIENT_CURRENCY
from src.api.common.utils.datetime import (
    get_current_datetime,
    get_current_year_month,
    get_month_start,
    get_year_month,
)
from src.api.projects.models.project import Project
from src.api.projects.services.project_service import ProjectService
from src.api.retainers.constants.retainer import UNKNOWN_CATEGORY
from src.api.retainers.schemas import (
    CategoryOption,
    ComputedMonth,
    RetainerComputedView,
    RetainerConfig,
    RetainerConfigView,
    RetainerFilterOptions,
    WorkRecord,
)
from src.api.retainers.services.retainer_compute import (
    compute_retainer_months,
    get_cycle_info,
    summarize_cycles,
)
from src.api.tasks.services.task_service import TaskService
from src.api.tasks.services.time_entry_service import TimeEntryService
from src.api.tasks.services.work_category_service import WorkCategoryService


def group_records_by_month(records: Iterable[WorkRecord]) -> Dict[str, List[WorkRecord]]:
    """Bucket work records by the YYYY-MM of their entry date"""
    tasks_by_month: Dict[str, List[WorkRecord]] = {}
    for record in records:
        tasks_by_month.setdefault(get_year_month(record.entry_date), []).append(record)
    return tasks_by_month


def filter_months_by_date_range(
    months: List[ComputedMonth],
    date_range_start: Optional[str] = None,
    date_range_end: Optional[str] = None,
) -> List[ComputedMonth]:
    """Restrict which computed months are returned. Balances are left untouched."""
    return [
        month for month in months
        if (not date_range_start or month.year_month >= date_range_start)
        and (not date_range_end or month.year_month <= date_range_end)
    ]


def filter_months_by_category(
    months: List[ComputedMonth],
    category_ids: Optional[Iterable[int]] = None,
) -> List[ComputedMonth]:
    """
    Restrict the task list and worked minutes shown per month to some categories.
    Start, available and end balances keep reflecting all categories.
    """
    category_filter = set(category_ids or [])
    if not category_filter:
        return months

    filtered = []
    for month in months:
        tasks = [task for task in month.tasks
                 if task.work_category_id is not None and task.work_category_id in category_filter]
        filtered.append(month.model_copy(update={
            "tasks": tasks,
            "worked_minutes": sum(task.duration_minutes for task in tasks),
        }))
    return filtered


class RetainerViewService:
    """Assembles time entries into work records and the retainer statement view."""

    def __init__(self, db: Session):
        self.db = db
        self.project_service = ProjectService(db)
        self.task_service = TaskService(db)
        self.time_entry_service = TimeEntryService(db)
        self.work_category_service = WorkCategoryService(db)

    def build_config(self, project: Project, today: Optional[date] = None) -> RetainerConfig:
        """Contract terms of a retainer project as of now"""
        currency = project.client.currency if project.client else DEFAULT_CLIENT_CURRENCY
        start_date = project.start_date or get_month_start(today or get_current_datetime().date())
        return RetainerConfig(
            included_minutes_per_month=project.included_minutes_per_month or 0,
            overage_rate=project.overage_rate or 0,
            rollover_enabled=True if project.rollover_enabled is None else project.rollover_enabled,
            start_date=start_date,
            currency=currency or DEFAULT_CLIENT_CURRENCY,
        )

    def get_work_records(self, project_id: int,
                         category_names: Optional[Dict[int, str]] = None) -> List[WorkRecord]:
        """
        One WorkRecord per time entry of every non-archived task of the project.
        Category id and name come from the task as it is now.
        """
        if category_names is None:
            category_names = self.work_category_service.get_category_names()

        tasks = {task.id: task
                 for task in self.task_service.get_tasks_by_project(project_id, include_archived=False)}

        records = []
        for entry in self.time_entry_service.get_entries_by_tasks(tasks.keys()):
            task = tasks[entry.task_id]
            category_name = None
            if task.work_category_id is not None:
                category_name = category_names.get(task.work_category_id, UNKNOWN_CATEGORY)
            records.append(WorkRecord(
                task_id=task.id,
                title=task.title,
                description=task.client_update_text,
                entry_date=entry.entry_date,
                work_category_id=task.work_category_id,
                work_category_name=category_name,
                duration_minutes=entry.duration_minutes,
                note=entry.note,
            ))
        return records

    def _get_used_categories(self, records: List[WorkRecord]) -> List[CategoryOption]:
        used_ids = {record.work_category_id for record in records
                    if record.work_category_id is not None}
        return [CategoryOption(id=category.id, name=category.name)
                for category in self.work_category_service.get_categories()
                if category.id in used_ids]

    def get_computed_view(
        self,
        project_id: int,
        date_range_start: Optional[str] = None,
        date_range_end: Optional[str] = None,
        category_filter: Optional[List[int]] = None,
        today: Optional[date] = None,
        include_overage_rate: bool = True,
    ) -> RetainerComputedView:
        """
        Fully computed retainer statement of a project.

        The balance recurrence always runs over the whole history; the date
        range only selects which months are returned and the category
        filter only narrows task lists and worked minutes.

        Raises:
            NotFoundError: if the project does not exist
            BillingTypeError: if the project is not a retainer project
        """
        project = self.project_service.get_retainer_project(project_id)
        config = self.build_config(project, today)
        current_year_month = get_current_year_month(today)

        records = self.get_work_records(project_id)
        months = compute_retainer_months(config, group_records_by_month(records), current_year_month)
        cycle_summaries = summarize_cycles(months, config)

        months = filter_months_by_date_range(months, date_range_start, date_range_end)
        months = filter_months_by_category(months, category_filter)

        return RetainerComputedView(
            project_id=project_id,
            config=RetainerConfigView(
                included_minutes_per_month=config.included_minutes_per_month,
                rollover_enabled=config.rollover_enabled,
                start_date=config.start_date,
                currency=config.currency,
                overage_rate=config.overage_rate if include_overage_rate else None,
            ),
            months=months,
            current_cycle_index=get_cycle_info(current_year_month, config.start_date).cycle_index,
            cycle_summaries=[cycle_summaries[index] for index in sorted(cycle_summaries)],
            categories=self._get_used_categories(records),
        )

    def get_filter_options(self, project_id: int) -> RetainerFilterOptions:
        """
        Months with logged time and categories in use, for the statement filter bar.

        Raises:
            NotFoundError: if the project does not exist
            BillingTypeError: if the project is not a retainer project
        """
        project = self.project_service.get_retainer_project(project_id)
        records = self.get_work_records(project_id)

        return RetainerFilterOptions(
            year_months=sorted({get_year_month(record.entry_date) for record in records}),
            categories=self._get_used_categories(records),
            start_date=project.start_date,
            rollover_enabled=True if project.rollover_enabled is None else project.rollover_enabled,
        )
