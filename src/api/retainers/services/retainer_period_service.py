from typing import List, Optional
from fastapi.logger import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from src.api.common.exceptions import NotFoundError
from src.api.common.utils.datetime import (
    add_months,
    get_year_month,
    get_year_month_boundaries,
    round_half_up,
)
from src.api.projects.models.project import Project
from src.api.projects.services.project_service import ProjectService
from src.api.retainers.constants.retainer import ROLLOVER_MONTHS, USAGE_WARNING_PERCENT
from src.api.retainers.models.retainer_period import RetainerPeriod
from src.api.retainers.schemas import (
    RetainerPeriodHistory,
    RetainerPeriodSnapshot,
    RetainerUsage,
    UsageWarnings,
)
from src.api.tasks.services.time_entry_service import TimeEntryService


def to_snapshot(period: RetainerPeriod) -> RetainerPeriodSnapshot:
    return RetainerPeriodSnapshot(
        id=period.id,
        project_id=period.project_id,
        period_start=period.period_start,
        period_end=period.period_end,
        year_month=period.year_month,
        included_minutes=period.included_minutes,
        rollover_minutes=period.rollover_minutes,
    )


class RetainerPeriodService:
    """
    Rolling period ledger: one persisted period per retainer project and month.

    Periods are created lazily and frozen at creation. Used minutes are
    always recomputed from the time entries, never stored.
    """

    def __init__(self, db: Session):
        self.db = db
        self.project_service = ProjectService(db)
        self.time_entry_service = TimeEntryService(db)

    def get_period(self, project_id: int, year_month: str) -> Optional[RetainerPeriod]:
        """Look up a period by its natural key (project, first day of month)"""
        period_start, _ = get_year_month_boundaries(year_month)
        return self.db.exec(
            select(RetainerPeriod).where(
                RetainerPeriod.project_id == project_id,
                RetainerPeriod.period_start == period_start,
            )
        ).first()

    def compute_used_minutes(self, project_id: int, year_month: str) -> int:
        """Minutes logged on the project within the month, both ends inclusive"""
        start, end = get_year_month_boundaries(year_month)
        return self.time_entry_service.get_project_minutes_between(project_id, start, end)

    def get_unused_minutes(self, period: RetainerPeriod) -> int:
        """Unused part of the period's own allotment. Inherited rollover is not included."""
        used_minutes = self.compute_used_minutes(period.project_id, period.year_month)
        return max(0, period.included_minutes - used_minutes)

    def compute_rollover_minutes(self, project_id: int, year_month: str) -> int:
        """
        Sum the unused own allotment of each of the previous ROLLOVER_MONTHS
        persisted periods. Months without a persisted period contribute nothing.
        """
        total_rollover = 0
        for offset in range(1, ROLLOVER_MONTHS + 1):
            previous = self.get_period(project_id, add_months(year_month, -offset))
            if previous:
                total_rollover += self.get_unused_minutes(previous)
        return total_rollover

    def get_or_create_for_month(self, project_id: int, year_month: str) -> RetainerPeriodSnapshot:
        """
        Return the period of a month, creating it on first access.

        Creation snapshots the project's current monthly budget and the
        trailing-window rollover. A second call for the same month returns
        the existing period unchanged.

        Raises:
            NotFoundError: if the project does not exist
            BillingTypeError: if the project is not a retainer project
        """
        project = self.project_service.get_retainer_project(project_id)

        existing = self.get_period(project_id, year_month)
        if existing:
            return to_snapshot(existing)

        period_start, period_end = get_year_month_boundaries(year_month)
        rollover_minutes = self.compute_rollover_minutes(project_id, year_month)
        period = RetainerPeriod(
            project_id=project_id,
            period_start=period_start,
            period_end=period_end,
            included_minutes=project.included_minutes_per_month or 0,
            rollover_minutes=rollover_minutes,
        )

        self.db.add(period)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent first access inserted the same month
            self.db.rollback()
            logger.warning(
                f"Retainer period {year_month} of project {project_id} was created concurrently, "
                f"returning the existing period")
            existing = self.get_period(project_id, year_month)
            if existing is None:
                raise
            return to_snapshot(existing)

        self.db.refresh(period)
        logger.info(
            f"Created retainer period {year_month} for project {project_id}: "
            f"included={period.included_minutes}m rollover={period.rollover_minutes}m")
        return to_snapshot(period)

    def get_usage(self, project_id: int, year_month: str) -> RetainerUsage:
        """
        Usage figures and warnings of a month for the dashboard widget.
        Falls back to the live budget and no rollover when the period does not exist yet.

        Raises:
            NotFoundError: if the project does not exist
            BillingTypeError: if the project is not a retainer project
        """
        project = self.project_service.get_retainer_project(project_id)
        period = self.get_period(project_id, year_month)

        if period:
            included_minutes = period.included_minutes
            rollover_minutes = period.rollover_minutes
        else:
            included_minutes = project.included_minutes_per_month or 0
            rollover_minutes = 0

        used_minutes = self.compute_used_minutes(project_id, year_month)
        total_available = included_minutes + rollover_minutes
        overage_minutes = max(0, used_minutes - total_available)
        usage_percent = (int(round_half_up(used_minutes / total_available * 100))
                         if total_available > 0 else 0)

        # Unused allotment of the month leaving the rollover window
        expiring_period = self.get_period(project_id, add_months(year_month, -ROLLOVER_MONTHS))
        expiring_minutes = self.get_unused_minutes(expiring_period) if expiring_period else 0

        return RetainerUsage(
            project_id=project_id,
            year_month=year_month,
            period_exists=period is not None,
            included_minutes=included_minutes,
            rollover_minutes=rollover_minutes,
            used_minutes=used_minutes,
            total_available=total_available,
            overage_minutes=overage_minutes,
            usage_percent=usage_percent,
            expiring_minutes=expiring_minutes,
            warnings=UsageWarnings(
                usage80=usage_percent >= USAGE_WARNING_PERCENT and overage_minutes == 0,
                overage=overage_minutes > 0,
                expiring=expiring_minutes > 0,
            ),
            overage_rate=project.overage_rate or 0,
        )

    def get_history(self, project_id: int) -> List[RetainerPeriodHistory]:
        """
        All persisted periods of a project, newest first, with live used and overage minutes.

        Raises:
            NotFoundError: if the project does not exist
        """
        if not self.db.get(Project, project_id):
            raise NotFoundError("Project", project_id)

        periods = self.db.exec(
            select(RetainerPeriod)
            .where(RetainerPeriod.project_id == project_id)
            .order_by(RetainerPeriod.period_start.desc())
        ).all()

        history = []
        for period in periods:
            year_month = get_year_month(period.period_start)
            used_minutes = self.compute_used_minutes(project_id, year_month)
            total_available = period.included_minutes + period.rollover_minutes
            history.append(RetainerPeriodHistory(
                id=period.id,
                period_start=period.period_start,
                period_end=period.period_end,
                year_month=year_month,
                included_minutes=period.included_minutes,
                rollover_minutes=period.rollover_minutes,
                used_minutes=used_minutes,
                overage_minutes=max(0, used_minutes - total_available),
            ))
        return history
