from typing import Optional
from datetime import date
from sqlmodel import Field
from sqlalchemy import UniqueConstraint
from src.api.common.models.base import BaseModel, TimestampMixin
from src.api.common.utils.datetime import get_year_month


class RetainerPeriod(BaseModel, TimestampMixin, table=True):
    """
    One persisted ledger month of a retainer project.

    Created lazily on first access to the month and never updated afterwards:
    included_minutes is the contract budget at creation time and
    rollover_minutes the trailing-window rollover computed at creation time.
    Used minutes are never stored.
    """
    __table_args__ = (
        UniqueConstraint("project_id", "period_start",
                         name="uq_retainerperiod_project_period_start"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    project_id: int = Field(foreign_key="project.id", nullable=False, index=True)

    # First and last calendar day of the month
    period_start: date = Field(nullable=False, index=True)
    period_end: date = Field(nullable=False)

    included_minutes: int = Field(nullable=False)
    rollover_minutes: int = Field(nullable=False, default=0)

    @property
    def year_month(self) -> str:
        return get_year_month(self.period_start)

    class Config:
        from_attributes = True
