from datetime import date
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from src.api.retainers.constants.retainer import CycleBudgetState, SettlementKind, StatusVariant


class RetainerConfig(BaseModel):
    """Contract terms a statement is computed against. Immutable per query."""
    included_minutes_per_month: int = Field(ge=0)
    overage_rate: float = 0.0
    rollover_enabled: bool = True
    start_date: date
    currency: str = "USD"

    model_config = ConfigDict(frozen=True)


class WorkRecord(BaseModel):
    """One time entry joined with its task and the task's current category."""
    task_id: int
    title: str
    description: Optional[str] = None
    entry_date: date
    work_category_id: Optional[int] = None
    work_category_name: Optional[str] = None
    duration_minutes: int
    note: Optional[str] = None


class CycleInfo(BaseModel):
    month_in_cycle: int
    is_cycle_start: bool
    is_cycle_end: bool
    cycle_index: int


class ComputedMonth(BaseModel):
    """One statement row. Balances are in minutes and may be negative."""
    period: str
    year_month: str
    cycle_index: int
    month_in_cycle: int
    is_cycle_start: bool
    is_cycle_end: bool
    tasks: List[WorkRecord] = []
    worked_minutes: int = 0
    start_balance: int = 0
    available_minutes: int = 0
    end_balance: int = 0
    # Only set at a settlement point
    extra_minutes: int = 0
    unused_minutes: int = 0
    settles: bool = False


class AggregatedTask(BaseModel):
    task_id: int
    title: str
    description: Optional[str] = None
    work_category_id: Optional[int] = None
    work_category_name: Optional[str] = None
    total_minutes: int
    earliest_date: date


class CategoryGroup(BaseModel):
    work_category_id: Optional[int] = None
    category_name: str
    tasks: List[AggregatedTask]
    total_minutes: int


class StatusTag(BaseModel):
    label: str
    variant: StatusVariant


class CycleSummary(BaseModel):
    cycle_index: int
    worked_minutes: int
    pool_minutes: int
    label: str


class SettlementBlock(BaseModel):
    kind: SettlementKind
    label: str
    explanation: str
    extra_minutes: int = 0
    unused_minutes: int = 0
    invoice_amount: Optional[float] = None
    invoice_calculation: Optional[str] = None


class CycleDashboard(BaseModel):
    label: str
    budget_minutes: int
    worked_minutes: int
    remaining_minutes: int
    state: CycleBudgetState
    remaining_label: str


class RetainerPeriodSnapshot(BaseModel):
    """
    A persisted ledger period as read back from storage.

    included_minutes and rollover_minutes were fixed when the period was
    created and are never recomputed.
    """
    id: int
    project_id: int
    period_start: date
    period_end: date
    year_month: str
    included_minutes: int
    rollover_minutes: int

    model_config = ConfigDict(frozen=True)


class UsageWarnings(BaseModel):
    usage80: bool
    overage: bool
    expiring: bool


class RetainerUsage(BaseModel):
    project_id: int
    year_month: str
    period_exists: bool
    included_minutes: int
    rollover_minutes: int
    used_minutes: int
    total_available: int
    overage_minutes: int
    usage_percent: int
    expiring_minutes: int
    warnings: UsageWarnings
    overage_rate: float


class RetainerPeriodHistory(BaseModel):
    id: int
    period_start: date
    period_end: date
    year_month: str
    included_minutes: int
    rollover_minutes: int
    used_minutes: int
    overage_minutes: int


class RetainerPeriodRead(RetainerPeriodSnapshot):
    pass


class RetainerConfigView(BaseModel):
    included_minutes_per_month: int
    rollover_enabled: bool
    start_date: date
    currency: str
    overage_rate: Optional[float] = None


class CategoryOption(BaseModel):
    id: int
    name: str


class RetainerComputedView(BaseModel):
    project_id: int
    config: RetainerConfigView
    months: List[ComputedMonth]
    current_cycle_index: int
    cycle_summaries: List[CycleSummary]
    categories: List[CategoryOption]


class RetainerFilterOptions(BaseModel):
    year_months: List[str]
    categories: List[CategoryOption]
    start_date: Optional[date] = None
    rollover_enabled: bool
