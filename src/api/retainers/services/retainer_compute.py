"""
Pure computation of retainer statements.

All figures are integer minutes. Nothing here touches storage: callers
assemble the WorkRecords and pass "today" explicitly when they need
deterministic results.
"""
from datetime import date
from typing import Dict, List, Mapping, Optional

from src.api.common.utils.datetime import (
    format_hours,
    format_month_range_label,
    format_period_label,
    get_current_year_month,
    get_months_between,
    get_year_month,
    minutes_to_hours,
    months_between,
    round_half_up,
)
from src.api.retainers.constants.retainer import (
    CYCLE_LENGTH,
    UNCATEGORIZED,
    CycleBudgetState,
    SettlementKind,
    StatusVariant,
)
from src.api.retainers.constants.strings import RetainerText as T
from src.api.retainers.schemas import (
    AggregatedTask,
    CategoryGroup,
    ComputedMonth,
    CycleDashboard,
    CycleInfo,
    CycleSummary,
    RetainerConfig,
    SettlementBlock,
    StatusTag,
    WorkRecord,
)


def _hours(minutes: int) -> str:
    return format_hours(minutes_to_hours(minutes))


def get_cycle_info(year_month: str, cycle_start_date: date) -> CycleInfo:
    """
    Place a month within the quarterly cycles anchored at the contract start month.
    Months before the start get a neutral result (month_in_cycle 0, cycle_index -1).
    """
    months_since_start = months_between(get_year_month(cycle_start_date), year_month)

    if months_since_start < 0:
        return CycleInfo(month_in_cycle=0, is_cycle_start=False,
                         is_cycle_end=False, cycle_index=-1)

    month_in_cycle = months_since_start % CYCLE_LENGTH + 1
    return CycleInfo(
        month_in_cycle=month_in_cycle,
        is_cycle_start=month_in_cycle == 1,
        is_cycle_end=month_in_cycle == CYCLE_LENGTH,
        cycle_index=months_since_start // CYCLE_LENGTH,
    )


def compute_retainer_months(
    config: RetainerConfig,
    tasks_by_month: Mapping[str, List[WorkRecord]],
    current_year_month: Optional[str] = None,
) -> List[ComputedMonth]:
    """
    Compute the full balance history of a retainer, oldest month first.

    Covers every month from the contract start month through the later of
    the current month and the latest month present in `tasks_by_month`.

    Args:
        config: Retainer contract terms
        tasks_by_month: Map of YYYY-MM -> WorkRecords logged in that month
        current_year_month: Override for the current month (YYYY-MM)

    Returns:
        One ComputedMonth per calendar month in range
    """
    first_month = get_year_month(config.start_date)
    last_month = current_year_month or get_current_year_month()
    for year_month in tasks_by_month:
        if year_month > last_month:
            last_month = year_month

    budget = config.included_minutes_per_month
    results: List[ComputedMonth] = []
    balance = 0

    for year_month in get_months_between(first_month, last_month):
        cycle_info = get_cycle_info(year_month, config.start_date)
        tasks = list(tasks_by_month.get(year_month, []))
        worked_minutes = sum(task.duration_minutes for task in tasks)

        if config.rollover_enabled:
            # Rollover never crosses a cycle boundary
            if cycle_info.is_cycle_start:
                balance = 0
            start_balance = balance
            settles = cycle_info.is_cycle_end
        else:
            start_balance = 0
            settles = True

        available_minutes = start_balance + budget
        balance = available_minutes - worked_minutes

        results.append(ComputedMonth(
            period=format_period_label(year_month),
            year_month=year_month,
            cycle_index=cycle_info.cycle_index,
            month_in_cycle=cycle_info.month_in_cycle,
            is_cycle_start=cycle_info.is_cycle_start,
            is_cycle_end=cycle_info.is_cycle_end,
            tasks=tasks,
            worked_minutes=worked_minutes,
            start_balance=start_balance,
            available_minutes=available_minutes,
            end_balance=balance,
            extra_minutes=max(0, -balance) if settles else 0,
            unused_minutes=max(0, balance) if settles else 0,
            settles=settles,
        ))

    return results


def aggregate_tasks(records: List[WorkRecord]) -> List[AggregatedTask]:
    """One row per unique task with summed minutes, sorted by earliest date."""
    aggregated: Dict[int, AggregatedTask] = {}
    for record in records:
        existing = aggregated.get(record.task_id)
        if existing:
            existing.total_minutes += record.duration_minutes
            if record.entry_date < existing.earliest_date:
                existing.earliest_date = record.entry_date
        else:
            aggregated[record.task_id] = AggregatedTask(
                task_id=record.task_id,
                title=record.title,
                description=record.description,
                work_category_id=record.work_category_id,
                work_category_name=record.work_category_name,
                total_minutes=record.duration_minutes,
                earliest_date=record.entry_date,
            )
    return sorted(aggregated.values(), key=lambda task: task.earliest_date)


def group_tasks_by_category(
    tasks: List[WorkRecord],
    category_map: Optional[Mapping[int, str]] = None,
) -> List[CategoryGroup]:
    """
    Group work records by category, aggregating per unique task.
    Named categories sort alphabetically, Uncategorized always last.
    """
    groups: Dict[Optional[int], List[WorkRecord]] = {}
    for task in tasks:
        groups.setdefault(task.work_category_id, []).append(task)

    result = []
    for category_id, records in groups.items():
        name = records[0].work_category_name
        if name is None and category_id is not None and category_map:
            name = category_map.get(category_id)
        result.append(CategoryGroup(
            work_category_id=category_id,
            category_name=name or UNCATEGORIZED,
            tasks=aggregate_tasks(records),
            total_minutes=sum(record.duration_minutes for record in records),
        ))

    return sorted(result, key=lambda group: (group.category_name == UNCATEGORIZED,
                                             group.category_name.casefold()))


def get_status_tag(month: ComputedMonth, rollover_enabled: bool) -> StatusTag:
    """
    Short label for a collapsed statement row.

    At a settlement point overage wins over unused; a zero balance is
    always reported as on budget.
    """
    on_budget = StatusTag(label=T.TAG_ON_BUDGET, variant=StatusVariant.SUCCESS)

    if rollover_enabled:
        if month.is_cycle_end:
            if month.extra_minutes > 0:
                return StatusTag(label=T.TAG_PAYMENT_DUE.format(hours=_hours(month.extra_minutes)),
                                 variant=StatusVariant.DESTRUCTIVE)
            if month.unused_minutes > 0:
                return StatusTag(label=T.TAG_UNUSED.format(hours=_hours(month.unused_minutes)),
                                 variant=StatusVariant.WARNING)
            return on_budget

        carries = T.TAG_CARRIES.format(hours=_hours(abs(month.end_balance)))
        if month.end_balance > 0:
            return StatusTag(label=f"+{carries}", variant=StatusVariant.SUCCESS)
        if month.end_balance < 0:
            return StatusTag(label=f"–{carries}", variant=StatusVariant.DESTRUCTIVE)
        return on_budget

    # No rollover: every month settles
    if month.end_balance < 0:
        return StatusTag(label=T.TAG_OVER.format(hours=_hours(month.extra_minutes)),
                         variant=StatusVariant.DESTRUCTIVE)
    if month.end_balance > 0:
        return StatusTag(label=T.TAG_UNUSED.format(hours=_hours(month.unused_minutes)),
                         variant=StatusVariant.WARNING)
    return on_budget


def get_started_with_subtitle(month: ComputedMonth, budget_hours: float,
                              rollover_enabled: bool) -> str:
    """Explain what the month's available hours are made of."""
    budget = format_hours(budget_hours)
    if not rollover_enabled:
        return T.START_NO_ROLLOVER.format(budget=budget)
    if month.is_cycle_start:
        return T.START_CYCLE_START.format(budget=budget)
    if month.start_balance > 0:
        return T.START_WITH_CARRY.format(budget=budget, hours=_hours(month.start_balance))
    if month.start_balance < 0:
        return T.START_WITH_DEDUCTION.format(budget=budget, hours=_hours(abs(month.start_balance)))
    return T.START_BUDGET_ONLY.format(budget=budget)


def get_ending_balance_subtitle(month: ComputedMonth, rollover_enabled: bool) -> str:
    """Explain what happens to the month's ending balance."""
    if not rollover_enabled:
        if month.end_balance > 0:
            return T.NOT_USED
        if month.end_balance < 0:
            return T.PAYMENT_DUE
        return T.NO_EXTRA_CHARGES

    if month.is_cycle_end:
        if month.end_balance > 0:
            return T.NOT_CARRIED_OVER
        if month.end_balance < 0:
            return T.PAYMENT_DUE
        return T.NO_EXTRA_CHARGES

    if month.end_balance > 0:
        return T.CARRIES_OVER
    if month.end_balance < 0:
        return T.DEDUCTED_NEXT
    return T.ALL_USED


def get_cycle_range_label(months: List[ComputedMonth]) -> str:
    if not months:
        return ""
    return format_month_range_label(months[0].year_month, months[-1].year_month)


def summarize_cycles(months: List[ComputedMonth], config: RetainerConfig) -> Dict[int, CycleSummary]:
    """Worked minutes, pooled budget and range label per cycle index."""
    by_cycle: Dict[int, List[ComputedMonth]] = {}
    for month in months:
        by_cycle.setdefault(month.cycle_index, []).append(month)

    return {
        cycle_index: CycleSummary(
            cycle_index=cycle_index,
            worked_minutes=sum(month.worked_minutes for month in cycle_months),
            pool_minutes=config.included_minutes_per_month * CYCLE_LENGTH,
            label=get_cycle_range_label(cycle_months),
        )
        for cycle_index, cycle_months in by_cycle.items()
    }


def get_settlement_block(
    month: ComputedMonth,
    config: RetainerConfig,
    cycle_summary: Optional[CycleSummary] = None,
) -> Optional[SettlementBlock]:
    """
    Settlement details for a settling month with a non-zero balance.

    Under rollover the overage is explained against the cycle pool,
    otherwise against the monthly budget.
    """
    if not month.settles:
        return None

    pooled = config.rollover_enabled and cycle_summary is not None
    range_label = cycle_summary.label if pooled else month.period

    if month.extra_minutes > 0:
        extra = _hours(month.extra_minutes)
        if pooled:
            explanation = T.EXTRA_EXPLAIN_CYCLE.format(
                used=_hours(cycle_summary.worked_minutes), extra=extra,
                pool=_hours(cycle_summary.pool_minutes))
        else:
            explanation = T.EXTRA_EXPLAIN_MONTH.format(
                used=_hours(month.worked_minutes), extra=extra,
                budget=_hours(config.included_minutes_per_month))

        invoice_amount = invoice_calculation = None
        if config.overage_rate > 0:
            invoice_amount = round_half_up(month.extra_minutes / 60 * config.overage_rate, 2)
            invoice_calculation = T.EXTRA_CALC.format(
                hours=extra, rate=format_hours(config.overage_rate), currency=config.currency)

        return SettlementBlock(
            kind=SettlementKind.EXTRA,
            label=T.EXTRA_HOURS_LABEL.format(range=range_label),
            explanation=explanation,
            extra_minutes=month.extra_minutes,
            invoice_amount=invoice_amount,
            invoice_calculation=invoice_calculation,
        )

    if month.unused_minutes > 0:
        unused = _hours(month.unused_minutes)
        template = T.UNUSED_CYCLE if config.rollover_enabled else T.UNUSED_MONTH
        return SettlementBlock(
            kind=SettlementKind.UNUSED,
            label=range_label,
            explanation=template.format(hours=unused),
            unused_minutes=month.unused_minutes,
        )

    return None


def get_cycle_dashboard(cycle_months: List[ComputedMonth], config: RetainerConfig) -> CycleDashboard:
    """Budget versus worked hours for the current cycle (or month, without rollover)."""
    budget_minutes = config.included_minutes_per_month
    if config.rollover_enabled:
        budget_minutes *= CYCLE_LENGTH
    worked_minutes = sum(month.worked_minutes for month in cycle_months)
    remaining_minutes = budget_minutes - worked_minutes

    if remaining_minutes < 0:
        state = CycleBudgetState.OVER
        remaining_label = T.OVER_BUDGET.format(hours=_hours(abs(remaining_minutes)))
    elif remaining_minutes == 0:
        state = CycleBudgetState.FULLY_USED
        remaining_label = T.FULLY_USED
    else:
        state = CycleBudgetState.REMAINING
        remaining_label = T.REMAINING.format(hours=_hours(remaining_minutes))

    label = (T.CURRENT_CYCLE.format(range=get_cycle_range_label(cycle_months))
             if config.rollover_enabled else T.THIS_MONTH)

    return CycleDashboard(
        label=label,
        budget_minutes=budget_minutes,
        worked_minutes=worked_minutes,
        remaining_minutes=remaining_minutes,
        state=state,
        remaining_label=remaining_label,
    )
