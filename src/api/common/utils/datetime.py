import math
from datetime import date, datetime, timezone, timedelta
from typing import List, Optional, Tuple

MONTH_SHORT = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def get_current_datetime() -> datetime:
    """Return current UTC datetime with timezone info."""
    dt = datetime.now(timezone.utc)
    # Ensure microseconds are stripped for consistency in tests
    return dt.replace(microsecond=0)


def get_month_boundaries(target_month: date) -> tuple[date, date]:
    """
    Get the start and end dates for a given month.

    Args:
        target_month: The month to get boundaries for

    Returns:
        Tuple of (month_start, month_end) dates
    """
    return get_month_start(target_month), get_month_end(target_month)


def get_month_start(target_month: date) -> date:
    """Get the first day of the given month."""
    return target_month.replace(day=1)


def get_month_end(target_month: date) -> date:
    """Get the last day of the given month."""
    if target_month.month == 12:
        return date(target_month.year + 1, 1, 1) - timedelta(days=1)
    return date(target_month.year, target_month.month + 1, 1) - timedelta(days=1)


def parse_year_month(year_month: str) -> Tuple[int, int]:
    """
    Split a YYYY-MM key into (year, month).

    Raises:
        ValueError: if the key is not a valid YYYY-MM string
    """
    parts = year_month.split("-") if isinstance(year_month, str) else []
    if len(parts) != 2 or len(parts[0]) != 4 or len(parts[1]) != 2 \
            or not parts[0].isdigit() or not parts[1].isdigit():
        raise ValueError(f"Invalid year-month '{year_month}', expected YYYY-MM")
    year, month = int(parts[0]), int(parts[1])
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in '{year_month}'")
    return year, month


def format_year_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def get_year_month(target_date: date) -> str:
    """YYYY-MM key of a date."""
    return format_year_month(target_date.year, target_date.month)


def get_year_month_boundaries(year_month: str) -> tuple[date, date]:
    """First and last calendar day of a YYYY-MM month."""
    year, month = parse_year_month(year_month)
    return get_month_boundaries(date(year, month, 1))


def add_months(year_month: str, months: int) -> str:
    """Shift a YYYY-MM key by a (possibly negative) number of months."""
    year, month = parse_year_month(year_month)
    index = year * 12 + (month - 1) + months
    return format_year_month(index // 12, index % 12 + 1)


def months_between(first: str, last: str) -> int:
    """Signed number of months from `first` to `last`."""
    first_year, first_month = parse_year_month(first)
    last_year, last_month = parse_year_month(last)
    return (last_year - first_year) * 12 + (last_month - first_month)


def get_months_between(first: str, last: str) -> List[str]:
    """All YYYY-MM keys between two months, both inclusive. Empty if first > last."""
    return [add_months(first, offset) for offset in range(months_between(first, last) + 1)]


def get_current_year_month(today: Optional[date] = None) -> str:
    return get_year_month(today or get_current_datetime().date())


def format_period_label(year_month: str) -> str:
    """
    Display label for a month.

    e.g. "2025-01" -> "Jan 1 – 31, 2025"
    """
    year, month = parse_year_month(year_month)
    month_end = get_month_end(date(year, month, 1))
    return f"{MONTH_SHORT[month - 1]} 1 – {month_end.day}, {year}"


def format_month_range_label(first: str, last: str) -> str:
    """
    Short label for a span of months.

    e.g. ("2025-04", "2025-06") -> "Apr – Jun 2025",
         ("2024-11", "2025-01") -> "Nov 2024 – Jan 2025"
    """
    first_year, first_month = parse_year_month(first)
    last_year, last_month = parse_year_month(last)
    if first == last:
        return f"{MONTH_SHORT[first_month - 1]} {first_year}"
    if first_year == last_year:
        return f"{MONTH_SHORT[first_month - 1]} – {MONTH_SHORT[last_month - 1]} {last_year}"
    return (f"{MONTH_SHORT[first_month - 1]} {first_year} – "
            f"{MONTH_SHORT[last_month - 1]} {last_year}")


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def minutes_to_hours(minutes: int) -> float:
    """
    Convert minutes to hours, rounded to 1 decimal.
    e.g. 90 -> 1.5, 600 -> 10.0, 0 -> 0.0
    """
    return round_half_up(minutes / 60, 1)


def format_hours(hours: float) -> str:
    """Render an hour figure without a trailing .0 (10.0 -> "10", 1.5 -> "1.5")."""
    return str(int(hours)) if float(hours).is_integer() else str(hours)
