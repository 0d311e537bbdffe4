"""Pure helpers for dates, search and reporting."""

from .dates import month_days, parse_month, parse_shift_date
from .search import filter_by_month, search_shifts

__all__ = [
    "month_days",
    "parse_month",
    "parse_shift_date",
    "filter_by_month",
    "search_shifts",
]
