"""
cashgap analyzers — the planning engine.

- ``currency``: rate resolution and conversion into the base currency.
- ``months``: month stepping and day-of-month clamping.
- ``events``: turns payments and supplier orders into dated cash events.
- ``expenses``: expands monthly planned expenses over the horizon.
- ``cashplan``: builds the day-by-day plan and answers questions about it.
"""

from cashgap.analyzers.cashplan import (
    build_cash_plan,
    evaluate_order_impact,
    first_gap_day,
    project_balance_on_date,
)
from cashgap.analyzers.currency import currency_rate, normalize_settings, rate_table
from cashgap.analyzers.events import collect_events
from cashgap.analyzers.expenses import expand_monthly_expenses, resolve_split

__all__ = [
    "build_cash_plan",
    "collect_events",
    "currency_rate",
    "evaluate_order_impact",
    "expand_monthly_expenses",
    "first_gap_day",
    "normalize_settings",
    "project_balance_on_date",
    "rate_table",
    "resolve_split",
]
