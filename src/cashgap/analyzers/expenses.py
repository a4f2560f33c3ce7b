"""
Monthly expense expander — recurring planned expenses as dated outflows.

Every planned expense repeats each calendar month, on one day or split over
two days. Days past the end of a short month move to its last day (31 → 30
in April, → 28/29 in February); they never spill into the next month.

Only occurrences between today and the horizon limit are emitted, so the
schedule is a pure function of the expense, ``today`` and the horizon.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, timedelta

from cashgap.analyzers.months import clamp_day, iter_month_starts
from cashgap.models.plan import CashEvent, CashEventType
from cashgap.models.records import PlannedExpense

logger = logging.getLogger("cashgap.analyzers.expenses")

DEFAULT_HORIZON_DAYS = 120

PART_ONE = " (часть 1/2)"
PART_TWO = " (часть 2/2)"


def resolve_split(expense: PlannedExpense) -> tuple[float, float | None]:
    """Amounts charged on the primary and secondary day.

    Without a secondary day, or with no part given, the whole amount falls on
    the primary day. When only one part is given the other is the remainder
    of the total.
    """
    if expense.day_secondary is None:
        return expense.amount, None

    primary = expense.amount_primary
    secondary = expense.amount_secondary
    if primary is None and secondary is None:
        return expense.amount, None
    if primary is None:
        primary = expense.amount - secondary
    if secondary is None:
        secondary = expense.amount - primary
    return primary, secondary


def _occurrence(
    month: date,
    day: int,
    amount: float,
    description: str,
    source: str,
    *,
    today: date,
    limit: date,
) -> CashEvent | None:
    when = clamp_day(month.year, month.month, day)
    if when < today or when > limit or amount <= 0:
        return None
    return CashEvent(
        date=when.isoformat(),
        type=CashEventType.OUTFLOW,
        amount=-amount,
        description=description,
        source=source,
    )


def expand_monthly_expenses(
    expenses: Iterable[PlannedExpense],
    *,
    today: date,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> list[CashEvent]:
    """Outflow events for every planned expense across the horizon."""
    limit = today + timedelta(days=horizon_days)
    events: list[CashEvent] = []

    for expense in expenses:
        if expense.day_primary is None:
            logger.debug("Skipping expense %s without a valid day", expense.id)
            continue

        primary_amount, secondary_amount = resolve_split(expense)
        has_secondary = (
            expense.day_secondary is not None and secondary_amount is not None and secondary_amount > 0
        )
        if primary_amount <= 0 and not has_secondary:
            logger.debug("Skipping expense %s with nothing to pay", expense.id)
            continue

        primary_title = expense.title + (PART_ONE if has_secondary else "")

        for month in iter_month_starts(today, limit):
            event = _occurrence(
                month, expense.day_primary, primary_amount, primary_title, expense.id, today=today, limit=limit
            )
            if event is not None:
                events.append(event)

            if has_secondary:
                event = _occurrence(
                    month,
                    expense.day_secondary,
                    secondary_amount,
                    expense.title + PART_TWO,
                    expense.id,
                    today=today,
                    limit=limit,
                )
                if event is not None:
                    events.append(event)

    return events
