"""
Cash Plan Builder — day-by-day projection of the cash balance.

Merges inflows, supplier-order payments and monthly expenses into one
chronological ledger and walks it day by day:

1. **Opening balance** — the sum of all account balances.
2. **Daily balances** — recorded only for days that have events.
3. **Lowest balance** — tracked across every day of the window.
4. **Cash gap** — how far the lowest balance dips below zero.

The window starts at the earliest event and stops at the latest event or
at ``today + horizon_days``, whichever comes first. The running balance is
kept unrounded; rounding to cents happens only when a value is reported.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import date, timedelta

from cashgap.analyzers.currency import rate_table
from cashgap.analyzers.events import collect_events, opening_event
from cashgap.analyzers.expenses import DEFAULT_HORIZON_DAYS, expand_monthly_expenses
from cashgap.models.plan import CashEvent, CashPlanResult, DailyStat, OrderImpact
from cashgap.models.records import (
    Account,
    AppSettings,
    IncomingPayment,
    OrderDraft,
    PlannedExpense,
    SupplierOrder,
)
from cashgap.parsing import round_money, to_date, to_date_key

logger = logging.getLogger("cashgap.analyzers.cashplan")

NEW_ORDER_ID = "new-order"


def build_cash_plan(
    accounts: Sequence[Account],
    inflows: Sequence[IncomingPayment],
    orders: Sequence[SupplierOrder],
    expenses: Sequence[PlannedExpense] = (),
    settings: AppSettings | None = None,
    *,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    today: date | None = None,
    include_opening_event: bool = False,
) -> CashPlanResult:
    """Project the cash balance forward and find the cash gap.

    Args:
        accounts: Cash accounts; their balances form the opening balance.
        inflows: Expected incoming payments.
        orders: Outstanding supplier orders.
        expenses: Monthly planned expenses.
        settings: Currency settings (CNY rate).
        horizon_days: How far ahead of ``today`` to project.
        today: Planning date; defaults to the local calendar day.
        include_opening_event: Carry the opening balance as an ``opening``
            event dated today (or the first earlier event day) instead of
            starting the walk from it.

    Returns:
        CashPlanResult with sparse daily balances, lowest balance and gap.
    """
    today = today or date.today()
    opening = sum(account.balance for account in accounts)

    events = collect_events(inflows, orders, rate_table(settings), today=today)
    events += expand_monthly_expenses(expenses, today=today, horizon_days=horizon_days)
    if include_opening_event:
        # opens the window even when a past-dated payment comes first
        opened_on = min([today, *(to_date(event.date) for event in events)])
        events.insert(0, opening_event(opening, opened_on))

    if not events:
        return CashPlanResult(
            opening_balance=round_money(opening),
            daily=[],
            min_balance=round_money(opening),
            cash_gap=round_money(max(0.0, -opening)),
        )

    # ISO keys sort chronologically; sorted() is stable for same-day events
    events = sorted(events, key=lambda e: e.date)
    by_day: dict[str, list[CashEvent]] = defaultdict(list)
    for event in events:
        by_day[event.date].append(event)

    first = to_date(events[0].date)
    last = to_date(events[-1].date)
    end = min(last, today + timedelta(days=horizon_days))

    balance = 0.0 if include_opening_event else opening
    min_balance = opening
    daily: list[DailyStat] = []

    cursor = first
    while cursor <= end:
        todays = by_day.get(cursor.isoformat(), [])
        for event in todays:
            balance += event.amount

        min_balance = min(min_balance, balance)

        if todays:
            daily.append(DailyStat(date=cursor.isoformat(), balance=round_money(balance), events=todays))

        cursor += timedelta(days=1)

    result = CashPlanResult(
        opening_balance=round_money(opening),
        daily=daily,
        min_balance=round_money(min_balance),
        cash_gap=round_money(-min_balance) if min_balance < 0 else 0.0,
    )
    logger.info(
        "Cash plan built: %d events over %d days, min balance %.2f, gap %.2f",
        len(events),
        len(daily),
        result.min_balance,
        result.cash_gap,
    )
    return result


def project_balance_on_date(plan: CashPlanResult, target: date | str) -> float | None:
    """Balance on ``target``, or the last known balance when that day has no events."""
    if not plan.daily:
        return None
    key = to_date_key(target)
    for day in plan.daily:
        if day.date == key:
            return day.balance
    return plan.daily[-1].balance


def first_gap_day(plan: CashPlanResult) -> DailyStat | None:
    """First day the balance goes below zero."""
    for day in plan.daily:
        if day.balance < 0:
            return day
    return None


def with_candidate(orders: Sequence[SupplierOrder], candidate: OrderDraft) -> list[SupplierOrder]:
    """Saved orders plus ``candidate`` under the ``new-order`` id; ``orders`` is left as is."""
    placeholder = SupplierOrder.model_validate({**candidate.model_dump(), "id": NEW_ORDER_ID})
    return [*orders, placeholder]


def evaluate_order_impact(
    accounts: Sequence[Account],
    inflows: Sequence[IncomingPayment],
    orders: Sequence[SupplierOrder],
    expenses: Sequence[PlannedExpense],
    candidate: OrderDraft,
    settings: AppSettings | None = None,
    *,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    today: date | None = None,
) -> OrderImpact:
    """What-if check: would adding ``candidate`` open a cash gap?"""
    plan = build_cash_plan(
        accounts,
        inflows,
        with_candidate(orders, candidate),
        expenses,
        settings,
        horizon_days=horizon_days,
        today=today,
    )
    logger.debug("Order impact for %r: min balance %.2f", candidate.title, plan.min_balance)
    return OrderImpact(ok=plan.min_balance >= 0, min_balance=plan.min_balance, cash_gap=plan.cash_gap)
