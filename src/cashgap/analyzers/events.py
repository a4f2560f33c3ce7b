"""
Event collector — expected payments and supplier orders as dated cash events.

Each incoming payment becomes one inflow. Each supplier order becomes up to
two outflows: the deposit (unless already paid) and the final payment for
whatever the deposit does not cover. Order amounts are converted into the
base currency with the rate table from :mod:`cashgap.analyzers.currency`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date

from cashgap.models.plan import CashEvent, CashEventType
from cashgap.models.records import IncomingKind, IncomingPayment, SupplierOrder

logger = logging.getLogger("cashgap.analyzers.events")

KIND_LABELS = {
    IncomingKind.FIXED: "фиксированный",
    IncomingKind.PLANNED: "плановый",
}
OPENING_LABEL = "Стартовый баланс"
DEPOSIT_LABEL = "аванс поставщику"
REMAINDER_LABEL = "финальный платёж"


def opening_event(balance: float, on: date) -> CashEvent:
    """Synthetic event carrying the opening balance on ``on``."""
    return CashEvent(
        date=on.isoformat(),
        type=CashEventType.OPENING,
        amount=balance,
        description=OPENING_LABEL,
    )


def inflow_events(inflows: Iterable[IncomingPayment], *, today: date) -> list[CashEvent]:
    events: list[CashEvent] = []
    for inflow in inflows:
        if inflow.kind == IncomingKind.PLANNED and inflow.expected_date < today:
            logger.debug("Dropping stale planned inflow %s (%s)", inflow.id, inflow.expected_date)
            continue
        events.append(
            CashEvent(
                date=inflow.expected_date.isoformat(),
                type=CashEventType.INFLOW,
                amount=inflow.amount,
                description=f"{inflow.counterparty} ({KIND_LABELS[inflow.kind]})",
                source=inflow.id,
            )
        )
    return events


def order_events(
    orders: Iterable[SupplierOrder],
    rates: Mapping[str, float],
    *,
    today: date,
) -> list[CashEvent]:
    events: list[CashEvent] = []
    for order in orders:
        rate = rates.get(order.currency, 1.0)
        deposit = order.deposit_amount * rate
        remainder = order.total_amount * rate - deposit
        supplier = f" {order.supplier_name}" if order.supplier_name else ""

        if deposit > 0 and not order.deposit_paid:
            events.append(
                CashEvent(
                    date=(order.deposit_date or today).isoformat(),
                    type=CashEventType.OUTFLOW,
                    amount=-deposit,
                    description=f"{order.title} — {DEPOSIT_LABEL}{supplier}",
                    source=order.id,
                )
            )

        if remainder > 0:
            events.append(
                CashEvent(
                    date=order.due_date.isoformat(),
                    type=CashEventType.OUTFLOW,
                    amount=-remainder,
                    description=f"{order.title} — {REMAINDER_LABEL}{supplier}",
                    source=order.id,
                )
            )
        elif remainder < 0:
            logger.debug("Order %s deposit exceeds total by %.2f", order.id, -remainder)

    return events


def collect_events(
    inflows: Iterable[IncomingPayment],
    orders: Iterable[SupplierOrder],
    rates: Mapping[str, float],
    *,
    today: date,
) -> list[CashEvent]:
    """Unordered inflow and order events for one planning run."""
    return inflow_events(inflows, today=today) + order_events(orders, rates, today=today)
