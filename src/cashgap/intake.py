"""
Intake checks for user-entered records.

The planning engine tolerates bad data; this module does not. It is what a
form or an API endpoint runs before saving a planned expense or a batch of
expected payments, so that a typo is reported instead of silently planned
around.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from cashgap.models.records import IncomingKind, IncomingPayment, PlannedExpense
from cashgap.parsing import parse_amount, parse_day

logger = logging.getLogger("cashgap.intake")

SPLIT_TOLERANCE = 0.01


def _new_id() -> str:
    return str(uuid.uuid4())


def validate_expense(payload: Mapping[str, Any]) -> PlannedExpense:
    """Validate a new planned expense and resolve its two parts.

    Raises:
        ValueError: With a message suitable for showing to the user.
    """
    title = str(payload.get("title") or "").strip()
    total = parse_amount(payload.get("amount"))
    day_primary = parse_day(payload.get("day_primary"))
    day_secondary = parse_day(payload.get("day_secondary"))
    part_primary = parse_amount(payload.get("amount_primary"))
    part_secondary = parse_amount(payload.get("amount_secondary"))

    if not title or total is None or day_primary is None:
        raise ValueError("Missing expense data: title, amount and day are required")
    if total < 0:
        raise ValueError("Expense amount cannot be negative")
    if payload.get("day_secondary") not in (None, "") and day_secondary is None:
        raise ValueError("Invalid secondary expense day")

    if day_secondary is not None:
        if part_primary is None and part_secondary is None:
            raise ValueError("Give at least one part amount for a two-day expense")
        if part_secondary is None:
            part_secondary = total - part_primary
        if part_primary is None:
            part_primary = total - part_secondary
        if part_primary < 0 or part_secondary < 0:
            raise ValueError("Expense parts cannot be negative")
        if abs(part_primary + part_secondary - total) > SPLIT_TOLERANCE:
            raise ValueError("Expense parts must add up to the total amount")
    else:
        part_primary = part_secondary = None

    return PlannedExpense(
        id=payload.get("id") or _new_id(),
        title=title,
        amount=total,
        amount_primary=part_primary,
        amount_secondary=part_secondary,
        day_primary=day_primary,
        day_secondary=day_secondary,
    )


def validate_inflows(items: Sequence[Mapping[str, Any]] | None) -> list[IncomingPayment]:
    """Validate a batch of expected payments; the whole batch fails on one bad row.

    Raises:
        ValueError: If the batch is empty or any row is incomplete.
    """
    if not items:
        raise ValueError("items must be a non-empty array.")

    payments: list[IncomingPayment] = []
    for index, item in enumerate(items):
        name = str(item.get("counterparty_name") or item.get("counterparty") or "").strip()
        expected = str(item.get("expected_date") or "").strip()
        amount = parse_amount(item.get("amount"))
        if not name or not expected or amount is None:
            raise ValueError(f"Invalid inflow at index {index}.")

        try:
            payments.append(
                IncomingPayment(
                    id=item.get("id") or _new_id(),
                    counterparty=name,
                    amount=amount,
                    expected_date=expected,
                    kind=item.get("kind") or IncomingKind.FIXED,
                    notes=item.get("notes") or None,
                )
            )
        except (ValidationError, ValueError) as e:
            raise ValueError(f"Invalid inflow at index {index}.") from e

    logger.info("Validated %d inflows", len(payments))
    return payments
