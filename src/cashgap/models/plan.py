"""
Cash plan model — events, daily balances, the lowest point and the gap.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CashEventType(str, Enum):
    """Direction of a cash event."""

    OPENING = "opening"
    INFLOW = "inflow"
    OUTFLOW = "outflow"


class _PlanModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CashEvent(_PlanModel):
    """A single dated movement of cash.

    ``amount`` is signed: positive for inflows and the opening balance,
    negative for outflows. ``source`` links back to the order or expense.
    """

    date: str  # YYYY-MM-DD
    type: CashEventType
    amount: float
    description: str = ""
    source: str | None = None


class DailyStat(_PlanModel):
    """Balance at the end of a day that had at least one event."""

    date: str
    balance: float
    events: list[CashEvent] = Field(default_factory=list)


class CashPlanResult(_PlanModel):
    """Projected cash plan.

    Only days with events appear in ``daily``. ``min_balance`` covers every
    day of the projected window; ``cash_gap`` is its magnitude when negative.
    """

    opening_balance: float = 0.0
    daily: list[DailyStat] = Field(default_factory=list)
    min_balance: float = 0.0
    cash_gap: float = Field(default=0.0, ge=0.0)

    @property
    def has_gap(self) -> bool:
        return self.cash_gap > 0

    @property
    def events(self) -> list[CashEvent]:
        """All events in chronological order."""
        return [event for day in self.daily for event in day.events]

    def to_markdown(self) -> str:
        """Export plan as Markdown."""
        from cashgap.exporters.markdown import render_markdown

        return render_markdown(self)

    def to_json(self) -> str:
        """Export plan as JSON (camelCase keys)."""
        return self.model_dump_json(indent=2, by_alias=True, exclude_none=True)

    def to_dict(self) -> dict[str, Any]:
        """Export plan as dictionary (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class OrderImpact(_PlanModel):
    """Outcome of adding a candidate order to the plan."""

    ok: bool
    min_balance: float
    cash_gap: float = Field(default=0.0, ge=0.0)
