"""
Source records — accounts, expected payments, supplier orders, planned expenses.

These are immutable snapshots handed to the planning engine. Numeric fields
go through :mod:`cashgap.parsing` before validation, so a blank or garbled
amount becomes ``0`` and a bad day of month becomes ``None``.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cashgap.parsing import normalize_amount, parse_amount, parse_day, to_date


class Currency(str, Enum):
    """Currencies a supplier order can be priced in."""

    RUB = "RUB"  # base currency
    CNY = "CNY"


class IncomingKind(str, Enum):
    """How certain an expected payment is."""

    FIXED = "fixed"  # contracted, always counted
    PLANNED = "planned"  # dropped once its date has passed


class AppSettings(BaseModel):
    """Planner settings stored alongside the records."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cny_rate: float = Field(default=1.0, alias="cnyRate", description="CNY to RUB rate")

    @field_validator("cny_rate", mode="before")
    @classmethod
    def safe_rate(cls, v: Any) -> float:
        rate = parse_amount(v)
        if rate is None or rate <= 0 or not math.isfinite(rate):
            return 1.0
        return round(rate, 4)


class Account(BaseModel):
    """A cash account. Balance is already in the base currency."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    balance: float = 0.0
    created_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return v if v is None else str(v)

    @field_validator("balance", mode="before")
    @classmethod
    def coerce_balance(cls, v: Any) -> float:
        return normalize_amount(v)


class IncomingPayment(BaseModel):
    """Money expected from a counterparty on a given date."""

    model_config = ConfigDict(frozen=True)

    id: str
    counterparty: str = ""
    amount: float = 0.0
    expected_date: date
    kind: IncomingKind = IncomingKind.FIXED
    notes: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return v if v is None else str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        return normalize_amount(v)

    @field_validator("expected_date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        return to_date(v) if isinstance(v, (str, datetime)) else v

    @field_validator("kind", mode="before")
    @classmethod
    def default_kind(cls, v: Any) -> Any:
        return IncomingKind.FIXED if v in (None, "") else v


class OrderDraft(BaseModel):
    """A supplier order that has not been saved yet.

    The deposit leaves the accounts on ``deposit_date`` unless it is already
    paid; the rest of ``total_amount`` leaves on ``due_date``.
    """

    model_config = ConfigDict(frozen=True)

    supplier_id: str | None = None
    supplier_name: str | None = None
    title: str = ""
    total_amount: float = 0.0
    deposit_amount: float = 0.0
    deposit_paid: bool = False
    deposit_date: date | None = None
    due_date: date
    currency: str = Currency.RUB.value
    description: str | None = None

    @field_validator("total_amount", "deposit_amount", mode="before")
    @classmethod
    def coerce_amounts(cls, v: Any) -> float:
        return normalize_amount(v)

    @field_validator("deposit_date", mode="before")
    @classmethod
    def optional_date(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        return to_date(v) if isinstance(v, (str, datetime)) else v

    @field_validator("due_date", mode="before")
    @classmethod
    def coerce_due_date(cls, v: Any) -> Any:
        return to_date(v) if isinstance(v, (str, datetime)) else v

    @field_validator("currency", mode="before")
    @classmethod
    def currency_code(cls, v: Any) -> str:
        if isinstance(v, Currency):
            return v.value
        if not v:
            return Currency.RUB.value
        return str(v).strip().upper()

    @field_validator("deposit_paid", mode="before")
    @classmethod
    def paid_flag(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("supplier_id", mode="before")
    @classmethod
    def stringify_supplier(cls, v: Any) -> Any:
        return v if v is None else str(v)


class SupplierOrder(OrderDraft):
    """A saved supplier order."""

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return v if v is None else str(v)


class PlannedExpense(BaseModel):
    """A monthly expense, paid on one day of the month or split over two."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    amount: float = 0.0
    amount_primary: float | None = None
    amount_secondary: float | None = None
    day_primary: int | None = None
    day_secondary: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return v if v is None else str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        return normalize_amount(v)

    @field_validator("amount_primary", "amount_secondary", mode="before")
    @classmethod
    def coerce_parts(cls, v: Any) -> float | None:
        return parse_amount(v)

    @field_validator("day_primary", "day_secondary", mode="before")
    @classmethod
    def coerce_days(cls, v: Any) -> int | None:
        return parse_day(v)


class PlanSnapshot(BaseModel):
    """Everything the planner needs for one run.

    This is what connectors produce and the planner consumes. ``settings``
    stays ``None`` unless the records carry a CNY rate.
    """

    accounts: list[Account] = Field(default_factory=list)
    inflows: list[IncomingPayment] = Field(default_factory=list)
    orders: list[SupplierOrder] = Field(default_factory=list)
    expenses: list[PlannedExpense] = Field(default_factory=list)
    settings: AppSettings | None = None

    @field_validator("accounts", "inflows", "orders", "expenses", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("settings", mode="before")
    @classmethod
    def settings_with_rate(cls, v: Any) -> AppSettings | None:
        from cashgap.analyzers.currency import stored_settings

        return stored_settings(v)

    @property
    def opening_balance(self) -> float:
        return sum(a.balance for a in self.accounts)
