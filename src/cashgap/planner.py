"""
cashgap — Main entry point.

The CashPlanner ties configuration, a record snapshot and the planning
engine together so callers do not have to thread the horizon, the currency
settings and "today" through every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from cashgap.analyzers.cashplan import (
    build_cash_plan,
    evaluate_order_impact,
    first_gap_day,
    project_balance_on_date,
)
from cashgap.config import CashGapConfig
from cashgap.connectors import connector_for
from cashgap.models.plan import CashPlanResult, DailyStat, OrderImpact
from cashgap.models.records import AppSettings, OrderDraft, PlanSnapshot

logger = logging.getLogger("cashgap")


@dataclass
class CashPlanner:
    """Top-level planner.

    Usage::

        from cashgap import CashPlanner

        planner = CashPlanner.from_config("cashgap.yaml")
        planner.load("records.yaml")
        plan = planner.plan()
        impact = planner.check_order(draft)

    A CNY rate stored with the snapshot wins over the configured one.
    """

    config: CashGapConfig = field(default_factory=CashGapConfig)
    snapshot: PlanSnapshot = field(default_factory=PlanSnapshot)
    today: date | None = None

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> CashPlanner:
        """Create a planner from a config file or keyword arguments."""
        return cls(config=CashGapConfig.load(config_path, **overrides))

    def load(self, path: str) -> PlanSnapshot:
        """Replace the snapshot with records read from ``path``."""
        self.snapshot = connector_for(path).load()
        return self.snapshot

    @property
    def settings(self) -> AppSettings:
        if self.snapshot.settings is not None:
            return self.snapshot.settings
        return self.config.settings

    def plan(self) -> CashPlanResult:
        """Build the cash plan for the current snapshot."""
        s = self.snapshot
        return build_cash_plan(
            s.accounts,
            s.inflows,
            s.orders,
            s.expenses,
            self.settings,
            horizon_days=self.config.horizon_days,
            today=self.today,
            include_opening_event=self.config.include_opening_event,
        )

    def balance_on(self, target: date | str) -> float | None:
        """Projected balance on ``target``."""
        return project_balance_on_date(self.plan(), target)

    def first_gap(self) -> DailyStat | None:
        """First day the plan goes negative."""
        return first_gap_day(self.plan())

    def check_order(self, candidate: OrderDraft) -> OrderImpact:
        """Would ``candidate`` push the plan below zero?"""
        s = self.snapshot
        impact = evaluate_order_impact(
            s.accounts,
            s.inflows,
            s.orders,
            s.expenses,
            candidate,
            self.settings,
            horizon_days=self.config.horizon_days,
            today=self.today,
        )
        logger.info(
            "Order check for %r: %s (min balance %.2f)",
            candidate.title,
            "ok" if impact.ok else "cash gap",
            impact.min_balance,
        )
        return impact
