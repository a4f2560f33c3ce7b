"""
cashgap — cash plan and cash gap detection for small businesses.

Accounts, expected payments, planned expenses and supplier orders in,
a day-by-day balance and the lowest point ahead out.
"""

__version__ = "0.3.0"
__all__ = [
    "CashPlanner",
    "build_cash_plan",
    "evaluate_order_impact",
    "project_balance_on_date",
]

from cashgap.analyzers.cashplan import (  # noqa: E402
    build_cash_plan,
    evaluate_order_impact,
    project_balance_on_date,
)
from cashgap.planner import CashPlanner  # noqa: E402
