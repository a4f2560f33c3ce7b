"""
Example: Build a cash plan and check a new order.

Run:
    python examples/basic/run_plan.py

Or via CLI:
    cashgap plan examples/basic/snapshot.yaml
    cashgap check-order examples/basic/snapshot.yaml --title "Худи" \
            --total 150000 --deposit 45000 --due-date 2026-12-15 --currency CNY
"""

from pathlib import Path

from cashgap import CashPlanner
from cashgap.models.records import OrderDraft

# Get the directory where this script lives
SCRIPT_DIR = Path(__file__).parent.resolve()
SNAPSHOT_PATH = SCRIPT_DIR / "snapshot.yaml"


def main() -> None:
    planner = CashPlanner.from_config(horizon_days=90)
    planner.load(str(SNAPSHOT_PATH))

    plan = planner.plan()
    print(plan.to_markdown())

    draft = OrderDraft(
        title="Худи",
        supplier_name="Guangzhou Textile Co.",
        total_amount=150_000,
        deposit_amount=45_000,
        due_date="2026-12-15",
        currency="CNY",
    )
    impact = planner.check_order(draft)
    if impact.ok:
        print(f"New order fits, lowest balance {impact.min_balance:,.2f}")
    else:
        print(f"New order opens a cash gap of {impact.cash_gap:,.2f}")


if __name__ == "__main__":
    main()
