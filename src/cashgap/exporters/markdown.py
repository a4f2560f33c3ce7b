"""
Markdown plan exporter.

Renders a CashPlanResult as a Markdown report: a summary table and a
day-by-day ledger, suitable for a wiki page or a chat message.
"""

from __future__ import annotations

from datetime import date

from cashgap.analyzers.cashplan import first_gap_day
from cashgap.models.plan import CashEventType, CashPlanResult


def format_money(amount: float, symbol: str = "₽") -> str:
    """``1234567.8`` → ``1 234 567.80 ₽``."""
    return f"{amount:,.2f}".replace(",", " ") + f" {symbol}"


def _format_day(key: str) -> str:
    return date.fromisoformat(key).strftime("%d.%m.%Y")


def render_markdown(plan: CashPlanResult, title: str = "Cash plan") -> str:
    """Render a CashPlanResult as Markdown."""
    lines: list[str] = []

    lines.append(f"# {title}")
    lines.append("")

    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Opening balance** | {format_money(plan.opening_balance)} |")
    lines.append(f"| **Lowest balance** | {format_money(plan.min_balance)} |")
    lines.append(f"| **Cash gap** | {format_money(plan.cash_gap)} |")
    lines.append(f"| **Days with payments** | {len(plan.daily)} |")
    lines.append("")

    if plan.has_gap:
        gap_day = first_gap_day(plan)
        where = f" starting {_format_day(gap_day.date)}" if gap_day else ""
        lines.append(
            f"> ⚠️ The plan goes below zero by {format_money(plan.cash_gap)}{where}. "
            "Bring inflows forward or move payments."
        )
        lines.append("")

    if not plan.daily:
        lines.append("*No payments in the planning window.*")
        return "\n".join(lines)

    lines.append("## Ledger")
    lines.append("")
    lines.append("| Date | Movement | Amount | Balance |")
    lines.append("|------|----------|-------:|--------:|")

    marks = {
        CashEventType.OPENING: "●",
        CashEventType.INFLOW: "▲",
        CashEventType.OUTFLOW: "▼",
    }
    for day in plan.daily:
        for i, event in enumerate(day.events):
            is_last = i == len(day.events) - 1
            lines.append(
                f"| {_format_day(day.date) if i == 0 else ''} "
                f"| {marks[event.type]} {event.description} "
                f"| {format_money(event.amount)} "
                f"| {format_money(day.balance) if is_last else ''} |"
            )

    lines.append("")
    return "\n".join(lines)
