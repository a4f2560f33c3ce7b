"""
cashgap CLI — command-line interface.

Usage:
    cashgap plan records.yaml
    cashgap plan records.yaml --horizon 90 --output plan.md
    cashgap balance records.yaml 2026-12-31
    cashgap check-order records.yaml --title "Batch #12" --total 900000 --due-date 2026-12-20
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from cashgap import __version__
from cashgap.exporters.markdown import format_money

app = typer.Typer(
    name="cashgap",
    help="Cash plan and cash gap detection for small businesses",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]cashgap[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log what the planner skips and builds",
    ),
) -> None:
    """Project the cash balance day by day and find the cash gap."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _parse_today(today: str | None) -> date | None:
    if not today:
        return None
    try:
        return date.fromisoformat(today)
    except ValueError:
        console.print(f"[red]Error: --today must be YYYY-MM-DD, got {today!r}[/red]")
        raise typer.Exit(1)


def _make_planner(snapshot: str, config: str | None, horizon: int | None, today: str | None, **overrides):  # noqa: ANN003, ANN202
    from pydantic import ValidationError

    from cashgap.planner import CashPlanner

    if horizon is not None:
        overrides["horizon_days"] = horizon
    config_path = config if config and Path(config).exists() else None
    planner = CashPlanner.from_config(config_path, **overrides)
    planner.today = _parse_today(today)

    try:
        planner.load(snapshot)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return planner


@app.command()
def plan(
    snapshot: str = typer.Argument(..., help="Records file (.yaml, .json or inflows .csv)"),
    config: str = typer.Option("cashgap.yaml", "--config", "-c", help="Path to config file"),
    horizon: int = typer.Option(None, "--horizon", min=1, help="Days to project ahead"),
    today: str = typer.Option(None, "--today", help="Planning date (YYYY-MM-DD), default today"),
    output: str = typer.Option(None, "--output", "-o", help="Save plan to .md or .json"),
    opening_event: bool = typer.Option(
        False,
        "--opening-event",
        help="Show the opening balance as a ledger entry",
    ),
) -> None:
    """Build the cash plan and show the ledger."""
    overrides = {"include_opening_event": True} if opening_event else {}
    planner = _make_planner(snapshot, config, horizon, today, **overrides)

    console.print(Panel.fit(
        "[bold blue]cashgap[/bold blue] — Cash Plan",
        subtitle=f"v{__version__}",
    ))

    with console.status("[bold green]Projecting...[/bold green]"):
        result = planner.plan()

    _display_plan(result)
    if output:
        _save_plan(result, output)


@app.command()
def balance(
    snapshot: str = typer.Argument(..., help="Records file"),
    on: str = typer.Argument(..., help="Date (YYYY-MM-DD)"),
    config: str = typer.Option("cashgap.yaml", "--config", "-c", help="Path to config file"),
    today: str = typer.Option(None, "--today", help="Planning date (YYYY-MM-DD), default today"),
) -> None:
    """Projected balance on a date."""
    planner = _make_planner(snapshot, config, None, today)
    try:
        value = planner.balance_on(on)
    except ValueError:
        console.print(f"[red]Error: date must be YYYY-MM-DD, got {on!r}[/red]")
        raise typer.Exit(1)

    if value is None:
        console.print("[dim]No payments planned — balance stays at the opening balance.[/dim]")
        value = planner.snapshot.opening_balance
    color = "red" if value < 0 else "green"
    console.print(f"Balance on [bold]{on}[/bold]: [{color}]{format_money(value)}[/{color}]")


@app.command("check-order")
def check_order(
    snapshot: str = typer.Argument(..., help="Records file"),
    title: str = typer.Option(..., "--title", help="Order title"),
    total: float = typer.Option(..., "--total", help="Total order amount"),
    due_date: str = typer.Option(..., "--due-date", help="Final payment date (YYYY-MM-DD)"),
    deposit: float = typer.Option(0.0, "--deposit", help="Deposit amount"),
    deposit_date: str = typer.Option(None, "--deposit-date", help="Deposit date, default today"),
    deposit_paid: bool = typer.Option(False, "--deposit-paid", help="Deposit already paid"),
    currency: str = typer.Option("RUB", "--currency", help="RUB or CNY"),
    supplier: str = typer.Option(None, "--supplier", help="Supplier name"),
    config: str = typer.Option("cashgap.yaml", "--config", "-c", help="Path to config file"),
    today: str = typer.Option(None, "--today", help="Planning date (YYYY-MM-DD), default today"),
) -> None:
    """Check whether a new supplier order opens a cash gap."""
    from pydantic import ValidationError

    from cashgap.models.records import Currency, OrderDraft

    code = currency.strip().upper()
    if code not in {c.value for c in Currency}:
        console.print(f"[red]Error: --currency must be RUB or CNY, got {currency!r}[/red]")
        raise typer.Exit(1)

    planner = _make_planner(snapshot, config, None, today)
    try:
        draft = OrderDraft(
            title=title,
            supplier_name=supplier,
            total_amount=total,
            deposit_amount=deposit,
            deposit_paid=deposit_paid,
            deposit_date=deposit_date,
            due_date=due_date,
            currency=code,
        )
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    impact = planner.check_order(draft)
    if impact.ok:
        console.print(
            f"[green]✓[/green] Order fits. Lowest balance: [bold]{format_money(impact.min_balance)}[/bold]"
        )
        return

    console.print(
        f"[red]✗ Cash gap of {format_money(impact.cash_gap)}[/red] "
        f"(lowest balance {format_money(impact.min_balance)})"
    )
    raise typer.Exit(1)


def _display_plan(result) -> None:  # noqa: ANN001
    """Display plan summary and ledger in the terminal."""
    from cashgap.analyzers.cashplan import first_gap_day

    console.print()

    table = Table(title="Cash Plan Summary", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Opening Balance", format_money(result.opening_balance))
    table.add_row("Lowest Balance", format_money(result.min_balance))
    table.add_row("Cash Gap", format_money(result.cash_gap))
    table.add_row("Days With Payments", str(len(result.daily)))
    gap_day = first_gap_day(result)
    if gap_day:
        table.add_row("First Negative Day", gap_day.date)

    console.print(table)
    console.print()

    if not result.daily:
        console.print("[dim]No payments in the planning window.[/dim]")
        return

    ledger = Table(title="Ledger")
    ledger.add_column("Date")
    ledger.add_column("Movement")
    ledger.add_column("Amount", justify="right")
    ledger.add_column("Balance", justify="right")

    for day in result.daily:
        for i, event in enumerate(day.events):
            amount_color = "green" if event.amount >= 0 else "red"
            is_last = i == len(day.events) - 1
            balance_cell = ""
            if is_last:
                balance_color = "red" if day.balance < 0 else "white"
                balance_cell = f"[{balance_color}]{format_money(day.balance)}[/{balance_color}]"
            ledger.add_row(
                day.date if i == 0 else "",
                event.description,
                f"[{amount_color}]{format_money(event.amount)}[/{amount_color}]",
                balance_cell,
            )

    console.print(ledger)
    if result.cash_gap > 0:
        console.print(f"\n[bold red]Warning:[/bold red] cash gap of {format_money(result.cash_gap)}")


def _save_plan(result, output: str) -> None:  # noqa: ANN001
    """Save plan to file."""
    path = Path(output)
    if path.suffix == ".json":
        content = result.to_json()
    else:
        content = result.to_markdown()

    path.write_text(content, encoding="utf-8")
    console.print(f"[green]✓[/green] Plan saved to [bold]{path}[/bold]")


if __name__ == "__main__":
    app()
