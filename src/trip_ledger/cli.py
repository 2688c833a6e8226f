"""CLI for Trip Ledger using Typer."""

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_settings
from .exceptions import ExpenseValidationError, TripLedgerError, UnbalancedLedgerError
from .models import BalanceSheet
from .money import Money
from .service import ExpenseService
from .snapshot import load_snapshot
from .splitting import split_equally

app = typer.Typer(
    name="trip-ledger",
    help="Balance sheets and settlement plans for shared trip expenses",
)

console = Console()

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, level_name: str = "INFO"):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_money(amount: Money, use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    The spaces ensure decimal points align in tables.
    """
    magnitude = str(abs(amount))
    if amount.is_negative():
        if use_color:
            return f"([red]{magnitude}[/red])"
        return f"({magnitude})"
    if use_color:
        return f" [green]{magnitude}[/green] "
    return f" {magnitude} "


def display_balance_sheet(sheet: BalanceSheet, names: dict[str, str], currency: str):
    """Display a balance sheet as rich tables."""
    console.print("\n[bold]Trip Balance Sheet:[/bold]")
    console.print(f"  Total spent: {format_money(sheet.total_spent)} {currency}")
    console.print(f"  Members: {sheet.member_count}")
    console.print()

    # Balances: positive net owes, so show it as an outflow
    balances = Table(title="Balances", show_header=True, header_style="bold magenta")
    balances.add_column("Member", style="cyan")
    balances.add_column("Paid", justify="right")
    balances.add_column("Share", justify="right")
    balances.add_column("Net", justify="right")

    for balance in sheet.per_member_balance.values():
        balances.add_row(
            balance.display_name,
            str(balance.total_paid),
            str(balance.total_owed),
            format_money(-balance.net),
        )
    console.print(balances)

    if sheet.settlement:
        transfers = Table(
            title="Settlement", show_header=True, header_style="bold magenta"
        )
        transfers.add_column("From", style="cyan")
        transfers.add_column("To", style="cyan")
        transfers.add_column("Amount", justify="right")
        for transfer in sheet.settlement:
            transfers.add_row(
                names.get(transfer.from_member_id, transfer.from_member_id),
                names.get(transfer.to_member_id, transfer.to_member_id),
                str(transfer.amount),
            )
        console.print(transfers)
    else:
        console.print("[green]✓ Everyone is settled up[/green]")

    if sheet.category_breakdown:
        categories = Table(
            title="Spending by Category", show_header=True, header_style="bold magenta"
        )
        categories.add_column("Category", style="yellow")
        categories.add_column("Amount", justify="right")
        categories.add_column("Share", justify="right", style="dim")
        for category, amount in sheet.category_breakdown.items():
            categories.add_row(
                category.capitalize(),
                str(amount),
                f"{sheet.category_percentages[category]}%",
            )
        console.print(categories)


def _fail(message: str, code: int = 1):
    console.print(f"\n[bold red]Error:[/bold red] {escape(message)}")
    sys.exit(code)


@app.command()
def sheet(
    snapshot_path: Path = typer.Argument(..., help="Trip snapshot JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Print the sheet as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Show balances and the settlement plan for a trip snapshot.
    """
    try:
        settings = load_settings()
        # Keep stdout clean for machine-readable output
        setup_logging(verbose, "WARNING" if as_json else settings.log_level)

        snapshot = load_snapshot(snapshot_path)
        service = ExpenseService(settings)
        balance_sheet = service.compute_balance_sheet(
            snapshot.to_ledger(), snapshot.members
        )

        if as_json:
            typer.echo(balance_sheet.model_dump_json(indent=2))
        else:
            display_balance_sheet(
                balance_sheet, snapshot.member_names(), settings.currency_code
            )

    except ExpenseValidationError as e:
        _fail(str(e))
    except UnbalancedLedgerError:
        # Already logged with details; the user can't act on it
        _fail("Could not compute balances for this trip. Please report this issue.", 2)
    except TripLedgerError as e:
        if verbose:
            raise
        _fail(str(e))


@app.command()
def split(
    snapshot_path: Path = typer.Argument(..., help="Trip snapshot JSON file"),
    amount: str = typer.Argument(..., help="Amount to split, e.g. 100.00"),
    members: list[str] | None = typer.Option(
        None, "--member", "-m", help="Member id to include (default: all active)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Preview an equal split of an amount among trip members.
    """
    try:
        settings = load_settings()
        setup_logging(verbose, settings.log_level)

        snapshot = load_snapshot(snapshot_path)
        total = Money.from_decimal(amount)
        participants = members or [member.id for member in snapshot.active_members()]
        splits = split_equally(total, participants, snapshot.members)

        names = snapshot.member_names()
        table = Table(
            title=f"Equal split of {total}", show_header=True, header_style="bold magenta"
        )
        table.add_column("Member", style="cyan")
        table.add_column("Share", justify="right")
        for share in splits:
            table.add_row(names.get(share.member_id, share.member_id), str(share.amount))
        console.print(table)

        allocated = Money.sum(share.amount for share in splits)
        if allocated == total:
            console.print("  [green]✓ Shares add up to the total[/green]")

    except ExpenseValidationError as e:
        _fail(str(e))
    except TripLedgerError as e:
        if verbose:
            raise
        _fail(str(e))


if __name__ == "__main__":
    app()
