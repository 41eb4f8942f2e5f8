"""
diner-pos admin CLI.

Back-office operations over the point of sale: business day, closing,
returns, backups and catalog maintenance.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from dinerpos.closing import BALANCED, SHORTAGE, ClosingAmounts
from dinerpos.config import BACKUP_DIR, DB_PATH
from dinerpos.logging_setup import configure_logging
from dinerpos.pos import DealLine, PointOfSale, cashier_ids
from dinerpos.rendering import format_money

app = typer.Typer(
    name="diner-pos",
    help="Restaurant point of sale back office",
    add_completion=False,
)
console = Console()


def _pos(ctx: typer.Context) -> PointOfSale:
    return ctx.obj


@app.callback()
def main(
    ctx: typer.Context,
    db: Path = typer.Option(Path(DB_PATH), "--db", help="Path to the store file"),
    backup_dir: Path = typer.Option(Path(BACKUP_DIR), "--backup-dir", help="Directory for backup files"),
) -> None:
    """Open the store shared by every command."""
    configure_logging()
    ctx.obj = PointOfSale(db, backup_dir=backup_dir)


# =============================================================================
# Business Day
# =============================================================================

@app.command()
def day(ctx: typer.Context) -> None:
    """Show the current business day."""
    console.print(f"Business day: [bold]{_pos(ctx).get_business_day()}[/bold]")


@app.command("advance-day")
def advance_day(ctx: typer.Context) -> None:
    """Advance the business day without taking a backup."""
    console.print(f"[green]✓ Business day is now {_pos(ctx).advance_day()}[/green]")


@app.command("end-day")
def end_day(ctx: typer.Context) -> None:
    """Advance the business day and write an automatic backup."""
    new_day, path = _pos(ctx).end_business_day()
    console.print(f"[green]✓ Business day is now {new_day}[/green]")
    if path is None:
        console.print("[red]✗ Automatic backup failed[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ Automatic backup written to {path}[/green]")


@app.command()
def closing(
    ctx: typer.Context,
    cashier: str = typer.Argument(..., help="Cashier id"),
    date: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD, defaults to the business day"),
    cash: float = typer.Option(0.0, "--cash"),
    expenses: float = typer.Option(0.0, "--expenses"),
    other: float = typer.Option(0.0, "--other"),
    returns: float = typer.Option(0.0, "--returns"),
) -> None:
    """Reconcile a cashier's submitted amounts against recorded sales."""
    if cashier not in cashier_ids():
        console.print(f"[red]✗ Unknown cashier {cashier}[/red]")
        raise typer.Exit(1)

    amounts = ClosingAmounts(cash=cash, expenses=expenses, other=other, returns=returns)
    if amounts.has_negative():
        console.print("[red]✗ Amounts cannot be negative.[/red]")
        raise typer.Exit(1)

    result = _pos(ctx).calculate_closing(cashier, amounts, date)
    if result is None:
        console.print(f"[red]✗ Invalid date {date}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Closing {result.cashier_id} {result.business_date.isoformat()}")
    table.add_column("", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_row("System sales", format_money(result.system_total))
    table.add_row("Submitted", format_money(result.submitted_total))
    table.add_row("Difference", format_money(result.difference))
    console.print(table)

    if result.status == BALANCED:
        console.print("[green]Submitted amount matches system sales.[/green]")
    elif result.status == SHORTAGE:
        console.print(f"[red]Shortage: system has {format_money(result.difference)} more than submitted.[/red]")
    else:
        console.print(f"[blue]Overage: submitted {format_money(abs(result.difference))} more than system sales.[/blue]")


# =============================================================================
# Sales
# =============================================================================

@app.command()
def sales(ctx: typer.Context) -> None:
    """List recorded sales, newest first."""
    rows = sorted(_pos(ctx).list_sales(), key=lambda sale: sale.created_at, reverse=True)
    table = Table(title="Sales")
    table.add_column("Bill ID", style="cyan")
    table.add_column("Created")
    table.add_column("Cashier")
    table.add_column("Table")
    table.add_column("Total", justify="right")
    for sale in rows:
        table.add_row(sale.id, sale.created_at, sale.cashier_id, sale.table_number or "N/A", format_money(sale.total_amount))
    console.print(table)
    console.print(f"{len(rows)} transactions, revenue {format_money(sum(s.total_amount for s in rows))}")


@app.command("return-bill")
def return_bill(ctx: typer.Context, bill_id: str = typer.Argument(..., help="Bill ID to return")) -> None:
    """Return a bill by removing its sale record."""
    returned = _pos(ctx).remove_sale(bill_id)
    if returned is None:
        console.print(f'[red]✗ Bill ID "{bill_id}" not found in sales records.[/red]')
        raise typer.Exit(1)
    console.print(f'[green]✓ Bill "{returned.id}" ({format_money(returned.total_amount)}) returned.[/green]')


@app.command("clear-sales")
def clear_sales(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Confirm clearing every sale"),
) -> None:
    """Remove every sale record."""
    if not yes:
        console.print("[yellow]Pass --yes to clear all sales.[/yellow]")
        raise typer.Exit(1)
    _pos(ctx).clear_sales()
    console.print("[green]✓ Sales cleared[/green]")


@app.command("deleted-items")
def deleted_items(ctx: typer.Context) -> None:
    """List lines removed from bills."""
    logs = sorted(_pos(ctx).list_deleted_logs(), key=lambda log: log.timestamp, reverse=True)
    table = Table(title="Deleted Items Log")
    table.add_column("When")
    table.add_column("Item", style="cyan")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Cashier")
    table.add_column("Reason")
    table.add_column("Deal")
    for log in logs:
        table.add_row(
            log.timestamp,
            f"{log.item_code} {log.item_name}",
            str(log.quantity_removed),
            format_money(log.price_per_item),
            log.removed_by_cashier_id,
            log.reason or "",
            log.deal_name or "",
        )
    console.print(table)


@app.command()
def summary(ctx: typer.Context) -> None:
    """Show the admin dashboard figures."""
    data = _pos(ctx).dashboard_summary()
    console.print(f"Business day: [bold]{data.business_day}[/bold]")
    console.print(f"Total sales: {format_money(data.total_sales_amount)} across {data.sales_count} bills")
    console.print(f"Menu items: {data.menu_item_count}")
    console.print(f"Deleted item entries: {data.deleted_log_count}")
    for sale in data.recent_sales:
        console.print(f"  Bill {sale.id[-4:]}  {sale.created_at}  {format_money(sale.total_amount)}")


# =============================================================================
# Catalog
# =============================================================================

@app.command("menu-items")
def menu_items(ctx: typer.Context) -> None:
    """List menu items."""
    table = Table(title="Menu Items")
    table.add_column("ID")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Price", justify="right")
    for item in _pos(ctx).list_menu_items():
        table.add_row(item.id, item.code, item.name, item.category or "", format_money(item.price))
    console.print(table)


@app.command("add-item")
def add_item(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name"),
    code: str = typer.Option(..., "--code"),
    price: float = typer.Option(..., "--price"),
    category: Optional[str] = typer.Option(None, "--category"),
) -> None:
    """Add a menu item."""
    item = _pos(ctx).create_menu_item(name, code, price, category)
    if item is None:
        console.print("[red]✗ Name, code and a non-negative price are required.[/red]")
        raise typer.Exit(1)
    console.print(f'[green]✓ Item "{item.name}" added as {item.id}[/green]')


@app.command("edit-item")
def edit_item(
    ctx: typer.Context,
    item_id: str = typer.Argument(..., help="Menu item id"),
    name: Optional[str] = typer.Option(None, "--name"),
    code: Optional[str] = typer.Option(None, "--code"),
    price: Optional[float] = typer.Option(None, "--price"),
    category: Optional[str] = typer.Option(None, "--category"),
) -> None:
    """Edit a menu item. Options left out keep their current value."""
    pos = _pos(ctx)
    current = pos.get_menu_item(item_id)
    if current is None:
        console.print(f'[red]✗ Menu item "{item_id}" not found.[/red]')
        raise typer.Exit(1)

    item = pos.edit_menu_item(
        item_id,
        name if name is not None else current.name,
        code if code is not None else current.code,
        price if price is not None else current.price,
        category if category is not None else current.category,
    )
    if item is None:
        console.print("[red]✗ Name, code and a non-negative price are required.[/red]")
        raise typer.Exit(1)
    console.print(f'[green]✓ Item "{item.name}" updated[/green]')


@app.command("remove-item")
def remove_item(ctx: typer.Context, item_id: str = typer.Argument(..., help="Menu item id")) -> None:
    """Delete a menu item. Deals that include it keep their reference."""
    removed = _pos(ctx).remove_menu_item(item_id)
    if removed is None:
        console.print(f'[red]✗ Menu item "{item_id}" not found.[/red]')
        raise typer.Exit(1)
    console.print(f'[green]✓ Item "{removed.name}" deleted[/green]')


@app.command()
def deals(ctx: typer.Context) -> None:
    """List deals."""
    table = Table(title="Deals")
    table.add_column("ID")
    table.add_column("Number", style="cyan")
    table.add_column("Name")
    table.add_column("Items", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Active")
    for deal in _pos(ctx).list_deals():
        table.add_row(
            deal.id,
            deal.deal_number,
            deal.name,
            str(len(deal.items)),
            format_money(deal.calculated_total_deal_price),
            "yes" if deal.is_active else "no",
        )
    console.print(table)


def _parse_deal_lines(raw_lines: List[str]) -> Optional[List[DealLine]]:
    """Turn MENU_ID:QTY:PRICE strings into deal lines; None if any is malformed."""
    lines = []
    for raw in raw_lines:
        try:
            menu_item_id, quantity, price = raw.rsplit(":", 2)
            lines.append(DealLine(menu_item_id, int(quantity), float(price)))
        except ValueError:
            console.print(f'[red]✗ Bad deal line "{raw}", expected MENU_ID:QTY:PRICE[/red]')
            return None
    return lines


@app.command("add-deal")
def add_deal(
    ctx: typer.Context,
    number: str = typer.Option(..., "--number", help="Deal number, unique across deals"),
    name: str = typer.Option(..., "--name"),
    line: Optional[List[str]] = typer.Option(None, "--line", help="MENU_ID:QTY:PRICE, repeat for each item"),
    description: Optional[str] = typer.Option(None, "--description"),
    inactive: bool = typer.Option(False, "--inactive", help="Create the deal switched off"),
) -> None:
    """Create a deal from menu items at per-item deal prices."""
    lines = _parse_deal_lines(line or [])
    if lines is None:
        raise typer.Exit(1)

    deal = _pos(ctx).create_deal(number, name, lines, description=description, is_active=not inactive)
    if deal is None:
        console.print("[red]✗ Deal rejected. Check the number is unused and every line is valid.[/red]")
        raise typer.Exit(1)
    total = format_money(deal.calculated_total_deal_price)
    console.print(f'[green]✓ Deal "{deal.name}" added as {deal.id}, total {total}[/green]')


@app.command("edit-deal")
def edit_deal(
    ctx: typer.Context,
    deal_id: str = typer.Argument(..., help="Deal id"),
    number: Optional[str] = typer.Option(None, "--number"),
    name: Optional[str] = typer.Option(None, "--name"),
    line: Optional[List[str]] = typer.Option(None, "--line", help="MENU_ID:QTY:PRICE, replaces all items"),
    description: Optional[str] = typer.Option(None, "--description"),
    active: Optional[bool] = typer.Option(None, "--active/--inactive"),
) -> None:
    """Edit a deal. Options left out keep their current value."""
    pos = _pos(ctx)
    current = pos.get_deal(deal_id)
    if current is None:
        console.print(f'[red]✗ Deal "{deal_id}" not found.[/red]')
        raise typer.Exit(1)

    if line:
        lines = _parse_deal_lines(line)
        if lines is None:
            raise typer.Exit(1)
    else:
        lines = [DealLine(item.menu_item_id, item.quantity, item.deal_price_per_item) for item in current.items]

    deal = pos.edit_deal(
        deal_id,
        number if number is not None else current.deal_number,
        name if name is not None else current.name,
        lines,
        description=description if description is not None else current.description,
        is_active=active if active is not None else current.is_active,
    )
    if deal is None:
        console.print("[red]✗ Deal rejected. Check the number is unused and every line is valid.[/red]")
        raise typer.Exit(1)
    console.print(f'[green]✓ Deal "{deal.name}" updated, total {format_money(deal.calculated_total_deal_price)}[/green]')


@app.command("toggle-deal")
def toggle_deal(ctx: typer.Context, deal_id: str = typer.Argument(..., help="Deal id")) -> None:
    """Switch a deal between active and inactive."""
    pos = _pos(ctx)
    current = pos.get_deal(deal_id)
    deal = pos.set_deal_active(deal_id, not current.is_active) if current is not None else None
    if deal is None:
        console.print(f'[red]✗ Deal "{deal_id}" not found.[/red]')
        raise typer.Exit(1)
    console.print(f'[green]✓ Deal "{deal.name}" is now {"active" if deal.is_active else "inactive"}[/green]')


@app.command("remove-deal")
def remove_deal(ctx: typer.Context, deal_id: str = typer.Argument(..., help="Deal id")) -> None:
    """Delete a deal."""
    removed = _pos(ctx).remove_deal(deal_id)
    if removed is None:
        console.print(f'[red]✗ Deal "{deal_id}" not found.[/red]')
        raise typer.Exit(1)
    console.print(f'[green]✓ Deal "{removed.name}" deleted[/green]')



# =============================================================================
# Utilities
# =============================================================================

@app.command()
def backup(
    ctx: typer.Context,
    directory: Optional[Path] = typer.Option(None, "--dir", help="Where to write the backup file"),
) -> None:
    """Write a full backup file."""
    path = _pos(ctx).write_backup(directory)
    if path is None:
        console.print("[red]✗ Backup failed[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ Backup written to {path}[/green]")


@app.command()
def restore(ctx: typer.Context, file: Path = typer.Argument(..., help="Backup JSON file")) -> None:
    """Replace all data with the contents of a backup file."""
    if not _pos(ctx).restore_from_file(file):
        console.print("[red]✗ Could not restore data. The backup file might be corrupted or invalid.[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Data restored from backup[/green]")


@app.command()
def reset(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Confirm wiping all data"),
) -> None:
    """Reset the system to its initial empty state."""
    if not yes:
        console.print("[yellow]Pass --yes to reset all data. Consider taking a backup first.[/yellow]")
        raise typer.Exit(1)
    _pos(ctx).reset()
    console.print(f"[green]✓ All data reset, business day {_pos(ctx).get_business_day()}[/green]")


@app.command()
def bill(
    ctx: typer.Context,
    cashier: str = typer.Option("ca1", "--cashier", help="Cashier id"),
) -> None:
    """Open the cashier billing screen."""
    from dinerpos.cashier_app import CashierApp

    if cashier not in cashier_ids():
        console.print(f"[red]✗ Unknown cashier {cashier}[/red]")
        raise typer.Exit(1)
    CashierApp(_pos(ctx), cashier).run()


if __name__ == "__main__":
    app()
