"""History commands: stored pairs and orders."""

import click
from rich.console import Console
from rich.table import Table

from coin_trade_monitor.exceptions import PersistenceError
from coin_trade_monitor.persistence import CoinExchangeStore, OrderStore

console = Console()


def _fmt(value) -> str:
    return "-" if value is None else f"{value:,.8g}"


@click.command()
@click.pass_context
def pairs(ctx):
    """Show tracked pairs and their last recorded state."""
    config = ctx.obj["config"]
    try:
        stored = CoinExchangeStore(config.storage.model_dump()).get_all()
    except PersistenceError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise click.Abort()

    if not stored:
        console.print("[yellow]No tracked pairs stored yet.[/yellow]")
        return

    table = Table(title=f"Tracked Pairs ({len(stored)})")
    table.add_column("ID", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_column("Start", justify="right")
    table.add_column("Order Price", justify="right")
    table.add_column("Last Price", justify="right")
    table.add_column("Change %", justify="right")
    table.add_column("Updated")

    for pair in stored:
        table.add_row(
            pair.id,
            _fmt(pair.amount),
            _fmt(pair.price_start),
            _fmt(pair.price_order),
            _fmt(pair.price_exchange),
            "-" if pair.price_change is None else f"{pair.price_change:+.2f}",
            pair.updated_at or "-",
        )

    console.print(table)


@click.command()
@click.option("--pair", "pair_id", default=None, help="Only orders of this pair id")
@click.option("--limit", "-l", default=20, show_default=True, help="Most recent N orders")
@click.pass_context
def orders(ctx, pair_id, limit):
    """Show the order history."""
    config = ctx.obj["config"]
    try:
        history = OrderStore(config.storage.model_dump()).get_orders(pair_id, limit=limit)
    except PersistenceError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise click.Abort()

    if not history:
        console.print("[yellow]No orders recorded.[/yellow]")
        return

    table = Table(title="Orders")
    table.add_column("Time", style="cyan")
    table.add_column("Pair")
    table.add_column("Type")
    table.add_column("Amount", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Exchange Order ID")

    for order in history:
        color = "green" if order.order_type.value == "BUY" else "red"
        table.add_row(
            order.created_at,
            order.coin_exchange_id,
            f"[{color}]{order.order_type.value}[/{color}]",
            _fmt(order.amount),
            _fmt(order.price),
            order.exchange_order_id,
        )

    console.print(table)
