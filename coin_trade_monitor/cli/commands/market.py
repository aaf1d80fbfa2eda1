"""Market commands: live quotes and available exchanges."""

import asyncio

import click
from rich.console import Console
from rich.table import Table

from coin_trade_monitor.exceptions import ComputationError, PersistenceError, TradeMonitorError
from coin_trade_monitor.exchanges import ExchangeFactory, ExchangeRegistry
from coin_trade_monitor.persistence import CoinExchangeStore
from coin_trade_monitor.pricing import compute_price_change

console = Console()


async def _quote_all(registry, pairs):
    async def quote(pair):
        try:
            exchange = registry.get_exchange(pair.exchange)
            return pair, await exchange.aget_coin_price(pair.coin, pair.base_coin), None
        except TradeMonitorError as e:
            return pair, None, e

    return await asyncio.gather(*(quote(p) for p in pairs))


@click.command()
@click.pass_context
def prices(ctx):
    """Fetch one live price for every tracked (or default) pair."""
    config = ctx.obj["config"]
    try:
        pairs = CoinExchangeStore(config.storage.model_dump()).get_all()
    except PersistenceError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise click.Abort()
    pairs = pairs or config.default_coin_exchanges()

    if not pairs:
        console.print("[yellow]No pairs to quote. Add default_pairs to the config.[/yellow]")
        return

    registry = ExchangeRegistry(config.exchange_settings())
    try:
        quotes = asyncio.run(_quote_all(registry, pairs))
    finally:
        registry.close_all()

    table = Table(title="Live Prices")
    table.add_column("Pair", style="cyan")
    table.add_column("Exchange", style="cyan")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Order Price", justify="right")
    table.add_column("Change %", justify="right")

    for pair, price, error in quotes:
        if error is not None:
            table.add_row(pair.symbol, pair.exchange, f"[red]{error}[/red]", "-", "-")
            continue
        change = "-"
        if pair.price_order:
            try:
                pct = compute_price_change(pair.price_order, price)
                color = "green" if pct >= 0 else "red"
                change = f"[{color}]{pct:+.2f}[/{color}]"
            except ComputationError:
                change = "[red]n/a[/red]"
        table.add_row(
            pair.symbol,
            pair.exchange,
            f"{price:,.8g}",
            f"{pair.price_order:,.8g}" if pair.price_order else "-",
            change,
        )

    console.print(table)


@click.command()
def exchanges():
    """List exchange names the monitor can build."""
    table = Table(title="Exchanges")
    table.add_column("Name", style="cyan")
    for name in ExchangeFactory.list_exchanges():
        table.add_row(name)
    table.add_row("<ccxt id> | ccxt:<ccxt id>")
    console.print(table)
