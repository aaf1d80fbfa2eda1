"""Command that runs the monitor loop."""

import asyncio
from collections import Counter

import click
from rich.console import Console
from rich.table import Table

from coin_trade_monitor.core import CoinTradeMonitor
from coin_trade_monitor.exceptions import TradeMonitorError
from coin_trade_monitor.observability import shutdown_metrics

console = Console()


@click.command()
@click.option(
    "--cycles",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after N cycles (default: run until interrupted)",
)
@click.pass_context
def run(ctx, cycles):
    """Start monitoring prices and placing orders."""
    config = ctx.obj["config"]

    if not config.default_pairs:
        console.print(
            "[yellow]No default pairs configured; only pairs already in the "
            "store will be monitored.[/yellow]"
        )

    app = CoinTradeMonitor(config, max_cycles=cycles)
    console.print(
        f"[bold green]Monitoring[/bold green] every "
        f"{config.refresh_interval_ms / 1000:g}s "
        f"(buy <= -{config.policy.buy_threshold}%, sell >= {config.policy.sell_threshold}%)"
    )

    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Monitor stopped by user[/yellow]")
    except TradeMonitorError as e:
        console.print(f"[bold red]Startup failed:[/bold red] {e}")
        raise click.Abort()
    finally:
        shutdown_metrics()

    summary = app.monitor.last_summary
    if summary is not None:
        console.print(
            f"Last cycle #{summary.cycle}: {summary.checked} pair(s) checked, "
            f"{len(summary.orders)} order(s), {len(summary.failures)} failure(s)"
        )

    counts = Counter(name for name, _, _ in app.event_buffer.drain())
    if counts:
        table = Table(title="Events")
        table.add_column("Event", style="cyan")
        table.add_column("Count", justify="right")
        for name, count in sorted(counts.items()):
            table.add_row(name, str(count))
        console.print(table)
        if app.event_buffer.dropped:
            console.print(f"[dim]{app.event_buffer.dropped} older event(s) dropped[/dim]")
