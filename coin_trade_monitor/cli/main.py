"""Command-line interface for Coin Trade Monitor."""

import logging
from pathlib import Path

import click
from rich.console import Console

from coin_trade_monitor.cli.commands.history import orders as orders_command
from coin_trade_monitor.cli.commands.history import pairs as pairs_command
from coin_trade_monitor.cli.commands.market import exchanges as exchanges_command
from coin_trade_monitor.cli.commands.market import prices as prices_command
from coin_trade_monitor.cli.commands.monitor import run as run_command
from coin_trade_monitor.config import MonitorConfig, load_config_from_file
from coin_trade_monitor.exceptions import ConfigurationError
from coin_trade_monitor.monitoring.logging_config import setup_logging
from coin_trade_monitor.observability import init_metrics, init_tracer

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"


def load_config(config_path: str = None) -> MonitorConfig:
    """
    Load and validate the monitor configuration.

    An explicit path must exist. Without one, ``config/config.yaml`` is used
    when present and built-in defaults otherwise.
    """
    if config_path is None:
        if not Path(DEFAULT_CONFIG_PATH).exists():
            return MonitorConfig()
        config_path = DEFAULT_CONFIG_PATH

    try:
        return load_config_from_file(config_path)
    except ConfigurationError as e:
        raise click.ClickException(f"Configuration error: {e}")


@click.group()
@click.option(
    "--config",
    "-c",
    default=None,
    help=f"Path to a YAML config file (default: {DEFAULT_CONFIG_PATH} if present)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, config, verbose):
    """Coin Trade Monitor - threshold-triggered trading on a fixed schedule."""
    ctx.ensure_object(dict)

    final_config = load_config(config)
    ctx.obj["config"] = final_config
    ctx.obj["verbose"] = verbose

    # Verbose flag takes priority over config setting
    setup_logging(
        level=final_config.logging.level,
        structured=final_config.logging.structured,
        log_file=final_config.logging.file,
        verbose=verbose,
    )

    telemetry = final_config.model_dump(include={"metrics", "tracing"})
    try:
        init_metrics(telemetry)
        init_tracer(telemetry)
    except Exception as e:
        logger.warning(f"Failed to initialize telemetry: {e}")


cli.add_command(run_command)
cli.add_command(prices_command)
cli.add_command(pairs_command)
cli.add_command(orders_command)
cli.add_command(exchanges_command)


if __name__ == "__main__":
    cli()
