#!/usr/bin/env python3
"""Main entry point for Coin Trade Monitor CLI."""

from coin_trade_monitor.cli.main import cli

if __name__ == "__main__":
    cli(obj={})
