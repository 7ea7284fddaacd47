"""
contractutils CLI

Command-line interface for deploying and driving Ethereum contracts.

Commands:
  deploy    - Deploy a compiled contract
  call      - Read a contract function (eth_call)
  transact  - Send a contract function transaction
  receipt   - Wait for a transaction outcome
  balance   - Show an address balance
  send      - Transfer ether
  wallet    - new / whoami / ganache / unlock
  mine      - start / stop mining on a dev node
  config    - Show effective configuration
"""

from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click

from .config import ConfigError, load_defaults
from .log import configure_logging


# ============ Constants ============

VERSION = "1.0.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="contractutils")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="contract_defaults.json to load (default: search cwd, scriptcs_bin/, package dir)",
)
@click.option(
    "--node-url",
    envvar="CONTRACTUTILS_NODE_URL",
    default=None,
    help="Ethereum node JSON-RPC URL (overrides config)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Append warnings and errors to this file",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    node_url: Optional[str],
    verbose: bool,
    log_file: Optional[Path],
) -> None:
    """contractutils - Ethereum contract helpers."""
    configure_logging(verbose=verbose, log_file=log_file)

    try:
        defaults = load_defaults(config_path)
    except (ConfigError, FileNotFoundError) as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(ConfigError.exit_code)

    if node_url:
        defaults = replace(defaults, node_url=node_url)
    ctx.obj = defaults


# ============ Top-level Commands ============

from .commands.account import balance, send, wallet
from .commands.deploy import deploy
from .commands.invoke import call, transact
from .commands.mining import mine
from .commands.receipt import receipt

cli.add_command(deploy)
cli.add_command(call)
cli.add_command(transact)
cli.add_command(receipt)
cli.add_command(balance)
cli.add_command(send)
cli.add_command(wallet)
cli.add_command(mine)


# ============ Config ============


@cli.group()
def config() -> None:
    """Inspect configuration."""


@config.command("show")
@click.pass_obj
def config_show(defaults) -> None:
    """Print the effective contract defaults as JSON."""
    click.echo(json.dumps(defaults.to_dict(), indent=2))


# ============ Entry Points ============


def main() -> None:
    """contractutils CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
