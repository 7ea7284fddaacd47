"""Helpers shared by the command modules."""

from __future__ import annotations

import json
import sys
from typing import NoReturn, Optional

import click

from ..config import ContractDefaults
from ..models import TransactionOutcome, Wallet
from ..wallet import get_wallet, load_private_key


def get_defaults(ctx: click.Context) -> ContractDefaults:
    defaults = ctx.find_object(ContractDefaults)
    if defaults is None:
        raise click.UsageError("Configuration not loaded")
    return defaults


def fail(message: str, exit_code: int = 1) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red")
    sys.exit(exit_code)


def parse_args_json(args_json: str) -> list:
    try:
        args = json.loads(args_json)
        if not isinstance(args, list):
            raise ValueError("Args must be a JSON array")
    except (json.JSONDecodeError, ValueError) as exc:
        fail(f"Invalid args: {exc}")
    return args


def resolve_sender(
    from_address: Optional[str], sign_local: bool
) -> tuple[Wallet, Optional[str]]:
    """Return the sending wallet and, for local signing, its private key."""
    try:
        if sign_local:
            private_key = load_private_key()
            wallet = Wallet.from_address(from_address) if from_address else get_wallet(private_key)
            return wallet, private_key
        if from_address:
            return Wallet.from_address(from_address), None
    except ValueError as exc:
        fail(str(exc))
    fail("Either --from or --sign-local is required")


def echo_outcome(outcome: TransactionOutcome) -> None:
    if outcome.succeeded:
        click.secho("SUCCESS: Transaction confirmed!", fg="green")
    elif outcome.status is None:
        click.secho("MINED: Receipt carries no status", fg="yellow")
    else:
        click.secho("FAILED: Transaction reverted", fg="red")
    click.echo(f"  TX: {outcome.tx_hash}")
    if outcome.block_number is not None:
        click.echo(f"  Block: {outcome.block_number}")
    if outcome.gas_used is not None:
        click.echo(f"  Gas used: {outcome.gas_used}")
    if outcome.contract_address:
        click.echo(f"  Contract: {outcome.contract_address}")
