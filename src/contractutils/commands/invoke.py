"""
Invoke - Read from or write to a deployed contract.

``call`` runs an eth_call and prints the decoded result.
``transact`` sends a transaction and, by default, waits for its receipt.
"""

from __future__ import annotations

from typing import Optional

import click
import httpx

from ..node.abi import load_compiled_contract
from ..node.receipt import ReceiptWaiter
from ..node.rpc import RpcError, get_transaction_receipt
from ..node.tx import call_read, call_write
from ._options import echo_outcome, fail, get_defaults, parse_args_json, resolve_sender


def _bind(artifact: str, address: str):
    try:
        return load_compiled_contract(artifact).at(address)
    except ValueError as exc:
        fail(str(exc))


@click.command()
@click.argument("address")
@click.argument("function")
@click.option("--artifact", required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.pass_context
def call(ctx: click.Context, address: str, function: str, artifact: str, args_json: str) -> None:
    """Call FUNCTION on the contract at ADDRESS without a transaction."""
    defaults = get_defaults(ctx)
    args = parse_args_json(args_json)
    contract = _bind(artifact, address)

    try:
        result = call_read(contract, function, args, defaults=defaults)
    except (RpcError, httpx.HTTPError, ValueError) as exc:
        fail(f"Call failed: {exc}")

    if isinstance(result, bytes):
        result = "0x" + result.hex()
    click.echo(result)


@click.command()
@click.argument("address")
@click.argument("function")
@click.option("--artifact", required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--from", "from_address", default=None, help="Sender wallet address")
@click.option("--sign-local", is_flag=True, help="Sign with PRIVATE_KEY instead of the node")
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--value", type=int, default=None, help="ETH value in wei")
@click.option("--gas", type=int, default=None, help="Gas limit")
@click.option("--wait/--no-wait", default=True, help="Wait for the receipt")
@click.option("--attempts", type=click.IntRange(min=1), default=None, help="Receipt polling attempts")
@click.option("--poll-interval", type=click.FloatRange(min=0), default=0.0, help="Seconds between polls")
@click.pass_context
def transact(
    ctx: click.Context,
    address: str,
    function: str,
    artifact: str,
    from_address: Optional[str],
    sign_local: bool,
    args_json: str,
    value: Optional[int],
    gas: Optional[int],
    wait: bool,
    attempts: Optional[int],
    poll_interval: float,
) -> None:
    """Send a transaction calling FUNCTION on the contract at ADDRESS."""
    defaults = get_defaults(ctx)
    args = parse_args_json(args_json)
    contract = _bind(artifact, address)
    wallet, private_key = resolve_sender(from_address, sign_local)

    click.echo(f"  Sender: {wallet}")
    click.echo(f"  Target: {contract.address}")
    click.echo(f"  Function: {function}")
    click.echo(f"  Args: {args}")
    click.echo("")

    try:
        tx_hash = call_write(
            contract,
            function,
            wallet,
            args,
            defaults=defaults,
            gas=gas,
            value=value,
            private_key=private_key,
        )
        if not wait:
            click.echo(f"  TX: {tx_hash}")
            return

        waiter = ReceiptWaiter(
            lambda h: get_transaction_receipt(h, defaults.node_url),
            max_attempts=attempts or defaults.max_attempts,
            poll_interval=poll_interval,
        )
        outcome = waiter.wait_for_outcome(tx_hash)
    except (RpcError, httpx.HTTPError, ValueError) as exc:
        fail(f"Transaction failed: {exc}")

    if outcome is None:
        click.secho("PENDING: No receipt yet", fg="yellow")
        click.echo(f"  TX: {tx_hash}")
        ctx.exit(3)

    echo_outcome(outcome)
    if not outcome.succeeded and outcome.status is not None:
        ctx.exit(1)
