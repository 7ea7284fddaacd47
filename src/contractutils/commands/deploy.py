"""
Deploy - Publish a compiled contract.

Flow:
1. Load the Truffle / Foundry artifact
2. Submit the creation transaction (node-signed or --sign-local)
3. Poll for the creation receipt and print the contract address
"""

from __future__ import annotations

from typing import Optional

import click
import httpx

from ..node.abi import load_compiled_contract
from ..node.rpc import RpcError
from ..node.tx import TransactionError, deploy_contract
from ._options import echo_outcome, fail, get_defaults, parse_args_json, resolve_sender


@click.command()
@click.argument("artifact", type=click.Path(exists=True, dir_okay=False))
@click.option("--from", "from_address", default=None, help="Owner wallet address")
@click.option("--sign-local", is_flag=True, help="Sign with PRIVATE_KEY instead of the node")
@click.option("--args", "args_json", default="[]", help="Constructor args as JSON array")
@click.option("--gas", type=int, default=None, help="Gas limit")
@click.option("--gas-price", type=int, default=None, help="Gas price in wei")
@click.option("--value", type=int, default=None, help="Initial balance in wei")
@click.option("--attempts", type=click.IntRange(min=1), default=None, help="Receipt polling attempts")
@click.option("--poll-interval", type=click.FloatRange(min=0), default=0.0, help="Seconds between polls")
@click.pass_context
def deploy(
    ctx: click.Context,
    artifact: str,
    from_address: Optional[str],
    sign_local: bool,
    args_json: str,
    gas: Optional[int],
    gas_price: Optional[int],
    value: Optional[int],
    attempts: Optional[int],
    poll_interval: float,
) -> None:
    """Deploy a compiled contract ARTIFACT."""
    defaults = get_defaults(ctx)
    args = parse_args_json(args_json)
    wallet, private_key = resolve_sender(from_address, sign_local)

    try:
        compiled = load_compiled_contract(artifact)
    except ValueError as exc:
        fail(str(exc))

    click.echo(f"  Owner: {wallet}")
    click.echo(f"  Node: {defaults.node_url}")
    click.echo("")

    try:
        deployed = deploy_contract(
            compiled,
            wallet,
            defaults,
            constructor_args=args,
            gas=gas,
            gas_price=gas_price,
            value=value,
            max_attempts=attempts,
            private_key=private_key,
            poll_interval=poll_interval,
        )
    except TransactionError as exc:
        fail(str(exc), exc.exit_code)
    except (RpcError, httpx.HTTPError, ValueError) as exc:
        fail(f"Deployment failed: {exc}")

    echo_outcome(deployed.outcome)
