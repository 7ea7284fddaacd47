"""
Receipt - Wait for a transaction outcome.

Exit codes: 0 confirmed, 1 reverted, 3 still pending after all attempts.
"""

from __future__ import annotations

from typing import Optional

import click
import httpx

from ..node.receipt import wait_for_outcome
from ..node.rpc import RpcError
from ._options import echo_outcome, fail, get_defaults


@click.command()
@click.argument("tx_hash")
@click.option("--attempts", type=click.IntRange(min=1), default=None, help="Polling attempts")
@click.option("--poll-interval", type=click.FloatRange(min=0), default=0.0, help="Seconds between polls")
@click.option("--backoff", type=click.FloatRange(min=1.0), default=1.0, help="Delay multiplier per attempt")
@click.pass_context
def receipt(
    ctx: click.Context,
    tx_hash: str,
    attempts: Optional[int],
    poll_interval: float,
    backoff: float,
) -> None:
    """Poll the node for the receipt of TX_HASH."""
    defaults = get_defaults(ctx)
    max_attempts = attempts or defaults.max_attempts

    try:
        outcome = wait_for_outcome(
            tx_hash,
            max_attempts,
            rpc_url=defaults.node_url,
            poll_interval=poll_interval,
            backoff=backoff,
        )
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Receipt query failed: {exc}")

    if outcome is None:
        click.secho(f"PENDING: No receipt after {max_attempts} attempts", fg="yellow")
        click.echo(f"  TX: {tx_hash}")
        ctx.exit(3)

    echo_outcome(outcome)
    if outcome.status == 0:
        ctx.exit(1)
