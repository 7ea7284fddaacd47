"""Mining - Start or stop the miner on a development node."""

from __future__ import annotations

import click
import httpx

from ..node.rpc import RpcError, start_mining, stop_mining
from ._options import fail, get_defaults


@click.group()
def mine() -> None:
    """Control mining on the node."""


@mine.command("start")
@click.option("--threads", type=click.IntRange(min=1), default=6, help="Miner threads")
@click.pass_context
def mine_start(ctx: click.Context, threads: int) -> None:
    defaults = get_defaults(ctx)
    try:
        start_mining(defaults.node_url, threads)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"miner_start failed: {exc}")
    click.secho(f"Mining started ({threads} threads)", fg="green")


@mine.command("stop")
@click.pass_context
def mine_stop(ctx: click.Context) -> None:
    defaults = get_defaults(ctx)
    try:
        stop_mining(defaults.node_url)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"miner_stop failed: {exc}")
    click.secho("Mining stopped", fg="green")
