"""
Account - Balances, transfers and wallet management.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
import httpx

from ..models import Wallet
from ..node.rpc import RpcError
from ..node.tx import send_ether
from ..wallet import (
    CONTRACTUTILS_ENV,
    generate_wallet,
    get_wallet,
    load_private_key,
    save_private_key,
    unlock_wallet,
    wallet_balance,
    wallet_from_ganache_log,
)
from ._options import fail, get_defaults, resolve_sender

WEI_PER_ETHER = 10**18


def _parse_wallet(address: str) -> Wallet:
    try:
        return Wallet.from_address(address)
    except ValueError as exc:
        fail(str(exc))


@click.command()
@click.argument("address")
@click.pass_context
def balance(ctx: click.Context, address: str) -> None:
    """Show the balance of a wallet or contract ADDRESS."""
    defaults = get_defaults(ctx)
    wallet = _parse_wallet(address)

    try:
        wei = wallet_balance(wallet, defaults)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Balance query failed: {exc}")

    click.echo(f"Address: {wallet}")
    click.echo(f"Balance: {wei} wei ({wei / WEI_PER_ETHER:.6f} ETH)")


@click.command()
@click.option("--from", "from_address", default=None, help="Sender wallet address")
@click.option("--sign-local", is_flag=True, help="Sign with PRIVATE_KEY instead of the node")
@click.option("--to", "to_address", required=True, help="Recipient address")
@click.option("--amount", type=click.IntRange(min=0), required=True, help="Amount in wei")
@click.pass_context
def send(
    ctx: click.Context,
    from_address: Optional[str],
    sign_local: bool,
    to_address: str,
    amount: int,
) -> None:
    """Send ether from one wallet to another address."""
    defaults = get_defaults(ctx)
    wallet, private_key = resolve_sender(from_address, sign_local)
    recipient = _parse_wallet(to_address)

    try:
        tx_hash = send_ether(
            wallet, recipient, amount, defaults=defaults, private_key=private_key
        )
    except (RpcError, httpx.HTTPError, ValueError) as exc:
        fail(f"Transfer failed: {exc}")

    click.echo(f"  TX: {tx_hash}")


@click.group()
def wallet() -> None:
    """Manage wallets."""


@wallet.command("new")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Where to store the key (default: {CONTRACTUTILS_ENV})",
)
@click.option("--force", is_flag=True, help="Overwrite an existing key")
def wallet_new(env_file: Optional[Path], force: bool) -> None:
    """Generate a local wallet key."""
    target = env_file or CONTRACTUTILS_ENV
    if not force:
        try:
            existing = get_wallet(load_private_key(target))
            click.echo(f"Wallet already exists: {existing}")
            click.echo("Use --force to replace it.")
            return
        except ValueError:
            pass

    private_key, new_wallet = generate_wallet()
    path = save_private_key(private_key, target)
    click.secho("Wallet created.", fg="green")
    click.echo(f"  Address: {new_wallet}")
    click.echo(f"  Key file: {path}")


@wallet.command("whoami")
@click.option("--env-file", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_context
def wallet_whoami(ctx: click.Context, env_file: Optional[Path]) -> None:
    """Show the local wallet address."""
    try:
        address = get_wallet(load_private_key(env_file))
    except ValueError:
        click.echo("No wallet found.")
        click.echo("Run 'contractutils wallet new' to create one.")
        ctx.exit(1)
    click.echo(f"Address: {address}")


@wallet.command("ganache")
@click.argument("log_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--index", type=click.IntRange(min=0), default=0, help="Account index")
@click.option("--timeout", type=click.FloatRange(min=0), default=120, help="Seconds to wait")
def wallet_ganache(log_path: Path, index: int, timeout: float) -> None:
    """Read account INDEX from a ganache-cli log."""
    try:
        found = wallet_from_ganache_log(log_path, index, timeout_seconds=timeout)
    except TimeoutError as exc:
        fail(str(exc))
    click.echo(found.address)


@wallet.command("unlock")
@click.argument("address")
@click.option("--password", prompt=True, hide_input=True)
@click.option("--duration", type=click.IntRange(min=0), default=120, help="Seconds")
@click.pass_context
def wallet_unlock(ctx: click.Context, address: str, password: str, duration: int) -> None:
    """Unlock a node-managed account."""
    defaults = get_defaults(ctx)
    target = _parse_wallet(address)

    try:
        unlocked = unlock_wallet(target, password, defaults, duration)
    except (RpcError, httpx.HTTPError) as exc:
        fail(f"Unlock failed: {exc}")

    if not unlocked:
        fail(f"Node refused to unlock {target}")
    click.secho(f"Unlocked {target} for {duration}s", fg="green")
