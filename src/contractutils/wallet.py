"""
Wallet management.

Two kinds of accounts are supported:
- Local keys, signed client-side with eth-account.  Stored in
  ~/.contractutils/.env as PRIVATE_KEY (hex format).
- Node-managed accounts (ganache-cli, geth dev), unlocked over RPC and
  signed by the node.
"""

from __future__ import annotations

import logging
import os
import secrets
import time
from pathlib import Path
from typing import Optional, Union

from dotenv import dotenv_values, set_key
from eth_account import Account
from eth_account.signers.local import LocalAccount

from .config import ContractDefaults
from .models import Wallet
from .node import rpc

logger = logging.getLogger(__name__)

CONTRACTUTILS_DIR = Path.home() / ".contractutils"
CONTRACTUTILS_ENV = CONTRACTUTILS_DIR / ".env"


def generate_wallet() -> tuple[str, Wallet]:
    """
    Generate a new secp256k1 keypair.

    Returns:
        Tuple of (private_key_hex, wallet)
    """
    private_key = "0x" + secrets.token_hex(32)
    account = Account.from_key(private_key)
    return private_key, Wallet.from_address(account.address)


def save_private_key(private_key: str, env_path: Optional[Path] = None) -> Path:
    """Store PRIVATE_KEY in a dotenv file; other entries and comments are kept."""
    env_path = Path(env_path or CONTRACTUTILS_ENV)
    env_path.parent.mkdir(parents=True, exist_ok=True)
    env_path.touch(exist_ok=True)

    set_key(env_path, "PRIVATE_KEY", private_key, quote_mode="never")

    if os.name != "nt":
        env_path.chmod(0o600)
    return env_path


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Return the 0x-prefixed PRIVATE_KEY.

    The process environment wins over the key file, which is read without
    being exported.

    Raises:
        ValueError: If PRIVATE_KEY is not set anywhere
    """
    env_path = Path(env_path or CONTRACTUTILS_ENV)
    stored = dotenv_values(env_path) if env_path.is_file() else {}

    key = os.environ.get("PRIVATE_KEY") or stored.get("PRIVATE_KEY")
    if not key:
        raise ValueError(
            f"PRIVATE_KEY not found. Run 'contractutils wallet new' or set "
            f"PRIVATE_KEY in {env_path}"
        )
    return key if key.startswith("0x") else "0x" + key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    """Get an eth-account LocalAccount, loading the key from .env if omitted."""
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


def get_wallet(private_key: Optional[str] = None) -> Wallet:
    return Wallet.from_address(get_account(private_key).address)


def _read_shared(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return None


def wallet_from_ganache_log(
    path: Union[str, Path],
    wallet_index: int = 0,
    timeout_seconds: float = 120,
    poll_interval: float = 1.0,
) -> Wallet:
    """
    Read a wallet address from ganache-cli output.

    ganache prints its accounts as ``(0) 0x627306...``.  The log is re-read
    until the requested index shows up, since ganache may still be starting.

    Args:
        path: Log file receiving ganache-cli stdout
        wallet_index: Account index (0-9 by default in ganache)
        timeout_seconds: Give up after this long
        poll_interval: Seconds between reads

    Raises:
        TimeoutError: If the address does not appear in time
    """
    path = Path(path)
    marker = f"({wallet_index})"
    deadline = time.monotonic() + timeout_seconds

    while True:
        content = _read_shared(path)
        if content is not None:
            index = content.find(marker)
            if index != -1:
                tokens = content[index + len(marker):].split(None, 1)
                if tokens:
                    logger.debug("Found wallet %d in %s", wallet_index, path)
                    return Wallet.from_address(tokens[0])

        if time.monotonic() >= deadline:
            break
        time.sleep(poll_interval)

    raise TimeoutError(
        f"Wallet address could not be loaded from {path}, operation timeout exceeded"
    )


def unlock_wallet(
    wallet: Wallet,
    password: str,
    defaults: ContractDefaults,
    duration_seconds: int = 120,
) -> bool:
    """Unlock a node-managed wallet."""
    unlocked = rpc.unlock_account(
        wallet.address, password, defaults.node_url, duration_seconds
    )
    logger.info("Unlock %s: %s", wallet.address, unlocked)
    return unlocked


def wallet_balance(wallet: Wallet, defaults: ContractDefaults) -> int:
    """Balance of ``wallet`` in wei."""
    return rpc.get_balance(wallet.address, defaults.node_url)
