"""
JSON-RPC client for an Ethereum node.

Lightweight alternative to web3.py: uses httpx for HTTP.  Every helper takes
the node URL explicitly; the caller owns configuration.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

RPC_TIMEOUT = 30


class RpcError(RuntimeError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, method: str, error: Any) -> None:
        if isinstance(error, dict):
            self.code = error.get("code")
            self.message = error.get("message", "")
            self.data = error.get("data")
        else:
            self.code = None
            self.message = str(error)
            self.data = None
        self.method = method
        super().__init__(f"RPC error in {method}: {self.message} (code {self.code})")


def rpc_call(
    method: str,
    params: list,
    rpc_url: str,
    client: Optional[httpx.Client] = None,
) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL
        client: Existing httpx client (a short-lived one is opened otherwise)

    Returns:
        Result field from the RPC response

    Raises:
        RpcError: If the node returns an error object
        httpx.HTTPError: On transport failure or non-2xx status
    """
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }
    logger.debug("RPC %s -> %s", method, rpc_url)

    if client is None:
        with httpx.Client(timeout=RPC_TIMEOUT) as owned:
            response = owned.post(rpc_url, json=payload)
    else:
        response = client.post(rpc_url, json=payload)

    response.raise_for_status()
    data = response.json()

    if "error" in data:
        raise RpcError(method, data["error"])

    return data.get("result")


def _to_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    return int(value, 16)


def get_balance(address: str, rpc_url: str, block: str = "latest") -> int:
    """
    Get ETH balance for an address.

    Returns:
        Balance in wei
    """
    return _to_int(rpc_call("eth_getBalance", [address, block], rpc_url))


def get_nonce(address: str, rpc_url: str) -> int:
    """Get the pending transaction count for an address."""
    return _to_int(rpc_call("eth_getTransactionCount", [address, "pending"], rpc_url))


def get_gas_price(rpc_url: str) -> int:
    """Get current gas price in wei."""
    return _to_int(rpc_call("eth_gasPrice", [], rpc_url))


def get_chain_id(rpc_url: str) -> int:
    return _to_int(rpc_call("eth_chainId", [], rpc_url))


def call(tx: dict, rpc_url: str, block: str = "latest") -> Optional[str]:
    """Execute a read-only call (eth_call) and return the raw hex result."""
    return rpc_call("eth_call", [tx, block], rpc_url)


def send_raw_transaction(raw_tx: str, rpc_url: str) -> str:
    """
    Send a signed raw transaction.

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url)


def send_transaction(tx: dict, rpc_url: str) -> str:
    """
    Send a transaction signed by the node (eth_sendTransaction).

    The ``from`` account must be managed and unlocked by the node.

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return rpc_call("eth_sendTransaction", [tx], rpc_url)


def get_transaction_receipt(tx_hash: str, rpc_url: str) -> Optional[dict]:
    """Fetch a receipt; ``None`` while the transaction is not mined."""
    return rpc_call("eth_getTransactionReceipt", [tx_hash], rpc_url)


def unlock_account(
    address: str, password: str, rpc_url: str, duration_seconds: int = 120
) -> bool:
    """Unlock a node-managed account for ``duration_seconds``."""
    return bool(
        rpc_call("personal_unlockAccount", [address, password, duration_seconds], rpc_url)
    )


def start_mining(rpc_url: str, threads: int = 6) -> Any:
    # geth returns null on success, some dev chains return true
    return rpc_call("miner_start", [threads], rpc_url)


def stop_mining(rpc_url: str) -> Any:
    return rpc_call("miner_stop", [], rpc_url)
