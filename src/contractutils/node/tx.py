"""
Transaction Builder - deploy contracts and call their functions.

Transactions are signed either client-side with eth-account (when a
private key is given) or by the node for an unlocked, node-managed account.
Gas, gas price and value fall back to the ContractDefaults passed in.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from eth_account import Account
from eth_utils import to_checksum_address

from ..config import ContractDefaults
from ..models import (
    CompiledContract,
    Contract,
    DeployedContract,
    TransactionOutcome,
    Wallet,
    address_of,
)
from . import rpc
from .abi import decode_function_result, encode_constructor_args, encode_function_call
from .receipt import ReceiptWaiter

logger = logging.getLogger(__name__)


class TransactionError(RuntimeError):
    exit_code: int = 1


class TransactionPendingError(TransactionError):
    """No receipt within the attempt budget."""

    exit_code = 3

    def __init__(self, tx_hash: str, attempts: int) -> None:
        self.tx_hash = tx_hash
        self.attempts = attempts
        super().__init__(f"Transaction {tx_hash} not confirmed after {attempts} attempts")


class TransactionFailedError(TransactionError):
    """Mined, but reverted or otherwise unusable."""

    def __init__(self, outcome: TransactionOutcome, reason: str = "reverted") -> None:
        self.outcome = outcome
        super().__init__(f"Transaction {outcome.tx_hash} {reason}")


def prepare_params(items: Optional[Iterable[Any]]) -> list:
    """Replace wallets, contracts and outcomes with their address or hash."""
    if not items:
        return []
    return [address_of(item) for item in items]


def _chain_id(defaults: ContractDefaults) -> int:
    if defaults.chain_id is not None:
        return defaults.chain_id
    return rpc.get_chain_id(defaults.node_url)


def _submit(
    tx: dict,
    wallet: Wallet,
    defaults: ContractDefaults,
    private_key: Optional[str] = None,
) -> str:
    """Sign (locally or on the node) and send ``tx``; returns the hash."""
    if private_key is not None:
        account = Account.from_key(private_key)
        if account.address.lower() != wallet.address.lower():
            raise ValueError(
                f"Private key belongs to {account.address}, not {wallet.address}"
            )
        local_tx = dict(tx)
        local_tx["nonce"] = rpc.get_nonce(wallet.address, defaults.node_url)
        local_tx["chainId"] = _chain_id(defaults)
        signed = account.sign_transaction(local_tx)
        raw_tx = "0x" + signed.raw_transaction.hex()
        tx_hash = rpc.send_raw_transaction(raw_tx, defaults.node_url)
    else:
        node_tx = {"from": wallet.address}
        for key, value in tx.items():
            node_tx[key] = hex(value) if isinstance(value, int) else value
        tx_hash = rpc.send_transaction(node_tx, defaults.node_url)

    logger.info("Submitted transaction %s from %s", tx_hash, wallet.address)
    return tx_hash


def _base_tx(
    defaults: ContractDefaults,
    gas: Optional[int],
    gas_price: Optional[int],
    value: Optional[int],
) -> dict:
    return {
        "gas": defaults.default_gas if gas is None else gas,
        "gasPrice": defaults.default_gas_price if gas_price is None else gas_price,
        "value": defaults.default_value if value is None else value,
    }


def deploy_contract(
    compiled: CompiledContract,
    wallet: Wallet,
    defaults: ContractDefaults,
    constructor_args: Optional[list] = None,
    gas: Optional[int] = None,
    gas_price: Optional[int] = None,
    value: Optional[int] = None,
    max_attempts: Optional[int] = None,
    private_key: Optional[str] = None,
    poll_interval: float = 0.0,
) -> DeployedContract:
    """
    Deploy a contract and wait for its creation receipt.

    Args:
        compiled: Compiled contract (abi + bytecode)
        wallet: Owner account paying for the deployment
        defaults: Gas / price / value defaults and node URL
        constructor_args: Constructor arguments (wallets and contracts are
                          replaced by their address)
        gas: Gas limit
        gas_price: Gas price in wei
        value: Initial contract balance in wei
        max_attempts: Receipt polling budget
        private_key: Sign locally instead of on the node
        poll_interval: Seconds between receipt polls

    Returns:
        DeployedContract bound to the new address

    Raises:
        TransactionPendingError: If no receipt arrives within the budget
        TransactionFailedError: If the deployment reverted
    """
    data = compiled.bytecode + encode_constructor_args(
        compiled.abi, prepare_params(constructor_args)
    )

    tx = _base_tx(defaults, gas, gas_price, value)
    tx["data"] = data
    tx_hash = _submit(tx, wallet, defaults, private_key)

    attempts = defaults.max_attempts if max_attempts is None else max_attempts
    waiter = ReceiptWaiter(
        lambda h: rpc.get_transaction_receipt(h, defaults.node_url),
        max_attempts=attempts,
        poll_interval=poll_interval,
    )
    outcome = waiter.wait_for_outcome(tx_hash)

    if outcome is None:
        raise TransactionPendingError(tx_hash, attempts)
    if outcome.status == 0:
        raise TransactionFailedError(outcome)
    if not outcome.contract_address:
        raise TransactionFailedError(outcome, "produced no contract address")

    contract = compiled.at(outcome.contract_address)
    logger.info("Deployed contract at %s (tx %s)", contract.address, tx_hash)
    return DeployedContract(contract=contract, outcome=outcome)


def call_read(
    contract: Contract,
    function_name: str,
    args: Optional[list] = None,
    *,
    defaults: ContractDefaults,
    wallet: Optional[Wallet] = None,
) -> Any:
    """
    Call a function as a read operation (eth_call).

    Returns:
        Decoded return value(s), or None for an empty result
    """
    calldata = encode_function_call(contract.abi, function_name, prepare_params(args))
    tx = {"to": contract.address, "data": calldata}
    if wallet is not None:
        tx["from"] = wallet.address

    result = rpc.call(tx, defaults.node_url)
    if result is None or result == "0x":
        return None
    return decode_function_result(contract.abi, function_name, result)


def call_write(
    contract: Contract,
    function_name: str,
    wallet: Wallet,
    args: Optional[list] = None,
    *,
    defaults: ContractDefaults,
    gas: Optional[int] = None,
    gas_price: Optional[int] = None,
    value: Optional[int] = None,
    private_key: Optional[str] = None,
) -> str:
    """
    Call a function as a write operation.

    Returns:
        Transaction hash; pair with ``wait_for_outcome`` to confirm it
    """
    calldata = encode_function_call(contract.abi, function_name, prepare_params(args))
    tx = _base_tx(defaults, gas, gas_price, value)
    tx["to"] = to_checksum_address(contract.address)
    tx["data"] = calldata
    return _submit(tx, wallet, defaults, private_key)


def send_ether(
    wallet: Wallet,
    to: Any,
    amount: int,
    *,
    defaults: ContractDefaults,
    gas: Optional[int] = None,
    gas_price: Optional[int] = None,
    private_key: Optional[str] = None,
) -> str:
    """Send ``amount`` wei from ``wallet`` to an address, wallet or contract."""
    if amount < 0:
        raise ValueError("amount must not be negative")
    tx = _base_tx(defaults, gas, gas_price, amount)
    tx["to"] = to_checksum_address(address_of(to))
    return _submit(tx, wallet, defaults, private_key)
