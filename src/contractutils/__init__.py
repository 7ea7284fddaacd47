__all__ = [
    # Models
    "CompiledContract",
    "Contract",
    "DeployedContract",
    "TransactionOutcome",
    "Wallet",
    "address_of",
    # Configuration
    "ConfigError",
    "ContractDefaults",
    "load_defaults",
    # Receipts
    "ReceiptWaiter",
    "wait_for_outcome",
    # RPC
    "RpcError",
    # Contracts and transactions
    "TransactionError",
    "TransactionFailedError",
    "TransactionPendingError",
    "call_read",
    "call_write",
    "deploy_contract",
    "load_compiled_contract",
    "prepare_params",
    "send_ether",
    # Wallets
    "generate_wallet",
    "get_wallet",
    "load_private_key",
    "unlock_wallet",
    "wallet_balance",
    "wallet_from_ganache_log",
]

from .config import ConfigError, ContractDefaults, load_defaults
from .models import (
    CompiledContract,
    Contract,
    DeployedContract,
    TransactionOutcome,
    Wallet,
    address_of,
)
from .node.abi import load_compiled_contract
from .node.receipt import ReceiptWaiter, wait_for_outcome
from .node.rpc import RpcError
from .node.tx import (
    TransactionError,
    TransactionFailedError,
    TransactionPendingError,
    call_read,
    call_write,
    deploy_contract,
    prepare_params,
    send_ether,
)
from .wallet import (
    generate_wallet,
    get_wallet,
    load_private_key,
    unlock_wallet,
    wallet_balance,
    wallet_from_ganache_log,
)
