"""
Value types shared across the package.

Conversions between these types and plain addresses are explicit:
``Wallet.from_address`` / ``wallet.address`` and ``address_of``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from eth_utils import is_address, to_checksum_address


def _quantity(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return int(value, 16)


@dataclass(frozen=True)
class TransactionOutcome:
    """
    Confirmed result of a mined transaction.

    Built from the node's receipt.  ``status`` is 1 on success, 0 on
    revert and None for pre-Byzantium receipts that carry no status.
    """

    tx_hash: str
    status: Optional[int]
    gas_used: Optional[int] = None
    contract_address: Optional[str] = None
    block_number: Optional[int] = None
    block_hash: Optional[str] = None
    logs: tuple = field(default=(), hash=False)
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_receipt(cls, receipt: dict) -> "TransactionOutcome":
        return cls(
            tx_hash=receipt.get("transactionHash", ""),
            status=_quantity(receipt.get("status")),
            gas_used=_quantity(receipt.get("gasUsed")),
            contract_address=receipt.get("contractAddress"),
            block_number=_quantity(receipt.get("blockNumber")),
            block_hash=receipt.get("blockHash"),
            logs=tuple(receipt.get("logs") or ()),
            raw=receipt,
        )

    @property
    def succeeded(self) -> bool:
        return self.status == 1


@dataclass(frozen=True)
class Wallet:
    """An Ethereum account address."""

    address: str

    @classmethod
    def from_address(cls, address: Optional[str]) -> "Wallet":
        """
        Create a wallet from a hex address.

        Raises:
            ValueError: If the address is missing or not a valid address
        """
        if address is None:
            raise ValueError("Wallet address is required")
        address = address.strip()
        if not is_address(address):
            raise ValueError(f"Invalid wallet address: {address!r}")
        return cls(address=to_checksum_address(address))

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True)
class CompiledContract:
    """ABI and creation bytecode of a compiled contract."""

    abi: list
    bytecode: str

    def at(self, address: str) -> "Contract":
        """Bind this ABI to an already deployed address."""
        return Contract(address=to_checksum_address(address), abi=self.abi)


@dataclass(frozen=True)
class Contract:
    address: str
    abi: list


@dataclass(frozen=True)
class DeployedContract:
    """A contract together with the outcome of its creation transaction."""

    contract: Contract
    outcome: TransactionOutcome

    @property
    def address(self) -> str:
        return self.contract.address


def address_of(item: Any) -> Any:
    """
    Reduce a wallet, contract or outcome to the value the node expects.

    Wallets and contracts become their address, outcomes their transaction
    hash.  Anything else is returned unchanged.
    """
    if isinstance(item, (Wallet, Contract, DeployedContract)):
        return item.address
    if isinstance(item, TransactionOutcome):
        return item.tx_hash
    return item
