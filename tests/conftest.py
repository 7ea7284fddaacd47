"""Shared fixtures: a scripted fake node and a small compiled contract."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable
from unittest.mock import patch

import pytest

from contractutils.config import ContractDefaults

# Well-known ganache / truffle development accounts.
OWNER = "0x627306090abab3a6e1400e9345bc60c78a8bef57"
OTHER = "0xf17f52151ebef6c7334fad080c5704d77216b732"
CONTRACT = "0xc5fdf4076b8f3a5357c5e395ab970b5b54098fef"
TX_HASH = "0x" + "ab" * 32

TOKEN_ABI = [
    {
        "type": "constructor",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "supply", "type": "uint256"},
        ],
    },
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "who", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "transfer",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "reset",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]

TOKEN_BYTECODE = "0x6080604052348015600f57600080fd5b50"


class FakeNode:
    """
    Stand-in for ``contractutils.node.rpc.rpc_call``.

    ``responses`` maps an RPC method to either a value or a callable taking
    the params list.  Every call is recorded in ``calls``.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[tuple[str, list]] = []

    def __call__(self, method: str, params: list, rpc_url: str, client=None) -> Any:
        self.calls.append((method, params))
        if method not in self.responses:
            raise AssertionError(f"Unexpected RPC method {method}")
        response = self.responses[method]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params)
        return response

    def methods(self) -> list[str]:
        return [method for method, _ in self.calls]

    def params_for(self, method: str) -> list:
        for name, params in self.calls:
            if name == method:
                return params
        raise AssertionError(f"{method} was not called")


def make_receipt(
    status: str | None = "0x1",
    contract_address: str | None = None,
    tx_hash: str = TX_HASH,
) -> dict:
    receipt = {
        "transactionHash": tx_hash,
        "blockNumber": "0x10",
        "blockHash": "0x" + "cd" * 32,
        "gasUsed": "0x5208",
        "contractAddress": contract_address,
        "logs": [],
    }
    if status is not None:
        receipt["status"] = status
    return receipt


def scripted(*responses: Any) -> Callable[[list], Any]:
    """Return successive responses on successive calls, then repeat the last."""
    remaining = list(responses)

    def respond(params: list) -> Any:
        value = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        if isinstance(value, Exception):
            raise value
        return value

    return respond


@pytest.fixture()
def defaults() -> ContractDefaults:
    return ContractDefaults(node_url="http://node.test:8545", chain_id=1337)


@pytest.fixture()
def fake_node():
    node = FakeNode()
    with patch("contractutils.node.rpc.rpc_call", node):
        yield node


@pytest.fixture()
def truffle_artifact(tmp_path: Path) -> Path:
    path = tmp_path / "Token.json"
    path.write_text(
        json.dumps({"contractName": "Token", "abi": TOKEN_ABI, "bytecode": TOKEN_BYTECODE}),
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Isolate tests from PRIVATE_KEY / CONTRACTUTILS_* and any local .env."""
    with patch.dict(os.environ):
        for key in ("PRIVATE_KEY", "CONTRACTUTILS_NODE_URL", "CONTRACTUTILS_CHAIN_ID"):
            os.environ.pop(key, None)
        monkeypatch.chdir(tmp_path)
        yield tmp_path
