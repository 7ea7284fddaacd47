"""Tests for artifact loading and call encoding."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from eth_abi import encode

from contractutils.node.abi import (
    decode_function_result,
    encode_constructor_args,
    encode_function_call,
    find_constructor,
    find_function,
    function_selector,
    load_compiled_contract,
)

from conftest import OTHER, TOKEN_ABI, TOKEN_BYTECODE


class TestLoadCompiledContract:
    def test_truffle_artifact(self, truffle_artifact: Path) -> None:
        compiled = load_compiled_contract(truffle_artifact)
        assert compiled.abi == TOKEN_ABI
        assert compiled.bytecode == TOKEN_BYTECODE

    def test_foundry_artifact_without_prefix(self, tmp_path: Path) -> None:
        path = tmp_path / "Token.json"
        path.write_text(
            json.dumps({"abi": TOKEN_ABI, "bytecode": {"object": TOKEN_BYTECODE[2:]}}),
            encoding="utf-8",
        )
        assert load_compiled_contract(path).bytecode == TOKEN_BYTECODE

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_compiled_contract(tmp_path / "missing.json")

    @pytest.mark.parametrize(
        "artifact",
        [
            {"bytecode": TOKEN_BYTECODE},
            {"abi": TOKEN_ABI, "bytecode": ""},
            {"abi": TOKEN_ABI, "bytecode": "0x"},
            {"abi": TOKEN_ABI},
        ],
    )
    def test_incomplete_artifact(self, tmp_path: Path, artifact: dict) -> None:
        path = tmp_path / "Bad.json"
        path.write_text(json.dumps(artifact), encoding="utf-8")
        with pytest.raises(ValueError):
            load_compiled_contract(path)

    @pytest.mark.parametrize("payload", ["[]", "\"Token\"", "42", "null"])
    def test_top_level_must_be_object(self, tmp_path: Path, payload: str) -> None:
        path = tmp_path / "Token.json"
        path.write_text(payload, encoding="utf-8")
        with pytest.raises(ValueError, match="not a JSON object"):
            load_compiled_contract(path)


class TestLookup:
    def test_find_function(self) -> None:
        assert find_function(TOKEN_ABI, "transfer")["name"] == "transfer"
        with pytest.raises(ValueError, match="mint"):
            find_function(TOKEN_ABI, "mint")

    def test_find_constructor(self) -> None:
        assert find_constructor(TOKEN_ABI)["type"] == "constructor"
        assert find_constructor(TOKEN_ABI[1:]) is None


class TestEncoding:
    def test_known_selectors(self) -> None:
        assert function_selector("transfer", ["address", "uint256"]).hex() == "a9059cbb"
        assert function_selector("balanceOf", ["address"]).hex() == "70a08231"

    def test_encode_function_call(self) -> None:
        calldata = encode_function_call(TOKEN_ABI, "transfer", [OTHER, 5])
        expected = "0xa9059cbb" + encode(["address", "uint256"], [OTHER, 5]).hex()
        assert calldata == expected

    def test_encode_no_args(self) -> None:
        assert encode_function_call(TOKEN_ABI, "reset", []) == "0x" + function_selector("reset", []).hex()

    def test_argument_count_checked(self) -> None:
        with pytest.raises(ValueError):
            encode_function_call(TOKEN_ABI, "transfer", [OTHER])

    def test_constructor_args(self) -> None:
        encoded = encode_constructor_args(TOKEN_ABI, [OTHER, 1000])
        assert encoded == encode(["address", "uint256"], [OTHER, 1000]).hex()
        assert not encoded.startswith("0x")
        assert encode_constructor_args(TOKEN_ABI, []) == ""

    def test_constructor_args_without_constructor(self) -> None:
        with pytest.raises(ValueError, match="Constructor not found"):
            encode_constructor_args(TOKEN_ABI[1:], [1])


class TestDecoding:
    def test_single_value(self) -> None:
        data = "0x" + encode(["uint256"], [42]).hex()
        assert decode_function_result(TOKEN_ABI, "balanceOf", data) == 42

    def test_unprefixed_data(self) -> None:
        data = encode(["bool"], [True]).hex()
        assert decode_function_result(TOKEN_ABI, "transfer", data) is True

    def test_no_outputs(self) -> None:
        assert decode_function_result(TOKEN_ABI, "reset", "0x") is None

    def test_multiple_outputs(self) -> None:
        abi = [
            {
                "type": "function",
                "name": "pair",
                "inputs": [],
                "outputs": [{"type": "uint256"}, {"type": "bool"}],
            }
        ]
        data = "0x" + encode(["uint256", "bool"], [7, False]).hex()
        assert decode_function_result(abi, "pair", data) == (7, False)
