"""
ABI helpers - compiled artifacts and call encoding.

Loads the JSON emitted by Truffle (``bytecode`` is a string) or Foundry
(``bytecode.object``).  Encoding and decoding are delegated to eth-abi.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

from eth_abi import decode, encode
from eth_hash.auto import keccak

from ..models import CompiledContract


def _ensure_0x(value: str) -> str:
    return value if value.startswith("0x") else "0x" + value


def load_compiled_contract(json_path: Union[str, Path]) -> CompiledContract:
    """
    Load a compiled contract from Truffle or Foundry output.

    Args:
        json_path: Path to the compiled JSON artifact

    Returns:
        CompiledContract with abi and 0x-prefixed bytecode

    Raises:
        FileNotFoundError: If the artifact does not exist
        ValueError: If the artifact has no abi or bytecode
    """
    path = Path(json_path)
    if not path.exists():
        raise FileNotFoundError(f"Compiled contract not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    if not isinstance(artifact, dict):
        raise ValueError(f"Artifact {path} is not a JSON object")

    abi = artifact.get("abi")
    if not isinstance(abi, list):
        raise ValueError(f"No abi in artifact {path}")

    bytecode = artifact.get("bytecode", "")
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object", "")
    if not bytecode or bytecode == "0x":
        raise ValueError(f"No bytecode in artifact {path}")

    return CompiledContract(abi=abi, bytecode=_ensure_0x(bytecode))


def find_function(abi: list, function_name: str) -> dict:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def find_constructor(abi: list) -> Optional[dict]:
    for entry in abi:
        if entry.get("type") == "constructor":
            return entry
    return None


def _input_types(entry: dict) -> list[str]:
    return [inp["type"] for inp in entry.get("inputs", [])]


def function_selector(function_name: str, input_types: list[str]) -> bytes:
    """First 4 bytes of keccak256 of the canonical signature."""
    # Keccak-256, not NIST SHA3-256.
    sig = f"{function_name}({','.join(input_types)})"
    return keccak(sig.encode("utf-8"))[:4]


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_function(abi, function_name)
    input_types = _input_types(func)
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} arguments, got {len(args)}"
        )

    selector = function_selector(function_name, input_types)
    encoded_args = encode(input_types, args) if args else b""
    return "0x" + selector.hex() + encoded_args.hex()


def encode_constructor_args(abi: list, args: list) -> str:
    """ABI-encode constructor arguments as bare hex (no 0x prefix)."""
    if not args:
        return ""

    constructor = find_constructor(abi)
    if constructor is None:
        raise ValueError("Constructor not found in ABI, but constructor args were provided")

    input_types = _input_types(constructor)
    if len(args) != len(input_types):
        raise ValueError(
            f"Constructor expects {len(input_types)} arguments, got {len(args)}"
        )
    return encode(input_types, args).hex()


def decode_function_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Decoded result (single value or tuple), or None for no outputs
    """
    func = find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded
