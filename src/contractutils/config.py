"""
Contract defaults - gas, gas price, value and node URL.

Loaded once from ``contract_defaults.json`` and passed explicitly to the
components that need it.  Lookup order when no path is given:

1. ./contract_defaults.json
2. ./scriptcs_bin/contract_defaults.json
3. <package dir>/contract_defaults.json

Environment overrides (a local .env is honoured via python-dotenv):
- CONTRACTUTILS_NODE_URL
- CONTRACTUTILS_CHAIN_ID
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "contract_defaults.json"
FALLBACK_DIR = "scriptcs_bin"

DEFAULT_GAS = 0x6691B7
DEFAULT_GAS_PRICE = 0x77359400
DEFAULT_VALUE = 0
DEFAULT_NODE_URL = "http://127.0.0.1:8545"
DEFAULT_MAX_ATTEMPTS = 10

ENV_NODE_URL = "CONTRACTUTILS_NODE_URL"
ENV_CHAIN_ID = "CONTRACTUTILS_CHAIN_ID"


class ConfigError(ValueError):
    exit_code: int = 2


def parse_quantity(value: Union[str, int], field_name: str = "value") -> int:
    """Parse an Ethereum quantity given as hex string, decimal string or int."""
    if isinstance(value, bool):
        raise ConfigError(f"{field_name}: expected a quantity, got {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ConfigError(f"{field_name}: must not be negative")
        return value
    if not isinstance(value, str):
        raise ConfigError(f"{field_name}: expected a quantity, got {value!r}")

    text = value.strip()
    try:
        if text.lower().startswith("0x"):
            parsed = int(text, 16)
        else:
            parsed = int(text, 10)
    except ValueError:
        raise ConfigError(f"{field_name}: invalid quantity {value!r}") from None

    if parsed < 0:
        raise ConfigError(f"{field_name}: must not be negative")
    return parsed


@dataclass(frozen=True)
class ContractDefaults:
    """Defaults applied to deployments and write calls."""

    default_gas: int = DEFAULT_GAS
    default_gas_price: int = DEFAULT_GAS_PRICE
    default_value: int = DEFAULT_VALUE
    node_url: str = DEFAULT_NODE_URL
    chain_id: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "ContractDefaults":
        """
        Build defaults from a parsed ``contract_defaults.json`` object.

        Raises:
            ConfigError: If a required key is missing or malformed
        """
        if not isinstance(config, Mapping):
            raise ConfigError("Config must be a JSON object")

        missing = [
            key
            for key in ("default_gas", "default_gas_price", "default_value", "node_url")
            if key not in config
        ]
        if missing:
            raise ConfigError(f"Config is missing keys: {', '.join(missing)}")

        node_url = config["node_url"]
        if not isinstance(node_url, str):
            raise ConfigError(f"node_url: expected a string, got {node_url!r}")
        node_url = node_url.strip()
        if not node_url:
            raise ConfigError("node_url must not be empty")

        chain_id = config.get("chain_id")
        max_attempts = parse_quantity(
            config.get("max_attempts", DEFAULT_MAX_ATTEMPTS), "max_attempts"
        )
        if max_attempts < 1:
            raise ConfigError("max_attempts must be at least 1")

        return cls(
            default_gas=parse_quantity(config["default_gas"], "default_gas"),
            default_gas_price=parse_quantity(
                config["default_gas_price"], "default_gas_price"
            ),
            default_value=parse_quantity(config["default_value"], "default_value"),
            node_url=node_url,
            chain_id=parse_quantity(chain_id, "chain_id") if chain_id is not None else None,
            max_attempts=max_attempts,
        )

    def with_env_overrides(self) -> "ContractDefaults":
        """Apply CONTRACTUTILS_* environment overrides."""
        updates: dict[str, Any] = {}
        node_url = os.environ.get(ENV_NODE_URL, "").strip()
        if node_url:
            updates["node_url"] = node_url
        chain_id = os.environ.get(ENV_CHAIN_ID, "").strip()
        if chain_id:
            updates["chain_id"] = parse_quantity(chain_id, ENV_CHAIN_ID)
        return replace(self, **updates) if updates else self

    def to_dict(self) -> dict[str, Any]:
        return {
            "default_gas": hex(self.default_gas),
            "default_gas_price": hex(self.default_gas_price),
            "default_value": hex(self.default_value),
            "node_url": self.node_url,
            "chain_id": self.chain_id,
            "max_attempts": self.max_attempts,
        }


def candidate_paths(filename: str = CONFIG_FILENAME) -> list[Path]:
    """Locations searched for the config file, in priority order."""
    cwd = Path.cwd()
    return [
        cwd / filename,
        cwd / FALLBACK_DIR / filename,
        Path(__file__).resolve().parent / filename,
    ]


def load_config_file(path: Path) -> ContractDefaults:
    """
    Load defaults from a specific JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file is not valid config JSON
    """
    logger.info("Attempting to load config from %s", path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    return ContractDefaults.from_mapping(data)


def load_defaults(path: Optional[Path] = None, apply_env: bool = True) -> ContractDefaults:
    """
    Load contract defaults.

    Args:
        path: Explicit config file.  Failure to read it is an error.
        apply_env: Whether to apply environment overrides

    Returns:
        ContractDefaults instance
    """
    if apply_env:
        load_dotenv(Path.cwd() / ".env", override=False)

    if path is not None:
        defaults = load_config_file(Path(path))
    else:
        defaults = None
        for candidate in candidate_paths():
            if not candidate.is_file():
                logger.info("Attempting to load config from %s", candidate)
                continue
            defaults = load_config_file(candidate)
            break

        if defaults is None:
            logger.warning(
                "Failed to load config from %s, using built-in defaults",
                CONFIG_FILENAME,
            )
            defaults = ContractDefaults()

    return defaults.with_env_overrides() if apply_env else defaults
