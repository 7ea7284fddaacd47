"""Tests for wallet keys, ganache log parsing and node-managed accounts."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from unittest.mock import patch

import pytest
from eth_utils import to_checksum_address

from contractutils.models import Wallet
from contractutils.wallet import (
    generate_wallet,
    get_wallet,
    load_private_key,
    save_private_key,
    unlock_wallet,
    wallet_balance,
    wallet_from_ganache_log,
)

from conftest import OTHER, OWNER

GANACHE_OUTPUT = f"""\
Ganache CLI v6.12.2 (ganache-core: 2.13.2)

Available Accounts
==================
(0) {OWNER} (100 ETH)
(1) {OTHER} (100 ETH)

Private Keys
==================
(0) 0xc87509a1c067bbde78beb793e6fa76530b6382a4c0241e5e4a9ec0a0f44dc0d3
(1) 0xae6ae8e5ccbfb04590405997ee2d52d2b330726137b875053c36d94e974d162f
"""


class TestLocalKeys:
    def test_generate_wallet(self) -> None:
        private_key, wallet = generate_wallet()
        assert private_key.startswith("0x") and len(private_key) == 66
        assert get_wallet(private_key) == wallet

    def test_save_and_load(self, clean_env: Path) -> None:
        env_path = clean_env / "keys" / ".env"
        env_path.parent.mkdir()
        env_path.write_text("# comment\nOTHER=value\n", encoding="utf-8")
        private_key, _ = generate_wallet()

        save_private_key(private_key, env_path)

        content = env_path.read_text(encoding="utf-8")
        assert "OTHER=value" in content
        assert f"PRIVATE_KEY={private_key}" in content
        if os.name != "nt":
            assert env_path.stat().st_mode & 0o777 == 0o600
        assert load_private_key(env_path) == private_key
        assert "# comment" in env_path.read_text(encoding="utf-8")
        assert "PRIVATE_KEY" not in os.environ

    def test_environment_takes_precedence(self, clean_env: Path) -> None:
        env_path = clean_env / ".env.keys"
        save_private_key("0x" + "22" * 32, env_path)
        os.environ["PRIVATE_KEY"] = "33" * 32

        assert load_private_key(env_path) == "0x" + "33" * 32

    def test_missing_key(self, clean_env: Path) -> None:
        with pytest.raises(ValueError, match="PRIVATE_KEY not found"):
            load_private_key(clean_env / "absent.env")


class TestGanacheLog:
    def test_reads_requested_index(self, tmp_path: Path) -> None:
        log = tmp_path / "ganache.log"
        log.write_text(GANACHE_OUTPUT, encoding="utf-8")

        assert wallet_from_ganache_log(log) == Wallet.from_address(OWNER)
        assert wallet_from_ganache_log(log, 1).address == to_checksum_address(OTHER)

    def test_waits_for_log_to_appear(self, tmp_path: Path) -> None:
        log = tmp_path / "ganache.log"
        reads = []

        def fake_sleep(seconds: float) -> None:
            reads.append(seconds)
            log.write_text(GANACHE_OUTPUT, encoding="utf-8")

        with patch("contractutils.wallet.time.sleep", side_effect=fake_sleep):
            wallet = wallet_from_ganache_log(log, 0, timeout_seconds=30, poll_interval=0.25)

        assert wallet.address == to_checksum_address(OWNER)
        assert reads == [0.25]

    def test_timeout(self, tmp_path: Path) -> None:
        log = tmp_path / "ganache.log"
        log.write_text("Ganache CLI starting...\n", encoding="utf-8")

        with pytest.raises(TimeoutError, match="timeout exceeded"):
            wallet_from_ganache_log(log, 3, timeout_seconds=0, poll_interval=0)

    def test_partial_line_is_retried(self, tmp_path: Path) -> None:
        log = tmp_path / "ganache.log"
        log.write_text("Available Accounts\n(0)", encoding="utf-8")
        done = threading.Event()

        def fake_sleep(seconds: float) -> None:
            if not done.is_set():
                log.write_text(GANACHE_OUTPUT, encoding="utf-8")
                done.set()

        with patch("contractutils.wallet.time.sleep", side_effect=fake_sleep):
            wallet = wallet_from_ganache_log(log, 0, timeout_seconds=30)

        assert wallet.address == to_checksum_address(OWNER)


class TestNodeAccounts:
    def test_unlock(self, fake_node, defaults) -> None:
        fake_node.responses["personal_unlockAccount"] = True
        wallet = Wallet.from_address(OWNER)

        assert unlock_wallet(wallet, "pw", defaults, 30) is True
        assert fake_node.params_for("personal_unlockAccount") == [wallet.address, "pw", 30]

    def test_balance(self, fake_node, defaults) -> None:
        fake_node.responses["eth_getBalance"] = "0x64"
        assert wallet_balance(Wallet.from_address(OWNER), defaults) == 100
