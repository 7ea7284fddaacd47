"""
Receipt waiter - bounded polling for a transaction outcome.

A submitted transaction is only a hash until a block includes it.  The
waiter re-queries the node until a receipt shows up or the attempt budget
is spent.  Running out of attempts is not an error: the result is None and
the caller decides whether that is fatal.  Node errors propagate on the
attempt where they occur.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from ..models import TransactionOutcome
from .rpc import get_transaction_receipt

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10

ReceiptFetcher = Callable[[str], Optional[dict]]


class ReceiptWaiter:
    """
    Poll ``fetch_receipt`` until it returns a receipt.

    Args:
        fetch_receipt: Callable taking a tx hash and returning the receipt
                       dict, or None/empty while pending
        max_attempts: Default attempt budget
        poll_interval: Seconds to wait between attempts (0 re-queries at once)
        backoff: Factor applied to the delay after each attempt
    """

    def __init__(
        self,
        fetch_receipt: ReceiptFetcher,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        poll_interval: float = 0.0,
        backoff: float = 1.0,
    ) -> None:
        _check_attempts(max_attempts)
        if poll_interval < 0:
            raise ValueError("poll_interval must not be negative")
        if backoff < 1.0:
            raise ValueError("backoff must be >= 1.0")
        self.fetch_receipt = fetch_receipt
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self.backoff = backoff

    def wait_for_outcome(
        self,
        tx_hash: str,
        max_attempts: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Optional[TransactionOutcome]:
        """
        Wait for the outcome of ``tx_hash``.

        Args:
            tx_hash: Transaction hash returned on submission
            max_attempts: Override the default attempt budget
            cancel: When set, stop before the next attempt and return None

        Returns:
            TransactionOutcome, or None if still pending after all attempts
        """
        attempts = self.max_attempts if max_attempts is None else max_attempts
        _check_attempts(attempts)

        delay = self.poll_interval
        for attempt in range(1, attempts + 1):
            if cancel is not None and cancel.is_set():
                logger.debug("Wait for %s cancelled before attempt %d", tx_hash, attempt)
                return None

            receipt = self.fetch_receipt(tx_hash)
            if receipt:
                outcome = TransactionOutcome.from_receipt(receipt)
                logger.debug(
                    "Receipt for %s found on attempt %d (status=%s)",
                    tx_hash,
                    attempt,
                    outcome.status,
                )
                return outcome

            logger.debug("No receipt for %s on attempt %d/%d", tx_hash, attempt, attempts)

            if attempt < attempts and delay > 0:
                if cancel is not None:
                    if cancel.wait(delay):
                        logger.debug("Wait for %s cancelled", tx_hash)
                        return None
                else:
                    time.sleep(delay)
                delay *= self.backoff

        logger.warning("Transaction %s not confirmed after %d attempts", tx_hash, attempts)
        return None


def _check_attempts(max_attempts: int) -> None:
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")


def wait_for_outcome(
    tx_hash: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    *,
    rpc_url: str,
    poll_interval: float = 0.0,
    backoff: float = 1.0,
    cancel: Optional[threading.Event] = None,
) -> Optional[TransactionOutcome]:
    """Wait for a transaction outcome from the node at ``rpc_url``."""
    waiter = ReceiptWaiter(
        lambda h: get_transaction_receipt(h, rpc_url),
        max_attempts=max_attempts,
        poll_interval=poll_interval,
        backoff=backoff,
    )
    return waiter.wait_for_outcome(tx_hash, cancel=cancel)
