"""Logging setup for the command-line entry point."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Error log is capped at 1 MiB with a single rollover file.
MAX_ERROR_LOG_BYTES = 1024 * 1024


def configure_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    max_bytes: int = MAX_ERROR_LOG_BYTES,
) -> None:
    """
    Configure the ``contractutils`` logger.

    Args:
        verbose: Emit DEBUG output to stderr instead of WARNING and above
        log_file: Also append WARNING and above to this file
        max_bytes: Size at which the error log rolls over
    """
    root = logging.getLogger("contractutils")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max(max_bytes, 1024),
            backupCount=1,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.WARNING)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)
