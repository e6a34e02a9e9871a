"""
Shared utilities for osu! Local Tops.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from pptops.config import REPORT_PREFIX, REPORT_SUFFIX, REPORT_TIMESTAMP_FORMAT


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


# --- File Operations ---
def unique_report_path(folder: Path, now: datetime | None = None) -> Path:
    """
    Build a timestamped report path that does not collide with an existing file.

    Args:
        folder: Folder the report will be written to
        now: Timestamp to embed (default: current local time)

    Returns:
        Path like ``tops_2024-01-31T18-05-09.txt``, suffixed with ``_1``, ``_2``...
        when a report from the same second already exists
    """
    stamp = (now or datetime.now()).strftime(REPORT_TIMESTAMP_FORMAT)
    path = folder / f"{REPORT_PREFIX}{stamp}{REPORT_SUFFIX}"
    counter = 1
    while path.exists():
        path = folder / f"{REPORT_PREFIX}{stamp}_{counter}{REPORT_SUFFIX}"
        counter += 1
    return path


def atomic_write_text(text: str, path: Path) -> None:
    """
    Write text to a file atomically using a temporary file.

    This prevents a half-written report if the write is interrupted.

    Args:
        text: Full file contents
        path: Destination path
    """
    logger = setup_logging(__name__)

    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    # Write to temp file first
    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            encoding='utf-8',
            delete=False,
            suffix=REPORT_SUFFIX,
            dir=path.parent  # Same filesystem for atomic move
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(text)

        os.replace(tmp_path, path)
        logger.debug(f"Atomically wrote {len(text)} characters to {path}")

    except Exception:
        # Clean up temp file if it exists
        if 'tmp_path' in locals() and tmp_path.exists():
            tmp_path.unlink()
        raise


__all__ = [
    # Logging
    'setup_logging',
    # File operations
    'unique_report_path',
    'atomic_write_text',
]
