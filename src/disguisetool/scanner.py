"""Directory walking and file discovery."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def iter_files(
    scan_root: Path, cancel: threading.Event | None = None
) -> Iterator[Path]:
    """Walk scan_root recursively and yield regular files as they are found.

    The walk is lazy and unordered. It stops early once ``cancel`` is set.
    Entries that cannot be stat'ed are logged and skipped.
    """
    for file_path in scan_root.rglob("*"):
        if cancel is not None and cancel.is_set():
            return
        try:
            if not file_path.is_file():
                continue
        except OSError as e:
            logger.warning("Skipping %s: %s", file_path, e)
            continue
        yield file_path
