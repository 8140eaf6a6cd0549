"""Shared utilities for Epictree - timestamps, line splitting and snapshot locking."""

import fcntl
import time
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator, List, Optional

from epictree_core.exceptions import LockError

__all__ = [
    "get_iso_timestamp",
    "since_timestamp",
    "split_lines",
    "file_lock",
]


def get_iso_timestamp(now: Optional[datetime] = None) -> str:
    """Format a UTC timestamp in ISO format with Z suffix.

    Args:
        now: Timestamp to format (defaults to the current time)

    Returns:
        ISO 8601 formatted timestamp string (e.g., "2024-01-15T10:30:00.123456Z")
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return now.isoformat().replace("+00:00", "Z")


def since_timestamp(days: int, now: Optional[datetime] = None) -> Optional[str]:
    """ISO timestamp ``days`` ago, or None when days <= 0 (no limit)."""
    if days <= 0:
        return None
    if now is None:
        now = datetime.now(timezone.utc)
    return get_iso_timestamp(now - timedelta(days=days))


def split_lines(text: str) -> List[str]:
    """Split issue text on ``\\n`` only, dropping one trailing ``\\r`` per line.

    Other Unicode line boundaries (form feed, U+2028...) stay inside the
    line. A final newline does not produce an empty last line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


@contextmanager
def file_lock(lock_path: Path, timeout: float = 5.0) -> Generator[object, None, None]:
    """Hold an exclusive lock on a snapshot's sidecar lock file.

    ``render --write`` takes it on ``<snapshot>.lock`` so two runs never
    read and rewrite the same JSONL snapshot at once. The lock file itself
    is left in place after release.

    Args:
        lock_path: Sidecar lock file next to the snapshot
        timeout: Seconds to wait for a concurrent run to finish

    Yields:
        The open lock file

    Raises:
        LockError: If another run still holds the snapshot after ``timeout``
    """
    lock_path = Path(lock_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + timeout

    with open(lock_path, "w") as lock_file:
        while True:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise LockError(
                        f"Could not acquire lock on {lock_path} within {timeout}s; "
                        "is another run writing this snapshot?"
                    )
                time.sleep(0.01)

        try:
            yield lock_file
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
