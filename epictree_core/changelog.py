"""Change log for Epictree - why a parent body changed."""

import logging
from typing import Iterator, List, Optional, Sequence

from epictree_core.issues import Issue

__all__ = [
    "ChangeLog",
    "create_comment",
]


class ChangeLog:
    """Ordered list of human-readable change entries.

    Every entry is also traced through ``logger``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.entries: List[str] = []
        self.logger = logger or logging.getLogger(__name__)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def record(self, entry: str) -> None:
        self.logger.debug("Log update. change=%s", entry)
        self.entries.append(entry)

    def record_update(self, issue: Issue) -> None:
        status = "closed" if issue.is_closed() else "opened"
        self.record(f"Updated child issue #{issue.id}. New status: {status}")

    def record_append(self, count: int) -> None:
        self.record(f"Appended new block with {count} child issue(s)")

    def record_missing(self, count: int, level: int) -> None:
        self.record(f"Appended {count} new child issue(s) on level {level}")


def create_comment(entries: Sequence[str]) -> str:
    """Format change log entries as a comment body.

    Returns:
        Markdown list headed by "Issue update changelog:", or "" when empty
    """
    if not entries:
        return ""

    lines = ["Issue update changelog:"]
    lines.extend(f"- {entry}" for entry in entries)
    return "\n".join(lines) + "\n"
