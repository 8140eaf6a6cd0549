"""Issue model for Epictree - status, checklist formatting, conversions."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

__all__ = [
    "IssueStatus",
    "Issue",
]


class IssueStatus(str, Enum):
    """Issue state as seen by the checklist renderer."""

    OPENED = "open"
    CLOSED = "closed"
    LOCKED = "locked"


@dataclass(eq=False)
class Issue:
    """A tracked issue and, once placed in a tree, its children.

    ``children`` is filled in by the tree builder. ``level`` is only
    meaningful during the editor pass that assigned it.
    """

    id: int
    title: str = ""
    body: str = ""
    status: IssueStatus = IssueStatus.OPENED
    children: List["Issue"] = field(default_factory=list)
    level: int = 0

    def is_opened(self) -> bool:
        return self.status == IssueStatus.OPENED

    def is_closed(self) -> bool:
        return self.status == IssueStatus.CLOSED

    def is_locked(self) -> bool:
        return self.status == IssueStatus.LOCKED

    def format_title(self, spaces: int) -> str:
        """Render the checklist line for this issue.

        Args:
            spaces: Number of leading spaces

        Returns:
            Line like ``"  - [x] Title #12"`` (no trailing newline)
        """
        mark = "x" if self.is_closed() else " "
        return f"{' ' * spaces}- [{mark}] {self.title} #{self.id}"

    def to_map(self) -> Dict[int, "Issue"]:
        """Flatten this issue and all descendants into an ID lookup.

        An ID found at several positions maps to the one visited last.
        """
        issue_map: Dict[int, Issue] = {self.id: self}
        for child in self.children:
            issue_map.update(child.to_map())
        return issue_map

    @classmethod
    def from_github(cls, payload: Dict[str, Any]) -> "Issue":
        """Build an issue from a GitHub REST issue payload."""
        status = IssueStatus.OPENED
        if payload.get("locked"):
            status = IssueStatus.LOCKED
        # closed is more important than locked
        if payload.get("state") == "closed":
            status = IssueStatus.CLOSED

        return cls(
            id=int(payload["number"]),
            title=payload.get("title") or "",
            body=payload.get("body") or "",
            status=status,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        """Build an issue from a JSONL record.

        Raises:
            ValueError: If the id or status is invalid
            KeyError: If the id is missing
        """
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            body=data.get("body") or "",
            status=IssueStatus(data.get("status", IssueStatus.OPENED.value)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSONL record (children are not included)."""
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "status": self.status.value,
        }

