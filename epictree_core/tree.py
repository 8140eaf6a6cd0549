"""Issue tree for Epictree - parent declarations and the parent/child graph."""

import logging
import re
from typing import Dict, Iterable, List, Optional, Set

from epictree_core.constants import MAX_ISSUE_DIGITS, PARENT_MARKERS
from epictree_core.exceptions import CycleError, SelfReferenceError
from epictree_core.issues import Issue
from epictree_core.utils import split_lines

__all__ = [
    "is_parent_issue_mark",
    "parse_issue_number",
    "parse_parent_issue",
    "detect_cycle",
    "IssueTree",
]

logger = logging.getLogger(__name__)

ISSUE_NUMBER_RE = re.compile(r"#(\d{1,%d})" % MAX_ISSUE_DIGITS)


def is_parent_issue_mark(mark: str) -> bool:
    """Check whether the left side of a line names a parent issue."""
    return mark.strip().lower() in PARENT_MARKERS


def parse_issue_number(text: str) -> Optional[int]:
    """Parse a ``#123`` reference.

    Args:
        text: Right side of a marker line

    Returns:
        Issue number, or None if the text is not a single reference
    """
    match = ISSUE_NUMBER_RE.fullmatch(text.strip())
    if match is None:
        return None
    return int(match.group(1))


def parse_parent_issue(body: str) -> Optional[int]:
    """Find the parent issue declared in an issue body.

    Looks for the first line of the form ``<marker>: #<id>`` where marker
    is one of "parent issue", "epic" or "parent" (any case). Lines that
    look like markers but carry a malformed reference are skipped.

    Returns:
        Parent issue number, or None for a root issue
    """
    for line in split_lines(body):
        if "#" not in line or ":" not in line:
            continue

        parts = line.split(":")
        if len(parts) != 2:
            continue

        if not is_parent_issue_mark(parts[0]):
            continue

        parent = parse_issue_number(parts[1])
        if parent is None:
            logger.debug("Failed to parse parent issue. line=%r", line)
            continue

        return parent

    return None


def detect_cycle(nodes: Dict[int, Set[int]]) -> Optional[List[int]]:
    """Find a cycle in a parent -> children mapping.

    Args:
        nodes: Mapping from parent ID to child IDs

    Returns:
        The IDs along the cycle (first ID repeated at the end), or None
    """
    done: Set[int] = set()

    for start in sorted(nodes):
        if start in done:
            continue

        # Iterative DFS; path holds the current chain from start
        path: List[int] = []
        on_path: Set[int] = set()
        stack = [(start, iter(sorted(nodes.get(start, ()))))]
        path.append(start)
        on_path.add(start)

        while stack:
            node, children = stack[-1]
            child = next(children, None)

            if child is None:
                stack.pop()
                path.pop()
                on_path.discard(node)
                done.add(node)
                continue

            if child in on_path:
                return path[path.index(child):] + [child]

            if child in done:
                continue

            stack.append((child, iter(sorted(nodes.get(child, ())))))
            path.append(child)
            on_path.add(child)

    return None


class IssueTree:
    """Parent/child graph built from parent declarations in issue bodies.

    Attributes:
        nodes: Mapping from parent ID to the set of its child IDs
        issues: Mapping from ID to issue
        missing: Parent IDs referenced by some child but not in ``issues``
    """

    def __init__(self, issues: Iterable[Issue] = ()):
        self.nodes: Dict[int, Set[int]] = {}
        self.issues: Dict[int, Issue] = {}
        self.missing: List[int] = []

        for issue in issues:
            self.issues[issue.id] = issue

            parent = parse_parent_issue(issue.body)
            if parent is None:
                logger.debug("No parent issue declared. issue=%s", issue.id)
                continue

            if parent == issue.id:
                raise SelfReferenceError(f"Issue #{issue.id} declares itself as its parent")

            self._add_node(parent, issue.id)

        self.missing = sorted(p for p in self.nodes if p not in self.issues)
        logger.info("Processed missing parent issues. count=%s", len(self.missing))

    @classmethod
    def build(cls, issues: Iterable[Issue]) -> "IssueTree":
        return cls(issues)

    def _add_node(self, parent: int, child: int) -> None:
        self.nodes.setdefault(parent, set()).add(child)
        logger.debug("Added issues link. parent=%s child=%s", parent, child)

    def add_parent_issues(self, issues: Iterable[Issue]) -> None:
        """Register parent issues fetched after the tree was built."""
        for issue in issues:
            if issue.id in self.issues:
                logger.debug("Parent issue is already added. issue=%s", issue.id)
                continue
            self.issues[issue.id] = issue

        self.missing = [p for p in self.missing if p not in self.issues]

    def parent_issues(self) -> List[Issue]:
        """Populate ``children`` and return every parent with a known child.

        Parents and children are sorted by ID. Unknown child or parent IDs
        are skipped.

        Raises:
            CycleError: If parent declarations form a cycle
        """
        cycle = detect_cycle(self.nodes)
        if cycle is not None:
            chain = " -> ".join(f"#{i}" for i in cycle)
            raise CycleError(f"Parent declarations form a cycle: {chain}")

        parents: List[Issue] = []

        for parent_id in sorted(self.nodes):
            parent = self.issues.get(parent_id)
            if parent is None:
                logger.warning("Failed to find parent issue. issue=%s", parent_id)
                continue

            children = []
            for child_id in sorted(self.nodes[parent_id]):
                child = self.issues.get(child_id)
                if child is None:
                    logger.warning("Child issue is not found. issue=%s", child_id)
                    continue
                children.append(child)

            if not children:
                continue

            parent.children = children
            parents.append(parent)

        logger.info("Generated list of parent issues. count=%s", len(parents))
        return parents
