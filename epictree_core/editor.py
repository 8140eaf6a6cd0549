"""Section editor for Epictree - keeps the child issue checklist in sync.

The generated section looks like::

    ### Child issues:

    - [ ] Child title #10
      - [x] Grandchild title #100

A body without the section gets one appended. A body with the section is
merged line by line after the last header: lines referencing a known
child are re-rendered from the child's current status, everything else
is kept verbatim.
"""

import io
import logging
import re
from typing import List, Optional, Set, TextIO, Tuple

from epictree_core.changelog import ChangeLog
from epictree_core.constants import SECTION_HEADER, SPACES_PER_LEVEL
from epictree_core.exceptions import AlreadyRenderedError, LevelTooDeepError, RenderStop
from epictree_core.issues import Issue
from epictree_core.utils import split_lines

__all__ = [
    "count_prefix_spaces",
    "parse_issue_id",
    "Editor",
]

EOL = "\n"

TRAILING_ISSUE_RE = re.compile(r"#(\d+)\s*$")


def count_prefix_spaces(line: str) -> int:
    """Count leading whitespace characters; a tab counts as one."""
    return len(line) - len(line.lstrip())


def parse_issue_id(line: str) -> Optional[int]:
    """Parse the trailing ``#<id>`` of a checklist line, or None."""
    match = TRAILING_ISSUE_RE.search(line)
    if match is None:
        return None
    return int(match.group(1))


class Editor:
    """Renders and merges the child issue section of a parent body.

    Args:
        max_levels: Number of nesting levels to render and accept (0 = unlimited)
        add_missing: Default for appending children absent from the section
        logger: Sink for diagnostic trace lines
    """

    def __init__(
        self,
        max_levels: int = 0,
        add_missing: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self.max_levels = max_levels
        self.add_missing = add_missing
        self.logger = logger or logging.getLogger(__name__)

    def update(self, issue: Optional[Issue], add_missing: Optional[bool] = None) -> Tuple[str, List[str]]:
        """Compute the new body of a parent issue.

        Args:
            issue: Parent issue with ``children`` populated
            add_missing: Append children missing from an existing section
                (defaults to the editor setting)

        Returns:
            Tuple of (new body, change log entries)
        """
        if issue is None:
            return "", []

        if not issue.children:
            return issue.body, []

        if add_missing is None:
            add_missing = self.add_missing

        changelog = ChangeLog(self.logger)

        start = issue.body.rfind(SECTION_HEADER)
        if not issue.body or start == -1:
            body = self._append_section(issue, changelog)
        else:
            body = self._merge_section(issue, start + len(SECTION_HEADER), changelog, add_missing)

        return body, list(changelog)

    def _too_deep(self, level: int) -> bool:
        return self.max_levels > 0 and level >= self.max_levels

    def _render(self, issue: Issue, level: int, out: TextIO, rendered: Set[int]) -> None:
        """Write ``issue`` and its descendants as checklist lines.

        Raises:
            LevelTooDeepError: If ``level`` is beyond ``max_levels``
            AlreadyRenderedError: If the issue was rendered earlier in this pass
        """
        if self._too_deep(level):
            raise LevelTooDeepError(f"level {level} is too deep")

        if issue.id in rendered:
            self.logger.debug("Skipping processed issue. issue=%s", issue.id)
            raise AlreadyRenderedError(f"issue #{issue.id} was already added")

        rendered.add(issue.id)
        out.write(issue.format_title(level * SPACES_PER_LEVEL) + EOL)

        for child in issue.children:
            try:
                self._render(child, level + 1, out, rendered)
            except RenderStop:
                continue

    def _append_section(self, issue: Issue, changelog: ChangeLog) -> str:
        out = io.StringIO()
        out.write(SECTION_HEADER + EOL + EOL)
        rendered: Set[int] = set()

        for child in issue.children:
            try:
                self._render(child, 0, out, rendered)
            except RenderStop:
                continue

        if issue.body:
            body = issue.body.rstrip() + EOL + EOL + out.getvalue()
        else:
            body = out.getvalue()

        changelog.record_append(len(issue.children))
        return body

    def _add_missing(self, parent: Issue, out: TextIO, processed: Set[int], changelog: ChangeLog) -> None:
        """Write the children of ``parent`` that the section did not list."""
        self.logger.debug("Adding missing issues. parent=%s level=%s", parent.id, parent.level)
        added = 0

        for child in parent.children:
            try:
                self._render(child, parent.level + 1, out, processed)
            except RenderStop:
                continue
            added += 1

        if added:
            # Change log levels count from 1 for the top of the section
            changelog.record_missing(added, parent.level + 2)

    def _merge_section(self, issue: Issue, start: int, changelog: ChangeLog, add_missing: bool) -> str:
        out = io.StringIO()
        issue_map = issue.to_map()
        processed: Set[int] = set()
        ancestors: List[Issue] = []

        if add_missing:
            issue.level = -1
            ancestors.append(issue)

        for line in split_lines(issue.body[start:]):
            if not line.strip():
                out.write(line + EOL)
                continue

            spaces = count_prefix_spaces(line)
            level = spaces // SPACES_PER_LEVEL
            self.logger.debug("Processing child issue. line=%r spaces=%s", line, spaces)

            if self._too_deep(level):
                self.logger.debug("Issue is below max level. max_levels=%s", self.max_levels)
                out.write(line + EOL)
                continue

            issue_id = parse_issue_id(line)
            if issue_id is None:
                out.write(line + EOL)
                continue

            while add_missing and ancestors and ancestors[-1].level >= level:
                self._add_missing(ancestors.pop(), out, processed, changelog)

            child = issue_map.get(issue_id)
            if child is None:
                self.logger.debug("Failed to find child issue by ID. id=%s", issue_id)
                out.write(line + EOL)
                continue

            child.level = level
            processed.add(child.id)
            if add_missing:
                ancestors.append(child)

            # Keep the line's own indentation, tabs included
            title = line[:spaces] + child.format_title(0)
            if title != line:
                changelog.record_update(child)
            out.write(title + EOL)

        while ancestors:
            self._add_missing(ancestors.pop(), out, processed, changelog)

        return issue.body[:start] + out.getvalue()
