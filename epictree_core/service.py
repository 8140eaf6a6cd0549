"""Sync service for Epictree - fetch, build the tree, edit parent bodies.

The core (tree builder and editor) is synchronous and does no I/O. This
module wires it to an issue client and fans the network calls out over a
thread pool, one task per issue.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Tuple

from epictree_core.changelog import create_comment
from epictree_core.config import Settings
from epictree_core.constants import MAX_WORKERS
from epictree_core.editor import Editor
from epictree_core.issues import Issue
from epictree_core.tree import IssueTree
from epictree_core.utils import since_timestamp

__all__ = [
    "IssueClient",
    "PlannedUpdate",
    "SyncResult",
    "SyncReport",
    "fetch_missing",
    "is_processable",
    "build_parents",
    "plan_updates",
    "apply_update",
    "apply_updates",
    "sync_repository",
]

logger = logging.getLogger(__name__)


class IssueClient(Protocol):
    """What the service needs from an issue tracker."""

    def list_issues(self, since: Optional[str] = None) -> List[Issue]: ...

    def get_issue(self, number: int) -> Issue: ...

    def edit_issue(self, number: int, body: str) -> None: ...

    def create_comment(self, number: int, body: str) -> None: ...


@dataclass
class PlannedUpdate:
    """New body and change log for one parent issue."""

    issue: Issue
    body: str
    change_log: List[str] = field(default_factory=list)


@dataclass
class SyncResult:
    """Outcome of applying one planned update."""

    issue_id: int
    updated: bool = False
    commented: bool = False
    error: Optional[str] = None


@dataclass
class SyncReport:
    fetched: int = 0
    parents: int = 0
    plans: List[PlannedUpdate] = field(default_factory=list)
    results: List[SyncResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def updated(self) -> List[SyncResult]:
        return [r for r in self.results if r.updated]


def fetch_missing(client: IssueClient, ids: Iterable[int], max_workers: int = MAX_WORKERS) -> List[Issue]:
    """Fetch issues by number concurrently.

    Issues that fail to load are logged and left out.
    """
    ids = list(ids)
    if not ids:
        return []

    logger.info("Fetching issues by ID. count=%s", len(ids))

    def fetch(issue_id: int) -> Optional[Issue]:
        try:
            return client.get_issue(issue_id)
        except Exception as e:
            logger.warning("Failed to retrieve an issue. issue=%s err=%s", issue_id, e)
            return None

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        fetched = list(pool.map(fetch, ids))

    return [issue for issue in fetched if issue is not None]


def is_processable(issue: Issue, update_closed: bool = False) -> bool:
    """Open parents are always synced, closed ones on request, locked ones never."""
    return issue.is_opened() or (issue.is_closed() and update_closed)


def build_parents(
    issues: Iterable[Issue],
    client: Optional[IssueClient] = None,
    max_workers: int = MAX_WORKERS,
) -> List[Issue]:
    """Build the tree and return parent issues with children populated.

    When ``client`` is given, parents referenced but not in ``issues`` are
    fetched by ID first.
    """
    tree = IssueTree.build(issues)

    if client is not None and tree.missing:
        tree.add_parent_issues(fetch_missing(client, tree.missing, max_workers))

    return tree.parent_issues()


def plan_updates(
    parents: Iterable[Issue],
    editor: Editor,
    update_closed: bool = False,
) -> Tuple[List[PlannedUpdate], List[str]]:
    """Run the editor over every processable parent.

    Returns:
        Tuple of (plans for parents whose body changed, error messages).
        An editor failure for one parent does not stop the others.
    """
    plans: List[PlannedUpdate] = []
    errors: List[str] = []

    for issue in parents:
        if not is_processable(issue, update_closed):
            logger.info("Skipping issue update. issue=%s status=%s", issue.id, issue.status.value)
            continue

        try:
            body, change_log = editor.update(issue)
        except Exception as e:
            logger.error("Failed to update issue body. issue=%s err=%s", issue.id, e)
            errors.append(f"Failed to update #{issue.id}: {e}")
            continue

        if body == issue.body:
            logger.debug("Skipping identical issue body. issue=%s", issue.id)
            continue

        plans.append(PlannedUpdate(issue=issue, body=body, change_log=change_log))

    return plans, errors


def apply_update(
    client: IssueClient,
    plan: PlannedUpdate,
    dry_run: bool = False,
    add_changelog: bool = False,
) -> SyncResult:
    """Persist one planned body and optionally comment its change log."""
    result = SyncResult(issue_id=plan.issue.id)
    logger.info("About to update an issue. issue=%s", plan.issue.id)

    if dry_run:
        logger.info("Dry run mode. issue=%s", plan.issue.id)
        return result

    try:
        client.edit_issue(plan.issue.id, plan.body)
    except Exception as e:
        logger.error("Error while editing an issue. issue=%s err=%s", plan.issue.id, e)
        result.error = str(e)
        return result

    result.updated = True

    comment = create_comment(plan.change_log)
    if add_changelog and comment:
        try:
            client.create_comment(plan.issue.id, comment)
        except Exception as e:
            logger.error("Error while adding a comment. issue=%s err=%s", plan.issue.id, e)
            result.error = str(e)
            return result
        result.commented = True

    return result


def apply_updates(
    client: IssueClient,
    plans: List[PlannedUpdate],
    dry_run: bool = False,
    add_changelog: bool = False,
    max_workers: int = MAX_WORKERS,
) -> List[SyncResult]:
    """Apply planned updates, one concurrent task per parent."""
    if not plans:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(lambda p: apply_update(client, p, dry_run, add_changelog), plans))


def sync_repository(
    settings: Settings,
    client: IssueClient,
    editor: Optional[Editor] = None,
    max_workers: int = MAX_WORKERS,
) -> SyncReport:
    """Sync the child issue sections of every parent in a repository."""
    if editor is None:
        editor = Editor(max_levels=settings.max_levels, add_missing=True)

    for line in settings.describe():
        logger.info(line)

    report = SyncReport()

    issues = client.list_issues(since=since_timestamp(settings.sync_days))
    report.fetched = len(issues)
    if not issues:
        return report

    parents = build_parents(issues, client, max_workers)
    report.parents = len(parents)

    report.plans, report.errors = plan_updates(parents, editor, settings.update_closed)
    report.results = apply_updates(
        client,
        report.plans,
        dry_run=settings.dry_run,
        add_changelog=settings.add_changelog,
        max_workers=max_workers,
    )

    for result in report.results:
        if result.error:
            report.errors.append(f"Failed to sync #{result.issue_id}: {result.error}")

    return report
