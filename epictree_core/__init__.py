"""Epictree - Keep child issue checklists of parent issues in sync.

This package provides the core functionality for epictree.
Import from here for the public API.
"""

from epictree_core.exceptions import (
    EpictreeError,
    RenderStop,
    AlreadyRenderedError,
    LevelTooDeepError,
    SelfReferenceError,
    CycleError,
    ConfigError,
    GitHubError,
    LockError,
)
from epictree_core.constants import (
    SECTION_HEADER,
    SPACES_PER_LEVEL,
    PARENT_MARKERS,
)
from epictree_core.utils import (
    get_iso_timestamp,
    since_timestamp,
    split_lines,
    file_lock,
)
from epictree_core.issues import IssueStatus, Issue
from epictree_core.tree import (
    is_parent_issue_mark,
    parse_issue_number,
    parse_parent_issue,
    detect_cycle,
    IssueTree,
)
from epictree_core.changelog import ChangeLog, create_comment
from epictree_core.editor import (
    count_prefix_spaces,
    parse_issue_id,
    Editor,
)
from epictree_core.config import (
    flag_to_bool,
    parse_sync_days,
    parse_max_levels,
    split_repo,
    Settings,
)
from epictree_core.github import GitHubClient
from epictree_core.jsonl import load_issues, export_issues
from epictree_core.service import (
    PlannedUpdate,
    SyncResult,
    SyncReport,
    fetch_missing,
    is_processable,
    build_parents,
    plan_updates,
    apply_update,
    apply_updates,
    sync_repository,
)
from epictree_core.cli import app, main

__all__ = [
    # Exceptions
    "EpictreeError",
    "RenderStop",
    "AlreadyRenderedError",
    "LevelTooDeepError",
    "SelfReferenceError",
    "CycleError",
    "ConfigError",
    "GitHubError",
    "LockError",
    # Constants
    "SECTION_HEADER",
    "SPACES_PER_LEVEL",
    "PARENT_MARKERS",
    # Utils
    "get_iso_timestamp",
    "since_timestamp",
    "split_lines",
    "file_lock",
    # Issues
    "IssueStatus",
    "Issue",
    # Tree
    "is_parent_issue_mark",
    "parse_issue_number",
    "parse_parent_issue",
    "detect_cycle",
    "IssueTree",
    # Change log
    "ChangeLog",
    "create_comment",
    # Editor
    "count_prefix_spaces",
    "parse_issue_id",
    "Editor",
    # Config
    "flag_to_bool",
    "parse_sync_days",
    "parse_max_levels",
    "split_repo",
    "Settings",
    # GitHub
    "GitHubClient",
    # JSONL
    "load_issues",
    "export_issues",
    # Service
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
    # CLI
    "app",
    "main",
]
