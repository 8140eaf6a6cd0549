"""Shared pytest fixtures for epictree tests."""

import json
from typing import Dict, List, Optional

import pytest


def _create_issues(children, level, recurse, issue_id, status):
    from etr_main import Issue

    issue = Issue(
        id=issue_id,
        title=f"Child Issue id({issue_id}) level({level})",
        status=status,
    )

    for i in range(children):
        # at most ten children per issue, so IDs stay readable
        child_id = 10 * issue_id + i

        if recurse > 0:
            child = _create_issues(children, level + 1, recurse - 1, child_id, status)
        else:
            child = Issue(
                id=child_id,
                title=f"Child Issue id({child_id}) level({level + 1})",
                status=status,
            )

        issue.children.append(child)

    return issue


@pytest.fixture
def make_issues():
    """Factory for a parent issue #1 with a regular tree of children.

    Child IDs are built from the parent ID: #1 has #10, #11...; #10 has
    #100, #101... and titles read "Child Issue id(<id>) level(<level>)".

    Usage:
        issue = make_issues(children=2, recurse=1)
    """
    from etr_main import IssueStatus

    def factory(children=1, recurse=0, status=IssueStatus.OPENED, body=""):
        issue = _create_issues(children, 0, recurse, 1, status)
        issue.body = body
        return issue

    return factory


class FakeClient:
    """In-memory stand-in for GitHubClient."""

    def __init__(self, issues=None, extra=None, fail_edit=None, fail_get=None):
        self.issues = list(issues or [])
        # Issues only reachable through get_issue (outside the sync window)
        self.extra = {i.id: i for i in (extra or [])}
        self.fail_edit = set(fail_edit or ())
        self.fail_get = set(fail_get or ())
        self.edits: Dict[int, str] = {}
        self.comments: Dict[int, List[str]] = {}
        self.since: Optional[str] = None
        self.fetched: List[int] = []

    def list_issues(self, since=None):
        self.since = since
        return list(self.issues)

    def get_issue(self, number):
        from etr_main import GitHubError

        self.fetched.append(number)
        if number in self.fail_get or number not in self.extra:
            raise GitHubError(f"GET issue {number} returned 404", status_code=404)
        return self.extra[number]

    def edit_issue(self, number, body):
        from etr_main import GitHubError

        if number in self.fail_edit:
            raise GitHubError(f"PATCH issue {number} returned 500", status_code=500)
        self.edits[number] = body

    def create_comment(self, number, body):
        self.comments.setdefault(number, []).append(body)


@pytest.fixture
def fake_client():
    """Factory for FakeClient instances."""
    return FakeClient


@pytest.fixture
def issues_jsonl(tmp_path):
    """Write issue records to a JSONL file and return its path.

    Usage:
        path = issues_jsonl([{"id": 1, "title": "Epic", "body": ""}])
    """

    def factory(records, name="issues.jsonl"):
        path = tmp_path / name
        path.write_text("".join(json.dumps(r) + "\n" for r in records))
        return path

    return factory


@pytest.fixture
def clean_env(monkeypatch):
    """Remove INPUT_* variables so tests do not see the real environment."""
    for name in (
        "INPUT_REPO",
        "INPUT_TOKEN",
        "INPUT_SYNC_DAYS",
        "INPUT_MAX_LEVELS",
        "INPUT_DRY_RUN",
        "INPUT_ADD_CHANGELOG",
        "INPUT_UPDATE_CLOSED",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
