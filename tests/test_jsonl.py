"""Tests for JSONL import/export."""

import json


def test_load_issues(issues_jsonl):
    """Records become issues in file order."""
    from etr_main import load_issues, IssueStatus

    path = issues_jsonl([
        {"id": 2, "title": "Child", "body": "Parent: #1", "status": "closed"},
        {"id": 1, "title": "Epic", "body": ""},
    ])

    issues, stats = load_issues(path)

    assert [i.id for i in issues] == [2, 1]
    assert issues[0].status == IssueStatus.CLOSED
    assert issues[1].status == IssueStatus.OPENED
    assert stats == {"loaded": 2, "errors": 0}


def test_load_issues_skips_malformed_lines(tmp_path):
    """Bad JSON and bad records are counted and skipped."""
    from etr_main import load_issues

    path = tmp_path / "issues.jsonl"
    path.write_text(
        '{"id": 1, "title": "Good"}\n'
        "\n"
        "not json\n"
        '{"title": "No id"}\n'
        '{"id": 2, "status": "weird"}\n'
        '{"id": 3}\n'
    )

    issues, stats = load_issues(path)

    assert [i.id for i in issues] == [1, 3]
    assert stats == {"loaded": 2, "errors": 3}


def test_load_issues_missing_file(tmp_path):
    from etr_main import load_issues

    issues, stats = load_issues(tmp_path / "nope.jsonl")

    assert issues == []
    assert stats == {"loaded": 0, "errors": 0}


def test_export_issues_sorts_by_id(tmp_path):
    """Export is sorted by ID for stable diffs."""
    from etr_main import export_issues, Issue, IssueStatus

    path = tmp_path / "out.jsonl"
    export_issues(
        [Issue(id=3, title="C"), Issue(id=1, title="A", status=IssueStatus.CLOSED)],
        path,
    )

    lines = path.read_text().strip().split("\n")
    assert [json.loads(line)["id"] for line in lines] == [1, 3]
    assert json.loads(lines[0]) == {"id": 1, "title": "A", "body": "", "status": "closed"}
