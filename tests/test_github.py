"""Tests for the GitHub client (no network, fake session)."""

import pytest
import requests


class FakeResponse:
    def __init__(self, payload=None, status_code=200, next_url=None):
        self.payload = payload
        self.status_code = status_code
        self.ok = status_code < 400
        self.text = "" if self.ok else "boom"
        self.links = {"next": {"url": next_url}} if next_url else {}

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.headers = {}
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, timeout=None, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(responses, token="t0k"):
    from etr_main import GitHubClient

    session = FakeSession(responses)
    return GitHubClient("octo", "hello", token=token, session=session), session


def test_list_issues_follows_pagination_and_skips_pulls():
    """All pages are read; pull requests are dropped."""
    page1 = [
        {"number": 1, "title": "Epic", "body": "", "state": "open"},
        {"number": 2, "title": "PR", "body": "", "state": "open", "pull_request": {}},
    ]
    page2 = [{"number": 3, "title": "Child", "body": "Parent: #1", "state": "closed"}]
    client, session = _client([
        FakeResponse(page1, next_url="https://api.github.com/repos/octo/hello/issues?page=2"),
        FakeResponse(page2),
    ])

    issues = client.list_issues(since="2024-01-01T00:00:00Z")

    assert [i.id for i in issues] == [1, 3]
    assert issues[1].is_closed()
    first, second = session.calls
    assert first[0] == "GET"
    assert first[1] == "https://api.github.com/repos/octo/hello/issues"
    assert first[2]["params"] == {"state": "all", "per_page": 100, "since": "2024-01-01T00:00:00Z"}
    assert second[1].endswith("page=2")
    assert second[2]["params"] == {}


def test_token_sets_authorization_header():
    client, session = _client([], token="secret")

    assert session.headers["Authorization"] == "Bearer secret"


def test_no_token_no_authorization_header():
    client, session = _client([], token="")

    assert "Authorization" not in session.headers


def test_get_edit_and_comment():
    """Single issue calls hit the expected endpoints."""
    client, session = _client([
        FakeResponse({"number": 7, "title": "T", "body": "b", "state": "open", "locked": True}),
        FakeResponse({}),
        FakeResponse({}),
    ])

    issue = client.get_issue(7)
    client.edit_issue(7, "new body")
    client.create_comment(7, "changelog")

    assert issue.is_locked()
    assert [(c[0], c[1].rsplit("/repos/", 1)[1]) for c in session.calls] == [
        ("GET", "octo/hello/issues/7"),
        ("PATCH", "octo/hello/issues/7"),
        ("POST", "octo/hello/issues/7/comments"),
    ]
    assert session.calls[1][2]["json"] == {"body": "new body"}
    assert session.calls[2][2]["json"] == {"body": "changelog"}


def test_http_error_raises_github_error():
    from etr_main import GitHubError

    client, _ = _client([FakeResponse(status_code=404)])

    with pytest.raises(GitHubError) as exc_info:
        client.get_issue(99)

    assert exc_info.value.status_code == 404


def test_connection_error_raises_github_error():
    from etr_main import GitHubError

    client, _ = _client([requests.ConnectionError("offline")])

    with pytest.raises(GitHubError, match="offline"):
        client.edit_issue(1, "x")
