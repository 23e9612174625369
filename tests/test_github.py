from urllib.parse import parse_qs, urlparse

import pytest
import responses

from zbkit.github import (
    API_URL,
    PREVIEW_BASE,
    SearchError,
    format_repo,
    notnull,
    parse_command,
    preview_url,
    search_repository,
    search_url,
)

REPO = {
    "full_name": "someone/project",
    "description": "a thing",
    "watchers": 12,
    "forks": 3,
    "open_issues": 4,
    "language": None,
    "license": {"key": "mit"},
    "pushed_at": "2022-10-01T00:00:00Z",
    "html_url": "https://example.com/someone/project",
}


def test_notnull():
    assert notnull("") == "None"
    assert notnull("Go") == "Go"


def test_parse_command_variants():
    assert parse_command(">github -p zero bot") == ("-p ", "zero bot")
    assert parse_command(">github zero") == ("", "zero")
    assert parse_command("github zero") is None


def test_search_url_round_trip():
    url = search_url("zero bot&x")
    parsed = urlparse(url)
    assert url.startswith(API_URL + "?")
    assert parse_qs(parsed.query)["q"] == ["zero bot&x"]


def test_format_repo():
    text = format_repo(REPO)
    lines = text.split("\n")
    assert lines[0] == "someone/project"
    assert lines[1] == "Description: a thing"
    assert lines[2] == "Star/Fork/Issue: 12/3/4"
    assert lines[3] == "Language: None"
    assert lines[4] == "License: " + "mit".upper()
    assert text.endswith("Jump: https://example.com/someone/project\n")


def test_format_repo_missing_license():
    text = format_repo({"full_name": "a/b", "license": None})
    assert "License: None\n" in text
    assert "Star/Fork/Issue: 0/0/0\n" in text


def test_preview_url():
    assert preview_url(REPO) == PREVIEW_BASE + "someone/project"


def test_search_repository_returns_first():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(
            responses.GET, API_URL, json={"total_count": 2, "items": [REPO, {"full_name": "x/y"}]}
        )
        repo = search_repository("project")
        assert repo["full_name"] == "someone/project"
        assert "User-Agent" in rsps.calls[0].request.headers


def test_search_repository_none_found():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, API_URL, json={"total_count": 0, "items": []})
        with pytest.raises(SearchError, match="没有找到这样的仓库"):
            search_repository("nothing")


def test_search_repository_bad_status():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, API_URL, status=403, body="limited")
        with pytest.raises(SearchError, match="code 403"):
            search_repository("x")