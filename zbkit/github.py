"""Search GitHub repositories and format the best match."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlencode

import requests

API_URL = "https://api.github.com/search/repositories"
PREVIEW_BASE = "https://opengraph.githubassets.com/0/"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/88.0.4324.182 Safari/537.36"
)

_COMMAND_RE = re.compile(r"^>github\s(-.{1,10}? )?(.*)\Z")


class SearchError(Exception):
    """The search request failed or found nothing."""


def notnull(text: str) -> str:
    """Return the text, or "None" when it is empty."""
    return text if text else "None"


def parse_command(text: str) -> tuple[str, str] | None:
    """Split ">github [-opt ]query" into (option, query); option may be empty."""
    m = _COMMAND_RE.match(text)
    if m is None:
        return None
    return m.group(1) or "", m.group(2)


def search_url(query: str) -> str:
    """Return the API URL that searches for the query."""
    return API_URL + "?" + urlencode({"q": query})


def _get(repo: dict, path: str) -> Any:
    value: Any = repo
    for key in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _str(repo: dict, path: str) -> str:
    value = _get(repo, path)
    return value if isinstance(value, str) else ""


def _int(repo: dict, path: str) -> int:
    value = _get(repo, path)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value))
        except ValueError:
            return 0
    return 0


def format_repo(repo: dict) -> str:
    """Render the text summary of a repository."""
    return (
        _str(repo, "full_name") + "\n"
        + "Description: " + _str(repo, "description") + "\n"
        + "Star/Fork/Issue: "
        + f"{_int(repo, 'watchers')}/{_int(repo, 'forks')}/{_int(repo, 'open_issues')}\n"
        + "Language: " + notnull(_str(repo, "language")) + "\n"
        + "License: " + notnull(_str(repo, "license.key").upper()) + "\n"
        + "Last pushed: " + _str(repo, "pushed_at") + "\n"
        + "Jump: " + _str(repo, "html_url") + "\n"
    )


def preview_url(repo: dict) -> str:
    """Return the social preview image URL of a repository."""
    return PREVIEW_BASE + _str(repo, "full_name")


def search_repository(query: str, session=None) -> dict:
    """Return the first repository that matches the query."""
    http = session if session is not None else requests.Session()
    try:
        resp = http.get(search_url(query), headers={"User-Agent": USER_AGENT})
    except requests.RequestException as exc:
        raise SearchError(str(exc)) from exc
    if resp.status_code != 200:
        raise SearchError(f"code {resp.status_code}")
    try:
        info = resp.json()
    except ValueError as exc:
        raise SearchError(str(exc)) from exc
    if not isinstance(info, dict) or _int(info, "total_count") == 0:
        raise SearchError("没有找到这样的仓库")
    items = info.get("items") or []
    if not items or not isinstance(items[0], dict):
        raise SearchError("没有找到这样的仓库")
    return items[0]