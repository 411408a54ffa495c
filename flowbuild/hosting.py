"""Pull request hosting API.

The update cycle talks to the hosting service through the small
RequestHost protocol. GhRequestHost implements it with the GitHub CLI;
tests use an in-memory fake.
"""

from __future__ import annotations

import json
from typing import Protocol

from .models import UpdateRequest
from .shell import gh


class RequestHost(Protocol):
    def list_open_requests(self, title_filter: str) -> list[UpdateRequest]: ...

    def create_request(self, base: str, head: str, title: str, body: str) -> str: ...

    def close_request(self, request_id: int, delete_branch: bool) -> None: ...

    def comment_on_request(self, request_id: int, body: str) -> None: ...


def parse_pr_list(output: str) -> list[UpdateRequest]:
    """Parse `gh pr list --json number,title,headRefName,body,state` output."""
    if not output:
        return []
    return [
        UpdateRequest(
            id=item["number"],
            title=item.get("title", ""),
            branch=item.get("headRefName", ""),
            body=item.get("body") or "",
            state="open" if item.get("state", "OPEN").upper() == "OPEN" else "closed",
        )
        for item in json.loads(output)
    ]


class GhRequestHost:
    """RequestHost backed by the `gh` CLI (authenticated via GITHUB_TOKEN)."""

    def __init__(self, limit: int = 100) -> None:
        self.limit = limit

    def list_open_requests(self, title_filter: str) -> list[UpdateRequest]:
        output = gh(
            "pr",
            "list",
            "--state",
            "open",
            "--search",
            f'"{title_filter}" in:title',
            "--json",
            "number,title,headRefName,body,state",
            "--limit",
            str(self.limit),
        )
        return [r for r in parse_pr_list(output) if title_filter in r.title]

    def create_request(self, base: str, head: str, title: str, body: str) -> str:
        """Open a pull request and return its URL."""
        return gh(
            "pr",
            "create",
            "--base",
            base,
            "--head",
            head,
            "--title",
            title,
            "--body",
            body,
        )

    def close_request(self, request_id: int, delete_branch: bool) -> None:
        args = ["pr", "close", str(request_id)]
        if delete_branch:
            args.append("--delete-branch")
        gh(*args)

    def comment_on_request(self, request_id: int, body: str) -> None:
        gh("pr", "comment", str(request_id), "--body", body)
