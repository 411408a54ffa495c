"""Tests for flowbuild.hosting."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, call, patch

from flowbuild.hosting import GhRequestHost, parse_pr_list

MARKER = "Maven POM auto updates into Develop"


def _pr(number: int, title: str, branch: str) -> dict:
    return {
        "number": number,
        "title": title,
        "headRefName": branch,
        "body": "Created by Scheduled GitHub action",
        "state": "OPEN",
    }


class TestParsePrList:
    def test_parses_fields(self) -> None:
        output = json.dumps([_pr(7, f"12-05-2022 - {MARKER}", "feature/auto-version-41")])

        (request,) = parse_pr_list(output)

        assert request.id == 7
        assert request.branch == "feature/auto-version-41"
        assert request.state == "open"
        assert request.body == "Created by Scheduled GitHub action"

    def test_empty_output(self) -> None:
        assert parse_pr_list("") == []

    def test_null_body(self) -> None:
        item = _pr(7, "t", "b") | {"body": None}
        assert parse_pr_list(json.dumps([item]))[0].body == ""


class TestGhRequestHost:
    @patch("flowbuild.hosting.gh")
    def test_list_filters_on_title(self, mock_gh: MagicMock) -> None:
        # gh search is fuzzy; only exact marker matches count
        mock_gh.return_value = json.dumps(
            [
                _pr(7, f"12-05-2022 - {MARKER}", "feature/auto-version-41"),
                _pr(8, "Maven POM cleanup", "feature/INT-9"),
            ]
        )

        requests = GhRequestHost().list_open_requests(MARKER)

        assert [r.id for r in requests] == [7]
        args = mock_gh.call_args[0]
        assert args[:4] == ("pr", "list", "--state", "open")
        assert f'"{MARKER}" in:title' in args

    @patch("flowbuild.hosting.gh")
    def test_create(self, mock_gh: MagicMock) -> None:
        mock_gh.return_value = "https://github.com/acme/app/pull/99"

        url = GhRequestHost().create_request(
            "develop", "feature/auto-version-42", "title", "body"
        )

        assert url == "https://github.com/acme/app/pull/99"
        mock_gh.assert_called_once_with(
            "pr",
            "create",
            "--base",
            "develop",
            "--head",
            "feature/auto-version-42",
            "--title",
            "title",
            "--body",
            "body",
        )

    @patch("flowbuild.hosting.gh")
    def test_close_and_comment(self, mock_gh: MagicMock) -> None:
        host = GhRequestHost()

        host.comment_on_request(7, "superseded")
        host.close_request(7, delete_branch=True)
        host.close_request(8, delete_branch=False)

        assert mock_gh.call_args_list == [
            call("pr", "comment", "7", "--body", "superseded"),
            call("pr", "close", "7", "--delete-branch"),
            call("pr", "close", "8"),
        ]
