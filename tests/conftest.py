"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit

from flowbuild.models import UpdateRequest


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file with a snapshot version."""
    content = """\
[project]
name = "test-package"
# keep in sync with the changelog
version = "1.0.245-SNAPSHOT"
dependencies = ["requests>=2.0"]

[tool.flowbuild.branches]
mainline = "main"
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def sample_toml_doc() -> tomlkit.TOMLDocument:
    """Create a sample TOML document."""
    content = """\
[project]
name = "my-package"
version = "2.0.0"

[tool.flowbuild]
descriptor = "maven"

[tool.flowbuild.update]
watched-files = ["pom.xml"]
"""
    return tomlkit.parse(content)


class FakeRequestHost:
    """In-memory RequestHost that records every call in order."""

    def __init__(self, requests: list[UpdateRequest] | None = None) -> None:
        self.requests = list(requests or [])
        self.calls: list[tuple] = []

    def list_open_requests(self, title_filter: str) -> list[UpdateRequest]:
        self.calls.append(("list", title_filter))
        return [r for r in self.requests if title_filter in r.title]

    def create_request(self, base: str, head: str, title: str, body: str) -> str:
        self.calls.append(("create", base, head, title, body))
        return "https://github.com/acme/app/pull/99"

    def close_request(self, request_id: int, delete_branch: bool) -> None:
        self.calls.append(("close", request_id, delete_branch))

    def comment_on_request(self, request_id: int, body: str) -> None:
        self.calls.append(("comment", request_id, body))


@pytest.fixture
def fake_host() -> FakeRequestHost:
    return FakeRequestHost()
