"""Capture the triggering event once, at startup.

GitHub Actions exposes the event through environment variables:

- push: GITHUB_REF_NAME is the pushed branch (e.g. "feature/INT-1234").
- pull_request: GITHUB_HEAD_REF is the source branch, GITHUB_BASE_REF the
  target (e.g. "develop"), and the merge status lives in the JSON payload
  at GITHUB_EVENT_PATH (pull_request.merged).

Everything downstream receives the resulting TriggerContext instead of
reading the environment again.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

from .models import TriggerContext
from .shell import git

PULL_REQUEST_EVENTS = frozenset({"pull_request", "pull_request_target"})


def current_branch() -> str:
    """Name of the checked-out branch."""
    return git("rev-parse", "--abbrev-ref", "HEAD")


def _read_merged_flag(event_path: str | None) -> bool | None:
    if not event_path:
        return None
    try:
        payload = json.loads(Path(event_path).read_text())
    except (OSError, json.JSONDecodeError):
        return None
    merged = payload.get("pull_request", {}).get("merged")
    return merged if isinstance(merged, bool) else None


def trigger_from_env(env: Mapping[str, str] | None = None) -> TriggerContext:
    """Build the TriggerContext for this run from the CI environment.

    Falls back to the locally checked-out branch (as a plain push) when
    not running under GitHub Actions.
    """
    env = os.environ if env is None else env
    event = env.get("GITHUB_EVENT_NAME", "")

    if event in PULL_REQUEST_EVENTS and env.get("GITHUB_BASE_REF"):
        return TriggerContext(
            source_branch=env.get("GITHUB_HEAD_REF", ""),
            target_branch=env["GITHUB_BASE_REF"],
            merged=_read_merged_flag(env.get("GITHUB_EVENT_PATH")),
        )

    source = env.get("GITHUB_REF_NAME") or current_branch()
    return TriggerContext(source_branch=source)


def build_trigger(
    source: str | None,
    target: str | None,
    merged: bool | None,
    env: Mapping[str, str] | None = None,
) -> TriggerContext:
    """Trigger from explicit values, falling back to the environment.

    If a source branch is given, the environment is ignored entirely.
    """
    if source:
        return TriggerContext(
            source_branch=source,
            target_branch=target or None,
            merged=merged if target else None,
        )
    return trigger_from_env(env)
