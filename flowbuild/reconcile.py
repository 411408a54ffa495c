"""Deduplication of automated dependency-update pull requests.

Each scheduled update run proposes a fresh branch. Before opening a pull
request for it, compare against the automated request that is already open:

    Scanning ─┬─ no existing request ─────────────────────→ CREATE_NEW
              └─ existing request ─┬─ tips identical ──────→ NO_ACTION_NEEDED
                                   └─ tips differ ─────────→ REPLACE_EXISTING

Tips are compared directly, so a request whose branch was cut from an older
develop is replaced even when it carries the same dependency bumps.

This module only decides. The caller performs the side effects, strictly
in the order comment → close → push → create, so the superseded request
keeps an explanation of why it disappeared.
"""

from __future__ import annotations

from collections.abc import Sequence

from .errors import InconsistentReconciliationState
from .models import DiffSet, ReconciliationDecision, UpdateRequest


def find_automated_requests(
    open_requests: Sequence[UpdateRequest], title_marker: str, proposed_branch: str
) -> list[UpdateRequest]:
    """Open requests that follow the automated-update naming convention.

    A request for the proposed branch itself is ignored: it cannot be stale
    relative to itself.
    """
    return [
        r
        for r in open_requests
        if r.state == "open"
        and title_marker in r.title
        and r.branch != proposed_branch
    ]


def reconcile(
    proposed_branch: str,
    proposed_diff: DiffSet,
    open_requests: Sequence[UpdateRequest],
    title_marker: str,
) -> ReconciliationDecision:
    """Decide what to do with a newly proposed update branch.

    Args:
        proposed_branch: The branch this run created.
        proposed_diff: Changes of the proposed branch against its base. Empty
            means there is nothing to publish.
        open_requests: Currently open requests, each carrying the tip-to-tip
            diff between proposed_branch and its own branch.
        title_marker: Fixed text every automated-update request title contains.

    Returns:
        CREATE_NEW when no automated request is open, NO_ACTION_NEEDED when
        the open one has exactly the content of the proposed branch,
        REPLACE_EXISTING with the stale request otherwise.

    Raises:
        InconsistentReconciliationState: If more than one automated request
            is open.
    """
    existing = find_automated_requests(open_requests, title_marker, proposed_branch)
    if len(existing) > 1:
        raise InconsistentReconciliationState(r.id for r in existing)
    current = existing[0] if existing else None

    if not proposed_diff:
        return ReconciliationDecision.no_action_needed(current)
    if current is None:
        return ReconciliationDecision.create_new()
    if current.diff:
        return ReconciliationDecision.replace_existing(current)
    return ReconciliationDecision.no_action_needed(current)
