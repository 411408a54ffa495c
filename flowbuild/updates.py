"""Scheduled dependency-update cycle: update → branch → commit → reconcile → publish.

This module drives one update run:
1. Run the configured update command (e.g. `uv lock --upgrade`)
2. Stop if none of the watched files changed
3. Commit the changes to a fresh branch off develop
4. Compare against the automated pull request that is already open
5. Comment on and close a stale request, then push and open a new one

Step 4 is the pure decision in flowbuild.reconcile; this module only
gathers its inputs and carries out the result.
"""

from __future__ import annotations

from datetime import date

from .config import UpdatePolicy
from .hosting import RequestHost
from .models import (
    BranchPolicy,
    DiffSet,
    ReconcileAction,
    ReconciliationDecision,
    UpdateRequest,
)
from .reconcile import reconcile
from .shell import fatal, git, run, step

BOT_NAME = "github-actions[bot]"
BOT_EMAIL = "github-actions[bot]@users.noreply.github.com"
_NULL_SHA = "0" * 40


def run_update_command(policy: UpdatePolicy) -> None:
    """Bump dependency versions in the working tree."""
    step("Updating dependencies")
    print(f"  {' '.join(policy.command)}")
    result = run(*policy.command, check=False)
    if result.returncode != 0:
        fatal(f"Update command failed: {' '.join(policy.command)}")


def detect_updated_files(watched_files: list[str]) -> list[str]:
    """Watched files modified in the working tree, per `git status --porcelain`."""
    changed: list[str] = []
    for line in git("status", "--porcelain").splitlines():
        # Porcelain lines are "XY path"; git() strips the first line's indent.
        path = line.split(maxsplit=1)[-1]
        name = path.rsplit("/", 1)[-1]
        if path in watched_files or name in watched_files:
            changed.append(path)
    return changed


def update_branch_name(policy: UpdatePolicy, run_number: str) -> str:
    return f"{policy.branch_prefix}{run_number}"


def request_title(policy: UpdatePolicy, today: date) -> str:
    """Title of a new automated request, e.g. "12-05-2022 - <marker>"."""
    return f"{today:%m-%d-%Y} - {policy.title}"


def commit_update(branch: str, base: str, files: list[str]) -> None:
    """Commit the updated files to a new branch created from base."""
    step(f"Committing updates to {branch}")
    git("switch", base)
    git("switch", "-c", branch)
    git("config", "--local", "user.email", BOT_EMAIL)
    git("config", "--local", "user.name", BOT_NAME)
    git("add", *files)
    git("commit", "-m", "Dependency versions changed")
    print(f"  {len(files)} file(s): {', '.join(files)}")


def parse_raw_diff(output: str) -> DiffSet:
    """Parse `git diff --raw --no-abbrev --no-renames` into a DiffSet.

    Lines look like ":100644 100644 <old-sha> <new-sha> M\\tpath".
    """
    files: dict[str, str] = {}
    for line in output.splitlines():
        if not line.startswith(":") or "\t" not in line:
            continue
        meta, path = line.split("\t", 1)
        fields = meta.split()
        new_sha, status = fields[3], fields[4]
        deleted = status == "D" or new_sha == _NULL_SHA
        files[path] = DiffSet.DELETED if deleted else new_sha
    return DiffSet(files=files)


def branch_diff(base: str, branch: str) -> DiffSet:
    """Change set of branch relative to its merge base with base."""
    return parse_raw_diff(
        git("diff", "--raw", "--no-abbrev", "--no-renames", f"{base}...{branch}")
    )


def tip_diff(ref: str, other: str) -> DiffSet:
    """Content differences between the tips of two refs."""
    return parse_raw_diff(
        git("diff", "--raw", "--no-abbrev", "--no-renames", ref, other)
    )


def gather_open_requests(
    host: RequestHost, policy: UpdatePolicy, proposed_branch: str
) -> list[UpdateRequest]:
    """Open automated requests, each with its tip-to-tip diff to proposed_branch."""
    step("Checking for existing automated pull requests")
    git("fetch", "origin", "--prune")
    requests = []
    for request in host.list_open_requests(policy.title):
        diff = tip_diff(proposed_branch, f"origin/{request.branch}")
        requests.append(request.model_copy(update={"diff": diff}))
        print(f"  #{request.id} {request.branch} differs in {len(diff.files)} file(s)")
    if not requests:
        print("  No open automated pull request")
    return requests


def apply_decision(
    decision: ReconciliationDecision,
    host: RequestHost,
    policy: UpdatePolicy,
    branch: str,
    base: str,
    today: date,
) -> str | None:
    """Carry out a decision: comment → close → push → create.

    Returns:
        URL of the newly opened request, or None if nothing was opened.
    """
    if not decision.opens_new_request:
        if decision.old_request_id is None:
            print("  Nothing to publish.")
        else:
            print(
                f"  #{decision.old_request_id} already has these changes. "
                "No new pull request needed."
            )
        return None

    if decision.action is ReconcileAction.REPLACE_EXISTING:
        old_id = decision.old_request_id
        print(f"  Additional changes detected. Closing #{old_id} and its branch.")
        host.comment_on_request(old_id, policy.supersede_comment)
        host.close_request(old_id, delete_branch=True)

    step(f"Publishing {branch}")
    git("push", "--set-upstream", "origin", branch)
    url = host.create_request(base, branch, request_title(policy, today), policy.body)
    print(f"  {url}")
    return url


def run_update_cycle(
    policy: UpdatePolicy,
    branches: BranchPolicy,
    host: RequestHost,
    run_number: str,
    *,
    today: date | None = None,
) -> ReconciliationDecision | None:
    """Execute one scheduled dependency-update cycle.

    Args:
        policy: Update settings from [tool.flowbuild.update].
        branches: Branch names; updates are based on branches.develop.
        host: Pull request hosting API.
        run_number: Unique per-run number, appended to the branch name.
        today: Date used in the request title (defaults to today).

    Returns:
        The reconciliation decision, or None if no dependency changed.

    Raises:
        InconsistentReconciliationState: If several automated requests are open.
    """
    today = today or date.today()
    base = branches.develop

    run_update_command(policy)
    files = detect_updated_files(policy.watched_files)
    if not files:
        print("\nNo dependency updates available.")
        return None

    branch = update_branch_name(policy, run_number)
    commit_update(branch, base, files)
    open_requests = gather_open_requests(host, policy, branch)
    proposed = branch_diff(f"origin/{base}", branch)
    decision = reconcile(branch, proposed, open_requests, policy.title)
    apply_decision(decision, host, policy, branch, base, today)

    print(f"\n{'=' * 60}\nDone!\n{'=' * 60}")
    return decision
