"""Subprocess helpers for flowbuild's external collaborators.

flowbuild never talks to a remote API directly: commit metadata, branch
pushes and tags go through git, pull requests through the GitHub CLI, and
version reads/writes through the project's build tool (mvn, uv).
"""

from __future__ import annotations

import subprocess
import sys


def git(*args: str, check: bool = True) -> str:
    """Run git and return its stripped stdout.

    Used for commit timestamps and short hashes, branch diffs, update
    commits, pushes and tags.

    Args:
        *args: git subcommand and arguments, e.g. ("diff", "--raw", a, b).
        check: Raise CalledProcessError on a non-zero exit. Pass False for
               queries whose failure is an answer, not an error.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def gh(*args: str, check: bool = True) -> str:
    """Run the GitHub CLI (pull request list/create/close/comment)."""
    result = subprocess.run(["gh", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def run(*args: str, check: bool = True) -> subprocess.CompletedProcess[bytes]:
    """Run a build-tool command with its output streamed to the CI log.

    The dependency update command and `mvn versions:set` go through here,
    since their progress is worth seeing in the job output.
    """
    return subprocess.run(args, check=check)


def capture(*args: str, check: bool = True) -> str:
    """Run a build-tool query, e.g. `mvn help:evaluate`, and return its answer."""
    result = subprocess.run(args, capture_output=True, text=True, check=check)
    return result.stdout.strip()


def step(msg: str) -> None:
    """Print a section header into the CI log."""
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def fatal(msg: str) -> None:
    """Report an unrecoverable failure on stderr and exit 1."""
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)
