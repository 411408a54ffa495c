"""Build identifier composition.

Mainline builds are canonical releases and get the bare version:

    1.0.245-SNAPSHOT  →  1.0.245

Every other build gets the qualifier tag, the commit time and the short sha:

    1.2.3  +  feature  +  20221205_140600  +  bas63e1  →  1.2.3-f20221205_140600.bas63e1

The timestamp layout sorts lexicographically, so identifiers with the same
qualifier sort chronologically; the sha separates builds in the same second.
"""

from __future__ import annotations

from .models import ProjectVersion, Qualifier
from .shell import git
from .versions import strip_prerelease

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def compose(
    version: ProjectVersion,
    qualifier: Qualifier,
    commit_timestamp: str,
    commit_short_sha: str,
) -> str:
    """Compose the build identifier.

    Args:
        version: Declared project version.
        qualifier: Result of branch classification.
        commit_timestamp: Commit time, already formatted as YYYYMMDD_HHMMSS.
        commit_short_sha: Abbreviated commit hash.

    Raises:
        MalformedVersion: For mainline builds whose raw version does not parse.
    """
    if qualifier is Qualifier.NONE:
        return strip_prerelease(version.raw)
    return f"{version.core}{qualifier.tag}{commit_timestamp}.{commit_short_sha}"


def commit_timestamp(ref: str = "HEAD") -> str:
    """Committer date of ref, formatted as YYYYMMDD_HHMMSS."""
    return git(
        "log",
        "-n",
        "1",
        "--pretty=format:%cd",
        f"--date=format:{TIMESTAMP_FORMAT}",
        ref,
    )


def short_sha(ref: str = "HEAD") -> str:
    """Abbreviated hash of ref."""
    return git("rev-parse", "--short", ref)
