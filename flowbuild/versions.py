"""Version parsing utilities.

Converts declared version strings (e.g. "1.0.245-SNAPSHOT") into
ProjectVersion snapshots, strips pre-release suffixes for release builds,
and maps build identifiers onto PEP 440 for Python packaging.
"""

from __future__ import annotations

import re

import semver
from packaging.version import InvalidVersion, Version

from .errors import MalformedVersion, VersionUnavailable
from .models import ProjectVersion

# The suffix is free-form, as Maven allows ("SNAPSHOT", "rc.01", "beta_2").
_VERSION_RE = re.compile(
    r"^(?P<core>\d+\.\d+\.\d+)"
    r"(?:-(?P<suffix>[0-9A-Za-z][0-9A-Za-z._-]*))?"
    r"(?:\+(?P<build>[0-9A-Za-z][0-9A-Za-z.-]*))?$"
)


def parse_core(version_str: str) -> semver.Version:
    """Parse the major.minor.patch core of a major.minor.patch[-suffix] string.

    Only the core has to be valid semver; the suffix and any build metadata
    are checked for shape and then dropped.

    Raises:
        ValueError: If the string does not have that shape.
    """
    match = _VERSION_RE.match(version_str.strip())
    if match is None:
        raise ValueError(f"{version_str!r} is not major.minor.patch[-suffix]")
    return semver.Version.parse(match["core"])


def parse_project_version(
    raw: str, *, source: str = "project descriptor"
) -> ProjectVersion:
    """Build a ProjectVersion from a raw declared version.

    Unlike looser version handling, incomplete versions ("1.2") are rejected:
    every build identifier needs all three components.

    Raises:
        VersionUnavailable: If raw is empty or not major.minor.patch[-suffix].
    """
    if not raw or not raw.strip():
        raise VersionUnavailable(source, "no version declared")
    try:
        v = parse_core(raw)
    except ValueError as exc:
        raise VersionUnavailable(
            source, f"{raw!r} is not major.minor.patch[-suffix]"
        ) from exc
    return ProjectVersion(major=v.major, minor=v.minor, patch=v.patch, raw=raw.strip())


def strip_prerelease(raw: str) -> str:
    """Drop any pre-release suffix (and build metadata) from a version.

    Examples:
        "1.0.245-SNAPSHOT" → "1.0.245"
        "2.1.0" → "2.1.0"

    Raises:
        MalformedVersion: If raw does not parse.
    """
    try:
        v = parse_core(raw)
    except ValueError as exc:
        raise MalformedVersion(raw) from exc
    return str(v.finalize_version())


def to_python_version(build_id: str) -> str:
    """Map a build identifier onto a PEP 440 version for pyproject.toml.

    Mainline identifiers are plain releases and pass through. For the others
    the qualifier, commit time and sha become a local version label:

        1.0.245-f20221205_140600.bas63e1 → 1.0.245+f20221205.140600.bas63e1

    Raises:
        MalformedVersion: If no PEP 440 version can be derived.
    """
    core, sep, label = build_id.partition("-")
    candidate = f"{core}+{label.replace('_', '.')}" if sep else build_id
    # Validate only: str(Version) would fold numeric segments ("000000" → "0").
    try:
        Version(candidate)
    except InvalidVersion as exc:
        raise MalformedVersion(build_id) from exc
    return candidate
