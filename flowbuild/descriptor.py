"""Build-tool project descriptors.

A descriptor answers "what version does the project declare?" and accepts
the composed build identifier back before packaging. Two build tools are
supported: pyproject.toml projects (read and written with tomlkit) and
Maven projects (queried through the mvn CLI). Maven takes the identifier
verbatim; pyproject.toml gets its PEP 440 form.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol

from tomlkit.exceptions import TOMLKitError

from .errors import VersionUnavailable
from .models import ProjectVersion
from .shell import capture, run
from .toml import (
    get_project_version,
    load_pyproject,
    save_pyproject,
    set_project_version,
)
from .versions import parse_project_version, to_python_version


class ProjectDescriptor(Protocol):
    """Read/write access to the project's declared version."""

    name: str

    def declared_version(self) -> str: ...

    def set_version(self, new_version: str) -> str:
        """Write new_version; return the version string actually written."""
        ...


class PyprojectDescriptor:
    """[project].version of a pyproject.toml file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = str(path)

    def declared_version(self) -> str:
        try:
            doc = load_pyproject(self.path)
        except (OSError, TOMLKitError) as exc:
            raise VersionUnavailable(self.name, str(exc)) from exc
        version = get_project_version(doc)
        if version is None:
            raise VersionUnavailable(self.name, "[project].version is not declared")
        return version

    def set_version(self, new_version: str) -> str:
        """Write new_version as a PEP 440 version, so the project still builds.

        Raises:
            MalformedVersion: If new_version has no PEP 440 equivalent.
        """
        version = to_python_version(new_version)
        doc = load_pyproject(self.path)
        set_project_version(doc, version)
        save_pyproject(self.path, doc)
        return version


class MavenDescriptor:
    """project.version of a Maven pom.xml, evaluated by mvn itself."""

    def __init__(self, pom: Path) -> None:
        self.pom = pom
        self.name = str(pom)

    def declared_version(self) -> str:
        try:
            return capture(
                "mvn",
                "-f",
                str(self.pom),
                "help:evaluate",
                "-Dexpression=project.version",
                "-q",
                "-DforceStdout",
            )
        except subprocess.CalledProcessError as exc:
            raise VersionUnavailable(
                self.name, f"mvn help:evaluate exited with {exc.returncode}"
            ) from exc
        except FileNotFoundError as exc:
            raise VersionUnavailable(self.name, "mvn is not installed") from exc

    def set_version(self, new_version: str) -> str:
        run(
            "mvn",
            "-f",
            str(self.pom),
            "--batch-mode",
            "versions:set",
            f"-DnewVersion={new_version}",
            "versions:commit",
        )
        return new_version


def descriptor_for(kind: str, root: Path) -> ProjectDescriptor:
    """Return the descriptor for a configured build tool kind."""
    if kind == "maven":
        return MavenDescriptor(root / "pom.xml")
    return PyprojectDescriptor(root / "pyproject.toml")


def extract_version(descriptor: ProjectDescriptor) -> ProjectVersion:
    """Read and parse the declared version.

    Raises:
        VersionUnavailable: If the descriptor cannot be read or the version
            is not major.minor.patch[-suffix].
    """
    return parse_project_version(descriptor.declared_version(), source=descriptor.name)
