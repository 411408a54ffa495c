"""Configuration loading from [tool.flowbuild] in pyproject.toml.

Example:

    [tool.flowbuild]
    descriptor = "maven"

    [tool.flowbuild.branches]
    mainline = "main"

    [tool.flowbuild.update]
    command = ["mvn", "versions:update-properties", "-U"]
    watched-files = ["pom.xml"]

Keys may be written kebab-case or snake_case. Anything not set falls back
to the defaults below.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .models import BranchPolicy
from .toml import get_tool_table, load_pyproject


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class UpdatePolicy(BaseModel):
    """Settings for the scheduled dependency-update cycle.

    Attributes:
        command: Command that bumps dependency versions in the working tree.
        watched_files: Files whose modification means an update happened.
        branch_prefix: Prefix of the per-run update branch (run number appended).
        title: Fixed marker identifying automated-update requests. The request
               title is "<MM-DD-YYYY> - <title>".
        body: Body of newly created requests.
        supersede_comment: Comment posted on a request before it is closed
                           in favour of a newer one.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=_kebab, populate_by_name=True, extra="forbid"
    )

    command: list[str] = Field(default_factory=lambda: ["uv", "lock", "--upgrade"])
    watched_files: list[str] = Field(
        default_factory=lambda: ["pyproject.toml", "uv.lock"]
    )
    branch_prefix: str = "feature/auto-version-"
    title: str = "Dependency auto updates into Develop"
    body: str = "Created by scheduled flowbuild update"
    supersede_comment: str = (
        "Additional dependency changes needed since creation of this Pull Request. "
        "Closing this Pull Request and opening a new one. [This is an automated message]"
    )


class FlowConfig(BaseModel):
    """Top-level [tool.flowbuild] settings."""

    model_config = ConfigDict(
        frozen=True, alias_generator=_kebab, populate_by_name=True, extra="forbid"
    )

    descriptor: Literal["pyproject", "maven"] = "pyproject"
    branches: BranchPolicy = Field(default_factory=BranchPolicy)
    update: UpdatePolicy = Field(default_factory=UpdatePolicy)


def parse_config(table: dict) -> FlowConfig:
    """Validate a raw [tool.flowbuild] table.

    Raises:
        ConfigError: If a key is unknown or a value has the wrong type.
    """
    branches = table.get("branches")
    if isinstance(branches, dict):
        snake = {k.replace("-", "_"): v for k, v in branches.items()}
        table = {**table, "branches": snake}
    try:
        return FlowConfig.model_validate(table)
    except ValidationError as exc:
        raise ConfigError(f"Invalid [tool.flowbuild] configuration:\n{exc}") from exc


def load_config(root: Path) -> FlowConfig:
    """Load configuration from root/pyproject.toml, defaulting when absent."""
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return FlowConfig()
    return parse_config(get_tool_table(load_pyproject(pyproject), "flowbuild"))
