"""Data models for flowbuild.

These Pydantic models represent the values passed between the classifier,
the composer and the reconciler. All of them are immutable snapshots.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field


class Qualifier(str, Enum):
    """Provenance category of a build, derived from branch topology."""

    FEATURE = "feature"
    RELEASE = "release"
    DEVELOP = "develop"
    SUPPORT = "support"
    HOTFIX = "hotfix"
    NONE = "none"

    @property
    def tag(self) -> str:
        """Two-character suffix embedded in the build identifier ("" for mainline)."""
        return _QUALIFIER_TAGS[self]


_QUALIFIER_TAGS = {
    Qualifier.FEATURE: "-f",
    Qualifier.RELEASE: "-r",
    Qualifier.DEVELOP: "-d",
    Qualifier.SUPPORT: "-s",
    Qualifier.HOTFIX: "-h",
    Qualifier.NONE: "",
}


class TriggerContext(BaseModel):
    """The event that started a pipeline run.

    Attributes:
        source_branch: Pushed branch, or the head branch of a pull request.
        target_branch: Base branch of a pull request; None for plain pushes.
        merged: Whether the pull request was merged; None for plain pushes.
    """

    model_config = ConfigDict(frozen=True)

    source_branch: str
    target_branch: str | None = None
    merged: bool | None = None

    @property
    def is_merge_event(self) -> bool:
        return self.target_branch is not None

    @property
    def is_abandoned_merge(self) -> bool:
        """A pull request that was closed without being merged."""
        return self.is_merge_event and self.merged is False


class ProjectVersion(BaseModel):
    """Declared project version at the commit being built.

    Attributes:
        major: Major component.
        minor: Minor component.
        patch: Patch component.
        raw: Version string as declared, possibly with a pre-release suffix
             (e.g. "1.0.245-SNAPSHOT").
    """

    model_config = ConfigDict(frozen=True)

    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    patch: int = Field(ge=0)
    raw: str

    @property
    def core(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class DiffSet(BaseModel):
    """Content changes between two refs, as listed by `git diff --raw`.

    Maps each differing path to its blob id at the second ref, or to
    DELETED when the file is absent there. An empty DiffSet means the two
    refs hold identical content.
    """

    model_config = ConfigDict(frozen=True)

    DELETED: ClassVar[str] = "deleted"

    files: dict[str, str] = Field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.files)


class UpdateRequest(BaseModel):
    """An open (or closed) automated dependency-update pull request."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    branch: str
    body: str = ""
    state: Literal["open", "closed"] = "open"
    # Tip-to-tip diff from the proposed update branch to this request's branch.
    diff: DiffSet = Field(default_factory=DiffSet)


class ReconcileAction(str, Enum):
    NO_ACTION_NEEDED = "no-action-needed"
    REPLACE_EXISTING = "replace-existing"
    CREATE_NEW = "create-new"


class ReconciliationDecision(BaseModel):
    """Outcome of one reconciliation cycle.

    Attributes:
        action: What the caller must do.
        old_request: The request to supersede (REPLACE_EXISTING) or the one
                     that already matches the proposed branch
                     (NO_ACTION_NEEDED, None if nothing was proposed).
    """

    model_config = ConfigDict(frozen=True)

    action: ReconcileAction
    old_request: UpdateRequest | None = None

    @classmethod
    def create_new(cls) -> ReconciliationDecision:
        return cls(action=ReconcileAction.CREATE_NEW)

    @classmethod
    def no_action_needed(
        cls, existing: UpdateRequest | None = None
    ) -> ReconciliationDecision:
        return cls(action=ReconcileAction.NO_ACTION_NEEDED, old_request=existing)

    @classmethod
    def replace_existing(cls, existing: UpdateRequest) -> ReconciliationDecision:
        return cls(action=ReconcileAction.REPLACE_EXISTING, old_request=existing)

    @property
    def old_request_id(self) -> int | None:
        return self.old_request.id if self.old_request else None

    @property
    def opens_new_request(self) -> bool:
        return self.action is not ReconcileAction.NO_ACTION_NEEDED


class BranchPolicy(BaseModel):
    """Branch naming conventions used by the classifier.

    Attributes:
        mainline: The canonical, always-releasable branch.
        develop: The integration branch feature/release work merges into.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    mainline: str = "master"
    develop: str = "develop"
    feature_prefix: str = "feature/"
    release_prefix: str = "release/"
    hotfix_prefix: str = "hotfix/"
    support_prefix: str = "support/"


class BuildInfo(BaseModel):
    """Result of resolving one pipeline run's build identifier.

    Attributes:
        qualifier: Provenance category of the build.
        version: Declared project version the identifier was derived from.
        build_id: The composed identifier (e.g. "1.2.3-f20221205_140600.bas63e1").
    """

    model_config = ConfigDict(frozen=True)

    qualifier: Qualifier
    version: ProjectVersion
    build_id: str
