"""Error types raised by flowbuild.

Every fatal condition names the rule or field that failed to resolve, so
the CLI can surface it verbatim and exit non-zero.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import TriggerContext


class FlowBuildError(Exception):
    """Base class for all flowbuild errors."""


class ConfigError(FlowBuildError):
    """The [tool.flowbuild] table is invalid."""


class ClassificationFailure(FlowBuildError):
    """A trigger matched no branch classification rule.

    Attributes:
        ctx: The trigger that could not be classified.
    """

    def __init__(self, ctx: TriggerContext) -> None:
        self.ctx = ctx
        super().__init__(
            "No branch classification rule matched "
            f"(source={ctx.source_branch!r}, target={ctx.target_branch!r}, "
            f"merged={ctx.merged!r})"
        )


class VersionUnavailable(FlowBuildError):
    """The declared project version could not be read or has the wrong shape."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Project version unavailable from {source}: {reason}")


class MalformedVersion(FlowBuildError):
    """A raw version string could not be stripped to major.minor.patch."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(
            f"Malformed project version {raw!r}: expected major.minor.patch[-suffix]"
        )


class InconsistentReconciliationState(FlowBuildError):
    """More than one open automated-update request exists.

    Left for manual cleanup: picking one to keep could discard review history.
    """

    def __init__(self, request_ids: Iterable[int]) -> None:
        self.request_ids = sorted(request_ids)
        ids = ", ".join(f"#{i}" for i in self.request_ids)
        super().__init__(
            f"Found {len(self.request_ids)} open automated-update requests ({ids}); "
            "close all but one manually"
        )
