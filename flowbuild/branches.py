"""Branch classification: which kind of build is this?

The qualifier records why a build exists (feature work in progress, a
reviewed merge into an integration branch, an urgent production fix, ...)
so consumers of the build identifier can sort and filter by provenance.

Classification is an ordered rule table evaluated top-down; the first
matching rule wins. A trigger that matches nothing is an error, never a
silent default, since a wrong qualifier pollutes every downstream consumer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

from .errors import ClassificationFailure
from .models import BranchPolicy, Qualifier, TriggerContext


class Rule(NamedTuple):
    """A single row of the classification table."""

    name: str
    matches: Callable[[TriggerContext, BranchPolicy], bool]
    qualifier: Qualifier


def _feature_push(ctx: TriggerContext, p: BranchPolicy) -> bool:
    return not ctx.is_merge_event and ctx.source_branch.startswith(p.feature_prefix)


def _release_push(ctx: TriggerContext, p: BranchPolicy) -> bool:
    return not ctx.is_merge_event and ctx.source_branch.startswith(p.release_prefix)


def _merged_into_develop(ctx: TriggerContext, p: BranchPolicy) -> bool:
    return (
        ctx.merged is True
        and ctx.target_branch == p.develop
        and ctx.source_branch.startswith((p.feature_prefix, p.release_prefix))
    )


def _feature_merged_into_support(ctx: TriggerContext, p: BranchPolicy) -> bool:
    # Only feature/ sources qualify here, unlike the develop rule. Kept as-is
    # pending product-owner confirmation.
    return (
        ctx.merged is True
        and ctx.target_branch is not None
        and ctx.target_branch.startswith(p.support_prefix)
        and ctx.source_branch.startswith(p.feature_prefix)
    )


def _hotfix(ctx: TriggerContext, p: BranchPolicy) -> bool:
    return ctx.source_branch.startswith(p.hotfix_prefix)


def _mainline(ctx: TriggerContext, p: BranchPolicy) -> bool:
    return ctx.source_branch == p.mainline


RULES: tuple[Rule, ...] = (
    Rule("feature-push", _feature_push, Qualifier.FEATURE),
    Rule("release-push", _release_push, Qualifier.RELEASE),
    Rule("merged-into-develop", _merged_into_develop, Qualifier.DEVELOP),
    Rule(
        "feature-merged-into-support", _feature_merged_into_support, Qualifier.SUPPORT
    ),
    Rule("hotfix", _hotfix, Qualifier.HOTFIX),
    Rule("mainline", _mainline, Qualifier.NONE),
)


def match_rule(ctx: TriggerContext, policy: BranchPolicy | None = None) -> Rule:
    """Return the first rule matching ctx.

    Raises:
        ClassificationFailure: If no rule matches.
    """
    policy = policy or BranchPolicy()
    for rule in RULES:
        if rule.matches(ctx, policy):
            return rule
    raise ClassificationFailure(ctx)


def classify(ctx: TriggerContext, policy: BranchPolicy | None = None) -> Qualifier:
    """Resolve the build qualifier for a trigger.

    Args:
        ctx: The event that started this run.
        policy: Branch naming conventions; defaults to git-flow names with
                "master" as mainline.

    Returns:
        The qualifier of the first matching rule.

    Raises:
        ClassificationFailure: If the trigger matches no rule.

    Example:
        classify(TriggerContext(source_branch="feature/INT-1234",
                                target_branch="develop", merged=True))
        → Qualifier.DEVELOP
    """
    return match_rule(ctx, policy).qualifier


def is_tagged_build(ctx: TriggerContext, policy: BranchPolicy | None = None) -> bool:
    """Whether this build gets a git tag: mainline pushes and support merges."""
    policy = policy or BranchPolicy()
    if ctx.source_branch == policy.mainline and not ctx.is_merge_event:
        return True
    return ctx.target_branch is not None and ctx.target_branch.startswith(
        policy.support_prefix
    )
