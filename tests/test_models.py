"""Tests for flowbuild.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from flowbuild.models import (
    DiffSet,
    ProjectVersion,
    Qualifier,
    ReconcileAction,
    ReconciliationDecision,
    TriggerContext,
    UpdateRequest,
)


class TestQualifier:
    @pytest.mark.parametrize(
        ("qualifier", "tag"),
        [
            (Qualifier.FEATURE, "-f"),
            (Qualifier.RELEASE, "-r"),
            (Qualifier.DEVELOP, "-d"),
            (Qualifier.SUPPORT, "-s"),
            (Qualifier.HOTFIX, "-h"),
            (Qualifier.NONE, ""),
        ],
    )
    def test_tags(self, qualifier: Qualifier, tag: str) -> None:
        assert qualifier.tag == tag

    def test_every_qualifier_has_a_tag(self) -> None:
        for q in Qualifier:
            assert isinstance(q.tag, str)


class TestTriggerContext:
    def test_push_defaults(self) -> None:
        ctx = TriggerContext(source_branch="feature/x")
        assert ctx.target_branch is None
        assert ctx.merged is None
        assert not ctx.is_merge_event
        assert not ctx.is_abandoned_merge

    def test_is_immutable(self) -> None:
        ctx = TriggerContext(source_branch="feature/x")
        with pytest.raises(ValidationError):
            ctx.source_branch = "develop"

    def test_abandoned_merge(self) -> None:
        ctx = TriggerContext(
            source_branch="feature/x", target_branch="develop", merged=False
        )
        assert ctx.is_merge_event
        assert ctx.is_abandoned_merge

    def test_merged_is_not_abandoned(self) -> None:
        ctx = TriggerContext(
            source_branch="feature/x", target_branch="develop", merged=True
        )
        assert not ctx.is_abandoned_merge


class TestProjectVersion:
    def test_core(self) -> None:
        v = ProjectVersion(major=1, minor=0, patch=245, raw="1.0.245-SNAPSHOT")
        assert v.core == "1.0.245"

    def test_rejects_negative_components(self) -> None:
        with pytest.raises(ValidationError):
            ProjectVersion(major=-1, minor=0, patch=0, raw="-1.0.0")


class TestDiffSet:
    def test_empty_is_falsy(self) -> None:
        assert not DiffSet()
        assert DiffSet(files={"a": DiffSet.DELETED})


class TestReconciliationDecision:
    def test_create_new(self) -> None:
        d = ReconciliationDecision.create_new()
        assert d.action is ReconcileAction.CREATE_NEW
        assert d.old_request_id is None
        assert d.opens_new_request

    def test_replace_existing_carries_old_id(self) -> None:
        old = UpdateRequest(id=12, title="t", branch="feature/auto-version-3")
        d = ReconciliationDecision.replace_existing(old)
        assert d.action is ReconcileAction.REPLACE_EXISTING
        assert d.old_request_id == 12
        assert d.opens_new_request

    def test_no_action_needed(self) -> None:
        old = UpdateRequest(id=12, title="t", branch="feature/auto-version-3")
        d = ReconciliationDecision.no_action_needed(old)
        assert d.action is ReconcileAction.NO_ACTION_NEEDED
        assert not d.opens_new_request
