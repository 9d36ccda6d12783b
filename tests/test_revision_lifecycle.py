"""Approval transition on an in-memory revision list."""
from app.togglehub.modules.feature_flags.models import REVISION_DRAFT, REVISION_LIVE, FeatureFlagRevision
from app.togglehub.modules.feature_flags.service import apply_approval


def _revisions(*statuses):
    return [FeatureFlagRevision(id=i + 1, user_id=1, status=st, default_value="v", rules=[]) for i, st in enumerate(statuses)]


def _live_ids(revisions):
    return [r.id for r in revisions if r.status == REVISION_LIVE]


def test_approve_draft_with_no_live():
    revs = _revisions(REVISION_DRAFT, REVISION_DRAFT)
    apply_approval(revs, 2)
    assert _live_ids(revs) == [2]


def test_approve_replaces_previous_live():
    revs = _revisions(REVISION_LIVE, REVISION_DRAFT, REVISION_DRAFT)
    apply_approval(revs, 3)
    assert _live_ids(revs) == [3]
    assert revs[0].status == REVISION_DRAFT


def test_approve_earlier_revision_than_live():
    revs = _revisions(REVISION_DRAFT, REVISION_LIVE)
    apply_approval(revs, 1)
    assert _live_ids(revs) == [1]


def test_reapproving_live_keeps_it_live():
    revs = _revisions(REVISION_DRAFT, REVISION_LIVE)
    apply_approval(revs, 2)
    assert _live_ids(revs) == [2]


def test_unknown_revision_leaves_none_live():
    revs = _revisions(REVISION_LIVE, REVISION_DRAFT)
    apply_approval(revs, 99)
    assert _live_ids(revs) == []


def test_empty_list_is_noop():
    revs = []
    apply_approval(revs, 1)
    assert revs == []
