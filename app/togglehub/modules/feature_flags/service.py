from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from sqlalchemy import select, update

from app.togglehub.db import apply_statement_timeout
from app.togglehub.modules.feature_flags.models import (
    REVISION_DRAFT,
    REVISION_LIVE,
    FeatureFlag,
    FeatureFlagRevision,
)
from app.togglehub.utils import utcnow

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.togglehub.modules.feature_flags.schemas import Rule


class FeatureFlagNotFound(Exception):
    """No feature flag with this id in the organization."""


def rules_to_json(rules: Sequence["Rule"] | None) -> list[dict[str, Any]]:
    return [r.model_dump() for r in (rules or [])]


def list_feature_flags(
    s: "Session",
    organization_id: int,
    page: int,
    page_size: int,
    *,
    timeout_seconds: int = 0,
) -> list[FeatureFlag]:
    """One page of the organization's flags that are not soft-deleted, oldest first."""
    apply_statement_timeout(s, timeout_seconds)
    stmt = (
        select(FeatureFlag)
        .where(
            FeatureFlag.organization_id == organization_id,
            FeatureFlag.deleted_at.is_(None),
        )
        .order_by(FeatureFlag.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(s.execute(stmt).scalars().all())


def get_feature_flag(
    s: "Session",
    organization_id: int,
    feature_flag_id: int,
    *,
    for_update: bool = False,
) -> FeatureFlag | None:
    """Fetch a flag by id, including soft-deleted ones."""
    stmt = select(FeatureFlag).where(
        FeatureFlag.id == feature_flag_id,
        FeatureFlag.organization_id == organization_id,
    )
    if for_update:
        stmt = stmt.with_for_update()
    return s.execute(stmt).scalar_one_or_none()


def create_feature_flag(
    s: "Session",
    *,
    organization_id: int,
    user_id: int,
    name: str,
    flag_type: str,
    default_value: str,
    rules: Sequence["Rule"] | None,
) -> FeatureFlag:
    """Create a flag at version 1 seeded with one draft revision."""
    now = utcnow()
    flag = FeatureFlag(
        organization_id=organization_id,
        user_id=user_id,
        name=name,
        type=flag_type,
        version=1,
        created_at=now,
        updated_at=now,
    )
    flag.revisions.append(
        FeatureFlagRevision(
            user_id=user_id,
            status=REVISION_DRAFT,
            default_value=default_value,
            rules=rules_to_json(rules),
            created_at=now,
        )
    )
    s.add(flag)
    s.flush()
    return flag


def push_revision(
    s: "Session",
    *,
    organization_id: int,
    feature_flag_id: int,
    user_id: int,
    default_value: str,
    rules: Sequence["Rule"] | None,
) -> FeatureFlagRevision:
    """
    Append a draft revision to a flag.

    Only the new revision row and the flag's ``updated_at`` are written; the
    existing revisions are never read back and rewritten.
    """
    now = utcnow()
    touched = s.execute(
        update(FeatureFlag)
        .where(
            FeatureFlag.id == feature_flag_id,
            FeatureFlag.organization_id == organization_id,
        )
        .values(updated_at=now)
        .execution_options(synchronize_session=False)
    )
    if touched.rowcount == 0:
        raise FeatureFlagNotFound(feature_flag_id)

    revision = FeatureFlagRevision(
        feature_flag_id=feature_flag_id,
        user_id=user_id,
        status=REVISION_DRAFT,
        default_value=default_value,
        rules=rules_to_json(rules),
        created_at=now,
    )
    s.add(revision)
    s.flush()
    return revision


def apply_approval(revisions: Sequence[FeatureFlagRevision], revision_id: int) -> None:
    """
    Make ``revision_id`` the live revision.

    Single pass in list order: every live revision is demoted and the target
    is promoted in the same visit, so approving the current live revision
    leaves it live. An unknown ``revision_id`` leaves every revision in draft.
    """
    for revision in revisions:
        if revision.status == REVISION_LIVE:
            revision.status = REVISION_DRAFT
        if revision.id == revision_id:
            revision.status = REVISION_LIVE


def approve_revision(
    s: "Session",
    *,
    organization_id: int,
    feature_flag_id: int,
    revision_id: int,
) -> FeatureFlag:
    """
    Run the approval transition and bump the version.

    The flag row is locked for the rest of the transaction so concurrent
    approvals of the same flag serialize (PostgreSQL; no-op on SQLite).
    The version is incremented even when no revision changes status.
    """
    flag = get_feature_flag(s, organization_id, feature_flag_id, for_update=True)
    if flag is None:
        raise FeatureFlagNotFound(feature_flag_id)

    apply_approval(flag.revisions, revision_id)
    flag.version += 1
    flag.updated_at = utcnow()
    s.flush()
    return flag


def soft_delete_feature_flag(s: "Session", *, organization_id: int, feature_flag_id: int) -> None:
    """Stamp ``deleted_at``; revisions are kept."""
    now = utcnow()
    result = s.execute(
        update(FeatureFlag)
        .where(
            FeatureFlag.id == feature_flag_id,
            FeatureFlag.organization_id == organization_id,
        )
        .values(deleted_at=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise FeatureFlagNotFound(feature_flag_id)
