from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.togglehub.db import db_session
from app.togglehub.models import Organization, OrganizationMember, User
from app.togglehub.rbac import PERMISSION_RANKS
from app.togglehub.utils import utcnow


def find_organization(organization_id: int, s: Session | None = None) -> Organization | None:
    s = s or db_session()
    return s.execute(
        select(Organization).where(
            Organization.id == organization_id,
            Organization.deleted_at.is_(None),
        )
    ).scalar_one_or_none()


def create_organization(s: Session, name: str) -> Organization:
    name = (name or "").strip()
    if not name:
        raise ValueError("Organization name is required.")
    org = Organization(name=name)
    s.add(org)
    s.flush()
    return org


def set_member_permission(s: Session, organization: Organization, user: User, permission: str) -> OrganizationMember:
    """Add ``user`` to the organization or change their permission."""
    if permission not in PERMISSION_RANKS:
        raise ValueError(f"Unknown permission {permission!r}. Must be one of: {', '.join(PERMISSION_RANKS)}")

    for member in organization.members:
        if member.user_id == user.id:
            member.permission = permission
            break
    else:
        member = OrganizationMember(user_id=user.id, permission=permission)
        organization.members.append(member)

    organization.updated_at = utcnow()
    s.flush()
    return member
