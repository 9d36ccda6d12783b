from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g

from app.togglehub.errors import AuthenticationError, AuthorizationError, ClientInputError, InternalError
from app.togglehub.models import Organization
from app.togglehub.utils import parse_id

READ_ONLY = "read_only"
COLLABORATOR = "collaborator"

# Higher rank implies every privilege of the lower ones.
PERMISSION_RANKS = {
    READ_ONLY: 1,
    COLLABORATOR: 2,
}


def user_has_permission(user_id: int | None, organization: Organization | None, required: str) -> bool:
    if user_id is None or organization is None:
        return False
    needed = PERMISSION_RANKS[required]
    for member in organization.members:
        if member.user_id == user_id:
            return PERMISSION_RANKS.get(member.permission, 0) >= needed
    return False


def require_org_permission(required: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Resolve the acting user and the ``organization_id`` path segment, then
    check membership. The loaded Organization is passed to the view as
    ``organization`` in place of ``organization_id``.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(fn)
        def wrapped(*args: Any, organization_id: str, **kwargs: Any):
            from app.togglehub.organizations import find_organization

            user_id: int | None = getattr(g, "current_user_id", None)
            if user_id is None:
                raise AuthenticationError("missing or invalid bearer token")

            org_id = parse_id(organization_id)
            if org_id is None:
                raise ClientInputError(f"malformed organization id {organization_id!r}")

            organization = find_organization(org_id)
            if organization is None:
                raise InternalError(f"organization {org_id} not found")

            if not user_has_permission(user_id, organization, required):
                raise AuthorizationError(f"user {user_id} lacks {required} on organization {org_id}")
            return fn(*args, organization=organization, **kwargs)

        return wrapped

    return decorator
