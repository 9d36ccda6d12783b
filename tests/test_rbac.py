import pytest

from app.togglehub.models import Organization, OrganizationMember
from app.togglehub.rbac import COLLABORATOR, READ_ONLY, user_has_permission


def _org(*members):
    org = Organization(id=1, name="Acme")
    for user_id, permission in members:
        org.members.append(OrganizationMember(user_id=user_id, permission=permission))
    return org


@pytest.mark.parametrize(
    "held,required,expected",
    [
        (READ_ONLY, READ_ONLY, True),
        (READ_ONLY, COLLABORATOR, False),
        (COLLABORATOR, READ_ONLY, True),
        (COLLABORATOR, COLLABORATOR, True),
    ],
)
def test_permission_matrix(held, required, expected):
    org = _org((10, held))
    assert user_has_permission(10, org, required) is expected


def test_non_member_has_no_permission():
    org = _org((10, COLLABORATOR))
    assert user_has_permission(11, org, READ_ONLY) is False


def test_missing_user_or_organization():
    org = _org((10, COLLABORATOR))
    assert user_has_permission(None, org, READ_ONLY) is False
    assert user_has_permission(10, None, READ_ONLY) is False


def test_unknown_stored_permission_grants_nothing():
    org = _org((10, "owner"))
    assert user_has_permission(10, org, READ_ONLY) is False
