"""Tests for the role permission matrix."""

import pytest
from fastapi import HTTPException

from mangafas.auth.models import CAPABILITY_NAMES, Role, User
from mangafas.auth.permissions import (
    PERMISSION_MATRIX,
    get_permissions,
    has_capability,
    require_capability,
    requires_approval,
)


def _user(role: Role) -> User:
    return User(id=f"u-{role.value}", display_name=role.label, email=f"{role.value}@example.com", role=role)


def test_matrix_covers_every_role():
    assert set(PERMISSION_MATRIX) == set(Role)


def test_member_can_only_read_comment_favorite():
    perms = get_permissions(Role.member)
    assert perms.can_read and perms.can_comment and perms.can_favorite
    assert not perms.can_upload
    assert not perms.can_moderate_comments
    assert not perms.can_administer


def test_expected_rows():
    expected = {
        Role.apprentice_contributor: (True, False, False, True),
        Role.senior_contributor: (True, True, False, True),
        Role.group_leader: (True, True, False, False),
        Role.moderator: (True, True, True, False),
        Role.owner: (True, True, True, False),
    }
    for role, (upload, moderate, administer, review) in expected.items():
        perms = get_permissions(role)
        assert perms.can_upload is upload, role
        assert perms.can_moderate_comments is moderate, role
        assert perms.can_administer is administer, role
        assert perms.upload_requires_approval is review, role


def test_higher_ranks_never_lose_capabilities():
    ranked = sorted(Role, key=lambda r: r.level)
    for lower, higher in zip(ranked, ranked[1:]):
        low, high = get_permissions(lower), get_permissions(higher)
        for name in CAPABILITY_NAMES:
            if getattr(low, name):
                assert getattr(high, name), f"{higher.value} lost {name}"


def test_get_permissions_accepts_role_value():
    assert get_permissions("moderator") == get_permissions(Role.moderator)


def test_get_permissions_rejects_unknown_role():
    with pytest.raises(ValueError):
        get_permissions("emperor")


def test_has_capability():
    assert has_capability(_user(Role.owner), "can_administer")
    assert not has_capability(_user(Role.group_leader), "can_administer")
    assert not has_capability(None, "can_read")


def test_has_capability_rejects_unknown_name():
    with pytest.raises(ValueError):
        has_capability(_user(Role.owner), "can_fly")


def test_requires_approval_only_for_reviewed_ranks():
    assert requires_approval(_user(Role.apprentice_contributor))
    assert requires_approval(_user(Role.senior_contributor))
    assert not requires_approval(_user(Role.group_leader))
    assert not requires_approval(_user(Role.owner))
    assert not requires_approval(_user(Role.member))


def test_require_capability_raises_403():
    require_capability(_user(Role.moderator), "can_administer")
    with pytest.raises(HTTPException) as exc_info:
        require_capability(_user(Role.member), "can_upload")
    assert exc_info.value.status_code == 403


def test_user_role_coerced_from_string():
    user = User(id="u1", display_name="A", email="a@example.com", role="group_leader")
    assert user.role is Role.group_leader
    assert user.created_at
    assert user.last_login == user.created_at
