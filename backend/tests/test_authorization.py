"""
Authorization tests for OrderHub.

Verifies the "owner or admin" decision table:
- Missing or invalid identity -> 401
- Admin -> allowed for every action
- Admin-only action by a User -> 403
- Read/Mutate by the owner -> allowed, by anyone else -> 403
"""

import pytest
from orderhub.schemas import Identity, Role
from orderhub.services.authorization import (
    Action,
    NotAuthenticatedError,
    PermissionDeniedError,
    decide,
    require,
)


USER = Identity(id=2, username="alice", email="alice@example.com", role=Role.USER)
ADMIN = Identity(id=1, username="admin", email="admin@example.com", role=Role.ADMIN)


# =============================================================================
# UNAUTHENTICATED (401)
# =============================================================================


class TestUnauthenticated:

    @pytest.mark.parametrize("action", list(Action))
    def test_missing_identity(self, action):
        decision = decide(None, action, owner_id=2)
        assert not decision.allowed
        assert decision.error_code == 401

    @pytest.mark.parametrize("bad_id", [0, -5])
    def test_non_positive_id(self, bad_id):
        identity = Identity(id=bad_id, username="ghost", email="g@example.com", role=Role.ADMIN)
        assert decide(identity, Action.READ).error_code == 401

    def test_require_raises(self):
        with pytest.raises(NotAuthenticatedError):
            require(None, Action.READ)


# =============================================================================
# ADMIN
# =============================================================================


class TestAdmin:

    @pytest.mark.parametrize("action", list(Action))
    @pytest.mark.parametrize("owner_id", [None, 1, 2, 999])
    def test_admin_always_allowed(self, action, owner_id):
        assert decide(ADMIN, action, owner_id=owner_id).allowed


# =============================================================================
# USER OWNERSHIP
# =============================================================================


class TestUserOwnership:

    @pytest.mark.parametrize("action", [Action.READ, Action.MUTATE])
    def test_owner_allowed(self, action):
        assert decide(USER, action, owner_id=USER.id)

    @pytest.mark.parametrize("action", [Action.READ, Action.MUTATE])
    def test_other_owner_forbidden(self, action):
        decision = decide(USER, action, owner_id=3)
        assert not decision
        assert decision.error_code == 403

    def test_unscoped_resource_allowed(self):
        assert decide(USER, Action.READ, owner_id=None).allowed

    @pytest.mark.parametrize("owner_id", [None, USER.id, 3])
    def test_admin_only_forbidden(self, owner_id):
        decision = decide(USER, Action.ADMIN_ONLY, owner_id=owner_id)
        assert decision.error_code == 403

    def test_require_raises_permission_denied(self):
        with pytest.raises(PermissionDeniedError) as exc_info:
            require(USER, Action.MUTATE, owner_id=99)
        assert exc_info.value.error_code == 403
