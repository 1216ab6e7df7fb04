# Overview: Ownership-aware authorization ("owner or admin") for use cases.

"""
Authorization Decisions

WHY: Every use case touching a caller-owned resource needs the same rule,
and it must be testable on its own without a database or request.

    decide(identity, Action.READ, owner_id=order.owner_id) -> Decision

RULES (fail closed):
- No identity, or a non-positive id          -> 401 Unauthenticated
- Admin                                       -> allowed for every action
- ADMIN_ONLY action, caller is not Admin      -> 403 Forbidden
- READ / MUTATE on a resource owned by caller -> allowed
- READ / MUTATE on someone else's resource    -> 403 Forbidden
- READ / MUTATE with owner_id=None            -> allowed (resource is not owner-scoped)

ORDERING: callers fetch the resource first and only then check ownership,
so a missing resource reports 404 before any 403.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..responses import ErrorCode
from ..schemas import Identity


class Action(str, Enum):
    READ = "read"
    MUTATE = "mutate"
    ADMIN_ONLY = "admin_only"


class AuthorizationError(Exception):
    error_code = ErrorCode.FORBIDDEN

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticatedError(AuthorizationError):
    error_code = ErrorCode.UNAUTHENTICATED


class PermissionDeniedError(AuthorizationError):
    error_code = ErrorCode.FORBIDDEN


@dataclass(frozen=True)
class Decision:
    allowed: bool
    error_code: int = ErrorCode.OK
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def decide(identity: Identity | None, action: Action, owner_id: int | None = None) -> Decision:
    if identity is None or not identity.id or identity.id <= 0:
        return Decision(False, ErrorCode.UNAUTHENTICATED, "Authentication required")

    if identity.is_admin:
        return ALLOW

    if action == Action.ADMIN_ONLY:
        return Decision(False, ErrorCode.FORBIDDEN, "Administrator role required")

    if owner_id is None or owner_id == identity.id:
        return ALLOW

    return Decision(False, ErrorCode.FORBIDDEN, "You do not have access to this resource")


def require(identity: Identity | None, action: Action, owner_id: int | None = None) -> None:
    """Raise NotAuthenticatedError / PermissionDeniedError instead of returning a Decision."""
    decision = decide(identity, action, owner_id)
    if decision.allowed:
        return
    if decision.error_code == ErrorCode.UNAUTHENTICATED:
        raise NotAuthenticatedError(decision.reason)
    raise PermissionDeniedError(decision.reason)
