"""Authoritative role lookup.

Roles are read from ``user_roles`` on every call. Nothing here accepts a
role claimed by the client or cached on a token.
"""
import logging
from typing import Optional
from sqlalchemy.orm import Session
from app.core.constants import UserRole, DenialReason
from app.models.user import User, RoleAssignment
from app.utils.errors import AuthorizationError

logger = logging.getLogger(__name__)


class RoleService:
    @staticmethod
    def resolve_role_or_none(db: Session, user_id) -> Optional[UserRole]:
        if user_id is None:
            return None
        row = (
            db.query(RoleAssignment.role)
            .join(User, User.id == RoleAssignment.user_id)
            .filter(RoleAssignment.user_id == int(user_id), User.is_deleted == False)  # noqa: E712
            .first()
        )
        return UserRole(row.role) if row else None

    @staticmethod
    def resolve_role(db: Session, user_id) -> UserRole:
        """Return the principal's role or fail closed with ``NoRole``."""
        role = RoleService.resolve_role_or_none(db, user_id)
        if role is None:
            logger.warning("No role assignment for principal %s", user_id)
            raise AuthorizationError(DenialReason.NO_ROLE)
        return role

    @staticmethod
    def require_role(db: Session, user_id, role: UserRole) -> UserRole:
        resolved = RoleService.resolve_role(db, user_id)
        if resolved != role:
            logger.warning("Principal %s has role %s, %s required", user_id, resolved.value, role.value)
            raise AuthorizationError(DenialReason.WRONG_ROLE)
        return resolved

    @staticmethod
    def assign_role(db: Session, user_id: int, role: UserRole) -> RoleAssignment:
        """Stage the single role assignment; the caller owns the transaction."""
        assignment = RoleAssignment(user_id=user_id, role=UserRole(role).value)
        db.add(assignment)
        return assignment
