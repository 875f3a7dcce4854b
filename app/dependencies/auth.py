from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.security import decode_token
from app.models.user import User
from app.models.session import UserSession
from app.services.authorization_service import Action, AuthorizationService
from app.utils.errors import Unauthorized
from app.utils.helpers import utcnow

security = HTTPBearer(auto_error=False)


def get_token_payload(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> dict:
    """Verify the bearer token and its session; return the decoded payload."""
    if credentials is None:
        raise Unauthorized("Not authenticated")

    payload = decode_token(credentials.credentials)
    if payload is None or not payload.get("sub") or not payload.get("jti"):
        raise Unauthorized("Invalid token")

    user_id = int(payload["sub"])
    session = db.query(UserSession).filter(
        UserSession.user_id == user_id,
        UserSession.token_jti == payload["jti"],
        UserSession.is_revoked == False,  # noqa: E712
    ).first()
    if not session:
        raise Unauthorized("Token revoked or invalid")
    if session.expires_at and session.expires_at < utcnow():
        raise Unauthorized("Token expired")

    user = db.query(User.id).filter(User.id == user_id, User.is_deleted == False).first()  # noqa: E712
    if not user:
        raise Unauthorized("User not found")

    return {**payload, "sub": user_id}


def get_current_principal_id(payload: dict = Depends(get_token_payload)) -> int:
    """The authenticated principal's id. Identity only; role is resolved per operation."""
    return payload["sub"]


def require_action(action: Action):
    """Dependency factory: authenticated principal allowed to perform ``action``."""

    def checker(
        principal_id: int = Depends(get_current_principal_id),
        db: Session = Depends(get_db),
    ) -> int:
        AuthorizationService.require(db, principal_id, action)
        return principal_id

    return checker
