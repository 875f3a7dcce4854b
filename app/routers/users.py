"""User profile endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.constants import UserRole
from app.core.database import get_db
from app.dependencies.auth import get_current_principal_id
from app.models.user import User
from app.schemas.user import UserRead, PermissionRead
from app.services.authorization_service import AuthorizationService
from app.services.doctor_service import DoctorService
from app.services.role_service import RoleService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
async def get_profile(
    principal_id: int = Depends(get_current_principal_id),
    db: Session = Depends(get_db),
):
    """Profile with the server-resolved role; clients branch navigation on this."""
    user = db.query(User).filter(User.id == principal_id).first()
    role = RoleService.resolve_role(db, principal_id)
    data = UserRead.model_validate(user)
    data.role = role.value
    if role == UserRole.DOCTOR:
        data.doctor_approved = DoctorService.is_user_approved(db, principal_id)
    return data


@router.get("/me/permissions", response_model=dict[str, PermissionRead])
async def get_permissions(
    principal_id: int = Depends(get_current_principal_id),
    db: Session = Depends(get_db),
):
    return {
        action: PermissionRead(
            allowed=decision.allowed,
            reason=decision.reason.value if decision.reason else None,
        )
        for action, decision in AuthorizationService.permissions(db, principal_id).items()
    }
