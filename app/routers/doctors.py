"""Doctor endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import require_action
from app.schemas.common import ERROR_RESPONSES
from app.schemas.doctor import DoctorRead, ApprovalStatusRead
from app.services.authorization_service import Action
from app.services.doctor_service import DoctorService

router = APIRouter(prefix="/doctors", tags=["doctors"], responses=ERROR_RESPONSES)


@router.get("/me", response_model=DoctorRead)
async def get_own_profile(
    principal_id: int = Depends(require_action(Action.VIEW_DOCTOR_DASHBOARD)),
    db: Session = Depends(get_db),
):
    return DoctorService.ensure_doctor(db, principal_id)


@router.get("/{doctor_id}/approval", response_model=ApprovalStatusRead)
async def get_approval(doctor_id: int, db: Session = Depends(get_db)):
    return {"doctor_id": doctor_id, "approved": DoctorService.is_approved(db, doctor_id)}
