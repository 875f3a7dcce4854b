"""Patient endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import require_action
from app.schemas.common import ERROR_RESPONSES
from app.schemas.patient import PatientRead
from app.services.authorization_service import Action
from app.services.patient_service import PatientService

router = APIRouter(prefix="/patients", tags=["patients"], responses=ERROR_RESPONSES)


@router.get("/me", response_model=PatientRead)
async def get_patient(
    principal_id: int = Depends(require_action(Action.VIEW_PATIENT_DASHBOARD)),
    db: Session = Depends(get_db),
):
    return PatientService.ensure_patient(db, principal_id)
