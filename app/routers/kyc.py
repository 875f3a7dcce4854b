"""KYC submission and status endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import get_current_principal_id
from app.dependencies.rate_limit import rate_limit
from app.schemas.common import ERROR_RESPONSES
from app.schemas.kyc import KycSubmitRequest, KycStatusRead
from app.services.kyc_service import KycService

router = APIRouter(prefix="/kyc", tags=["kyc"], responses=ERROR_RESPONSES)


@router.post("", status_code=201, response_model=KycStatusRead)
async def submit_kyc(
    payload: KycSubmitRequest,
    principal_id: int = Depends(get_current_principal_id),
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    KycService.submit(
        db,
        principal_id,
        payload.document_type,
        payload.document_number,
        payload.full_name,
        payload.date_of_birth,
    )
    return KycService.get_status(db, principal_id, principal_id)


@router.get("/me", response_model=KycStatusRead | None)
async def get_own_kyc(
    principal_id: int = Depends(get_current_principal_id),
    db: Session = Depends(get_db),
):
    return KycService.get_status(db, principal_id, principal_id)


@router.get("/users/{user_id}", response_model=KycStatusRead | None)
async def get_user_kyc(
    user_id: int,
    principal_id: int = Depends(get_current_principal_id),
    db: Session = Depends(get_db),
):
    return KycService.get_status(db, user_id, principal_id)
