"""Admin endpoints: doctor approvals and KYC decisions."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.dependencies.auth import require_action
from app.dependencies.rate_limit import rate_limit
from app.schemas.common import ERROR_RESPONSES
from app.schemas.doctor import DoctorRead, PendingDoctorRead, DoctorDecisionRequest
from app.schemas.kyc import KycStatusRead, PendingKycRead, KycRejectRequest, AuditTrailRead
from app.services.authorization_service import Action
from app.services.doctor_service import DoctorService
from app.services.kyc_service import KycService

router = APIRouter(prefix="/admin", tags=["admin"], responses=ERROR_RESPONSES)


@router.get("/pending-doctors", response_model=list[PendingDoctorRead])
async def pending_doctors(
    admin_id: int = Depends(require_action(Action.APPROVE_DOCTORS)),
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    return DoctorService.list_pending(db, admin_id)


@router.post("/doctors/{doctor_id}/approve", response_model=DoctorRead)
async def approve_doctor(
    doctor_id: int,
    payload: DoctorDecisionRequest | None = None,
    admin_id: int = Depends(require_action(Action.APPROVE_DOCTORS)),
    db: Session = Depends(get_db),
):
    return DoctorService.approve_doctor(db, doctor_id, admin_id, payload.notes if payload else None)


@router.post("/doctors/{doctor_id}/reject", response_model=DoctorRead)
async def reject_doctor(
    doctor_id: int,
    payload: DoctorDecisionRequest | None = None,
    admin_id: int = Depends(require_action(Action.APPROVE_DOCTORS)),
    db: Session = Depends(get_db),
):
    return DoctorService.reject_doctor(db, doctor_id, admin_id, payload.notes if payload else None)


@router.get("/pending-kyc", response_model=list[PendingKycRead])
async def pending_kyc(
    admin_id: int = Depends(require_action(Action.PROCESS_KYC)),
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    return KycService.list_pending(db, admin_id)


@router.post("/kyc/{kyc_id}/verify", response_model=KycStatusRead)
async def verify_kyc(
    kyc_id: int,
    admin_id: int = Depends(require_action(Action.PROCESS_KYC)),
    db: Session = Depends(get_db),
):
    return KycService.verify(db, kyc_id, admin_id)


@router.post("/kyc/{kyc_id}/reject", response_model=KycStatusRead)
async def reject_kyc(
    kyc_id: int,
    payload: KycRejectRequest | None = None,
    admin_id: int = Depends(require_action(Action.PROCESS_KYC)),
    db: Session = Depends(get_db),
):
    return KycService.reject(db, kyc_id, admin_id, payload.reason if payload else None)


@router.get("/kyc/{kyc_id}/audit", response_model=AuditTrailRead)
async def kyc_audit_trail(
    kyc_id: int,
    admin_id: int = Depends(require_action(Action.VIEW_KYC_AUDIT)),
    db: Session = Depends(get_db),
):
    return KycService.audit_trail(db, kyc_id, admin_id)
