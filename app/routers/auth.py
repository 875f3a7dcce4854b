from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.schemas.auth import RegisterRequest, LoginRequest, TokenResponse
from app.schemas.common import SuccessResponse
from app.services.auth_service import AuthService
from app.dependencies.auth import get_token_payload
from app.dependencies.rate_limit import rate_limit
from app.utils.helpers import get_client_ip

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", status_code=201, response_model=SuccessResponse)
async def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    """
    Register a patient or doctor
    - Creates the account, its role and its profile together
    - Doctors wait for admin approval before doctor-only features open
    """
    user = AuthService.register(
        db=db,
        email=request.email,
        password=request.password,
        full_name=request.full_name,
        role=request.role,
        phone=request.phone,
        specialization=request.specialization,
        license_number=request.license_number,
        years_of_experience=request.years_of_experience,
        bio=request.bio,
    )
    return {"success": True, "data": {"user_id": user.id, "email": user.email}}


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit),
):
    return AuthService.login(
        db=db,
        email=payload.email,
        password=payload.password,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent", ""),
    )


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    token: dict = Depends(get_token_payload),
    db: Session = Depends(get_db),
):
    AuthService.logout(db, token["sub"], token["jti"])
    return {"success": True}
