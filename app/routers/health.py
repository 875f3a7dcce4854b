"""Health check endpoints."""
from fastapi import APIRouter
from app.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME, "env": settings.ENV}
