from fastapi import APIRouter
from somnus.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "provider": settings.ANALYSIS_PROVIDER,
        "remote_configured": settings.remote_configured,
    }
