# Health Router
from fastapi import APIRouter

from fellowship_api.config import get_settings

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.service_name,
        "version": settings.api_version,
    }
