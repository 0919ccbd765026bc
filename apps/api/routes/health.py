from fastapi import APIRouter

from apps.api.config import settings

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint.

    Used by Docker, Kubernetes, and load balancers to verify the service is alive.
    """
    return {
        "status": "ok",
        "name": settings.app_name,
        "version": settings.app_version,
    }
