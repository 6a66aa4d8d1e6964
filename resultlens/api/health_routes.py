from fastapi import APIRouter

from resultlens.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check", response_description="Service status and version")
def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "healthy", "version": settings.APP_VERSION}
