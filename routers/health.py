# routers/health.py

from fastapi import APIRouter

from core.config import settings
from core.store import get_store

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/store
# Record counts from the in-memory studio store
# No auth required
# -----------------------------------------------------
@router.get("/store", summary="Studio store health check")
async def health_store():
    """
    Reports record counts per collection.
    Safe for external health monitors (no auth required).
    """
    try:
        return {
            "service": "Studio store",
            "status": "ok",
            "details": get_store().stats(),
        }

    except Exception as e:
        return {
            "service": "Studio store",
            "status": "error",
            "error": str(e),
        }


# -----------------------------------------------------
# GET /health/app
# Simple API health check
# -----------------------------------------------------
@router.get("/app", summary="App health check")
async def health_app():
    """
    Lightweight health check for uptime monitors.
    """
    return {
        "service": settings.PROJECT_NAME,
        "status": "ok",
    }
