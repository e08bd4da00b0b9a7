# gc_app/api/routers/health.py

from fastapi import APIRouter, Request

from gc_app.config.settings import get_settings

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Health check with request ID from request state."""
    settings = get_settings()
    return {
        "status": "ok",
        "request_id": getattr(request.state, "request_id", None),
        "environment": settings.environment,
        "version": settings.version,
    }
