"""Readiness check route."""

from fastapi import APIRouter, Depends, Request

from routes.room import get_room_cache
from services.cache import ExpiringCache

router = APIRouter()


@router.get("/ready")
def ready(request: Request, cache: ExpiringCache = Depends(get_room_cache)) -> dict:
    """Lightweight readiness check, no upstream calls."""
    if cache.value is None:
        state = "empty"
    elif cache.is_fresh():
        state = "fresh"
    else:
        state = "stale"

    settings = request.app.state.settings
    return {
        "status": "ok",
        "service": "peephole",
        "commit": settings.git_sha,
        "room_name": settings.room_name,
        "cache": state,
    }
