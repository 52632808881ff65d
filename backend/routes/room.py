"""Room status route: participant count of the configured room."""

from fastapi import APIRouter, Depends, Request

from services.cache import ExpiringCache
from services.room_status import get_room_status

router = APIRouter()


def get_room_cache(request: Request) -> ExpiringCache:
    return request.app.state.room_cache


# Plain ``def`` so FastAPI runs it in the threadpool; the cache lock blocks.
@router.get("/")
def room_status(cache: ExpiringCache = Depends(get_room_cache)) -> dict:
    """Room name, participant count and creation time of the configured room."""
    return get_room_status(cache)
