"""Wires the census client to the expiring cache for the configured room."""

import logging
from functools import partial

import httpx

from config import Settings
from services.cache import ExpiringCache
from services.census import CensusClient, census_url

logger = logging.getLogger(__name__)


def build_census_client(settings: Settings) -> CensusClient:
    url = census_url(settings.census_host, settings.census_port)
    return CensusClient(url, httpx.Client(timeout=settings.upstream_timeout))


def build_room_cache(settings: Settings, client: CensusClient) -> ExpiringCache:
    """Cache the record for ``settings.room_name`` fetched through ``client``."""
    if not settings.room_name:
        raise ValueError("PEEPHOLE_ROOM_NAME environment variable is required")
    logger.info(
        "Reporting room %r from %s (cache expiry %.3gs)",
        settings.room_name,
        client.url,
        settings.cache_expiry,
    )
    return ExpiringCache(
        partial(client.fetch, settings.room_name),
        expiry=settings.cache_expiry,
    )


def get_room_status(cache: ExpiringCache) -> dict:
    """Current record for the configured room, ready for JSON encoding."""
    return cache.get().to_json()
