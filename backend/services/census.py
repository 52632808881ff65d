"""Room census client for the Prosody HTTP API.

Fetches the census of all active rooms and picks out a single room by name.
Some Prosody versions encode an empty census as ``{}`` instead of ``[]``;
both are accepted.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, StrictInt, ValidationError, field_validator

from errors import DecodeError, FetchError

logger = logging.getLogger(__name__)

CENSUS_PATH = "/room-census"


class RoomRecord(BaseModel):
    """Last known state of one room."""

    model_config = ConfigDict(frozen=True)

    room_name: str = ""
    participants: StrictInt = 0
    # Seconds since epoch. Upstream sends it as a string or an integer.
    created_time: int | None = None

    def to_json(self) -> dict:
        return self.model_dump(exclude_none=True)


class RoomCensus(BaseModel):
    room_census: list[RoomRecord] = []

    @field_validator("room_census", mode="before")
    @classmethod
    def _empty_object_as_list(cls, value: Any) -> Any:
        if value is None or value == {}:
            return []
        return value


def census_url(host: str, port: str | int) -> str:
    """Build the room census URL from the upstream host and port."""
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    return f"http://{host}:{port}{CENSUS_PATH}"


def decode_census(body: bytes | str) -> list[RoomRecord]:
    """Decode a room census payload into its list of rooms.

    Raises:
        DecodeError: the body is not valid JSON or has an unexpected shape.
    """
    try:
        return RoomCensus.model_validate_json(body).room_census
    except ValidationError as e:
        raise DecodeError(e) from e


def select_room(census: list[RoomRecord], room_name: str) -> RoomRecord:
    """Return the first room named ``room_name``, or an empty record for it."""
    for room in census:
        if room.room_name == room_name:
            return room
    return RoomRecord(room_name=room_name, participants=0)


class CensusClient:
    """Synchronous client for a single room census endpoint."""

    def __init__(self, url: str, client: httpx.Client | None = None):
        self.url = url
        self._client = client or httpx.Client()

    def fetch(self, room_name: str) -> RoomRecord:
        """Fetch the census and return the record for ``room_name``.

        A room missing from the census is reported with zero participants.

        Raises:
            FetchError: the upstream request failed.
            DecodeError: the upstream response could not be parsed.
        """
        logger.debug("Fetching room census from %s", self.url)
        try:
            resp = self._client.get(self.url)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchError(self.url, e) from e

        return select_room(decode_census(resp.content), room_name)

    def close(self) -> None:
        self._client.close()
