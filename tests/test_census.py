from __future__ import annotations

import httpx
import pytest

from errors import DecodeError, FetchError
from services.census import (
    CensusClient,
    RoomRecord,
    census_url,
    decode_census,
    select_room,
)

URL = "http://census.test:5280/room-census"


def test_census_url_from_host_and_port() -> None:
    assert census_url("xmpp.meet.jitsi", "5280") == "http://xmpp.meet.jitsi:5280/room-census"
    assert census_url("::1", 5280) == "http://[::1]:5280/room-census"


def test_decode_census_list() -> None:
    census = decode_census(
        b'{"room_census": [{"room_name": "a", "participants": 2},'
        b' {"room_name": "b", "participants": 5, "created_time": 1700000000}]}'
    )
    assert census == [
        RoomRecord(room_name="a", participants=2),
        RoomRecord(room_name="b", participants=5, created_time=1700000000),
    ]


def test_decode_census_created_time_as_string() -> None:
    census = decode_census('{"room_census": [{"room_name": "a", "participants": 1, "created_time": "1700000000"}]}')
    assert census[0].created_time == 1700000000


@pytest.mark.parametrize(
    "body",
    ['{"room_census": {}}', '{"room_census": []}', '{"room_census": null}', "{}"],
)
def test_decode_census_empty_shapes(body: str) -> None:
    assert decode_census(body) == []


@pytest.mark.parametrize(
    "body",
    [
        '{"room_census": [{"room_name": "a"',
        "",
        "not json",
        "[]",
        '{"room_census": "nope"}',
        '{"room_census": {"room_name": "a"}}',
        '{"room_census": [{"room_name": "a", "participants": "many"}]}',
        '{"room_census": [{"room_name": "a", "participants": true}]}',
        '{"room_census": [{"room_name": "a", "participants": "3"}]}',
    ],
)
def test_decode_census_rejects_other_shapes(body: str) -> None:
    with pytest.raises(DecodeError):
        decode_census(body)


def test_select_room_is_case_sensitive() -> None:
    census = [RoomRecord(room_name="Room1", participants=4)]
    assert select_room(census, "room1") == RoomRecord(room_name="room1", participants=0)


def test_select_room_returns_first_match() -> None:
    census = [
        RoomRecord(room_name="x", participants=1),
        RoomRecord(room_name="room1", participants=3),
        RoomRecord(room_name="room1", participants=9),
    ]
    assert select_room(census, "room1").participants == 3


def _client(handler) -> CensusClient:
    return CensusClient(URL, httpx.Client(transport=httpx.MockTransport(handler)))


def test_fetch_returns_matching_room(upstream) -> None:
    upstream.body = (
        '{"room_census": [{"room_name": "other", "participants": 7},'
        ' {"room_name": "room1", "participants": 3, "created_time": "1700000000"}]}'
    )
    room = CensusClient(URL, upstream.client()).fetch("room1")

    assert room == RoomRecord(room_name="room1", participants=3, created_time=1700000000)
    assert upstream.calls == 1


def test_fetch_room_absent_from_census(upstream) -> None:
    upstream.body = '{"room_census": [{"room_name": "other", "participants": 7}]}'
    room = CensusClient(URL, upstream.client()).fetch("room1")

    assert room == RoomRecord(room_name="room1", participants=0)
    assert room.created_time is None


@pytest.mark.parametrize("body", ['{"room_census": {}}', "{}"])
def test_fetch_empty_census_is_not_an_error(upstream, body: str) -> None:
    upstream.body = body
    room = CensusClient(URL, upstream.client()).fetch("room1")
    assert room.to_json() == {"room_name": "room1", "participants": 0}


def test_fetch_truncated_body_raises_decode_error(upstream) -> None:
    upstream.body = '{"room_census": [{"room_name": "room1", "partici'
    with pytest.raises(DecodeError) as exc_info:
        CensusClient(URL, upstream.client()).fetch("room1")
    assert exc_info.value.__cause__ is not None


def test_fetch_connection_refused_raises_fetch_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(FetchError) as exc_info:
        _client(refuse).fetch("room1")

    assert exc_info.value.url == URL
    assert URL in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_fetch_error_status_raises_fetch_error(upstream) -> None:
    upstream.status_code = 503
    upstream.body = "Service Unavailable"
    with pytest.raises(FetchError):
        CensusClient(URL, upstream.client()).fetch("room1")
    assert upstream.calls == 1


def test_room_record_json_omits_missing_created_time() -> None:
    assert RoomRecord(room_name="r", participants=2).to_json() == {"room_name": "r", "participants": 2}
    assert RoomRecord(room_name="r", participants=2, created_time=5).to_json() == {
        "room_name": "r",
        "participants": 2,
        "created_time": 5,
    }
