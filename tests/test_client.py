import os
import sys

import httpx
import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from client import AsyncExerciseClient
from errors import InconsistentResponse, LookupNotFound, TransportError
from models import EntryCreate
from rest_api import LogAPI


@pytest.fixture
def client(tmp_path):
    api = LogAPI(db_path=str(tmp_path / "workout.db"))
    return AsyncExerciseClient(
        "http://testserver", transport=httpx.ASGITransport(app=api.app)
    )


def _mock_client(handler):
    return AsyncExerciseClient(
        "http://testserver", transport=httpx.MockTransport(handler)
    )


@pytest.mark.asyncio
async def test_entry_lifecycle_against_api(client):
    created = await client.create_entry(
        EntryCreate(name="overhead_press", weight=95, reps=5, created_at=100)
    )
    assert created.id == 1
    assert created.created_at == 100
    assert await client.list_exercise_names() == ["overhead_press"]
    entries = await client.list_entries("overhead_press")
    assert [e.weight for e in entries] == [95.0]
    assert (await client.get_entry(created.id)).reps == 5
    await client.delete_entry(created.id)
    assert await client.list_entries("overhead_press") == []
    with pytest.raises(LookupNotFound):
        await client.get_entry(created.id)
    assert (await client.health())["status"] == "ok"


@pytest.mark.asyncio
async def test_create_without_id_is_inconsistent():
    def handler(request):
        return httpx.Response(200, json={"status": "ok"})

    with pytest.raises(InconsistentResponse, match="please try again"):
        await _mock_client(handler).create_entry(
            EntryCreate(name="squat", weight=100, reps=5)
        )


@pytest.mark.asyncio
async def test_accepts_underscore_id_and_iso_dates():
    def handler(request):
        assert request.url.params["name"] == "squat"
        return httpx.Response(
            200,
            json=[
                {
                    "_id": "abc",
                    "name": "squat",
                    "weight": 100,
                    "reps": 5,
                    "createdAt": "1970-01-01T00:00:02Z",
                }
            ],
        )

    entries = await _mock_client(handler).list_entries("squat")
    assert entries[0].id == "abc"
    assert entries[0].created_at == 2000


@pytest.mark.asyncio
async def test_server_error_uses_detail():
    def handler(request):
        return httpx.Response(500, json={"detail": "database is locked"})

    with pytest.raises(TransportError) as info:
        await _mock_client(handler).list_exercise_names()
    assert str(info.value) == "database is locked"
    assert info.value.status_code == 500


@pytest.mark.asyncio
async def test_network_failure_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError):
        await _mock_client(handler).list_entries("squat")


@pytest.mark.asyncio
async def test_malformed_payloads():
    def handler(request):
        if request.url.path == "/exercises/names":
            return httpx.Response(200, json={"names": []})
        return httpx.Response(200, json={"id": 1, "name": "squat"})

    client = _mock_client(handler)
    with pytest.raises(InconsistentResponse):
        await client.list_exercise_names()
    with pytest.raises(InconsistentResponse):
        await client.get_entry(1)
