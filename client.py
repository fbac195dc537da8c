import logging
from typing import List, Optional, Protocol

import httpx
from pydantic import ValidationError as SchemaError

from errors import InconsistentResponse, LookupNotFound, TransportError
from models import EntryCreate, EntryId, ExerciseEntry

logger = logging.getLogger(__name__)


class ExerciseStore(Protocol):
    """Remote store of exercise entries."""

    async def list_exercise_names(self) -> List[str]: ...

    async def list_entries(self, name: str) -> List[ExerciseEntry]: ...

    async def get_entry(self, entry_id: EntryId) -> ExerciseEntry: ...

    async def create_entry(self, entry: EntryCreate) -> ExerciseEntry: ...

    async def delete_entry(self, entry_id: EntryId) -> None: ...


class AsyncExerciseClient:
    """REST client for the exercise log API.

    A fresh ``httpx.AsyncClient`` is opened for every request so one
    instance can be shared across event loops.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs):
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                resp = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TransportError(f"Could not reach the server: {exc}") from exc
        if resp.status_code == 404:
            raise LookupNotFound(_detail(resp) or "Entry not found.")
        if resp.status_code >= 400:
            logger.warning("%s %s returned %s", method, path, resp.status_code)
            raise TransportError(
                _detail(resp) or f"HTTP error! status: {resp.status_code}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise InconsistentResponse("Server returned a malformed response.") from exc

    async def list_exercise_names(self) -> List[str]:
        data = await self._request("GET", "/exercises/names")
        if not isinstance(data, list):
            raise InconsistentResponse("Expected a list of exercise names.")
        return [str(n) for n in data]

    async def list_entries(self, name: str) -> List[ExerciseEntry]:
        data = await self._request("GET", "/exercises", params={"name": name})
        if not isinstance(data, list):
            raise InconsistentResponse("Expected a list of entries.")
        return [_parse_entry(item) for item in data]

    async def get_entry(self, entry_id: EntryId) -> ExerciseEntry:
        data = await self._request("GET", f"/exercises/{entry_id}")
        return _parse_entry(data)

    async def create_entry(self, entry: EntryCreate) -> ExerciseEntry:
        data = await self._request("POST", "/exercises", json=entry.to_wire())
        if not isinstance(data, dict) or data.get("id", data.get("_id")) is None:
            raise InconsistentResponse("Entry could not be added, please try again.")
        return _parse_entry(data)

    async def delete_entry(self, entry_id: EntryId) -> None:
        await self._request("DELETE", f"/exercises/{entry_id}")

    async def health(self) -> dict:
        return await self._request("GET", "/health")


def _parse_entry(data) -> ExerciseEntry:
    try:
        return ExerciseEntry.model_validate(data)
    except SchemaError as exc:
        raise InconsistentResponse(f"Malformed entry in response: {exc}") from exc


def _detail(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        return body["detail"]
    return None
