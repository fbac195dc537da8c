import logging
import os

from fastapi import FastAPI, HTTPException

from algorithms.timestamps import now_ms
from db import AsyncExerciseEntryRepository
from exercise_labels import to_storage_key
from models import EntryCreate

logger = logging.getLogger(__name__)


class LogAPI:
    """Provides REST endpoints for the exercise log."""

    def __init__(self, db_path: str = "workout.db") -> None:
        self.db_path = db_path
        self.entries = AsyncExerciseEntryRepository(db_path)
        self.app = FastAPI(
            title="Lift Log API",
            description="REST API for logging sets and browsing exercise history",
        )
        self._setup_routes()

    def _setup_routes(self) -> None:
        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and database connectivity.",
        )
        async def health():
            """Return API and database connection status."""
            try:
                count = await self.entries.count()
                return {"status": "ok", "entries": count}
            except Exception as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @self.app.get("/exercises/names", summary="List exercise names")
        async def list_exercise_names():
            return await self.entries.fetch_names()

        @self.app.get("/exercises", summary="List entries for one exercise")
        async def list_entries(name: str):
            return await self.entries.fetch_for_name(to_storage_key(name))

        @self.app.get("/exercises/{entry_id}")
        async def get_entry(entry_id: int):
            try:
                return await self.entries.fetch_detail(entry_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @self.app.post("/exercises")
        async def create_entry(entry: EntryCreate):
            name = to_storage_key(entry.name)
            if not name:
                raise HTTPException(status_code=400, detail="name required")
            notes = entry.notes.strip() if entry.notes else None
            created_at = entry.created_at if entry.created_at is not None else now_ms()
            eid = await self.entries.add(
                name, entry.weight, entry.reps, created_at, notes or None
            )
            logger.info("Created entry %s for %s", eid, name)
            return await self.entries.fetch_detail(eid)

        @self.app.delete("/exercises/{entry_id}")
        async def delete_entry(entry_id: int):
            try:
                await self.entries.remove(entry_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            logger.info("Deleted entry %s", entry_id)
            return {"status": "deleted"}


def create_app(db_path: str | None = None) -> FastAPI:
    return LogAPI(db_path or os.environ.get("DB_PATH", "workout.db")).app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("rest_api:create_app", factory=True)
