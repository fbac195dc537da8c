import asyncio
import os
import sys
from typing import Dict, List

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from errors import LookupNotFound, TransportError
from models import EntryCreate, ExerciseEntry


class FakeStore:
    """In-memory ExerciseStore with call recording and optional gates."""

    def __init__(self) -> None:
        self.entries: Dict[int, ExerciseEntry] = {}
        self.calls: List[tuple] = []
        self.gates: Dict[str, asyncio.Event] = {}
        self.entry_gates: Dict[int, asyncio.Event] = {}
        self.fail_with: Dict[str, Exception] = {}
        self._next_id = 1

    def seed(self, name: str, weight: float, reps: int, created_at: int) -> ExerciseEntry:
        entry = ExerciseEntry(
            id=self._next_id, name=name, weight=weight, reps=reps, created_at=created_at
        )
        self.entries[entry.id] = entry
        self._next_id += 1
        return entry

    async def _enter(self, op: str, *args) -> None:
        self.calls.append((op,) + args)
        if op in self.fail_with:
            raise self.fail_with[op]

    async def list_exercise_names(self) -> List[str]:
        await self._enter("list_exercise_names")
        return sorted({e.name for e in self.entries.values()})

    async def list_entries(self, name: str) -> List[ExerciseEntry]:
        await self._enter("list_entries", name)
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        return [e for e in self.entries.values() if e.name == name]

    async def get_entry(self, entry_id) -> ExerciseEntry:
        await self._enter("get_entry", entry_id)
        gate = self.entry_gates.get(entry_id)
        if gate is not None:
            await gate.wait()
        try:
            return self.entries[entry_id]
        except KeyError:
            raise LookupNotFound("Entry not found.")

    async def create_entry(self, entry: EntryCreate) -> ExerciseEntry:
        await self._enter("create_entry", entry)
        return self.seed(entry.name, entry.weight, entry.reps, entry.created_at or 0)

    async def delete_entry(self, entry_id) -> None:
        await self._enter("delete_entry", entry_id)
        if entry_id not in self.entries:
            raise TransportError("HTTP error! status: 500", status_code=500)
        del self.entries[entry_id]

    def count(self, op: str) -> int:
        return sum(1 for c in self.calls if c[0] == op)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()
