import logging
import math
import re

from algorithms.timestamps import to_unix_ms
from client import ExerciseStore
from errors import ValidationError
from history import HistoryLoader
from log_state import EntryDraft, ExerciseLogState
from models import EntryCreate, EntryId, ExerciseEntry

logger = logging.getLogger(__name__)

_DECIMAL = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?\d+")


def parse_draft(draft: EntryDraft) -> EntryCreate:
    """Validate the form text of ``draft`` and build the create request."""
    weight_text = draft.weight_text.strip()
    reps_text = draft.reps_text.strip()
    if not _DECIMAL.fullmatch(weight_text) or not _INTEGER.fullmatch(reps_text):
        raise ValidationError("Reps or weights must be numbers.")
    weight = float(weight_text)
    reps = int(reps_text)
    if not math.isfinite(weight):
        raise ValidationError("Reps or weights must be numbers.")
    if weight <= 0 or reps <= 0:
        raise ValidationError("Weight and reps must be greater than zero.")
    if not draft.exercise_key:
        raise ValidationError("Select an exercise first.")
    notes = draft.notes_text.strip()
    return EntryCreate(
        name=draft.exercise_key,
        weight=weight,
        reps=reps,
        notes=notes or None,
        created_at=to_unix_ms(draft.date),
    )


class EntryLifecycleController:
    """Add and delete entries, then refresh the history they belong to."""

    def __init__(
        self,
        store: ExerciseStore,
        loader: HistoryLoader,
        state: ExerciseLogState,
    ) -> None:
        self.store = store
        self.loader = loader
        self.state = state

    async def submit(self, draft: EntryDraft) -> ExerciseEntry:
        """Create an entry from ``draft``.

        Raises ``ValidationError`` without contacting the store when the
        draft is malformed. The form is only cleared once the store has
        assigned an identity.
        """
        request = parse_draft(draft)
        entry = await self.store.create_entry(request)
        logger.info("Added entry %s to %s", entry.id, draft.exercise_key)
        self.state.form.reset()
        await self.loader.refresh(draft.exercise_key)
        return entry

    async def remove(self, entry_id: EntryId, exercise_key: str) -> None:
        """Delete ``entry_id``; on failure the detail view stays open."""
        await self.store.delete_entry(entry_id)
        logger.info("Deleted entry %s from %s", entry_id, exercise_key)
        inspected = self.state.inspected
        if inspected is not None and inspected.id == entry_id:
            self.state.close_modal()
        await self.loader.refresh(exercise_key)
