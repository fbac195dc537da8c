import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from exercise_labels import ExerciseCatalog
from models import DataPoint, DropdownItem, ExerciseEntry


class ModalKind(str, Enum):
    NONE = "none"
    NEW_EXERCISE = "new_exercise"
    ENTRY_DETAIL = "entry_detail"


@dataclass(frozen=True)
class Notice:
    """Transient message for the user."""

    text: str
    title: str = "Whoops!"
    level: str = "error"


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class EntryDraft:
    exercise_key: str
    weight_text: str
    reps_text: str
    notes_text: str = ""
    date: datetime.datetime = field(default_factory=_now)


@dataclass
class EntryForm:
    """Raw text of the add-entry form."""

    weight_text: str = ""
    reps_text: str = ""
    notes_text: str = ""
    date: datetime.datetime = field(default_factory=_now)

    def reset(self) -> None:
        self.weight_text = ""
        self.reps_text = ""
        self.notes_text = ""
        self.date = _now()

    def to_draft(self, exercise_key: str) -> EntryDraft:
        return EntryDraft(
            exercise_key=exercise_key,
            weight_text=self.weight_text,
            reps_text=self.reps_text,
            notes_text=self.notes_text,
            date=self.date,
        )


@dataclass
class ExerciseLogState:
    """Everything the exercise log page renders.

    ``inspected`` is only ever set together with ``ModalKind.ENTRY_DETAIL``;
    use :meth:`show_entry` and :meth:`close_modal` rather than assigning the
    fields directly.
    """

    selected: Optional[DropdownItem] = None
    points: List[DataPoint] = field(default_factory=list)
    inspected: Optional[ExerciseEntry] = None
    modal: ModalKind = ModalKind.NONE
    exercises: ExerciseCatalog = field(default_factory=ExerciseCatalog)
    form: EntryForm = field(default_factory=EntryForm)
    metric: str = "weight"
    notices: List[Notice] = field(default_factory=list)

    @property
    def selected_key(self) -> Optional[str]:
        return self.selected.value if self.selected else None

    def show_entry(self, entry: ExerciseEntry) -> None:
        self.inspected = entry
        self.modal = ModalKind.ENTRY_DETAIL

    def open_new_exercise(self) -> None:
        self.inspected = None
        self.modal = ModalKind.NEW_EXERCISE

    def close_modal(self) -> None:
        self.inspected = None
        self.modal = ModalKind.NONE
