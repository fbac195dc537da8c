import logging
from enum import Enum
from typing import List, Optional

from algorithms.chart_points import METRICS
from client import ExerciseStore
from entries import EntryLifecycleController
from errors import InvalidTransition, TrackerError, ValidationError
from exercise_labels import dropdown_items, is_new_exercise, to_storage_key
from history import HistoryLoader
from log_state import ExerciseLogState, ModalKind, Notice
from models import DataPoint, DropdownItem, ExerciseEntry

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    VIEWING = "viewing"
    INSPECTING = "inspecting"
    CREATING_EXERCISE = "creating_exercise"


class ExerciseLogController:
    """Selection and drill-down state of the exercise log.

    This is the whole surface the presentation layer talks to. Failures of
    store calls are turned into notices (see :meth:`pop_notices`) and leave
    the previous state in place. Calling an operation from a phase where it
    is not offered raises :class:`InvalidTransition`.
    """

    def __init__(
        self, store: ExerciseStore, state: Optional[ExerciseLogState] = None
    ) -> None:
        self.store = store
        self.state = state or ExerciseLogState()
        self.loader = HistoryLoader(store, self.state)
        self.entries = EntryLifecycleController(store, self.loader, self.state)

    @property
    def phase(self) -> Phase:
        if self.state.modal is ModalKind.NEW_EXERCISE:
            return Phase.CREATING_EXERCISE
        if self.state.modal is ModalKind.ENTRY_DETAIL:
            return Phase.INSPECTING
        if self.state.selected is not None:
            return Phase.VIEWING
        return Phase.IDLE

    @property
    def loading(self) -> bool:
        key = self.state.selected_key
        return key is not None and self.loader.is_loading(key)

    def _require(self, action: str, *phases: Phase) -> None:
        if self.phase not in phases:
            raise InvalidTransition(f"cannot {action} while {self.phase.value}")

    def _notify(self, exc: TrackerError) -> None:
        logger.info("%s: %s", type(exc).__name__, exc)
        self.state.notices.append(Notice(str(exc)))

    def pop_notices(self) -> List[Notice]:
        notices = list(self.state.notices)
        self.state.notices.clear()
        return notices

    async def load_exercises(self) -> None:
        """Add the store's exercise names to the known exercises."""
        try:
            names = await self.store.list_exercise_names()
        except TrackerError as exc:
            self._notify(exc)
            return
        for item in dropdown_items(names):
            self.state.exercises.add(item)

    async def select(self, item: DropdownItem) -> None:
        """Handle a choice in the exercise dropdown.

        The new exercise option opens the naming modal. Any other item
        becomes the selection and its history is loaded; points of a
        previously selected exercise are cleared at once.
        """
        if is_new_exercise(item):
            self._require("create an exercise", Phase.IDLE, Phase.VIEWING)
            self.state.open_new_exercise()
            return
        if self.state.modal is not ModalKind.NONE:
            self.state.close_modal()
        item = self.state.exercises.add(item)
        if item.value != self.state.selected_key:
            self.state.points = []
        self.state.selected = item
        await self._refresh(item.value)

    async def reload(self) -> None:
        self._require(
            "reload", Phase.VIEWING, Phase.INSPECTING, Phase.CREATING_EXERCISE
        )
        if self.state.selected_key is None:
            return
        await self._refresh(self.state.selected_key)

    async def _refresh(self, key: str) -> None:
        try:
            await self.loader.refresh(key)
        except TrackerError as exc:
            self._notify(exc)

    async def click_point(self, point: DataPoint) -> Optional[ExerciseEntry]:
        """Load the entry behind ``point`` and show it."""
        self._require("inspect a point", Phase.VIEWING)
        key = self.state.selected_key
        try:
            entry = await self.store.get_entry(point.label)
        except TrackerError as exc:
            self._notify(exc)
            return None
        if self.phase is not Phase.VIEWING or self.state.selected_key != key:
            logger.debug("Ignoring entry %s, view changed meanwhile", point.label)
            return None
        self.state.show_entry(entry)
        return entry

    def close_modal(self) -> None:
        self._require("close a modal", Phase.INSPECTING, Phase.CREATING_EXERCISE)
        self.state.close_modal()

    async def confirm_new_exercise(self, name: str) -> Optional[DropdownItem]:
        """Add ``name`` as an exercise and select it.

        A brand-new exercise has no history, so no refresh is made; a name
        that maps to an already known exercise selects that one instead.
        """
        self._require("name an exercise", Phase.CREATING_EXERCISE)
        label = name.strip()
        if not label:
            self._notify(ValidationError("Please enter a valid exercise name."))
            return None
        key = to_storage_key(label)
        existing = self.state.exercises.get(key)
        if existing is not None:
            await self.select(existing)
            return existing
        item = self.state.exercises.add(DropdownItem(label=label, value=key))
        self.state.selected = item
        self.state.points = []
        self.state.close_modal()
        return item

    async def submit_entry(self) -> Optional[ExerciseEntry]:
        """Submit the entry form for the selected exercise."""
        self._require("add an entry", Phase.VIEWING)
        draft = self.state.form.to_draft(self.state.selected_key)
        try:
            return await self.entries.submit(draft)
        except TrackerError as exc:
            self._notify(exc)
            return None

    async def delete_inspected(self) -> bool:
        """Delete the entry in the detail view.

        Returns ``True`` once the store confirmed the deletion.
        """
        self._require("delete an entry", Phase.INSPECTING)
        entry = self.state.inspected
        key = self.state.selected_key
        try:
            await self.entries.remove(entry.id, key)
        except TrackerError as exc:
            self._notify(exc)
        # the detail view only closes after a confirmed deletion
        return self.phase is not Phase.INSPECTING

    async def set_metric(self, metric: str) -> None:
        if metric not in METRICS:
            raise ValueError(f"unknown metric: {metric}")
        self.state.metric = metric
        if self.state.selected_key is not None:
            await self._refresh(self.state.selected_key)
