import logging
from collections import Counter
from typing import List

from algorithms.chart_points import to_chart_points
from client import ExerciseStore
from log_state import ExerciseLogState
from models import DataPoint

logger = logging.getLogger(__name__)


class HistoryLoader:
    """Resynchronize the displayed points with the store.

    Every request is tagged with the exercise key it was issued for. When it
    resolves, the points replace the current set only if that key is still
    the selected one; otherwise the result is dropped. Requests are never
    cancelled.
    """

    def __init__(self, store: ExerciseStore, state: ExerciseLogState) -> None:
        self.store = store
        self.state = state
        self._in_flight: Counter = Counter()

    def is_loading(self, exercise_key: str | None = None) -> bool:
        if exercise_key is None:
            return sum(self._in_flight.values()) > 0
        return self._in_flight[exercise_key] > 0

    async def refresh(self, exercise_key: str) -> List[DataPoint]:
        self._in_flight[exercise_key] += 1
        try:
            entries = await self.store.list_entries(exercise_key)
        finally:
            self._in_flight[exercise_key] -= 1
            if self._in_flight[exercise_key] <= 0:
                del self._in_flight[exercise_key]
        points = to_chart_points(entries, self.state.metric)
        if self.state.selected_key != exercise_key:
            logger.debug(
                "Dropping %d points for %s, %s is selected",
                len(points),
                exercise_key,
                self.state.selected_key,
            )
            return points
        self.state.points = points
        return points
