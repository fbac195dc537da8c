from typing import Callable, Dict, Iterable, List

from models import DataPoint, ExerciseEntry
from .math_tools import MathTools
from .timestamps import to_unix_ms

METRICS: Dict[str, Callable[[ExerciseEntry], float]] = {
    "weight": lambda e: e.weight,
    "est_1rm": lambda e: MathTools.epley_1rm(e.weight, e.reps),
    "volume": lambda e: MathTools.set_volume(e.weight, e.reps),
}


def to_chart_points(
    entries: Iterable[ExerciseEntry], metric: str = "weight"
) -> List[DataPoint]:
    """Convert entries into chart points ordered by creation time.

    Each point's ``label`` is the identity of the entry it came from. Points
    sharing a timestamp keep their input order.
    """
    try:
        y_of = METRICS[metric]
    except KeyError:
        raise ValueError(f"unknown metric: {metric}")
    points = [
        DataPoint(
            x=to_unix_ms(entry.created_at),
            y=y_of(entry),
            label=entry.id,
            display_text=f"{entry.weight:g} x {entry.reps}",
        )
        for entry in entries
    ]
    return sorted(points, key=lambda p: p.x)
