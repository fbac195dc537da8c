from .math_tools import MathTools
from .weight_converter import WeightConverter
from .timestamps import to_unix_ms, from_unix_ms, now_ms, format_ms

__all__ = [
    "MathTools",
    "WeightConverter",
    "to_unix_ms",
    "from_unix_ms",
    "now_ms",
    "format_ms",
]
