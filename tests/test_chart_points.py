import datetime
import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import MathTools, format_ms, from_unix_ms, to_unix_ms
from algorithms.chart_points import to_chart_points
from models import DataPoint, ExerciseEntry


def _entry(eid, weight, reps, created_at, name="deadlift"):
    return ExerciseEntry(
        id=eid, name=name, weight=weight, reps=reps, created_at=created_at
    )


class ChartPointsTest(unittest.TestCase):
    def test_single_entry(self) -> None:
        entry = ExerciseEntry.model_validate(
            {"_id": "a1", "name": "deadlift", "weight": 135, "reps": 5, "createdAt": 100}
        )
        points = to_chart_points([entry])
        self.assertEqual(
            points, [DataPoint(x=100, y=135, label="a1", display_text="135 x 5")]
        )

    def test_two_bench_press_sets(self) -> None:
        entries = [
            _entry(1, 135, 5, 100, "bench_press"),
            _entry(2, 140, 3, 200, "bench_press"),
        ]
        self.assertEqual(
            [(p.x, p.y, p.label) for p in to_chart_points(entries)],
            [(100, 135, 1), (200, 140, 2)],
        )

    def test_empty(self) -> None:
        self.assertEqual(to_chart_points([]), [])

    def test_sorted_and_stable(self) -> None:
        entries = [
            _entry(1, 100, 5, 300),
            _entry(2, 110, 5, 100),
            _entry(3, 120, 5, 300),
            _entry(4, 130, 5, 200),
        ]
        points = to_chart_points(entries)
        self.assertEqual([p.label for p in points], [2, 4, 1, 3])
        self.assertEqual(len(points), len(entries))

    def test_labels_are_entry_ids(self) -> None:
        entries = [_entry(7, 100, 5, 1), _entry(8, 100, 5, 2)]
        self.assertEqual({p.label for p in to_chart_points(entries)}, {7, 8})

    def test_metrics(self) -> None:
        entries = [_entry(1, 100, 5, 1)]
        self.assertEqual(to_chart_points(entries, "volume")[0].y, 500)
        self.assertEqual(
            to_chart_points(entries, "est_1rm")[0].y, MathTools.epley_1rm(100, 5)
        )
        with self.assertRaises(ValueError):
            to_chart_points(entries, "tonnage")


class TimestampTest(unittest.TestCase):
    def test_integers_pass_through(self) -> None:
        self.assertEqual(to_unix_ms(100), 100)
        self.assertEqual(to_unix_ms("1700000000000"), 1700000000000)

    def test_iso_strings(self) -> None:
        self.assertEqual(to_unix_ms("1970-01-01T00:00:01Z"), 1000)
        self.assertEqual(to_unix_ms("1970-01-01T00:00:01+00:00"), 1000)
        self.assertEqual(to_unix_ms("1970-01-01T00:00:01"), 1000)

    def test_datetimes(self) -> None:
        dt = datetime.datetime(2024, 1, 2, tzinfo=datetime.timezone.utc)
        self.assertEqual(from_unix_ms(to_unix_ms(dt)), dt)
        self.assertEqual(to_unix_ms(datetime.date(1970, 1, 2)), 86400000)

    def test_rejects_garbage(self) -> None:
        for value in ["yesterday", "", True, None, float("nan")]:
            with self.assertRaises(ValueError):
                to_unix_ms(value)

    def test_format(self) -> None:
        self.assertEqual(format_ms(0), "1970-01-01 00:00")
        self.assertEqual(format_ms(13 * 3600 * 1000, "12h"), "1970-01-01 01:00 PM")


class MathToolsTest(unittest.TestCase):
    def test_epley(self) -> None:
        self.assertEqual(MathTools.epley_1rm(100, 1), 103.33)
        self.assertAlmostEqual(MathTools.epley_1rm(100, 5), 116.65, places=2)

    def test_volume(self) -> None:
        self.assertEqual(MathTools.set_volume(60, 10), 600)


if __name__ == "__main__":
    unittest.main()
