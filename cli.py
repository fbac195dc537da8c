import argparse
import asyncio
import datetime
import logging
import os
import shutil
import time

import requests

from algorithms import WeightConverter, format_ms, to_unix_ms
from algorithms.chart_points import to_chart_points
from client import AsyncExerciseClient
from config import load_settings
from db import ExerciseEntryRepository
from errors import TrackerError
from exercise_labels import to_display_label, to_storage_key
from nutrition import NutritionClient

logger = logging.getLogger(__name__)

DEMO_SETS = [
    ("deadlift", 135.0, 5, -14),
    ("deadlift", 185.0, 5, -7),
    ("deadlift", 225.0, 3, 0),
    ("squat", 135.0, 8, -10),
    ("squat", 155.0, 6, -3),
    ("overhead_press", 65.0, 10, -5),
]


def export_entries(db_path: str, fmt: str, output_dir: str = ".", name=None) -> str:
    repo = ExerciseEntryRepository(db_path)
    key = to_storage_key(name) if name else None
    data = repo.export_csv(key) if fmt == "csv" else repo.export_json(key)
    out_path = os.path.join(output_dir, f"{key or 'entries'}.{fmt}")
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(data)
    logger.info("Exported entries to %s", out_path)
    return out_path


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def benchmark(url: str, runs: int = 10) -> float:
    times: list[float] = []
    for _ in range(runs):
        t0 = time.time()
        requests.get(f"{url}/health", timeout=5)
        times.append(time.time() - t0)
    avg = sum(times) / len(times)
    print(f"Average /health response time over {runs} runs: {avg:.4f}s")
    return avg


def demo_data(db_path: str) -> int:
    """Populate the database with demo entries if empty."""
    repo = ExerciseEntryRepository(db_path)
    if repo.fetch_names():
        print("Database already contains entries")
        return 0
    today = datetime.datetime.now(datetime.timezone.utc)
    for name, weight, reps, offset in DEMO_SETS:
        day = today + datetime.timedelta(days=offset)
        repo.add(name, weight, reps, to_unix_ms(day))
    print("Demo data inserted")
    return len(DEMO_SETS)


def print_names(url: str) -> None:
    names = asyncio.run(AsyncExerciseClient(url).list_exercise_names())
    for name in names:
        print(to_display_label(name))


def print_history(url: str, exercise: str, metric: str, time_format: str) -> None:
    key = to_storage_key(exercise)
    entries = asyncio.run(AsyncExerciseClient(url).list_entries(key))
    for point in to_chart_points(entries, metric):
        print(f"{format_ms(point.x, time_format)}  {point.y:g}  ({point.display_text})")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Utility commands")
    parser.add_argument("--yaml", default=None, help="settings file")
    sub = parser.add_subparsers(dest="cmd", required=True)

    srv = sub.add_parser("serve")
    srv.add_argument("--db", default=os.environ.get("DB_PATH", "workout.db"))
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default="workout.db")

    exp = sub.add_parser("export")
    exp.add_argument("--db", default="workout.db")
    exp.add_argument("--fmt", choices=["csv", "json"], default="csv")
    exp.add_argument("--out", default=".")
    exp.add_argument("--name", default=None)

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="workout.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="workout.db")

    bench = sub.add_parser("benchmark")
    bench.add_argument("--url", default=None)
    bench.add_argument("--runs", type=int, default=10)

    conv = sub.add_parser("convert")
    conv.add_argument("--weight", type=float, required=True)
    conv.add_argument("--unit", choices=list(WeightConverter.UNITS), required=True)

    sub.add_parser("names")

    hist = sub.add_parser("history")
    hist.add_argument("exercise")
    hist.add_argument("--metric", default=None)

    look = sub.add_parser("lookup")
    look.add_argument("--upc", required=True)

    srch = sub.add_parser("search")
    srch.add_argument("query")
    srch.add_argument("--limit", type=int, default=10)

    args = parser.parse_args(argv)
    settings = load_settings(args.yaml)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        _dispatch(args, settings)
    except TrackerError as e:
        parser.exit(1, f"Whoops! {e}\n")


def _dispatch(args, settings) -> None:
    if args.cmd == "serve":
        import uvicorn

        from rest_api import create_app

        uvicorn.run(create_app(args.db), host=args.host, port=args.port)
    elif args.cmd == "demo":
        demo_data(args.db)
    elif args.cmd == "export":
        print(export_entries(args.db, args.fmt, args.out, args.name))
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)
    elif args.cmd == "benchmark":
        benchmark(args.url or settings.api_url, args.runs)
    elif args.cmd == "convert":
        other = "lb" if args.unit == "kg" else "kg"
        converted = WeightConverter.convert(args.weight, args.unit, other)
        print(f"{args.weight} {args.unit} = {converted} {other}")
    elif args.cmd == "names":
        print_names(settings.api_url)
    elif args.cmd == "history":
        print_history(
            settings.api_url,
            args.exercise,
            args.metric or settings.metric,
            settings.time_format,
        )
    elif args.cmd == "lookup":
        info = NutritionClient.from_settings(settings).lookup_by_barcode(args.upc)
        print(f"{info.product_name}: {info.calories:g} kcal per {info.serving_unit}")
    elif args.cmd == "search":
        client = NutritionClient.from_settings(settings)
        for option in client.search_by_text(args.query, args.limit):
            brand = f" ({option.brand_name})" if option.brand_name else ""
            print(f"{option.food_name}{brand}")


if __name__ == "__main__":
    main()
