import sqlite3
import sys

from algorithms.timestamps import to_unix_ms
from exercise_labels import to_storage_key

# integers below this are legacy Unix seconds
SECONDS_CUTOFF = 10 ** 11


def legacy_to_ms(value):
    if value is None:
        return 0
    if isinstance(value, (int, float)) and abs(value) < SECONDS_CUTOFF:
        return to_unix_ms(value * 1000)
    return to_unix_ms(value)


def migrate(db_path='workout.db'):
    """Rewrite legacy rows of ``exercise_entries`` in place.

    Text timestamps and Unix seconds become Unix milliseconds and names
    become storage keys.
    Returns the number of rows changed.
    """
    conn = sqlite3.connect(db_path)
    cur = conn.cursor()
    cur.execute("PRAGMA table_info(exercise_entries);")
    cols = [r[1] for r in cur.fetchall()]
    if not cols:
        conn.close()
        return 0
    if 'notes' not in cols:
        cur.execute("ALTER TABLE exercise_entries ADD COLUMN notes TEXT;")
    cur.execute("SELECT id, name, created_at FROM exercise_entries;")
    changed = 0
    for eid, name, created_at in cur.fetchall():
        key = to_storage_key(name or '')
        stamp = legacy_to_ms(created_at)
        if key != name or stamp != created_at:
            conn.execute(
                "UPDATE exercise_entries SET name = ?, created_at = ? WHERE id = ?;",
                (key, stamp, eid),
            )
            changed += 1
    conn.commit()
    conn.close()
    return changed

if __name__ == '__main__':
    path = sys.argv[1] if len(sys.argv) > 1 else 'workout.db'
    print(f"{migrate(path)} rows migrated")
