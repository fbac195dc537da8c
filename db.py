import sqlite3
import aiosqlite
import csv
import io
import json
from contextlib import contextmanager, asynccontextmanager
from typing import List, Tuple, Optional


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "exercise_entries": (
            """CREATE TABLE exercise_entries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    weight REAL NOT NULL,
                    reps INTEGER NOT NULL,
                    notes TEXT,
                    created_at INTEGER NOT NULL
                );""",
            ["id", "name", "weight", "reps", "notes", "created_at"],
        ),
    }

    _INDEXES = [
        "CREATE INDEX IF NOT EXISTS idx_entries_name_created "
        "ON exercise_entries (name, created_at);",
    ]

    def __init__(self, db_path: str = "workout.db") -> None:
        self._db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)
            for sql in self._INDEXES:
                conn.execute(sql)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        # rebuild with the current column layout, keeping shared columns
        conn.execute("DROP INDEX IF EXISTS idx_entries_name_created;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)
        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            missing = [c for c in columns if c not in existing_cols]
            if missing:
                defaults = ", ".join(
                    "0" if c in ("created_at", "reps", "weight") else "NULL"
                    for c in missing
                )
                conn.execute(
                    f"INSERT INTO {table} ({cols}, {', '.join(missing)}) SELECT {cols}, {defaults} FROM {table}_old;"
                )
            else:
                conn.execute(
                    f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
                )
        conn.execute(f"DROP TABLE {table}_old;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class AsyncDatabase(Database):
    """Provides asynchronous connection management."""

    @asynccontextmanager
    async def _async_connection(self):
        conn = await aiosqlite.connect(self._db_path)
        try:
            yield conn
            await conn.commit()
        finally:
            await conn.close()


class AsyncBaseRepository(AsyncDatabase):
    """Asynchronous variant of BaseRepository using aiosqlite."""

    async def execute(self, query: str, params: Tuple = ()) -> int:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.lastrowid

    async def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return list(rows)


_ENTRY_COLUMNS = "id, name, weight, reps, notes, created_at"


def _entry_row(row: Tuple) -> dict:
    eid, name, weight, reps, notes, created_at = row
    return {
        "id": eid,
        "name": name,
        "weight": weight,
        "reps": reps,
        "notes": notes,
        "createdAt": created_at,
    }


class ExerciseEntryRepository(BaseRepository):
    """Repository for logged exercise sets."""

    def add(
        self,
        name: str,
        weight: float,
        reps: int,
        created_at: int,
        notes: Optional[str] = None,
    ) -> int:
        return self.execute(
            "INSERT INTO exercise_entries (name, weight, reps, notes, created_at) VALUES (?, ?, ?, ?, ?);",
            (name, weight, reps, notes, created_at),
        )

    def remove(self, entry_id: int) -> None:
        self.fetch_detail(entry_id)
        self.execute("DELETE FROM exercise_entries WHERE id = ?;", (entry_id,))

    def fetch_detail(self, entry_id: int) -> dict:
        rows = self.fetch_all(
            f"SELECT {_ENTRY_COLUMNS} FROM exercise_entries WHERE id = ?;",
            (entry_id,),
        )
        if not rows:
            raise ValueError("entry not found")
        return _entry_row(rows[0])

    def fetch_names(self) -> List[str]:
        rows = self.fetch_all(
            "SELECT DISTINCT name FROM exercise_entries ORDER BY name;"
        )
        return [r[0] for r in rows]

    def fetch_for_name(self, name: str) -> List[dict]:
        rows = self.fetch_all(
            f"SELECT {_ENTRY_COLUMNS} FROM exercise_entries WHERE name = ? ORDER BY created_at, id;",
            (name,),
        )
        return [_entry_row(r) for r in rows]

    def fetch_all_entries(self) -> List[dict]:
        rows = self.fetch_all(
            f"SELECT {_ENTRY_COLUMNS} FROM exercise_entries ORDER BY name, created_at, id;"
        )
        return [_entry_row(r) for r in rows]

    def export_csv(self, name: Optional[str] = None) -> str:
        entries = self.fetch_for_name(name) if name else self.fetch_all_entries()
        buf = io.StringIO()
        writer = csv.DictWriter(
            buf, fieldnames=["id", "name", "weight", "reps", "notes", "createdAt"]
        )
        writer.writeheader()
        for entry in entries:
            writer.writerow(entry)
        return buf.getvalue()

    def export_json(self, name: Optional[str] = None) -> str:
        entries = self.fetch_for_name(name) if name else self.fetch_all_entries()
        return json.dumps(entries, indent=2)


class AsyncExerciseEntryRepository(AsyncBaseRepository):
    """Asynchronous repository for logged exercise sets."""

    async def add(
        self,
        name: str,
        weight: float,
        reps: int,
        created_at: int,
        notes: Optional[str] = None,
    ) -> int:
        return await self.execute(
            "INSERT INTO exercise_entries (name, weight, reps, notes, created_at) VALUES (?, ?, ?, ?, ?);",
            (name, weight, reps, notes, created_at),
        )

    async def remove(self, entry_id: int) -> None:
        await self.fetch_detail(entry_id)
        await self.execute("DELETE FROM exercise_entries WHERE id = ?;", (entry_id,))

    async def fetch_detail(self, entry_id: int) -> dict:
        rows = await self.fetch_all(
            f"SELECT {_ENTRY_COLUMNS} FROM exercise_entries WHERE id = ?;",
            (entry_id,),
        )
        if not rows:
            raise ValueError("entry not found")
        return _entry_row(rows[0])

    async def fetch_names(self) -> List[str]:
        rows = await self.fetch_all(
            "SELECT DISTINCT name FROM exercise_entries ORDER BY name;"
        )
        return [r[0] for r in rows]

    async def fetch_for_name(self, name: str) -> List[dict]:
        rows = await self.fetch_all(
            f"SELECT {_ENTRY_COLUMNS} FROM exercise_entries WHERE name = ? ORDER BY created_at, id;",
            (name,),
        )
        return [_entry_row(r) for r in rows]

    async def count(self) -> int:
        rows = await self.fetch_all("SELECT COUNT(*) FROM exercise_entries;")
        return int(rows[0][0])
