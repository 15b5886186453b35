from __future__ import annotations

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, Iterator, List, Optional, Tuple

from .exceptions import StorageError
from .filters import (
    CompletionIs,
    DescriptionContains,
    EndsOnOrBefore,
    EventFilter,
    Predicate,
    StartsOnOrAfter,
    TitleContains,
)
from .models import EventEntity
from .repositories import Repository
from .schemas import EventIn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "event"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    start_date_time: str = "start_date_time"
    end_date_time: str = "end_date_time"
    is_completed: str = "is_completed"


_COLS = _Cols()

# SQLite INTEGER is a signed 64-bit value; larger ids can never be stored
_MAX_ROW_ID = 2**63 - 1


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def _storable_id(event_id: int) -> bool:
    return -_MAX_ROW_ID - 1 <= event_id <= _MAX_ROW_ID


def _predicate_sql(predicate: Predicate) -> Tuple[str, list]:
    """Translate one filter predicate into a parameterised WHERE clause."""
    if isinstance(predicate, StartsOnOrAfter):
        return f"{_COLS.start_date_time} >= ?", [predicate.at.isoformat()]
    if isinstance(predicate, EndsOnOrBefore):
        return f"{_COLS.end_date_time} <= ?", [predicate.at.isoformat()]
    if isinstance(predicate, TitleContains):
        return f"INSTR(unicode_lower({_COLS.title}), ?) > 0", [predicate.text]
    if isinstance(predicate, DescriptionContains):
        return f"INSTR(unicode_lower({_COLS.description}), ?) > 0", [predicate.text]
    if isinstance(predicate, CompletionIs):
        return f"{_COLS.is_completed} = ?", [1 if predicate.value else 0]
    raise TypeError(f"Unsupported filter predicate: {predicate!r}")


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.

    Timestamps are stored as ISO8601 text, so lexical comparison in SQL
    follows chronological order. Calls made inside ``transaction()`` on the
    same thread share its connection.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._local = threading.local()
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        # Autocommit mode; transactions are opened explicitly in transaction()
        conn = sqlite3.connect(self._db_path, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.create_function("unicode_lower", 1, _lower, deterministic=True)
        return conn

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        active: Optional[sqlite3.Connection] = getattr(self._local, "conn", None)
        try:
            if active is not None:
                yield active
            else:
                conn = self._connect()
                try:
                    yield conn
                finally:
                    conn.close()
        except sqlite3.Error as exc:
            logger.exception("SQLite operation failed on %s", self._db_path)
            raise StorageError(f"Storage backend failure: {exc}") from exc

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if getattr(self._local, "conn", None) is not None:
            # Nested block joins the outer transaction
            yield
            return
        with self._conn() as conn:
            conn.execute("BEGIN IMMEDIATE")
            self._local.conn = conn
            try:
                yield
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            else:
                conn.execute("COMMIT")
            finally:
                self._local.conn = None

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.description} TEXT NULL,
                    {_COLS.start_date_time} TEXT NOT NULL,
                    {_COLS.end_date_time} TEXT NOT NULL,
                    {_COLS.is_completed} INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_start ON {_COLS.table}({_COLS.start_date_time})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_end ON {_COLS.table}({_COLS.end_date_time})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_completed ON {_COLS.table}({_COLS.is_completed})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> EventEntity:
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "description": row[_COLS.description],
            "start_date_time": datetime.fromisoformat(row[_COLS.start_date_time]),
            "end_date_time": datetime.fromisoformat(row[_COLS.end_date_time]),
            "is_completed": bool(row[_COLS.is_completed]),
        }

    def _select_one(self, conn: sqlite3.Connection, event_id: int) -> Optional[sqlite3.Row]:
        if not _storable_id(event_id):
            return None
        return conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (event_id,)).fetchone()

    def insert(self, data: EventIn) -> EventEntity:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.description}, {_COLS.start_date_time},
                    {_COLS.end_date_time}, {_COLS.is_completed})
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    data.title,
                    data.description,
                    data.start_date_time.isoformat(),  # type: ignore[union-attr]
                    data.end_date_time.isoformat(),  # type: ignore[union-attr]
                    1 if data.is_completed else 0,
                ),
            )
            row = self._select_one(conn, cur.lastrowid)
            assert row is not None
            return self._row_to_entity(row)

    def find_by_id(self, event_id: int) -> Optional[EventEntity]:
        with self._conn() as conn:
            row = self._select_one(conn, event_id)
            return self._row_to_entity(row) if row else None

    def exists_by_id(self, event_id: int) -> bool:
        if not _storable_id(event_id):
            return False
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT 1 FROM {_COLS.table} WHERE {_COLS.id} = ?", (event_id,)
            ).fetchone()
            return row is not None

    def find_all(self) -> List[EventEntity]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.id}").fetchall()
            return [self._row_to_entity(r) for r in rows]

    def delete_by_id(self, event_id: int) -> None:
        if not _storable_id(event_id):
            return
        with self._conn() as conn:
            conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (event_id,))

    def find_filtered(self, event_filter: EventFilter) -> List[EventEntity]:
        clauses = []
        params: list = []
        for predicate in event_filter.predicates:
            clause, values = _predicate_sql(predicate)
            clauses.append(clause)
            params.extend(values)

        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} {where_sql} ORDER BY {_COLS.id}", params
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def save(self, entity: EventEntity) -> EventEntity:
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.title}, {_COLS.description},
                    {_COLS.start_date_time}, {_COLS.end_date_time}, {_COLS.is_completed})
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT({_COLS.id}) DO UPDATE SET
                    {_COLS.title} = excluded.{_COLS.title},
                    {_COLS.description} = excluded.{_COLS.description},
                    {_COLS.start_date_time} = excluded.{_COLS.start_date_time},
                    {_COLS.end_date_time} = excluded.{_COLS.end_date_time},
                    {_COLS.is_completed} = excluded.{_COLS.is_completed}
                """,
                (
                    entity["id"],
                    entity["title"],
                    entity["description"],
                    entity["start_date_time"].isoformat(),
                    entity["end_date_time"].isoformat(),
                    1 if entity["is_completed"] else 0,
                ),
            )
            row = self._select_one(conn, entity["id"])
            assert row is not None
            return self._row_to_entity(row)
