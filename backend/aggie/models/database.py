"""
SQLite document store for reports.

Each report is kept as a JSON document in ``full_json`` with the fields that
are filtered or sorted on mirrored into indexed columns. Thread-safe: every
thread gets its own connection, WAL mode allows concurrent readers.
"""

from __future__ import annotations

import functools
import json
import sqlite3
import threading
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from aggie.core.time_utils import to_timestamp, utcnow_timestamp
from aggie.models.report_query import ReportQuery

T = TypeVar("T")


class StoreError(Exception):
    """Data-access failure carrying the HTTP status it should surface as."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


def _wrap_errors(fn: Callable[..., T]) -> Callable[..., T]:
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except sqlite3.Error as e:
            raise StoreError(500, f"{type(e).__name__}: {e}") from e

    return wrapper


def _columns(doc: Dict[str, Any]) -> tuple:
    return (
        doc.get("authoredAt"),
        doc.get("storedAt"),
        1 if doc.get("flagged") else 0,
        1 if doc.get("read") else 0,
        doc.get("_incident"),
        doc.get("_source"),
        doc.get("_media"),
        doc.get("author"),
        doc.get("content") or "",
        doc.get("checkedOutBy"),
        json.dumps(doc),
    )


class ReportStore:
    """Persistence collaborator used by the report routes."""

    def __init__(self, db_path: str):
        self.db_path = str(db_path)
        self._local = threading.local()

    def _conn(self) -> sqlite3.Connection:
        """Return this thread's connection, opening it on first use."""
        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = sqlite3.connect(self.db_path, check_same_thread=False, timeout=10.0)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            self._local.conn = conn
        return conn

    def close(self) -> None:
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            conn.close()
            self._local.conn = None

    @_wrap_errors
    def init_db(self) -> None:
        """Create tables if they don't exist."""
        conn = self._conn()
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS reports (
                id              TEXT PRIMARY KEY,
                authored_at     TEXT,
                stored_at       TEXT,
                flagged         INTEGER NOT NULL DEFAULT 0,
                read            INTEGER NOT NULL DEFAULT 0,
                incident_id     TEXT,
                source_id       TEXT,
                media           TEXT,
                author          TEXT,
                content         TEXT NOT NULL DEFAULT '',
                checked_out_by  TEXT,
                full_json       TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_reports_authored ON reports(authored_at);
            CREATE INDEX IF NOT EXISTS idx_reports_stored ON reports(stored_at DESC);
            CREATE INDEX IF NOT EXISTS idx_reports_checked_out ON reports(checked_out_by);
        """
        )
        conn.commit()

    # ── Writes ────────────────────────────────────────────────────────────────

    @_wrap_errors
    def insert(self, report: Dict[str, Any]) -> str:
        """Store a new report document. Returns its ``_id``."""
        doc = dict(report)
        doc["_id"] = str(doc.get("_id") or uuid.uuid4().hex)
        doc["storedAt"] = to_timestamp(doc["storedAt"]) if doc.get("storedAt") else utcnow_timestamp()
        if doc.get("authoredAt"):
            doc["authoredAt"] = to_timestamp(doc["authoredAt"])
        doc.setdefault("flagged", False)
        doc.setdefault("read", False)
        doc.setdefault("_incident", None)
        doc.setdefault("checkedOutBy", None)
        doc.setdefault("checkedOutAt", None)

        conn = self._conn()
        conn.execute(
            """
            INSERT INTO reports
                (authored_at, stored_at, flagged, read, incident_id, source_id, media,
                 author, content, checked_out_by, full_json, id)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            _columns(doc) + (doc["_id"],),
        )
        conn.commit()
        return doc["_id"]

    @_wrap_errors
    def save(self, report: Dict[str, Any]) -> int:
        """Write ``report`` back over its stored document. Returns rows affected."""
        conn = self._conn()
        cur = conn.execute(
            """
            UPDATE reports SET
                authored_at = ?, stored_at = ?, flagged = ?, read = ?, incident_id = ?,
                source_id = ?, media = ?, author = ?, content = ?, checked_out_by = ?,
                full_json = ?
            WHERE id = ?
        """,
            _columns(report) + (report.get("_id"),),
        )
        conn.commit()
        return cur.rowcount

    @_wrap_errors
    def remove_all(self) -> int:
        conn = self._conn()
        cur = conn.execute("DELETE FROM reports")
        conn.commit()
        return cur.rowcount

    # ── Reads ─────────────────────────────────────────────────────────────────

    def _select(self, where: str, params: Iterable[Any], suffix: str = "") -> List[Dict]:
        rows = self._conn().execute(f"SELECT full_json FROM reports WHERE {where} {suffix}", list(params)).fetchall()
        return [json.loads(r["full_json"]) for r in rows]

    @_wrap_errors
    def find_by_id(self, rid: str) -> Optional[Dict]:
        """Fetch a single report by ID."""
        row = self._conn().execute("SELECT full_json FROM reports WHERE id = ?", (rid,)).fetchone()
        return json.loads(row["full_json"]) if row else None

    @_wrap_errors
    def find_by_ids(self, ids: List[str]) -> List[Dict]:
        """Fetch every report whose id is in ``ids``, in id order."""
        if not ids:
            return []
        marks = ", ".join("?" for _ in ids)
        return self._select(f"id IN ({marks})", ids, "ORDER BY id")

    @_wrap_errors
    def find_authored_between(self, start: str, end: str) -> List[Dict]:
        """Reports with ``authoredAt`` in [start, end]."""
        return self._select("authored_at >= ? AND authored_at <= ?", (start, end), "ORDER BY authored_at")

    def _page(self, where: str, params: List[Any], page: int, page_size: int) -> Dict[str, Any]:
        conn = self._conn()
        total = conn.execute(f"SELECT COUNT(*) FROM reports WHERE {where}", params).fetchone()[0]
        results = self._select(
            where,
            params + [page_size, page * page_size],
            "ORDER BY stored_at DESC, id ASC LIMIT ? OFFSET ?",
        )
        return {"total": total, "results": results}

    @_wrap_errors
    def find_sorted_page(self, page: int, page_size: int) -> Dict[str, Any]:
        """All reports, newest first, one page at a time."""
        return self._page("1 = 1", [], page, page_size)

    @_wrap_errors
    def query_reports(self, query: ReportQuery, page: int, page_size: int) -> Dict[str, Any]:
        """Search reports matching ``query``.

        Raises:
            StoreError: 400 when a time bound in the query can't be parsed.
        """
        try:
            where, params = query.to_sql()
        except ValueError as e:
            raise StoreError(400, str(e)) from e
        return self._page(where, params, page, page_size)

    # ── Batches ───────────────────────────────────────────────────────────────

    @_wrap_errors
    def find_checked_out(self, user_id: str) -> List[Dict]:
        return self._select("checked_out_by = ?", (user_id,), "ORDER BY stored_at DESC, id ASC")

    @_wrap_errors
    def release(self, user_id: str) -> int:
        """Clear the checkout on every report held by ``user_id``."""
        released = 0
        conn = self._conn()
        with conn:
            for doc in self._select("checked_out_by = ?", (user_id,)):
                doc["checkedOutBy"] = None
                doc["checkedOutAt"] = None
                released += conn.execute(
                    "UPDATE reports SET checked_out_by = NULL, full_json = ? WHERE id = ?",
                    (json.dumps(doc), doc["_id"]),
                ).rowcount
        return released

    @_wrap_errors
    def claim_unread(self, user_id: str, limit: int) -> int:
        """Check out up to ``limit`` free, unread, unflagged reports, oldest first."""
        claimed = 0
        now = utcnow_timestamp()
        conn = self._conn()
        with conn:
            candidates = self._select(
                "checked_out_by IS NULL AND read = 0 AND flagged = 0",
                [limit],
                "ORDER BY stored_at ASC, id ASC LIMIT ?",
            )
            for doc in candidates:
                doc["checkedOutBy"] = user_id
                doc["checkedOutAt"] = now
                claimed += conn.execute(
                    "UPDATE reports SET checked_out_by = ?, full_json = ? WHERE id = ? AND checked_out_by IS NULL",
                    (user_id, json.dumps(doc), doc["_id"]),
                ).rowcount
        return claimed
