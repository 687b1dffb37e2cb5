"""SQLite movie repository which owns the connection, schema and query helpers."""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS movies (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    title        TEXT NOT NULL,
    director     TEXT NOT NULL,
    genre        TEXT NOT NULL,
    release_year INTEGER NOT NULL,
    rating       REAL,
    description  TEXT,
    created_at   TEXT NOT NULL,
    updated_at   TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_movies_created_at ON movies(created_at);
"""

TITLE_INDEX_SQL = {
    True: "CREATE UNIQUE INDEX IF NOT EXISTS ux_movies_title ON movies(title)",
    False: (
        "CREATE UNIQUE INDEX IF NOT EXISTS ux_movies_title_nocase "
        "ON movies(title COLLATE NOCASE)"
    ),
}

WRITABLE_COLUMNS = ("title", "director", "genre", "release_year", "rating", "description")


class PersistenceError(Exception):
    """Raised when the underlying database fails."""


class RecordNotFoundError(PersistenceError):
    def __init__(self, movie_id: int):
        super().__init__(f"movie {movie_id} does not exist")
        self.movie_id = movie_id


class UniqueViolationError(PersistenceError):
    pass


@dataclass
class MoviePredicate:
    title: str | None = None
    exclude_id: int | None = None
    genre: str | None = None
    director: str | None = None
    min_year: int | None = None
    max_year: int | None = None
    min_rating: float | None = None


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _like_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class MovieRepository:
    """Persistence accessor for the ``movies`` table.

    A single connection is opened by :meth:`open` and shared by every request;
    access is serialised with a lock, so callers never coordinate among
    themselves. Title uniqueness is enforced by a unique index whose collation
    follows ``case_sensitive_titles``.
    """

    def __init__(self, db_path: Path | str, *, case_sensitive_titles: bool = True):
        self._db_path = db_path
        self._case_sensitive_titles = case_sensitive_titles
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()
        logger.info(
            "MovieRepository initialized with %s (case_sensitive_titles=%s)",
            db_path, case_sensitive_titles,
        )

    @property
    def case_sensitive_titles(self) -> bool:
        return self._case_sensitive_titles

    def open(self) -> "MovieRepository":
        if self._conn is not None:
            return self
        try:
            conn = sqlite3.connect(self._db_path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            if str(self._db_path) != ":memory:":
                conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(SCHEMA_SQL)
            conn.execute(TITLE_INDEX_SQL[self._case_sensitive_titles])
            conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"could not open {self._db_path}: {exc}") from exc
        self._conn = conn
        logger.info("Opened movie database %s", self._db_path)
        return self

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
        logger.info("Closed movie database %s", self._db_path)

    def __enter__(self) -> "MovieRepository":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def _transaction(self):
        with self._lock:
            if self._conn is None:
                raise PersistenceError("movie repository is not open")
            try:
                with self._conn:
                    yield self._conn
            except sqlite3.IntegrityError as exc:
                if "UNIQUE constraint failed" in str(exc):
                    raise UniqueViolationError(str(exc)) from exc
                raise PersistenceError(str(exc)) from exc
            except sqlite3.Error as exc:
                raise PersistenceError(str(exc)) from exc

    def health_check(self) -> bool:
        try:
            with self._transaction() as conn:
                conn.execute("SELECT 1 FROM movies LIMIT 1")
            return True
        except PersistenceError:
            logger.exception("Database health check failed")
            return False

    def _where(self, predicate: MoviePredicate) -> tuple[str, list]:
        clauses: list[str] = []
        params: list = []

        if predicate.title is not None:
            if self._case_sensitive_titles:
                clauses.append("title = ?")
            else:
                clauses.append("title = ? COLLATE NOCASE")
            params.append(predicate.title)
        if predicate.exclude_id is not None:
            clauses.append("id != ?")
            params.append(predicate.exclude_id)
        if predicate.genre:
            clauses.append("genre LIKE ? ESCAPE '\\'")
            params.append(_like_pattern(predicate.genre))
        if predicate.director:
            clauses.append("director LIKE ? ESCAPE '\\'")
            params.append(_like_pattern(predicate.director))
        if predicate.min_year is not None:
            clauses.append("release_year >= ?")
            params.append(predicate.min_year)
        if predicate.max_year is not None:
            clauses.append("release_year <= ?")
            params.append(predicate.max_year)
        if predicate.min_rating is not None:
            clauses.append("rating >= ?")
            params.append(predicate.min_rating)

        where = " AND ".join(clauses) if clauses else "1=1"
        return where, params

    def find_one(self, predicate: MoviePredicate) -> dict | None:
        where, params = self._where(predicate)
        with self._transaction() as conn:
            row = conn.execute(
                f"SELECT * FROM movies WHERE {where} ORDER BY id LIMIT 1", params
            ).fetchone()
        return dict(row) if row else None

    def find_by_id(self, movie_id: int) -> dict | None:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM movies WHERE id = ?", (movie_id,)
            ).fetchone()
        return dict(row) if row else None

    def find_many(self, predicate: MoviePredicate, skip: int = 0, limit: int = 10) -> list[dict]:
        where, params = self._where(predicate)
        sql = f"""
            SELECT * FROM movies
            WHERE {where}
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?
        """
        params.extend([limit, skip])
        with self._transaction() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [dict(r) for r in rows]

    def count(self, predicate: MoviePredicate) -> int:
        where, params = self._where(predicate)
        with self._transaction() as conn:
            row = conn.execute(f"SELECT COUNT(*) FROM movies WHERE {where}", params).fetchone()
        return row[0]

    def find_page(
        self, predicate: MoviePredicate, skip: int = 0, limit: int = 10
    ) -> tuple[list[dict], int]:
        """Return one page of matches and the total match count from the same snapshot."""
        where, params = self._where(predicate)
        with self._transaction() as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM movies
                WHERE {where}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, skip],
            ).fetchall()
            total = conn.execute(
                f"SELECT COUNT(*) FROM movies WHERE {where}", params
            ).fetchone()[0]
        return [dict(r) for r in rows], total

    def create(self, fields: dict) -> dict:
        values = self._writable(fields)
        now = _utcnow()
        values["created_at"] = now
        values["updated_at"] = now

        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        with self._transaction() as conn:
            cur = conn.execute(
                f"INSERT INTO movies ({columns}) VALUES ({placeholders})",
                list(values.values()),
            )
            row = conn.execute(
                "SELECT * FROM movies WHERE id = ?", (cur.lastrowid,)
            ).fetchone()
        return dict(row)

    def update(self, movie_id: int, fields: dict) -> dict:
        values = self._writable(fields)
        with self._transaction() as conn:
            if values:
                values["updated_at"] = _utcnow()
                assignments = ", ".join(f"{col} = ?" for col in values)
                cur = conn.execute(
                    f"UPDATE movies SET {assignments} WHERE id = ?",
                    [*values.values(), movie_id],
                )
                if cur.rowcount == 0:
                    raise RecordNotFoundError(movie_id)
            row = conn.execute(
                "SELECT * FROM movies WHERE id = ?", (movie_id,)
            ).fetchone()
            if row is None:
                raise RecordNotFoundError(movie_id)
        return dict(row)

    def delete(self, movie_id: int) -> dict:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM movies WHERE id = ?", (movie_id,)
            ).fetchone()
            if row is None:
                raise RecordNotFoundError(movie_id)
            conn.execute("DELETE FROM movies WHERE id = ?", (movie_id,))
        return dict(row)

    @staticmethod
    def _writable(fields: dict) -> dict:
        unknown = set(fields) - set(WRITABLE_COLUMNS)
        if unknown:
            raise ValueError(f"unknown movie columns: {sorted(unknown)}")
        return {col: fields[col] for col in WRITABLE_COLUMNS if col in fields}
