"""SQLite persistence for users, entries, categories and entry metadata."""

import re
import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

import structlog

from db import transaction, wal_connect

from .errors import DatabaseError, DuplicateError, NotFoundError, ValidationError
from .tokenizer import WORDS_PER_MINUTE, reading_time, word_count

logger = structlog.get_logger()

MAX_TITLE_LENGTH = 100
MAX_CATEGORY_NAME_LENGTH = 50
DEFAULT_CATEGORY_COLOR = "#6B7280"
_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass
class EntryMetadata:
    word_count: int = 0
    reading_time: int = 0
    sentiment_score: Optional[float] = None
    sentiment_magnitude: Optional[float] = None
    mood: Optional[str] = None

    @property
    def analyzed(self) -> bool:
        return self.sentiment_score is not None and self.mood is not None

    def to_dict(self) -> dict:
        return {
            "word_count": self.word_count,
            "reading_time": self.reading_time,
            "sentiment_score": self.sentiment_score,
            "sentiment_magnitude": self.sentiment_magnitude,
            "mood": self.mood,
        }


@dataclass
class Entry:
    id: str
    user_id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    category_ids: list[str] = field(default_factory=list)
    metadata: Optional[EntryMetadata] = None

    @property
    def word_count(self) -> int:
        return self.metadata.word_count if self.metadata else 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "category_ids": list(self.category_ids),
            "metadata": self.metadata.to_dict() if self.metadata else None,
        }


@dataclass
class Category:
    id: str
    user_id: str
    name: str
    color: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    entry_count: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "description": self.description,
            "parent_id": self.parent_id,
            "entry_count": self.entry_count,
        }


def _timestamp(dt: datetime | None = None) -> str:
    """Naive local ISO timestamp; aware datetimes are converted to local time."""
    dt = dt or datetime.now()
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt.isoformat(timespec="microseconds")


@contextmanager
def _db_errors(action: str) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as e:
        logger.error("store.db_error", action=action, error=str(e))
        raise DatabaseError(f"Failed to {action}: {e}") from e


class JournalTransaction:
    """Reads and writes bound to one open write transaction."""

    def __init__(self, conn: sqlite3.Connection, words_per_minute: int = WORDS_PER_MINUTE):
        self.conn = conn
        self.words_per_minute = words_per_minute

    def get_entry_content(self, entry_id: str) -> str:
        row = self.conn.execute(
            "SELECT content FROM entries WHERE id = ?", (entry_id,)
        ).fetchone()
        if row is None:
            raise NotFoundError("Journal entry")
        return row["content"]

    def upsert_metadata(self, entry_id: str, metadata: EntryMetadata) -> None:
        if (metadata.sentiment_score is None) != (metadata.mood is None):
            raise ValidationError("sentiment_score and mood must be set together", field="mood")
        self.conn.execute(
            """INSERT INTO entry_metadata
               (entry_id, word_count, reading_time, sentiment_score, sentiment_magnitude, mood)
               VALUES (?, ?, ?, ?, ?, ?)
               ON CONFLICT(entry_id) DO UPDATE SET
                   word_count = excluded.word_count,
                   reading_time = excluded.reading_time,
                   sentiment_score = excluded.sentiment_score,
                   sentiment_magnitude = excluded.sentiment_magnitude,
                   mood = excluded.mood""",
            (
                entry_id,
                metadata.word_count,
                metadata.reading_time,
                metadata.sentiment_score,
                metadata.sentiment_magnitude,
                metadata.mood,
            ),
        )


class JournalStore:
    """SQLite persistence for the journal."""

    def __init__(self, db_path: str | Path, words_per_minute: int = WORDS_PER_MINUTE):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.words_per_minute = words_per_minute
        self._init_db()

    def _init_db(self):
        with _db_errors("initialize database"), wal_connect(self.db_path) as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT,
                    name TEXT,
                    created_at TIMESTAMP NOT NULL
                );
                CREATE TABLE IF NOT EXISTS categories (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    name TEXT NOT NULL,
                    color TEXT NOT NULL,
                    description TEXT,
                    parent_id TEXT REFERENCES categories(id) ON DELETE SET NULL,
                    created_at TIMESTAMP NOT NULL,
                    UNIQUE (user_id, name)
                );
                CREATE TABLE IF NOT EXISTS entries (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_entries_user_created
                    ON entries(user_id, created_at DESC);
                CREATE TABLE IF NOT EXISTS entry_categories (
                    entry_id TEXT NOT NULL REFERENCES entries(id) ON DELETE CASCADE,
                    category_id TEXT NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
                    PRIMARY KEY (entry_id, category_id)
                );
                CREATE INDEX IF NOT EXISTS idx_entry_categories_category
                    ON entry_categories(category_id);
                CREATE TABLE IF NOT EXISTS entry_metadata (
                    entry_id TEXT PRIMARY KEY REFERENCES entries(id) ON DELETE CASCADE,
                    word_count INTEGER NOT NULL DEFAULT 0 CHECK(word_count >= 0),
                    reading_time INTEGER NOT NULL DEFAULT 0 CHECK(reading_time >= 0),
                    sentiment_score REAL,
                    sentiment_magnitude REAL,
                    mood TEXT CHECK(mood IN (
                        'very_positive','positive','neutral','negative','very_negative'
                    )),
                    CHECK((sentiment_score IS NULL) = (mood IS NULL))
                );
            """)

    @contextmanager
    def transaction(self) -> Iterator[JournalTransaction]:
        """Atomic read-then-write unit; rolls back on any exception."""
        with _db_errors("complete transaction"), transaction(self.db_path) as conn:
            yield JournalTransaction(conn, self.words_per_minute)

    def _metadata_for(self, content: str) -> EntryMetadata:
        words = word_count(content)
        return EntryMetadata(
            word_count=words,
            reading_time=reading_time(words, self.words_per_minute),
        )

    # --- Users ---

    def ensure_user(self, user_id: str, email: str | None = None, name: str | None = None) -> None:
        """Insert the user if missing, refresh email/name otherwise."""
        with _db_errors("save user"), wal_connect(self.db_path) as conn:
            conn.execute(
                """INSERT INTO users (id, email, name, created_at) VALUES (?, ?, ?, ?)
                   ON CONFLICT(id) DO UPDATE SET
                       email = COALESCE(excluded.email, users.email),
                       name = COALESCE(excluded.name, users.name)""",
                (user_id, email, name, _timestamp()),
            )

    # --- Entries ---

    @staticmethod
    def _validate_entry(title: str | None, content: str | None, partial: bool = False):
        if title is not None or not partial:
            if not title or not title.strip():
                raise ValidationError("Title is required", field="title")
            if len(title) > MAX_TITLE_LENGTH:
                raise ValidationError(
                    f"Title must be less than {MAX_TITLE_LENGTH} characters", field="title"
                )
        if content is not None or not partial:
            if not content or not content.strip():
                raise ValidationError("Content is required", field="content")

    def _check_categories(self, conn: sqlite3.Connection, user_id: str, category_ids: list[str]):
        for category_id in category_ids:
            row = conn.execute(
                "SELECT 1 FROM categories WHERE id = ? AND user_id = ?", (category_id, user_id)
            ).fetchone()
            if row is None:
                raise NotFoundError("Category")

    def create_entry(
        self,
        user_id: str,
        title: str,
        content: str,
        category_ids: list[str] | None = None,
        created_at: datetime | None = None,
    ) -> Entry:
        """Create an entry together with its word-count metadata (sentiment unset)."""
        self._validate_entry(title, content)
        self.ensure_user(user_id)
        entry_id = uuid.uuid4().hex
        created = _timestamp(created_at)
        metadata = self._metadata_for(content)
        category_ids = list(dict.fromkeys(category_ids or []))

        with _db_errors("create entry"), transaction(self.db_path) as conn:
            self._check_categories(conn, user_id, category_ids)
            conn.execute(
                """INSERT INTO entries (id, user_id, title, content, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (entry_id, user_id, title.strip(), content, created, created),
            )
            conn.executemany(
                "INSERT INTO entry_categories (entry_id, category_id) VALUES (?, ?)",
                [(entry_id, c) for c in category_ids],
            )
            JournalTransaction(conn).upsert_metadata(entry_id, metadata)

        logger.info("journal.entry_created", entry_id=entry_id, user_id=user_id,
                    word_count=metadata.word_count)
        return self.get_entry(entry_id)

    def update_entry(
        self,
        entry_id: str,
        user_id: str,
        title: str | None = None,
        content: str | None = None,
        category_ids: list[str] | None = None,
    ) -> Entry:
        """Partial update. A content change recomputes word count and reading time."""
        self._validate_entry(title, content, partial=True)

        with _db_errors("update entry"), transaction(self.db_path) as conn:
            row = conn.execute(
                "SELECT id FROM entries WHERE id = ? AND user_id = ?", (entry_id, user_id)
            ).fetchone()
            if row is None:
                raise NotFoundError("Journal entry")

            sets, params = ["updated_at = ?"], [_timestamp()]
            if title is not None:
                sets.append("title = ?")
                params.append(title.strip())
            if content is not None:
                sets.append("content = ?")
                params.append(content)
            conn.execute(f"UPDATE entries SET {', '.join(sets)} WHERE id = ?", (*params, entry_id))

            if category_ids is not None:
                category_ids = list(dict.fromkeys(category_ids))
                self._check_categories(conn, user_id, category_ids)
                conn.execute("DELETE FROM entry_categories WHERE entry_id = ?", (entry_id,))
                conn.executemany(
                    "INSERT INTO entry_categories (entry_id, category_id) VALUES (?, ?)",
                    [(entry_id, c) for c in category_ids],
                )

            if content is not None:
                metadata = self._metadata_for(content)
                conn.execute(
                    """INSERT INTO entry_metadata (entry_id, word_count, reading_time)
                       VALUES (?, ?, ?)
                       ON CONFLICT(entry_id) DO UPDATE SET
                           word_count = excluded.word_count,
                           reading_time = excluded.reading_time""",
                    (entry_id, metadata.word_count, metadata.reading_time),
                )

        logger.info("journal.entry_updated", entry_id=entry_id, content_changed=content is not None)
        return self.get_entry(entry_id)

    def delete_entry(self, entry_id: str, user_id: str) -> None:
        with _db_errors("delete entry"), wal_connect(self.db_path) as conn:
            cur = conn.execute(
                "DELETE FROM entries WHERE id = ? AND user_id = ?", (entry_id, user_id)
            )
            if cur.rowcount == 0:
                raise NotFoundError("Journal entry")
        logger.info("journal.entry_deleted", entry_id=entry_id)

    def get_entry(self, entry_id: str, user_id: str | None = None) -> Entry:
        """Fetch one entry; with ``user_id`` only the owner's entry is visible."""
        with _db_errors("fetch entry"), wal_connect(self.db_path, row_factory=True) as conn:
            query = self._entry_select() + " WHERE e.id = ?"
            params: list = [entry_id]
            if user_id is not None:
                query += " AND e.user_id = ?"
                params.append(user_id)
            row = conn.execute(query, params).fetchone()
            if row is None:
                raise NotFoundError("Journal entry")
            categories = self._category_ids(conn, [entry_id])
        return self._row_to_entry(row, categories.get(entry_id, []))

    def get_entry_content(self, entry_id: str) -> str:
        with _db_errors("fetch entry"), wal_connect(self.db_path, row_factory=True) as conn:
            return JournalTransaction(conn).get_entry_content(entry_id)

    def upsert_metadata(self, entry_id: str, metadata: EntryMetadata) -> None:
        with self.transaction() as tx:
            tx.get_entry_content(entry_id)
            tx.upsert_metadata(entry_id, metadata)

    def get_metadata(self, entry_id: str) -> Optional[EntryMetadata]:
        with _db_errors("fetch metadata"), wal_connect(self.db_path, row_factory=True) as conn:
            row = conn.execute(
                "SELECT * FROM entry_metadata WHERE entry_id = ?", (entry_id,)
            ).fetchone()
        return self._row_to_metadata(row) if row else None

    def list_entries(
        self,
        user_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        category_id: str | None = None,
        newest_first: bool = True,
        limit: int | None = None,
    ) -> list[Entry]:
        """Entries with metadata, optionally bounded by ``created_at`` and category."""
        query = self._entry_select() + " WHERE e.user_id = ?"
        params: list = [user_id]
        if start is not None:
            query += " AND e.created_at >= ?"
            params.append(_timestamp(start))
        if end is not None:
            query += " AND e.created_at <= ?"
            params.append(_timestamp(end))
        if category_id is not None:
            query += " AND e.id IN (SELECT entry_id FROM entry_categories WHERE category_id = ?)"
            params.append(category_id)
        query += f" ORDER BY e.created_at {'DESC' if newest_first else 'ASC'}, e.rowid"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with _db_errors("list entries"), wal_connect(self.db_path, row_factory=True) as conn:
            rows = conn.execute(query, params).fetchall()
            categories = self._category_ids(conn, [r["id"] for r in rows])
        return [self._row_to_entry(r, categories.get(r["id"], [])) for r in rows]

    def list_entry_ids(self, user_id: str | None = None, only_unanalyzed: bool = False) -> list[str]:
        query = (
            "SELECT e.id FROM entries e LEFT JOIN entry_metadata m ON m.entry_id = e.id WHERE 1 = 1"
        )
        params: list = []
        if user_id is not None:
            query += " AND e.user_id = ?"
            params.append(user_id)
        if only_unanalyzed:
            query += " AND (m.entry_id IS NULL OR m.sentiment_score IS NULL)"
        query += " ORDER BY e.created_at ASC"
        with _db_errors("list entries"), wal_connect(self.db_path) as conn:
            return [r[0] for r in conn.execute(query, params).fetchall()]

    # --- Categories ---

    @staticmethod
    def _validate_category_name(name: str | None):
        if not name or not name.strip():
            raise ValidationError("Name is required", field="name")
        if len(name) > MAX_CATEGORY_NAME_LENGTH:
            raise ValidationError(
                f"Name must be less than {MAX_CATEGORY_NAME_LENGTH} characters", field="name"
            )

    @staticmethod
    def _validate_color(color: str | None):
        if color is not None and not _HEX_COLOR.match(color):
            raise ValidationError("Color must be a hex value like #3B82F6", field="color")

    def create_category(
        self,
        user_id: str,
        name: str,
        color: str | None = None,
        description: str | None = None,
        parent_id: str | None = None,
    ) -> Category:
        self._validate_category_name(name)
        self._validate_color(color)
        self.ensure_user(user_id)
        category_id = uuid.uuid4().hex
        with _db_errors("create category"), transaction(self.db_path) as conn:
            if conn.execute(
                "SELECT 1 FROM categories WHERE user_id = ? AND name = ?", (user_id, name.strip())
            ).fetchone():
                raise DuplicateError("Category with this name")
            if parent_id is not None:
                self._check_categories(conn, user_id, [parent_id])
            conn.execute(
                """INSERT INTO categories
                   (id, user_id, name, color, description, parent_id, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    category_id,
                    user_id,
                    name.strip(),
                    color or DEFAULT_CATEGORY_COLOR,
                    description,
                    parent_id,
                    _timestamp(),
                ),
            )
        logger.info("journal.category_created", category_id=category_id, user_id=user_id)
        return self.get_category(category_id, user_id)

    def update_category(
        self,
        category_id: str,
        user_id: str,
        name: str | None = None,
        color: str | None = None,
        description: str | None = None,
        parent_id: str | None = None,
    ) -> Category:
        if name is not None:
            self._validate_category_name(name)
        self._validate_color(color)
        if parent_id is not None and parent_id == category_id:
            raise ValidationError("A category cannot be its own parent", field="parent_id")

        with _db_errors("update category"), transaction(self.db_path) as conn:
            self._check_categories(conn, user_id, [category_id])
            if name is not None and conn.execute(
                "SELECT 1 FROM categories WHERE user_id = ? AND name = ? AND id != ?",
                (user_id, name.strip(), category_id),
            ).fetchone():
                raise DuplicateError("Category with this name")
            if parent_id is not None:
                self._check_categories(conn, user_id, [parent_id])

            sets, params = [], []
            for column, value in (
                ("name", name.strip() if name is not None else None),
                ("color", color),
                ("description", description),
                ("parent_id", parent_id),
            ):
                if value is not None:
                    sets.append(f"{column} = ?")
                    params.append(value)
            if sets:
                conn.execute(
                    f"UPDATE categories SET {', '.join(sets)} WHERE id = ?", (*params, category_id)
                )
        return self.get_category(category_id, user_id)

    def delete_category(self, category_id: str, user_id: str) -> None:
        with _db_errors("delete category"), wal_connect(self.db_path) as conn:
            cur = conn.execute(
                "DELETE FROM categories WHERE id = ? AND user_id = ?", (category_id, user_id)
            )
            if cur.rowcount == 0:
                raise NotFoundError("Category")

    def get_category(self, category_id: str, user_id: str) -> Category:
        with _db_errors("fetch category"), wal_connect(self.db_path, row_factory=True) as conn:
            row = conn.execute(
                self._category_select() + " WHERE c.id = ? AND c.user_id = ? GROUP BY c.id",
                (category_id, user_id),
            ).fetchone()
        if row is None:
            raise NotFoundError("Category")
        return self._row_to_category(row)

    def list_categories(self, user_id: str) -> list[Category]:
        """All of a user's categories with their total entry counts, by name."""
        with _db_errors("list categories"), wal_connect(self.db_path, row_factory=True) as conn:
            rows = conn.execute(
                self._category_select() + " WHERE c.user_id = ? GROUP BY c.id ORDER BY c.name ASC",
                (user_id,),
            ).fetchall()
        return [self._row_to_category(r) for r in rows]

    def category_hierarchy(self, user_id: str) -> list[dict]:
        """Categories nested under their parents; roots are parentless."""
        categories = self.list_categories(user_id)
        known = {c.id for c in categories}

        def _children(parent_id: str | None) -> list[dict]:
            return [
                {**c.to_dict(), "children": _children(c.id)}
                for c in categories
                if c.parent_id == parent_id or (parent_id is None and c.parent_id not in known)
            ]

        return _children(None)

    # --- Row mapping ---

    @staticmethod
    def _entry_select() -> str:
        return """SELECT e.*, m.entry_id AS m_entry_id, m.word_count, m.reading_time,
                         m.sentiment_score, m.sentiment_magnitude, m.mood
                  FROM entries e
                  LEFT JOIN entry_metadata m ON m.entry_id = e.id"""

    @staticmethod
    def _category_select() -> str:
        return """SELECT c.*, COUNT(ec.entry_id) AS entry_count
                  FROM categories c
                  LEFT JOIN entry_categories ec ON ec.category_id = c.id"""

    @staticmethod
    def _category_ids(conn: sqlite3.Connection, entry_ids: list[str]) -> dict[str, list[str]]:
        if not entry_ids:
            return {}
        result: dict[str, list[str]] = {}
        # Chunked to stay under SQLite's bound-parameter limit
        for i in range(0, len(entry_ids), 500):
            chunk = entry_ids[i : i + 500]
            placeholders = ",".join("?" * len(chunk))
            rows = conn.execute(
                f"SELECT entry_id, category_id FROM entry_categories WHERE entry_id IN ({placeholders})",
                chunk,
            ).fetchall()
            for entry_id, category_id in rows:
                result.setdefault(entry_id, []).append(category_id)
        return result

    @staticmethod
    def _row_to_metadata(row: sqlite3.Row) -> EntryMetadata:
        d = dict(row)
        return EntryMetadata(
            word_count=d["word_count"] or 0,
            reading_time=d["reading_time"] or 0,
            sentiment_score=d["sentiment_score"],
            sentiment_magnitude=d["sentiment_magnitude"],
            mood=d["mood"],
        )

    @classmethod
    def _row_to_entry(cls, row: sqlite3.Row, category_ids: list[str]) -> Entry:
        d = dict(row)
        return Entry(
            id=d["id"],
            user_id=d["user_id"],
            title=d["title"],
            content=d["content"],
            created_at=datetime.fromisoformat(d["created_at"]),
            updated_at=datetime.fromisoformat(d["updated_at"]),
            category_ids=category_ids,
            metadata=cls._row_to_metadata(row) if d["m_entry_id"] is not None else None,
        )

    @staticmethod
    def _row_to_category(row: sqlite3.Row) -> Category:
        d = dict(row)
        return Category(
            id=d["id"],
            user_id=d["user_id"],
            name=d["name"],
            color=d["color"],
            description=d["description"],
            parent_id=d["parent_id"],
            entry_count=d["entry_count"],
        )
