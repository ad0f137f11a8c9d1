"""
Journal Store for Kinship.

Free-form reflections, optionally about one person. Entries live in the
people database; deleting a person detaches their entries rather than
removing them.
"""
import json
import sqlite3
import uuid
import logging
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime, timezone
from typing import Optional

from api.utils.datetime_utils import parse_timestamp
from api.utils.db_paths import get_people_db_path

logger = logging.getLogger(__name__)

JOURNAL_MOODS = ("happy", "neutral", "sad")


@dataclass(frozen=True)
class JournalEntry:
    """A journal entry. Private entries are hidden from shared views."""

    id: str
    content: str
    title: Optional[str] = None
    mood: Optional[str] = None  # one of JOURNAL_MOODS
    person_id: Optional[str] = None
    tags: tuple[str, ...] = ()
    is_private: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["tags"] = list(self.tags)
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return data

    @classmethod
    def from_row(cls, row: tuple) -> "JournalEntry":
        """Create JournalEntry from SQLite row.

        Column order:
        0: id, 1: content, 2: title, 3: mood, 4: person_id, 5: tags,
        6: is_private, 7: created_at, 8: updated_at
        """
        try:
            tags = tuple(json.loads(row[5])) if row[5] else ()
        except json.JSONDecodeError:
            logger.warning(f"Bad tags on journal entry {row[0]}")
            tags = ()
        return cls(
            id=row[0],
            content=row[1],
            title=row[2],
            mood=row[3],
            person_id=row[4],
            tags=tags,
            is_private=bool(row[6]),
            created_at=parse_timestamp(row[7]) or datetime.now(timezone.utc),
            updated_at=parse_timestamp(row[8]),
        )


_COLUMNS = "id, content, title, mood, person_id, tags, is_private, created_at, updated_at"
_EDITABLE_FIELDS = ("content", "title", "mood", "person_id", "tags", "is_private")
_CLEARABLE_FIELDS = ("title", "mood", "person_id")


class JournalStore:
    """
    SQLite-backed journal storage.

    Shares its database file with PersonStore and InteractionStore.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or get_people_db_path()
        self._init_db()

    def _init_db(self):
        """Create database tables if they don't exist."""
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS journal_entries (
                    id TEXT PRIMARY KEY,
                    content TEXT NOT NULL,
                    title TEXT,
                    mood TEXT,
                    person_id TEXT,
                    tags TEXT,
                    is_private INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP
                )
            """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_journal_person_created
                ON journal_entries(person_id, created_at DESC)
            """
            )
            conn.commit()
            logger.info(f"Initialized journal database at {self.db_path}")
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        return sqlite3.connect(self.db_path)

    def create(self, content: str, tags=(), **kwargs) -> JournalEntry:
        """
        Create and store a new entry.

        Args:
            content: Entry text
            tags: Iterable of tag strings
            **kwargs: title, mood, person_id, is_private

        Returns:
            The stored JournalEntry
        """
        entry = JournalEntry(
            id=str(uuid.uuid4()),
            content=content,
            tags=tuple(tags or ()),
            **{k: v for k, v in kwargs.items() if v is not None},
        )
        conn = self._get_connection()
        try:
            conn.execute(
                f"INSERT INTO journal_entries ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    entry.id,
                    entry.content,
                    entry.title,
                    entry.mood,
                    entry.person_id,
                    json.dumps(list(entry.tags)),
                    int(entry.is_private),
                    entry.created_at.isoformat(),
                    None,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info(f"Created journal entry: {entry.id}")
        return entry

    def get_by_id(self, entry_id: str) -> Optional[JournalEntry]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM journal_entries WHERE id = ?", (entry_id,)
            ).fetchone()
            return JournalEntry.from_row(row) if row else None
        finally:
            conn.close()

    def list_recent(
        self,
        limit: int = 20,
        person_id: Optional[str] = None,
        include_private: bool = True,
    ) -> list[JournalEntry]:
        """Newest entries first, optionally for one person."""
        query = f"SELECT {_COLUMNS} FROM journal_entries"
        clauses, params = [], []
        if person_id:
            clauses.append("person_id = ?")
            params.append(person_id)
        if not include_private:
            clauses.append("is_private = 0")
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
        params.append(limit)

        conn = self._get_connection()
        try:
            rows = conn.execute(query, params).fetchall()
            return [JournalEntry.from_row(row) for row in rows]
        finally:
            conn.close()

    def update(self, entry_id: str, **changes) -> Optional[JournalEntry]:
        """
        Update fields of an entry.

        None clears title, mood and person_id and is ignored for the rest.
        Returns the updated entry, or None if it does not exist.
        """
        entry = self.get_by_id(entry_id)
        if not entry:
            return None

        updates = {
            k: v for k, v in changes.items()
            if k in _EDITABLE_FIELDS and (v is not None or k in _CLEARABLE_FIELDS)
        }
        if "tags" in updates:
            updates["tags"] = tuple(updates["tags"])
        updated = replace(entry, updated_at=datetime.now(timezone.utc), **updates)

        conn = self._get_connection()
        try:
            conn.execute(
                """
                UPDATE journal_entries
                SET content = ?, title = ?, mood = ?, person_id = ?, tags = ?,
                    is_private = ?, updated_at = ?
                WHERE id = ?
            """,
                (
                    updated.content,
                    updated.title,
                    updated.mood,
                    updated.person_id,
                    json.dumps(list(updated.tags)),
                    int(updated.is_private),
                    updated.updated_at.isoformat(),
                    entry_id,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return updated

    def delete(self, entry_id: str) -> bool:
        conn = self._get_connection()
        try:
            cursor = conn.execute("DELETE FROM journal_entries WHERE id = ?", (entry_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def detach_person(self, person_id: str) -> int:
        """Unlink a deleted person's entries. Returns how many were touched."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "UPDATE journal_entries SET person_id = NULL WHERE person_id = ?", (person_id,)
            )
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def count(self) -> int:
        conn = self._get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM journal_entries").fetchone()[0]
        finally:
            conn.close()


# Singleton instance
_journal_store: Optional[JournalStore] = None


def get_journal_store(db_path: Optional[str] = None) -> JournalStore:
    """Get or create the singleton JournalStore."""
    global _journal_store
    if _journal_store is None:
        _journal_store = JournalStore(db_path)
    return _journal_store


def reset_journal_store() -> None:
    """Drop the singleton (used by tests)."""
    global _journal_store
    _journal_store = None
