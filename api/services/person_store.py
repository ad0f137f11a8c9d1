"""
Person Store for Kinship.

Stores connections (people) the user keeps in touch with. Health is not
stored here; it is derived from interaction recency on every read
(see relationship_health.py).
"""
import sqlite3
import uuid
import logging
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime, timezone
from typing import Optional

from config.relationship_thresholds import MIN_CLOSENESS, MAX_CLOSENESS
from api.utils.datetime_utils import parse_timestamp
from api.utils.db_paths import get_people_db_path

logger = logging.getLogger(__name__)


def clamp_closeness(value: int) -> int:
    """Clamp a closeness rating to the 1-5 scale."""
    return max(MIN_CLOSENESS, min(MAX_CLOSENESS, int(value)))


@dataclass(frozen=True)
class Person:
    """
    A connection the user tracks.

    closeness is user-assigned (1-5, 5 = Inner Circle). The suggestion
    engine proposes changes but never writes them.
    """

    id: str
    name: str
    relationship: str = "friend"  # free text: family, friend, colleague, ...
    closeness: int = 3
    platform: Optional[str] = None  # preferred platform
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        data["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return data

    @classmethod
    def from_row(cls, row: tuple) -> "Person":
        """Create Person from SQLite row.

        Column order:
        0: id, 1: name, 2: relationship, 3: closeness, 4: platform,
        5: email, 6: phone, 7: notes, 8: created_at, 9: updated_at
        """
        return cls(
            id=row[0],
            name=row[1],
            relationship=row[2] or "friend",
            closeness=clamp_closeness(row[3] if row[3] is not None else 3),
            platform=row[4],
            email=row[5],
            phone=row[6],
            notes=row[7],
            created_at=parse_timestamp(row[8]) or datetime.now(timezone.utc),
            updated_at=parse_timestamp(row[9]),
        )


_COLUMNS = "id, name, relationship, closeness, platform, email, phone, notes, created_at, updated_at"
_PROTECTED_FIELDS = ("id", "created_at", "updated_at")
_CLEARABLE_FIELDS = ("platform", "email", "phone", "notes")


class PersonStore:
    """
    SQLite-backed person storage.

    Shares its database file with InteractionStore.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize person store.

        Args:
            db_path: Path to SQLite database (default from settings)
        """
        self.db_path = db_path or get_people_db_path()
        self._init_db()

    def _init_db(self):
        """Create database tables if they don't exist."""
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS people (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    relationship TEXT,
                    closeness INTEGER NOT NULL DEFAULT 3,
                    platform TEXT,
                    email TEXT,
                    phone TEXT,
                    notes TEXT,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP
                )
            """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_people_created
                ON people(created_at DESC)
            """
            )
            conn.commit()
            logger.info(f"Initialized people database at {self.db_path}")
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        return sqlite3.connect(self.db_path)

    def create(self, name: str, closeness: int = 3, **kwargs) -> Person:
        """
        Create and store a new person.

        Args:
            name: Display name
            closeness: 1-5 rating, clamped to the scale
            **kwargs: Any other Person field (relationship, platform, ...)

        Returns:
            The stored Person
        """
        person = Person(
            id=str(uuid.uuid4()),
            name=name,
            closeness=clamp_closeness(closeness),
            **{k: v for k, v in kwargs.items() if v is not None},
        )
        conn = self._get_connection()
        try:
            conn.execute(
                f"INSERT INTO people ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    person.id,
                    person.name,
                    person.relationship,
                    person.closeness,
                    person.platform,
                    person.email,
                    person.phone,
                    person.notes,
                    person.created_at.isoformat(),
                    None,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        logger.info(f"Created person: {person.id} - {person.name}")
        return person

    def get_by_id(self, person_id: str) -> Optional[Person]:
        """Get a person by ID."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM people WHERE id = ?", (person_id,)
            ).fetchone()
            return Person.from_row(row) if row else None
        finally:
            conn.close()

    def get_all(self) -> list[Person]:
        """All people, newest first."""
        conn = self._get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM people ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
            return [Person.from_row(row) for row in rows]
        finally:
            conn.close()

    def update(self, person_id: str, **changes) -> Optional[Person]:
        """
        Update fields of a person.

        None clears an optional field (platform, email, phone, notes) and
        is ignored for required ones. Returns the updated Person, or None
        if the person does not exist.
        """
        person = self.get_by_id(person_id)
        if not person:
            return None

        updates = {
            k: v for k, v in changes.items()
            if k in Person.__dataclass_fields__ and k not in _PROTECTED_FIELDS
            and (v is not None or k in _CLEARABLE_FIELDS)
        }
        if "closeness" in updates:
            updates["closeness"] = clamp_closeness(updates["closeness"])
        updated = replace(person, updated_at=datetime.now(timezone.utc), **updates)

        conn = self._get_connection()
        try:
            conn.execute(
                """
                UPDATE people
                SET name = ?, relationship = ?, closeness = ?, platform = ?,
                    email = ?, phone = ?, notes = ?, updated_at = ?
                WHERE id = ?
            """,
                (
                    updated.name,
                    updated.relationship,
                    updated.closeness,
                    updated.platform,
                    updated.email,
                    updated.phone,
                    updated.notes,
                    updated.updated_at.isoformat(),
                    person_id,
                ),
            )
            conn.commit()
        finally:
            conn.close()

        if updated.closeness != person.closeness:
            logger.info(f"Closeness for {updated.name}: {person.closeness} -> {updated.closeness}")
        return updated

    def update_closeness(self, person_id: str, closeness: int) -> Optional[Person]:
        """Persist a new closeness value, e.g. from an accepted suggestion."""
        return self.update(person_id, closeness=closeness)

    def delete(self, person_id: str) -> bool:
        """Delete a person. Interactions are removed by the caller."""
        conn = self._get_connection()
        try:
            cursor = conn.execute("DELETE FROM people WHERE id = ?", (person_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def count(self) -> int:
        """Total number of people."""
        conn = self._get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM people").fetchone()[0]
        finally:
            conn.close()


# Singleton instance
_person_store: Optional[PersonStore] = None


def get_person_store(db_path: Optional[str] = None) -> PersonStore:
    """
    Get or create the singleton PersonStore.

    Args:
        db_path: Path to SQLite database

    Returns:
        PersonStore instance
    """
    global _person_store
    if _person_store is None:
        _person_store = PersonStore(db_path)
    return _person_store


def reset_person_store() -> None:
    """Drop the singleton (used by tests)."""
    global _person_store
    _person_store = None
