"""
Interaction Store for Kinship.

Stores interactions logged against a person. Each interaction represents a
single contact event (call, text, email, in-person meeting, social media,
video call).
"""
import sqlite3
import uuid
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timedelta, timezone
from typing import Optional

from api.utils.datetime_utils import make_aware as _make_aware, parse_timestamp
from api.utils.db_paths import get_people_db_path

logger = logging.getLogger(__name__)

INTERACTION_TYPES = ("call", "text", "email", "in_person", "social_media", "video_call")


@dataclass(frozen=True)
class Interaction:
    """
    A single logged contact with a person.

    Immutable once created; edits and deletes go through the store.
    """

    id: str
    person_id: str  # FK to Person.id
    type: str  # one of INTERACTION_TYPES
    occurred_at: datetime
    duration_minutes: Optional[int] = None  # meaningful for call / video_call
    description: Optional[str] = None
    location: Optional[str] = None
    mood_rating: Optional[int] = None  # 1-5
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    platform: Optional[str] = None  # whatsapp, imessage, ... or any custom name

    def to_dict(self) -> dict:
        """Convert to dict for JSON serialization."""
        data = asdict(self)
        data["occurred_at"] = self.occurred_at.isoformat()
        data["created_at"] = self.created_at.isoformat()
        return data

    @classmethod
    def from_row(cls, row: tuple) -> "Interaction":
        """Create Interaction from SQLite row.

        Column order:
        0: id, 1: person_id, 2: type, 3: occurred_at, 4: duration_minutes,
        5: description, 6: location, 7: mood_rating, 8: created_at, 9: platform

        A missing occurred_at falls back to created_at.
        """
        created_at = parse_timestamp(row[8]) or datetime.now(timezone.utc)
        occurred_at = parse_timestamp(row[3]) or created_at
        return cls(
            id=row[0],
            person_id=row[1],
            type=row[2],
            occurred_at=occurred_at,
            duration_minutes=row[4],
            description=row[5],
            location=row[6],
            mood_rating=row[7],
            created_at=created_at,
            platform=row[9],
        )

    @property
    def type_badge(self) -> str:
        """Get emoji badge for interaction type."""
        badges = {
            "call": "📞",
            "text": "💬",
            "email": "📧",
            "in_person": "🤝",
            "social_media": "📱",
            "video_call": "🎥",
        }
        return badges.get(self.type, "📄")


_COLUMNS = (
    "id, person_id, type, occurred_at, duration_minutes, description, location, mood_rating, "
    "created_at, platform"
)


class InteractionStore:
    """
    SQLite-backed interaction storage.

    Manages interaction records with efficient queries by person and time range.
    Results are always ordered most recent first.
    """

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize interaction store.

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
                CREATE TABLE IF NOT EXISTS interactions (
                    id TEXT PRIMARY KEY,
                    person_id TEXT NOT NULL,
                    type TEXT NOT NULL,
                    occurred_at TIMESTAMP,
                    duration_minutes INTEGER,
                    description TEXT,
                    location TEXT,
                    mood_rating INTEGER,
                    created_at TIMESTAMP NOT NULL,
                    platform TEXT
                )
            """
            )

            # Index for efficient person + time queries
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_interactions_person_occurred
                ON interactions(person_id, occurred_at DESC)
            """
            )

            # Index for time-based queries
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_interactions_occurred
                ON interactions(occurred_at DESC)
            """
            )

            conn.commit()
            logger.info(f"Initialized interaction database at {self.db_path}")
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        return sqlite3.connect(self.db_path)

    def add(self, interaction: Interaction) -> Interaction:
        """
        Add a new interaction.

        Args:
            interaction: Interaction to add

        Returns:
            The added interaction
        """
        conn = self._get_connection()
        try:
            conn.execute(
                f"INSERT INTO interactions ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    interaction.id,
                    interaction.person_id,
                    interaction.type,
                    _make_aware(interaction.occurred_at).astimezone(timezone.utc).isoformat(),
                    interaction.duration_minutes,
                    interaction.description,
                    interaction.location,
                    interaction.mood_rating,
                    interaction.created_at.isoformat(),
                    interaction.platform,
                ),
            )
            conn.commit()
            logger.debug(f"Logged {interaction.type} with {interaction.person_id}")
            return interaction
        finally:
            conn.close()

    def get_by_id(self, interaction_id: str) -> Optional[Interaction]:
        """Get an interaction by ID."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM interactions WHERE id = ?", (interaction_id,)
            ).fetchone()
            return Interaction.from_row(row) if row else None
        finally:
            conn.close()

    def get_for_person(
        self,
        person_id: str,
        days_back: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[Interaction]:
        """
        Get interactions for a person, most recent first.

        Args:
            person_id: Person ID
            days_back: Only include interactions from the last N days
            limit: Maximum number of results

        Returns:
            List of interactions
        """
        query = f"SELECT {_COLUMNS} FROM interactions WHERE person_id = ?"
        params: list = [person_id]

        if days_back is not None:
            cutoff = datetime.now(timezone.utc) - timedelta(days=days_back)
            query += " AND occurred_at >= ?"
            params.append(cutoff.isoformat())

        query += " ORDER BY occurred_at DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        conn = self._get_connection()
        try:
            rows = conn.execute(query, params).fetchall()
            return [Interaction.from_row(row) for row in rows]
        finally:
            conn.close()

    def get_all(self, limit: Optional[int] = None) -> list[Interaction]:
        """All interactions, most recent first."""
        query = f"SELECT {_COLUMNS} FROM interactions ORDER BY occurred_at DESC"
        params: list = []
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        conn = self._get_connection()
        try:
            rows = conn.execute(query, params).fetchall()
            return [Interaction.from_row(row) for row in rows]
        finally:
            conn.close()

    def get_last_interaction(self, person_id: str) -> Optional[Interaction]:
        """Most recent interaction with a person."""
        results = self.get_for_person(person_id, limit=1)
        return results[0] if results else None

    def delete(self, interaction_id: str) -> bool:
        """Delete an interaction by ID."""
        conn = self._get_connection()
        try:
            cursor = conn.execute("DELETE FROM interactions WHERE id = ?", (interaction_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def delete_for_person(self, person_id: str) -> int:
        """Delete all interactions for a person. Returns the number removed."""
        conn = self._get_connection()
        try:
            cursor = conn.execute("DELETE FROM interactions WHERE person_id = ?", (person_id,))
            conn.commit()
            if cursor.rowcount:
                logger.info(f"Deleted {cursor.rowcount} interactions for {person_id}")
            return cursor.rowcount
        finally:
            conn.close()

    def count(self) -> int:
        """Total number of interactions."""
        conn = self._get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM interactions").fetchone()[0]
        finally:
            conn.close()


# Singleton instance
_interaction_store: Optional[InteractionStore] = None


def get_interaction_store(db_path: Optional[str] = None) -> InteractionStore:
    """
    Get or create the singleton InteractionStore.

    Args:
        db_path: Path to SQLite database

    Returns:
        InteractionStore instance
    """
    global _interaction_store
    if _interaction_store is None:
        _interaction_store = InteractionStore(db_path)
    return _interaction_store


def reset_interaction_store() -> None:
    """Drop the singleton (used by tests)."""
    global _interaction_store
    _interaction_store = None


def create_interaction(
    person_id: str,
    type: str,
    occurred_at: Optional[datetime] = None,
    duration_minutes: Optional[int] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
    mood_rating: Optional[int] = None,
    platform: Optional[str] = None,
) -> Interaction:
    """
    Build a new Interaction (not yet stored).

    occurred_at defaults to now and is normalised to UTC-aware.
    """
    now = datetime.now(timezone.utc)
    return Interaction(
        id=str(uuid.uuid4()),
        person_id=person_id,
        type=type,
        occurred_at=_make_aware(occurred_at) or now,
        duration_minutes=duration_minutes,
        description=description,
        location=location,
        mood_rating=mood_rating,
        created_at=now,
        platform=platform,
    )
