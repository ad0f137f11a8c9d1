"""
Notification Store for Kinship.

SQLite storage for in-app notifications and the user's notification
preferences. Per-person reminders carry an indexed person_id column so
duplicate checks are a direct query instead of a metadata scan.
"""
import json
import sqlite3
import uuid
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Optional

from api.utils.datetime_utils import make_aware, parse_timestamp
from api.utils.db_paths import get_notifications_db_path

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ("reminder", "activity", "milestone", "system")
NOTIFICATION_PRIORITIES = ("low", "medium", "high")


@dataclass
class Notification:
    """An in-app notification."""
    id: str
    type: str  # one of NOTIFICATION_TYPES
    title: str
    description: Optional[str] = None
    priority: str = "medium"
    is_actionable: bool = False
    action_url: Optional[str] = None
    metadata: dict = field(default_factory=dict)
    person_id: Optional[str] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ("read_at", "created_at", "expires_at"):
            value = getattr(self, key)
            data[key] = value.isoformat() if value else None
        return data

    @classmethod
    def from_row(cls, row: tuple) -> "Notification":
        """Create Notification from SQLite row.

        Column order:
        0: id, 1: type, 2: title, 3: description, 4: priority,
        5: is_actionable, 6: action_url, 7: metadata, 8: person_id,
        9: is_read, 10: read_at, 11: created_at, 12: expires_at
        """
        try:
            metadata = json.loads(row[7]) if row[7] else {}
        except json.JSONDecodeError:
            logger.warning(f"Bad metadata on notification {row[0]}")
            metadata = {}
        return cls(
            id=row[0],
            type=row[1],
            title=row[2],
            description=row[3],
            priority=row[4] or "medium",
            is_actionable=bool(row[5]),
            action_url=row[6],
            metadata=metadata,
            person_id=row[8],
            is_read=bool(row[9]),
            read_at=parse_timestamp(row[10]),
            created_at=parse_timestamp(row[11]) or datetime.now(timezone.utc),
            expires_at=parse_timestamp(row[12]),
        )


@dataclass
class NotificationPreferences:
    """Which notification kinds the user wants."""
    reminder_enabled: bool = True
    reminder_frequency_days: int = 7
    activity_enabled: bool = True
    milestone_enabled: bool = True
    system_enabled: bool = True

    def to_dict(self) -> dict:
        return asdict(self)

    def allows(self, notification_type: str) -> bool:
        return getattr(self, f"{notification_type}_enabled", True)


_COLUMNS = (
    "id, type, title, description, priority, is_actionable, action_url, "
    "metadata, person_id, is_read, read_at, created_at, expires_at"
)


class NotificationStore:
    """
    SQLite-backed notification storage.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or get_notifications_db_path()
        self._init_db()

    def _init_db(self):
        """Create database tables if they don't exist."""
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS notifications (
                    id TEXT PRIMARY KEY,
                    type TEXT NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    priority TEXT NOT NULL DEFAULT 'medium',
                    is_actionable INTEGER NOT NULL DEFAULT 0,
                    action_url TEXT,
                    metadata TEXT,
                    person_id TEXT,
                    is_read INTEGER NOT NULL DEFAULT 0,
                    read_at TIMESTAMP,
                    created_at TIMESTAMP NOT NULL,
                    expires_at TIMESTAMP
                )
            """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_notifications_unread
                ON notifications(is_read, type, person_id)
            """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS notification_preferences (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    reminder_enabled INTEGER NOT NULL,
                    reminder_frequency_days INTEGER NOT NULL,
                    activity_enabled INTEGER NOT NULL,
                    milestone_enabled INTEGER NOT NULL,
                    system_enabled INTEGER NOT NULL
                )
            """
            )
            conn.commit()
            logger.info(f"Initialized notification database at {self.db_path}")
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def create(
        self,
        type: str,
        title: str,
        description: Optional[str] = None,
        priority: str = "medium",
        is_actionable: bool = False,
        action_url: Optional[str] = None,
        metadata: Optional[dict] = None,
        person_id: Optional[str] = None,
        expires_at: Optional[datetime] = None,
    ) -> Notification:
        """Store a new unread notification."""
        notification = Notification(
            id=str(uuid.uuid4()),
            type=type,
            title=title,
            description=description,
            priority=priority or "medium",
            is_actionable=is_actionable,
            action_url=action_url,
            metadata=metadata or {},
            person_id=person_id,
            expires_at=make_aware(expires_at).astimezone(timezone.utc) if expires_at else None,
        )
        conn = self._get_connection()
        try:
            conn.execute(
                f"INSERT INTO notifications ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    notification.id,
                    notification.type,
                    notification.title,
                    notification.description,
                    notification.priority,
                    int(notification.is_actionable),
                    notification.action_url,
                    json.dumps(notification.metadata, default=str),
                    notification.person_id,
                    0,
                    None,
                    notification.created_at.isoformat(),
                    notification.expires_at.isoformat() if notification.expires_at else None,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return notification

    def get(self, notification_id: str) -> Optional[Notification]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM notifications WHERE id = ?", (notification_id,)
            ).fetchone()
            return Notification.from_row(row) if row else None
        finally:
            conn.close()

    def list_all(self, limit: int = 20, include_read: bool = True) -> list[Notification]:
        """Newest first."""
        query = f"SELECT {_COLUMNS} FROM notifications"
        if not include_read:
            query += " WHERE is_read = 0"
        query += " ORDER BY created_at DESC, rowid DESC LIMIT ?"

        conn = self._get_connection()
        try:
            rows = conn.execute(query, (limit,)).fetchall()
            return [Notification.from_row(row) for row in rows]
        finally:
            conn.close()

    def unread_count(self) -> int:
        conn = self._get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM notifications WHERE is_read = 0").fetchone()[0]
        finally:
            conn.close()

    def has_unread(self, type: str, person_id: str) -> bool:
        """True if an unread notification of this type exists for the person."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT 1 FROM notifications WHERE is_read = 0 AND type = ? AND person_id = ? LIMIT 1",
                (type, person_id),
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    def mark_as_read(self, notification_id: str) -> bool:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "UPDATE notifications SET is_read = 1, read_at = ? WHERE id = ?",
                (datetime.now(timezone.utc).isoformat(), notification_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def mark_all_as_read(self) -> int:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "UPDATE notifications SET is_read = 1, read_at = ? WHERE is_read = 0",
                (datetime.now(timezone.utc).isoformat(),),
            )
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def delete(self, notification_id: str) -> bool:
        conn = self._get_connection()
        try:
            cursor = conn.execute("DELETE FROM notifications WHERE id = ?", (notification_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def delete_expired(self, now: datetime) -> int:
        """Remove notifications whose expires_at has passed."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM notifications WHERE expires_at IS NOT NULL AND expires_at < ?",
                (make_aware(now).astimezone(timezone.utc).isoformat(),),
            )
            conn.commit()
            if cursor.rowcount:
                logger.info(f"Removed {cursor.rowcount} expired notifications")
            return cursor.rowcount
        finally:
            conn.close()

    def get_preferences(self) -> NotificationPreferences:
        """Stored preferences, or defaults if none were saved."""
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT reminder_enabled, reminder_frequency_days, activity_enabled, "
                "milestone_enabled, system_enabled FROM notification_preferences WHERE id = 1"
            ).fetchone()
        finally:
            conn.close()

        if not row:
            from config.settings import settings
            return NotificationPreferences(reminder_frequency_days=settings.default_reminder_frequency_days)
        return NotificationPreferences(
            reminder_enabled=bool(row[0]),
            reminder_frequency_days=row[1],
            activity_enabled=bool(row[2]),
            milestone_enabled=bool(row[3]),
            system_enabled=bool(row[4]),
        )

    def save_preferences(self, prefs: NotificationPreferences) -> NotificationPreferences:
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO notification_preferences
                (id, reminder_enabled, reminder_frequency_days, activity_enabled,
                 milestone_enabled, system_enabled)
                VALUES (1, ?, ?, ?, ?, ?)
            """,
                (
                    int(prefs.reminder_enabled),
                    prefs.reminder_frequency_days,
                    int(prefs.activity_enabled),
                    int(prefs.milestone_enabled),
                    int(prefs.system_enabled),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return prefs


# Singleton instance
_notification_store: Optional[NotificationStore] = None


def get_notification_store(db_path: Optional[str] = None) -> NotificationStore:
    """Get or create the singleton NotificationStore."""
    global _notification_store
    if _notification_store is None:
        _notification_store = NotificationStore(db_path)
    return _notification_store


def reset_notification_store() -> None:
    """Drop the singleton (used by tests)."""
    global _notification_store
    _notification_store = None
