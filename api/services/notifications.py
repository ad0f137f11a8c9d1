"""
Notification service for Kinship.

Creates in-app notifications:
- contact reminders for people who have not been contacted in a while
- activity notifications (new relationship insights, journal entries)

Relationship suggestions feed in through
maybe_notify_high_confidence_suggestions(), which is scheduled as a
background task after analytics are served. It never raises: store failures
are logged and the next analytics request tries again.
"""
import asyncio
import logging
import math
import threading
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence

from api.services.interaction_store import Interaction
from api.services.notification_store import Notification, get_notification_store
from api.services.person_store import Person
from api.services.relationship_health import days_since_last_contact
from api.services.relationship_suggestions import (
    Suggestion,
    CONFIDENCE_HIGH,
    group_by_person,
)
from config.relationship_thresholds import NEVER_CONTACTED_DAYS

logger = logging.getLogger(__name__)

REMINDER_EXPIRY = timedelta(days=7)
ACTIVITY_EXPIRY = timedelta(days=3)

# Fingerprint of the last high-confidence set we notified about
_last_notified: Optional[tuple] = None
_notify_lock = threading.Lock()


def format_time_ago(days: int) -> str:
    """Human-readable 'last contact' text."""
    if days == NEVER_CONTACTED_DAYS:
        return "No contact yet"
    if days == 1:
        return "1 day ago"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{math.ceil(days / 7)} weeks ago"
    return f"{math.ceil(days / 30)} months ago"


def create_notification(
    type: str,
    title: str,
    description: Optional[str] = None,
    priority: str = "medium",
    is_actionable: bool = False,
    action_url: Optional[str] = None,
    metadata: Optional[dict] = None,
    expires_at: Optional[datetime] = None,
    person_id: Optional[str] = None,
) -> Optional[Notification]:
    """
    Create a notification.

    Args:
        type: reminder, activity, milestone or system
        title: Short headline
        description: Optional body text
        priority: low, medium or high
        is_actionable: Whether the UI should offer an action
        action_url: Where the action leads
        metadata: Extra JSON-serialisable data
        expires_at: When the notification can be cleaned up
        person_id: Person the notification is about, if any

    Returns:
        The stored Notification, or None if the store failed
    """
    try:
        return get_notification_store().create(
            type=type,
            title=title,
            description=description,
            priority=priority,
            is_actionable=is_actionable,
            action_url=action_url,
            metadata=metadata,
            person_id=person_id,
            expires_at=expires_at,
        )
    except Exception as e:
        logger.error(f"Error creating notification: {e}")
        return None


def create_contact_reminder(
    person_id: str,
    person_name: str,
    days_since_contact: int,
    now: Optional[datetime] = None,
) -> Optional[Notification]:
    """
    Create a 'time to reach out' reminder for a person.

    Priority is low, medium after 21 days, high after 30 days.
    Expires after a week.
    """
    now = now or datetime.now(timezone.utc)

    priority = "low"
    if days_since_contact > 21:
        priority = "medium"
    if days_since_contact > 30:
        priority = "high"

    return create_notification(
        type="reminder",
        title=f"Time to reach out to {person_name}",
        description=f"Last contact: {format_time_ago(days_since_contact)}",
        priority=priority,
        is_actionable=True,
        action_url=f"/people/{person_id}",
        metadata={
            "person_id": person_id,
            "person_name": person_name,
            "days_since_contact": days_since_contact,
            "reminder_type": "contact_overdue",
        },
        expires_at=now + REMINDER_EXPIRY,
        person_id=person_id,
    )


def create_activity_notification(
    title: str,
    description: str,
    metadata: Optional[dict] = None,
    now: Optional[datetime] = None,
) -> Optional[Notification]:
    """
    Low-priority activity notification, expires after 3 days.

    Returns None without creating anything when activity notifications
    are disabled in preferences.
    """
    now = now or datetime.now(timezone.utc)
    try:
        if not get_notification_store().get_preferences().allows("activity"):
            logger.debug(f"Activity notifications disabled, skipping: {title}")
            return None
    except Exception as e:
        logger.error(f"Error reading notification preferences: {e}")
        return None

    return create_notification(
        type="activity",
        title=title,
        description=description,
        priority="low",
        metadata=metadata or {},
        expires_at=now + ACTIVITY_EXPIRY,
    )


def generate_reminder_notifications(
    people: Iterable[Person],
    interactions: Iterable[Interaction],
    now: Optional[datetime] = None,
) -> int:
    """
    Create contact reminders for everyone overdue.

    Skipped entirely if reminders are disabled in preferences. A person who
    already has an unread reminder does not get another one.

    Returns:
        Number of reminders created
    """
    now = now or datetime.now(timezone.utc)
    created = 0

    try:
        store = get_notification_store()
        prefs = store.get_preferences()
        if not prefs.allows("reminder"):
            logger.info("Reminders disabled in preferences, skipping generation")
            return 0

        by_person = group_by_person(interactions)
        for person in people:
            if store.has_unread("reminder", person.id):
                continue

            days = days_since_last_contact(person, by_person.get(person.id, []), now)
            if days >= prefs.reminder_frequency_days:
                if create_contact_reminder(person.id, person.name, days, now=now):
                    created += 1
    except Exception as e:
        logger.error(f"Error generating reminder notifications: {e}")

    if created:
        logger.info(f"Created {created} contact reminders")
    return created


def _fingerprint(suggestions: Sequence[Suggestion]) -> tuple:
    return tuple(sorted(
        (s.person_id, s.action_type, s.suggested_closeness) for s in suggestions
    ))


async def maybe_notify_high_confidence_suggestions(suggestions: Sequence[Suggestion]) -> None:
    """
    Create one activity notification when high-confidence suggestions change.

    Nothing is created if there are no high-confidence suggestions, or if
    the set is the same one we last notified about. Errors are logged and
    swallowed.

    Args:
        suggestions: Output of compute_suggestions()
    """
    global _last_notified

    high = [s for s in suggestions if s.confidence == CONFIDENCE_HIGH]
    fingerprint = _fingerprint(high)

    with _notify_lock:
        if not high:
            _last_notified = None
            return
        if fingerprint == _last_notified:
            logger.debug("High-confidence suggestions unchanged, not notifying")
            return
        # Claim the set before awaiting so concurrent calls don't double-notify
        previous, _last_notified = _last_notified, fingerprint

    try:
        store = get_notification_store()
        prefs = await asyncio.to_thread(store.get_preferences)
        if not prefs.allows("activity"):
            _release(fingerprint, previous)
            return

        notification = await asyncio.to_thread(
            store.create,
            type="activity",
            title="New Relationship Insights Available",
            description=f"{len(high)} high-confidence suggestions for updating your relationship circles",
            priority="medium",
            is_actionable=True,
            action_url="/?view=map",
            metadata={
                "suggestion_count": len(high),
                "suggestion_types": [s.action_type for s in high],
            },
        )
    except Exception as e:
        logger.error(f"Error creating relationship suggestion notification: {e}")
        _release(fingerprint, previous)
        return

    logger.info(f"Notified about {len(high)} high-confidence suggestions ({notification.id})")


def _release(fingerprint: tuple, previous: Optional[tuple]) -> None:
    """Undo a claim so the same set is retried on the next call."""
    global _last_notified
    with _notify_lock:
        if _last_notified == fingerprint:
            _last_notified = previous


def reset_suggestion_notifications() -> None:
    """Forget the last notified suggestion set (used by tests)."""
    global _last_notified
    with _notify_lock:
        _last_notified = None
