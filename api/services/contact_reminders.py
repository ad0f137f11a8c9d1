"""
Contact Reminders - Who to reach out to next.

Lists people not contacted for at least a week (or never), prioritised by
relationship type and silence length:

- family / parent / sibling: high after 14 days, else medium
- best friend / partner:     high after 10 days, else medium
- everyone else:             medium after 21 days, else low

Each reminder carries a suggested action picked from a short list for the
relationship category. The pick is a stable hash of the person ID so the
same person always gets the same suggestion.
"""
import hashlib
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Iterable

from api.services.interaction_store import Interaction
from api.services.person_store import Person
from api.services.relationship_health import days_since_last_contact
from api.services.relationship_suggestions import group_by_person
from config.relationship_thresholds import (
    CONTACT_SUGGESTIONS,
    PRIORITY_RANK,
    REMINDER_MIN_DAYS,
    REMINDER_QUEUE_SIZE,
)


@dataclass(frozen=True)
class ContactReminder:
    person_id: str
    name: str
    relationship: str
    days_since_contact: int
    priority: str  # high, medium, low
    suggestion: str

    def to_dict(self) -> dict:
        return asdict(self)


def reminder_priority(relationship: str, days: int) -> str:
    """Priority of a contact reminder."""
    rel = (relationship or "").lower()
    if "family" in rel or "parent" in rel or "sibling" in rel:
        return "high" if days > 14 else "medium"
    if "best friend" in rel or "partner" in rel:
        return "high" if days > 10 else "medium"
    return "medium" if days > 21 else "low"


def suggestion_category(relationship: str) -> str:
    rel = (relationship or "").lower()
    for category in ("family", "friend", "colleague"):
        if category in rel:
            return category
    return "default"


def pick_suggestion(person_id: str, relationship: str) -> str:
    """Deterministically pick a suggested action for a person."""
    options = CONTACT_SUGGESTIONS[suggestion_category(relationship)]
    digest = hashlib.sha256(person_id.encode("utf-8")).digest()
    return options[int.from_bytes(digest[:4], "big") % len(options)]


def compute_contact_reminders(
    people: Iterable[Person],
    interactions: Iterable[Interaction],
    now: datetime,
    limit: int = REMINDER_QUEUE_SIZE,
) -> list[ContactReminder]:
    """
    Build the contact reminder queue.

    Args:
        people: People to consider
        interactions: All interactions
        now: Reference time
        limit: Maximum reminders to return

    Returns:
        Reminders sorted by priority (high first), then longest silence
    """
    by_person = group_by_person(interactions)
    reminders = []

    for person in people:
        days = days_since_last_contact(person, by_person.get(person.id, []), now)
        if days < REMINDER_MIN_DAYS:
            continue
        reminders.append(ContactReminder(
            person_id=person.id,
            name=person.name,
            relationship=person.relationship or "Friend",
            days_since_contact=days,
            priority=reminder_priority(person.relationship, days),
            suggestion=pick_suggestion(person.id, person.relationship),
        ))

    reminders.sort(key=lambda r: (-PRIORITY_RANK[r.priority], -r.days_since_contact))
    return reminders[:limit]
