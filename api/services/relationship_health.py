"""
Relationship Health - Classify connections by contact recency.

    days since last contact <= 7   -> healthy
    8 to 21 days                   -> attention
    > 21 days, or never contacted  -> inactive

Health is derived every time people are loaded and is never stored.
See config/relationship_thresholds.py for the thresholds.
"""
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Union

from api.services.interaction_store import Interaction
from api.services.person_store import Person
from api.utils.datetime_utils import whole_days_between
from config.relationship_thresholds import (
    HEALTHY_MAX_DAYS,
    ATTENTION_MAX_DAYS,
    NEVER_CONTACTED_DAYS,
)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    ATTENTION = "attention"
    INACTIVE = "inactive"


def _person_id(person: Union[Person, str]) -> str:
    return person if isinstance(person, str) else person.id


def last_contact_at(
    person: Union[Person, str],
    interactions: Iterable[Interaction],
) -> Optional[datetime]:
    """
    Most recent occurred_at among the person's interactions.

    Interactions for other people are ignored, so callers can pass either
    the full set or a pre-filtered list.
    """
    person_id = _person_id(person)
    timestamps = [i.occurred_at for i in interactions if i.person_id == person_id]
    return max(timestamps) if timestamps else None


def days_since_last_contact(
    person: Union[Person, str],
    interactions: Iterable[Interaction],
    now: datetime,
) -> int:
    """
    Whole days since the person was last contacted.

    Returns NEVER_CONTACTED_DAYS (999) if there are no interactions.
    """
    last = last_contact_at(person, interactions)
    if last is None:
        return NEVER_CONTACTED_DAYS
    return whole_days_between(last, now)


def health_for_days(days: int) -> HealthStatus:
    """Map days since last contact to a health status."""
    if days <= HEALTHY_MAX_DAYS:
        return HealthStatus.HEALTHY
    if days <= ATTENTION_MAX_DAYS:
        return HealthStatus.ATTENTION
    return HealthStatus.INACTIVE


def classify_health(
    person: Union[Person, str],
    interactions: Iterable[Interaction],
    now: datetime,
) -> HealthStatus:
    """
    Classify a connection's health from its latest interaction.

    Args:
        person: Person (or person ID) to classify
        interactions: Interactions, for this person or for everyone
        now: Reference time

    Returns:
        HealthStatus; never-contacted people are INACTIVE
    """
    return health_for_days(days_since_last_contact(person, interactions, now))
