"""
Relationship Insights - Ranked summaries of interaction patterns.

Three lists, top 5 each:
- most active: interactions in the last 30 days (> 0)
- neglected: days since last contact, 30 < days < 999
- rising: last-30-day count minus prior 30-60 day count (> 2)

Ties keep input order.
"""
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Iterable

from api.services.interaction_store import Interaction
from api.services.person_store import Person
from api.services.relationship_suggestions import group_by_person
from api.utils.datetime_utils import whole_days_between
from config.relationship_thresholds import (
    INSIGHT_LIST_SIZE,
    NEGLECTED_AFTER_DAYS,
    NEVER_CONTACTED_DAYS,
    RECENT_WINDOW_DAYS,
    RISING_TREND_MIN,
)


@dataclass(frozen=True)
class ActiveRelationship:
    person_id: str
    person_name: str
    interaction_count: int


@dataclass(frozen=True)
class NeglectedRelationship:
    person_id: str
    person_name: str
    days_since_last_contact: int


@dataclass(frozen=True)
class RisingConnection:
    person_id: str
    person_name: str
    trend: int


@dataclass(frozen=True)
class Insights:
    most_active: tuple[ActiveRelationship, ...] = ()
    neglected: tuple[NeglectedRelationship, ...] = ()
    rising: tuple[RisingConnection, ...] = ()

    def to_dict(self) -> dict:
        return {
            "most_active": [asdict(x) for x in self.most_active],
            "neglected": [asdict(x) for x in self.neglected],
            "rising": [asdict(x) for x in self.rising],
        }


def compute_insights(
    people: Iterable[Person],
    interactions: Iterable[Interaction],
    now: datetime,
) -> Insights:
    """
    Build the most-active, neglected and rising lists.

    Args:
        people: People to rank
        interactions: All interactions (any order)
        now: Reference time

    Returns:
        Insights with up to INSIGHT_LIST_SIZE entries per list
    """
    by_person = group_by_person(interactions)
    recent_cutoff = now - timedelta(days=RECENT_WINDOW_DAYS)
    prior_cutoff = now - timedelta(days=RECENT_WINDOW_DAYS * 2)

    active = []
    neglected = []
    rising = []

    for person in people:
        mine = by_person.get(person.id, [])

        recent_count = sum(1 for i in mine if i.occurred_at >= recent_cutoff)
        prior_count = sum(1 for i in mine if prior_cutoff <= i.occurred_at < recent_cutoff)

        if mine:
            days_since = whole_days_between(max(i.occurred_at for i in mine), now)
        else:
            days_since = NEVER_CONTACTED_DAYS

        if recent_count > 0:
            active.append(ActiveRelationship(person.id, person.name, recent_count))
        if NEGLECTED_AFTER_DAYS < days_since < NEVER_CONTACTED_DAYS:
            neglected.append(NeglectedRelationship(person.id, person.name, days_since))

        trend = recent_count - prior_count
        if trend > RISING_TREND_MIN:
            rising.append(RisingConnection(person.id, person.name, trend))

    return Insights(
        most_active=tuple(sorted(active, key=lambda x: -x.interaction_count)[:INSIGHT_LIST_SIZE]),
        neglected=tuple(sorted(neglected, key=lambda x: -x.days_since_last_contact)[:INSIGHT_LIST_SIZE]),
        rising=tuple(sorted(rising, key=lambda x: -x.trend)[:INSIGHT_LIST_SIZE]),
    )
