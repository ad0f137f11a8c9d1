"""
Relationship Suggestions - Propose closeness changes from interaction patterns.

For every person we compute:
- total interactions (lifetime)
- recent interactions (last 30 days) and very recent (last 7 days)
- days since last contact (999 if never contacted)
- average interaction quality (see interaction_quality.py)

Rules, first match wins (at most one suggestion per person):

    1. >=5 contacts this week, closeness < 5           -> +1 (max 5), high
    2. >=8 contacts this month, quality > 2.5, c < 4   -> +1 (max 4), high
    3. >=5 contacts this month, closeness < 3          -> +1 (max 3), medium
    4. >180 days silent, closeness > 1                 -> 1, high
    5. >90 days silent, closeness > 2                  -> -1 (min 1), medium
    6. >60 days silent, none this month, closeness > 3 -> -1 (min 2), medium

Promotions always shadow demotions. The 180-day rule is checked before the
90 and 60 day rules so long-silent connections drop straight to 1.

The engine never writes; accepting a suggestion is the caller's job.
"""
from collections import defaultdict
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from api.services.interaction_quality import average_interaction_quality
from api.services.interaction_store import Interaction
from api.services.person_store import Person
from api.utils.datetime_utils import whole_days_between
from config.relationship_thresholds import (
    MIN_CLOSENESS,
    MAX_CLOSENESS,
    NEVER_CONTACTED_DAYS,
    RECENT_WINDOW_DAYS,
    VERY_RECENT_WINDOW_DAYS,
    VERY_RECENT_PROMOTE_COUNT,
    QUALITY_PROMOTE_COUNT,
    QUALITY_PROMOTE_MIN_AVERAGE,
    QUALITY_PROMOTE_CAP,
    MODERATE_PROMOTE_COUNT,
    MODERATE_PROMOTE_CAP,
    DISTANT_AFTER_DAYS,
    LONG_SILENCE_DAYS,
    CLOSE_SILENCE_DAYS,
    CLOSE_SILENCE_FLOOR,
    CONFIDENCE_RANK,
)

CONFIDENCE_HIGH = "high"
CONFIDENCE_MEDIUM = "medium"
CONFIDENCE_LOW = "low"

ACTION_PROMOTE = "promote"
ACTION_DEMOTE = "demote"


@dataclass(frozen=True)
class PersonMetrics:
    """Interaction statistics for one person at a point in time."""
    total_interactions: int
    recent_interaction_count: int
    very_recent_count: int
    days_since_last_contact: int
    average_interaction_quality: float


@dataclass(frozen=True)
class Suggestion:
    """A proposed closeness change. Derived on demand, never stored."""
    person_id: str
    person_name: str
    current_closeness: int
    suggested_closeness: int
    reason: str
    confidence: str  # high, medium, low
    action_type: str  # promote or demote
    interaction_count: int
    days_since_last_contact: int
    average_interaction_quality: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SuggestionReport:
    """Suggestions plus the promote/demote split the UI shows."""
    suggestions: tuple[Suggestion, ...]

    @property
    def promotions(self) -> list[Suggestion]:
        return [s for s in self.suggestions if s.action_type == ACTION_PROMOTE]

    @property
    def demotions(self) -> list[Suggestion]:
        return [s for s in self.suggestions if s.action_type == ACTION_DEMOTE]

    @property
    def total_suggestions(self) -> int:
        return len(self.suggestions)

    @property
    def high_confidence(self) -> list[Suggestion]:
        return [s for s in self.suggestions if s.confidence == CONFIDENCE_HIGH]


def group_by_person(interactions: Iterable[Interaction]) -> dict[str, list[Interaction]]:
    """Bucket interactions by person_id, preserving input order."""
    grouped: dict[str, list[Interaction]] = defaultdict(list)
    for interaction in interactions:
        grouped[interaction.person_id].append(interaction)
    return grouped


def compute_person_metrics(
    person_interactions: Sequence[Interaction],
    now: datetime,
) -> PersonMetrics:
    """
    Compute the metrics the suggestion rules look at.

    Args:
        person_interactions: All interactions for one person
        now: Reference time

    Returns:
        PersonMetrics
    """
    recent_cutoff = now - timedelta(days=RECENT_WINDOW_DAYS)
    very_recent_cutoff = now - timedelta(days=VERY_RECENT_WINDOW_DAYS)

    recent = sum(1 for i in person_interactions if i.occurred_at >= recent_cutoff)
    very_recent = sum(1 for i in person_interactions if i.occurred_at >= very_recent_cutoff)

    if person_interactions:
        last = max(i.occurred_at for i in person_interactions)
        days_since = whole_days_between(last, now)
    else:
        days_since = NEVER_CONTACTED_DAYS

    return PersonMetrics(
        total_interactions=len(person_interactions),
        recent_interaction_count=recent,
        very_recent_count=very_recent,
        days_since_last_contact=days_since,
        average_interaction_quality=average_interaction_quality(person_interactions),
    )


def _clamp(value: int) -> int:
    return max(MIN_CLOSENESS, min(MAX_CLOSENESS, value))


def evaluate_rules(closeness: int, m: PersonMetrics) -> Optional[tuple[int, str, str, str]]:
    """
    Apply the suggestion rules to one person.

    Returns:
        (suggested_closeness, reason, confidence, action_type) for the first
        matching rule, or None if no rule matches
    """
    days = m.days_since_last_contact

    # Promotions
    if m.very_recent_count >= VERY_RECENT_PROMOTE_COUNT and closeness < MAX_CLOSENESS:
        return (
            min(MAX_CLOSENESS, closeness + 1),
            f"{m.very_recent_count} interactions in the past week suggests a very close relationship",
            CONFIDENCE_HIGH,
            ACTION_PROMOTE,
        )
    if (
        m.recent_interaction_count >= QUALITY_PROMOTE_COUNT
        and m.average_interaction_quality > QUALITY_PROMOTE_MIN_AVERAGE
        and closeness < QUALITY_PROMOTE_CAP
    ):
        return (
            min(QUALITY_PROMOTE_CAP, closeness + 1),
            f"{m.recent_interaction_count} high-quality interactions this month indicates growing closeness",
            CONFIDENCE_HIGH,
            ACTION_PROMOTE,
        )
    if m.recent_interaction_count >= MODERATE_PROMOTE_COUNT and closeness < MODERATE_PROMOTE_CAP:
        return (
            min(MODERATE_PROMOTE_CAP, closeness + 1),
            f"{m.recent_interaction_count} interactions this month suggests closer relationship",
            CONFIDENCE_MEDIUM,
            ACTION_PROMOTE,
        )

    # Demotions
    if days > DISTANT_AFTER_DAYS and closeness > MIN_CLOSENESS:
        if days == NEVER_CONTACTED_DAYS and m.total_interactions == 0:
            reason = "No interactions logged yet suggests this relationship has become distant"
        else:
            reason = f"{days} days without contact suggests this relationship has become distant"
        return MIN_CLOSENESS, reason, CONFIDENCE_HIGH, ACTION_DEMOTE
    if days > LONG_SILENCE_DAYS and closeness > 2:
        return (
            max(MIN_CLOSENESS, closeness - 1),
            f"{days} days since last contact suggests relationship has become more distant",
            CONFIDENCE_MEDIUM,
            ACTION_DEMOTE,
        )
    if days > CLOSE_SILENCE_DAYS and m.recent_interaction_count == 0 and closeness > 3:
        return (
            max(CLOSE_SILENCE_FLOOR, closeness - 1),
            f"No contact in {days} days for a close relationship suggests it needs attention",
            CONFIDENCE_MEDIUM,
            ACTION_DEMOTE,
        )
    return None


def _sort_key(suggestion: Suggestion) -> tuple[int, int]:
    return (
        -CONFIDENCE_RANK.get(suggestion.confidence, 0),
        0 if suggestion.action_type == ACTION_PROMOTE else 1,
    )


def compute_suggestions(
    people: Iterable[Person],
    interactions: Iterable[Interaction],
    now: datetime,
) -> list[Suggestion]:
    """
    Compute closeness-change suggestions for everyone.

    Deterministic for identical inputs and now. Inputs are not modified.

    Args:
        people: People to evaluate
        interactions: All interactions (any order)
        now: Reference time

    Returns:
        Suggestions sorted by confidence (high first), then promotions
        before demotions, otherwise in input order
    """
    by_person = group_by_person(interactions)
    suggestions = []

    for person in people:
        metrics = compute_person_metrics(by_person.get(person.id, []), now)
        outcome = evaluate_rules(person.closeness, metrics)
        if outcome is None:
            continue

        suggested, reason, confidence, action_type = outcome
        suggested = _clamp(suggested)
        if suggested == person.closeness:
            continue

        suggestions.append(Suggestion(
            person_id=person.id,
            person_name=person.name,
            current_closeness=person.closeness,
            suggested_closeness=suggested,
            reason=reason,
            confidence=confidence,
            action_type=action_type,
            interaction_count=metrics.total_interactions,
            days_since_last_contact=metrics.days_since_last_contact,
            average_interaction_quality=metrics.average_interaction_quality,
        ))

    # sorted() is stable, so ties keep input order
    return sorted(suggestions, key=_sort_key)


def build_suggestion_report(
    people: Iterable[Person],
    interactions: Iterable[Interaction],
    now: datetime,
) -> SuggestionReport:
    """compute_suggestions wrapped with promote/demote views."""
    return SuggestionReport(suggestions=tuple(compute_suggestions(people, interactions, now)))


def find_suggestion(suggestions: Iterable[Suggestion], person_id: str) -> Optional[Suggestion]:
    """The suggestion for a person, if any."""
    for suggestion in suggestions:
        if suggestion.person_id == person_id:
            return suggestion
    return None
