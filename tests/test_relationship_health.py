"""Tests for relationship health classification."""
import pytest
from datetime import timedelta

from api.services.relationship_health import (
    HealthStatus,
    classify_health,
    days_since_last_contact,
    health_for_days,
    last_contact_at,
)
from config.relationship_thresholds import NEVER_CONTACTED_DAYS
from tests.factories import NOW, make_interaction, make_person

pytestmark = pytest.mark.unit


class TestDaysSinceLastContact:
    """Tests for the recency input to health."""

    def test_never_contacted_uses_sentinel(self):
        person = make_person()
        assert days_since_last_contact(person, [], NOW) == NEVER_CONTACTED_DAYS

    def test_uses_latest_interaction(self):
        person = make_person()
        interactions = [
            make_interaction(person, days_ago=40),
            make_interaction(person, days_ago=3),
            make_interaction(person, days_ago=12),
        ]
        assert days_since_last_contact(person, interactions, NOW) == 3

    def test_partial_days_are_floored(self):
        person = make_person()
        interactions = [make_interaction(person, days_ago=2.9)]
        assert days_since_last_contact(person, interactions, NOW) == 2

    def test_ignores_other_people(self):
        person = make_person()
        other = make_person(name="Sam")
        interactions = [make_interaction(other, days_ago=1), make_interaction(person, days_ago=30)]
        assert days_since_last_contact(person, interactions, NOW) == 30

    def test_accepts_person_id(self):
        person = make_person()
        interactions = [make_interaction(person, days_ago=5)]
        assert days_since_last_contact(person.id, interactions, NOW) == 5

    def test_last_contact_at_none_without_interactions(self):
        assert last_contact_at(make_person(), []) is None


class TestClassifyHealth:
    """Tests for healthy / attention / inactive thresholds."""

    def test_no_interactions_is_inactive(self):
        assert classify_health(make_person(), [], NOW) == HealthStatus.INACTIVE

    @pytest.mark.parametrize("days,expected", [
        (0, HealthStatus.HEALTHY),
        (7, HealthStatus.HEALTHY),
        (8, HealthStatus.ATTENTION),
        (21, HealthStatus.ATTENTION),
        (22, HealthStatus.INACTIVE),
        (400, HealthStatus.INACTIVE),
    ])
    def test_boundaries(self, days, expected):
        person = make_person()
        interactions = [make_interaction(person, days_ago=days)]
        assert classify_health(person, interactions, NOW) == expected

    def test_future_interaction_counts_as_healthy(self):
        person = make_person()
        interactions = [make_interaction(person, days_ago=-3)]
        assert classify_health(person, interactions, NOW) == HealthStatus.HEALTHY

    def test_health_is_string_valued(self):
        assert health_for_days(1).value == "healthy"
        assert health_for_days(NEVER_CONTACTED_DAYS) == "inactive"

    def test_pure(self):
        """Classification does not depend on wall-clock time."""
        person = make_person()
        interactions = [make_interaction(person, days_ago=10)]
        later = NOW + timedelta(days=20)
        assert classify_health(person, interactions, NOW) == HealthStatus.ATTENTION
        assert classify_health(person, interactions, later) == HealthStatus.INACTIVE
