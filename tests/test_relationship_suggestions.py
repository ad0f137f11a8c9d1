"""Tests for closeness suggestions."""
import copy

import pytest

from api.services.relationship_suggestions import (
    ACTION_DEMOTE,
    ACTION_PROMOTE,
    CONFIDENCE_HIGH,
    CONFIDENCE_MEDIUM,
    PersonMetrics,
    build_suggestion_report,
    compute_person_metrics,
    compute_suggestions,
    evaluate_rules,
    find_suggestion,
)
from config.relationship_thresholds import NEVER_CONTACTED_DAYS
from tests.factories import NOW, make_interaction, make_interactions, make_person

pytestmark = pytest.mark.unit


def only_suggestion(people, interactions):
    suggestions = compute_suggestions(people, interactions, NOW)
    assert len(suggestions) == 1
    return suggestions[0]


class TestPersonMetrics:
    """Tests for the per-person inputs to the rules."""

    def test_no_interactions(self):
        m = compute_person_metrics([], NOW)
        assert m.total_interactions == 0
        assert m.recent_interaction_count == 0
        assert m.very_recent_count == 0
        assert m.days_since_last_contact == NEVER_CONTACTED_DAYS
        assert m.average_interaction_quality == 0.0

    def test_windows(self):
        person = make_person()
        interactions = [
            make_interaction(person, days_ago=1),
            make_interaction(person, days_ago=7),    # on the 7-day edge
            make_interaction(person, days_ago=8),
            make_interaction(person, days_ago=30),   # on the 30-day edge
            make_interaction(person, days_ago=31),
        ]
        m = compute_person_metrics(interactions, NOW)
        assert m.total_interactions == 5
        assert m.very_recent_count == 2
        assert m.recent_interaction_count == 4
        assert m.days_since_last_contact == 1


class TestScenarios:
    """End-to-end scenarios for each rule."""

    def test_frequent_week_promotes_high(self):
        person = make_person(closeness=2)
        s = only_suggestion([person], make_interactions(person, 6, days_ago=1))
        assert s.suggested_closeness == 3
        assert s.confidence == CONFIDENCE_HIGH
        assert s.action_type == ACTION_PROMOTE
        assert s.interaction_count == 6
        assert s.average_interaction_quality == pytest.approx(2.0)
        assert "6" in s.reason

    def test_long_silence_demotes_medium(self):
        person = make_person(closeness=4)
        s = only_suggestion([person], [make_interaction(person, days_ago=95)])
        assert s.suggested_closeness == 3
        assert s.confidence == CONFIDENCE_MEDIUM
        assert s.action_type == ACTION_DEMOTE
        assert s.days_since_last_contact == 95
        assert "95" in s.reason

    def test_six_months_silence_drops_to_one(self):
        person = make_person(closeness=5)
        s = only_suggestion([person], [make_interaction(person, days_ago=200)])
        assert s.suggested_closeness == 1
        assert s.confidence == CONFIDENCE_HIGH
        assert s.action_type == ACTION_DEMOTE
        assert "200" in s.reason

    def test_never_contacted_drops_to_one(self):
        person = make_person(closeness=3)
        s = only_suggestion([person], [])
        assert s.suggested_closeness == 1
        assert s.confidence == CONFIDENCE_HIGH
        assert s.days_since_last_contact == NEVER_CONTACTED_DAYS
        assert s.interaction_count == 0

    def test_quality_month_promotes_high(self):
        person = make_person(closeness=3)
        s = only_suggestion([person], make_interactions(person, 8, days_ago=10, type="call"))
        assert s.suggested_closeness == 4
        assert s.confidence == CONFIDENCE_HIGH
        assert "8" in s.reason

    def test_quality_rule_beats_moderate_rule(self):
        person = make_person(closeness=2)
        s = only_suggestion([person], make_interactions(person, 8, days_ago=10, type="call"))
        assert s.suggested_closeness == 3
        assert s.confidence == CONFIDENCE_HIGH

    def test_low_quality_month_falls_back_to_moderate(self):
        person = make_person(closeness=2)
        s = only_suggestion([person], make_interactions(person, 8, days_ago=10, type="text"))
        assert s.suggested_closeness == 3
        assert s.confidence == CONFIDENCE_MEDIUM

    def test_moderate_month_promotes_medium(self):
        person = make_person(closeness=1)
        s = only_suggestion([person], make_interactions(person, 5, days_ago=10))
        assert s.suggested_closeness == 2
        assert s.confidence == CONFIDENCE_MEDIUM
        assert s.action_type == ACTION_PROMOTE

    def test_close_relationship_gone_quiet(self):
        person = make_person(closeness=5)
        s = only_suggestion([person], [make_interaction(person, days_ago=75)])
        assert s.suggested_closeness == 4
        assert s.confidence == CONFIDENCE_MEDIUM
        assert s.action_type == ACTION_DEMOTE
        assert "75" in s.reason

    def test_regular_contact_over_90_days(self):
        person = make_person(closeness=3)
        s = only_suggestion([person], [make_interaction(person, days_ago=100)])
        assert s.suggested_closeness == 2


class TestNoSuggestion:
    """Cases where no rule fires or the result is unchanged."""

    @pytest.mark.parametrize("closeness,days_ago", [
        (3, 75),   # quiet, but not close enough for the 60-day rule
        (2, 100),  # already distant
        (1, 400),  # already at the bottom
    ])
    def test_quiet_but_nothing_to_change(self, closeness, days_ago):
        person = make_person(closeness=closeness)
        assert compute_suggestions([person], [make_interaction(person, days_ago=days_ago)], NOW) == []

    def test_inner_circle_stays(self):
        person = make_person(closeness=5)
        assert compute_suggestions([person], make_interactions(person, 10, days_ago=1), NOW) == []

    def test_moderate_month_at_regular_contact(self):
        person = make_person(closeness=3)
        assert compute_suggestions([person], make_interactions(person, 5, days_ago=10), NOW) == []

    def test_never_contacted_already_distant(self):
        assert compute_suggestions([make_person(closeness=1)], [], NOW) == []

    def test_empty_inputs(self):
        assert compute_suggestions([], [], NOW) == []

    def test_interactions_for_unknown_people_ignored(self):
        assert compute_suggestions([], make_interactions("ghost", 10), NOW) == []


class TestRulePriority:

    def test_promotion_shadows_contradictory_demotion(self):
        """Metrics matching both a weekly promote and a 90-day demote."""
        metrics = PersonMetrics(
            total_interactions=6,
            recent_interaction_count=6,
            very_recent_count=6,
            days_since_last_contact=120,
            average_interaction_quality=2.0,
        )
        suggested, _, confidence, action = evaluate_rules(3, metrics)
        assert (suggested, confidence, action) == (4, CONFIDENCE_HIGH, ACTION_PROMOTE)

    def test_no_rule(self):
        metrics = PersonMetrics(1, 1, 1, 2, 2.0)
        assert evaluate_rules(3, metrics) is None


class TestOrdering:

    def test_confidence_then_promotions_first(self):
        demote_medium = make_person(name="B", closeness=4)
        promote_medium = make_person(name="M", closeness=1)
        demote_high = make_person(name="C", closeness=5)
        promote_high = make_person(name="A", closeness=2)
        people = [demote_medium, promote_medium, demote_high, promote_high]
        interactions = (
            [make_interaction(demote_medium, days_ago=95)]
            + make_interactions(promote_medium, 5, days_ago=10)
            + [make_interaction(demote_high, days_ago=200)]
            + make_interactions(promote_high, 6, days_ago=1)
        )

        names = [s.person_name for s in compute_suggestions(people, interactions, NOW)]
        assert names == ["A", "C", "M", "B"]

    def test_ties_keep_input_order(self):
        people = [make_person(name=n, closeness=3) for n in ("first", "second", "third")]
        names = [s.person_name for s in compute_suggestions(people, [], NOW)]
        assert names == ["first", "second", "third"]


class TestProperties:

    def test_suggested_always_differs_and_is_clamped(self):
        profiles = [
            [],
            [("text", 1)] * 6,
            [("call", 10)] * 8,
            [("text", 10)] * 5,
            [("text", 65)],
            [("text", 95)],
            [("text", 200)],
        ]
        for closeness in range(1, 6):
            for profile in profiles:
                person = make_person(closeness=closeness)
                interactions = [make_interaction(person, days_ago=d, type=t) for t, d in profile]
                for s in compute_suggestions([person], interactions, NOW):
                    assert 1 <= s.suggested_closeness <= 5
                    assert s.suggested_closeness != s.current_closeness

    def test_idempotent(self):
        people = [make_person(name=str(i), closeness=(i % 5) + 1) for i in range(10)]
        interactions = []
        for i, p in enumerate(people):
            interactions += make_interactions(p, i, days_ago=i * 12)
        assert compute_suggestions(people, interactions, NOW) == compute_suggestions(people, interactions, NOW)

    def test_inputs_not_modified(self):
        person = make_person(closeness=2)
        people = [person]
        interactions = make_interactions(person, 6, days_ago=1)
        before = (copy.deepcopy(people), copy.deepcopy(interactions))
        compute_suggestions(people, interactions, NOW)
        assert (people, interactions) == before


class TestSuggestionReport:

    def test_promotions_and_demotions(self):
        up = make_person(name="up", closeness=2)
        down = make_person(name="down", closeness=4)
        interactions = make_interactions(up, 6, days_ago=1) + [make_interaction(down, days_ago=95)]
        report = build_suggestion_report([up, down], interactions, NOW)
        assert report.total_suggestions == 2
        assert [s.person_name for s in report.promotions] == ["up"]
        assert [s.person_name for s in report.demotions] == ["down"]
        assert [s.person_name for s in report.high_confidence] == ["up"]

    def test_find_suggestion(self):
        person = make_person(closeness=3)
        suggestions = compute_suggestions([person], [], NOW)
        assert find_suggestion(suggestions, person.id).suggested_closeness == 1
        assert find_suggestion(suggestions, "missing") is None
