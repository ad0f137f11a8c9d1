"""
Tests for InteractionStore.
"""
import pytest
from datetime import datetime, timedelta, timezone

from api.services.interaction_store import (
    Interaction,
    InteractionStore,
    create_interaction,
    get_interaction_store,
)

pytestmark = pytest.mark.unit


class TestInteraction:
    """Tests for Interaction dataclass."""

    def test_create_interaction(self):
        interaction = create_interaction(
            person_id="person-123",
            type="call",
            occurred_at=datetime(2024, 6, 15, 10, 30),
            duration_minutes=20,
        )

        assert interaction.id
        assert interaction.person_id == "person-123"
        assert interaction.occurred_at.tzinfo is not None
        assert interaction.type_badge == "📞"

    def test_defaults_to_now(self):
        before = datetime.now(timezone.utc)
        interaction = create_interaction(person_id="p1", type="text")
        assert interaction.occurred_at >= before

    def test_type_badges(self):
        badges = {"text": "💬", "email": "📧", "in_person": "🤝", "video_call": "🎥", "fax": "📄"}
        for type, expected in badges.items():
            assert create_interaction(person_id="p1", type=type).type_badge == expected

    def test_to_dict(self):
        interaction = create_interaction(
            person_id="p1", type="in_person", occurred_at=datetime(2024, 6, 15, tzinfo=timezone.utc),
        )
        data = interaction.to_dict()
        assert data["type"] == "in_person"
        assert data["occurred_at"] == "2024-06-15T00:00:00+00:00"

    def test_missing_occurred_at_falls_back_to_created(self):
        row = ("i1", "p1", "text", None, None, None, None, None, "2024-06-01T09:00:00+00:00", None)
        interaction = Interaction.from_row(row)
        assert interaction.occurred_at == datetime(2024, 6, 1, 9, tzinfo=timezone.utc)


class TestInteractionStore:
    """Tests for InteractionStore."""

    @pytest.fixture
    def store(self, tmp_path):
        return InteractionStore(str(tmp_path / "kinship.db"))

    def log(self, store, person_id="p1", days_ago=0, **kwargs):
        occurred = datetime.now(timezone.utc) - timedelta(days=days_ago)
        return store.add(create_interaction(person_id=person_id, type=kwargs.pop("type", "text"),
                                            occurred_at=occurred, **kwargs))

    def test_add_and_get(self, store):
        added = self.log(store, type="call", duration_minutes=45, description="Catch-up", mood_rating=4,
                         platform="whatsapp")
        found = store.get_by_id(added.id)
        assert found == added
        assert found.platform == "whatsapp"

    def test_get_nonexistent(self, store):
        assert store.get_by_id("nonexistent") is None

    def test_naive_occurred_at_stored_as_utc(self, store):
        added = store.add(create_interaction(person_id="p1", type="text", occurred_at=datetime(2024, 6, 15, 8)))
        assert store.get_by_id(added.id).occurred_at == datetime(2024, 6, 15, 8, tzinfo=timezone.utc)

    def test_other_timezones_normalised(self, store):
        plus_two = timezone(timedelta(hours=2))
        occurred = datetime(2024, 6, 15, 10, tzinfo=plus_two)
        added = store.add(create_interaction(person_id="p1", type="text", occurred_at=occurred))
        found = store.get_by_id(added.id)
        assert found.occurred_at == occurred
        assert found.occurred_at.utcoffset() == timedelta(0)

    def test_get_for_person_most_recent_first(self, store):
        old = self.log(store, days_ago=20)
        new = self.log(store, days_ago=1)
        self.log(store, person_id="p2")

        assert [i.id for i in store.get_for_person("p1")] == [new.id, old.id]

    def test_get_for_person_days_back_and_limit(self, store):
        for days in (1, 5, 40):
            self.log(store, days_ago=days)

        assert len(store.get_for_person("p1", days_back=30)) == 2
        assert len(store.get_for_person("p1", limit=1)) == 1

    def test_get_last_interaction(self, store):
        self.log(store, days_ago=10)
        latest = self.log(store, days_ago=2)
        assert store.get_last_interaction("p1").id == latest.id
        assert store.get_last_interaction("nobody") is None

    def test_get_all(self, store):
        self.log(store, person_id="p1")
        self.log(store, person_id="p2")
        assert len(store.get_all()) == 2
        assert len(store.get_all(limit=1)) == 1

    def test_delete(self, store):
        added = self.log(store)
        assert store.delete(added.id) is True
        assert store.delete(added.id) is False
        assert store.count() == 0

    def test_delete_for_person(self, store):
        self.log(store, person_id="p1")
        self.log(store, person_id="p1")
        self.log(store, person_id="p2")

        assert store.delete_for_person("p1") == 2
        assert store.count() == 1


class TestSingleton:

    def test_uses_configured_data_path(self, isolated_data_path):
        store = get_interaction_store()
        assert store.db_path.startswith(str(isolated_data_path))
        assert get_interaction_store() is store
