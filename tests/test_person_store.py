"""
Tests for PersonStore.
"""
import pytest

from api.services.person_store import PersonStore, clamp_closeness, get_person_store

pytestmark = pytest.mark.unit


class TestClampCloseness:

    @pytest.mark.parametrize("value,expected", [(-3, 1), (0, 1), (1, 1), (3, 3), (5, 5), (9, 5)])
    def test_clamp(self, value, expected):
        assert clamp_closeness(value) == expected


class TestPersonStore:
    """Tests for PersonStore CRUD operations."""

    @pytest.fixture
    def store(self, tmp_path):
        return PersonStore(str(tmp_path / "kinship.db"))

    def test_create_and_get(self, store):
        person = store.create("Sam Lee", closeness=4, relationship="family", email="sam@example.com")
        found = store.get_by_id(person.id)

        assert found.name == "Sam Lee"
        assert found.closeness == 4
        assert found.relationship == "family"
        assert found.email == "sam@example.com"
        assert found.updated_at is None

    def test_create_defaults(self, store):
        person = store.create("Alex", relationship=None)
        assert person.closeness == 3
        assert person.relationship == "friend"

    def test_create_clamps_closeness(self, store):
        assert store.create("Too close", closeness=8).closeness == 5

    def test_get_nonexistent(self, store):
        assert store.get_by_id("nonexistent") is None

    def test_get_all_newest_first(self, store):
        first = store.create("first")
        second = store.create("second")
        assert [p.id for p in store.get_all()] == [second.id, first.id]
        assert store.count() == 2

    def test_update(self, store):
        person = store.create("Alex", notes="met at work")
        updated = store.update(person.id, name="Alex Kim", phone="555-0100")

        assert updated.name == "Alex Kim"
        assert updated.phone == "555-0100"
        assert updated.notes == "met at work"
        assert updated.updated_at is not None
        assert store.get_by_id(person.id) == updated

    def test_none_clears_optional_fields(self, store):
        person = store.create("Alex", email="alex@example.com", notes="gym", platform="signal")
        updated = store.update(person.id, email=None, notes=None)

        assert updated.email is None
        assert updated.notes is None
        assert updated.platform == "signal"
        assert store.get_by_id(person.id).email is None

    def test_none_ignored_for_required_fields(self, store):
        person = store.create("Alex", closeness=4)
        updated = store.update(person.id, name=None, relationship=None, closeness=None)
        assert (updated.name, updated.relationship, updated.closeness) == ("Alex", "friend", 4)

    def test_update_ignores_unknown_and_protected_fields(self, store):
        person = store.create("Alex")
        updated = store.update(person.id, id="hijack", favourite_colour="green")
        assert updated.id == person.id

    def test_update_nonexistent(self, store):
        assert store.update("nonexistent", name="x") is None

    def test_update_closeness_clamped(self, store):
        person = store.create("Alex", closeness=2)
        assert store.update_closeness(person.id, 0).closeness == 1
        assert store.get_by_id(person.id).closeness == 1

    def test_delete(self, store):
        person = store.create("Alex")
        assert store.delete(person.id) is True
        assert store.get_by_id(person.id) is None
        assert store.delete(person.id) is False

    def test_to_dict(self, store):
        data = store.create("Alex").to_dict()
        assert data["name"] == "Alex"
        assert isinstance(data["created_at"], str)
        assert data["updated_at"] is None


class TestSingleton:

    def test_same_instance(self):
        assert get_person_store() is get_person_store()
