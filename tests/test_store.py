"""Tests for the entity store adapters."""

import pytest

from lenslink.config import StoreConfig
from lenslink.errors import NotFoundError, ValidationError
from lenslink.schemas import BookingStatus, User
from lenslink.services import BookingService, PhotographerService, UserService
from lenslink.store import JsonFileStore, MemoryStore, create_store
from tests.conftest import EVENT_DAY, NOW, make_request, weekday_availability


@pytest.fixture(params=["memory", "file"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(str(tmp_path / "data"))


class TestRepositoryContract:
    def test_add_and_get(self, any_store):
        user = User(id="USR-1", name="Ava", email="ava@example.com")
        any_store.users.add(user)
        assert any_store.users.get("USR-1") == user
        assert any_store.users.get("USR-2") is None

    def test_duplicate_id(self, any_store):
        any_store.users.add(User(id="USR-1", name="Ava", email="ava@example.com"))
        with pytest.raises(ValueError):
            any_store.users.add(User(id="USR-1", name="Ava", email="ava@example.com"))

    def test_require_unknown(self, any_store):
        with pytest.raises(NotFoundError, match="User USR-9 not found"):
            any_store.users.require("USR-9")

    def test_update_applies_mutation(self, any_store):
        any_store.users.add(User(id="USR-1", name="Ava", email="ava@example.com"))

        def rename(user):
            user.name = "Ava C."

        updated = any_store.users.update("USR-1", rename)
        assert updated.name == "Ava C."
        assert any_store.users.get("USR-1").name == "Ava C."

    def test_failed_mutation_writes_nothing(self, any_store):
        any_store.users.add(User(id="USR-1", name="Ava", email="ava@example.com"))

        def half_done(user):
            user.name = "Partial"
            raise ValidationError("nope")

        with pytest.raises(ValidationError):
            any_store.users.update("USR-1", half_done)
        assert any_store.users.get("USR-1").name == "Ava"

    def test_returned_entities_are_copies(self, any_store):
        any_store.users.add(User(id="USR-1", name="Ava", email="ava@example.com"))
        copy = any_store.users.get("USR-1")
        copy.name = "Changed"
        assert any_store.users.get("USR-1").name == "Ava"

    def test_find_and_count(self, any_store):
        for i in range(3):
            any_store.users.add(User(id=f"USR-{i}", name=f"User {i}", email=f"u{i}@example.com"))
        assert any_store.users.count() == 3
        assert [u.id for u in any_store.users.find(lambda u: u.id != "USR-1")] == [
            "USR-0", "USR-2",
        ]
        assert any_store.users.find_one(lambda u: u.email == "u2@example.com").id == "USR-2"

    def test_remove(self, any_store):
        any_store.users.add(User(id="USR-1", name="Ava", email="ava@example.com"))
        removed = any_store.users.remove("USR-1")
        assert removed.name == "Ava"
        assert any_store.users.get("USR-1") is None
        with pytest.raises(NotFoundError):
            any_store.users.remove("USR-1")

    def test_update_stamps_given_time(self, any_store):
        any_store.users.add(User(id="USR-1", name="Ava", email="ava@example.com"))

        def rename(user):
            user.name = "Ava C."

        updated = any_store.users.update("USR-1", rename, now=NOW)
        assert updated.updated_at == NOW
        assert any_store.users.get("USR-1").updated_at == NOW


class TestJsonFileStore:
    def test_booking_round_trips_through_disk(self, tmp_path, clock, notifier):
        data_dir = str(tmp_path / "data")
        store = JsonFileStore(data_dir)
        users = UserService(store, clock, notifier)
        client = users.register_user("Ava Client", "ava@example.com")
        owner = users.register_user("Noor Lens", "noor@example.com", role="photographer")
        photographer = PhotographerService(store, clock, notifier).create_profile(
            owner.id, "Noor Lens Studio", availability=weekday_availability()
        )
        bookings = BookingService(store, clock, notifier)
        booking = bookings.create_booking(
            client.id, photographer.id, EVENT_DAY, "10:00", "12:00", make_request()
        )
        bookings.transition_status(booking.id, owner.id, "confirmed")

        reopened = JsonFileStore(data_dir)
        loaded = reopened.bookings.get(booking.id)
        assert loaded.status == BookingStatus.CONFIRMED
        assert loaded.event_date == EVENT_DAY
        assert loaded.location.venue == "Harbour Hall"
        assert (tmp_path / "data" / "bookings.json").exists()


class TestCreateStore:
    def test_memory_backend(self):
        assert isinstance(create_store(StoreConfig(backend="memory")), MemoryStore)

    def test_file_backend(self, tmp_path):
        store = create_store(StoreConfig(backend="file", data_dir=str(tmp_path)))
        assert isinstance(store, JsonFileStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown store backend"):
            create_store(StoreConfig(backend="mongo"))
