"""Tests for account registration and maintenance."""

import pytest

from lenslink.errors import NotFoundError, UnauthorizedError, ValidationError
from lenslink.notifications import NotificationKind
from lenslink.schemas import UserRole
from tests.conftest import NOW


class TestRegistration:
    def test_register_client(self, user_service, sender):
        user = user_service.register_user("Ava Client", "  Ava@Example.com ")
        assert user.email == "ava@example.com"
        assert user.role == UserRole.CLIENT
        assert user.is_active
        assert user.created_at == NOW
        welcome = sender.of_kind(NotificationKind.WELCOME)
        assert welcome[0][0] == "ava@example.com"

    def test_duplicate_email_is_rejected(self, user_service, client):
        with pytest.raises(ValidationError, match="already exists"):
            user_service.register_user("Someone Else", "AVA@example.com")

    @pytest.mark.parametrize("email", ["", "not-an-email", "a@b"])
    def test_invalid_email(self, user_service, email):
        with pytest.raises(ValidationError):
            user_service.register_user("Ava Client", email)

    def test_invalid_role(self, user_service):
        with pytest.raises(ValidationError, match="role"):
            user_service.register_user("Ava Client", "ava@example.com", role="superuser")

    @pytest.mark.parametrize("name", ["", "A", "x" * 101])
    def test_name_length(self, user_service, name):
        with pytest.raises(ValidationError):
            user_service.register_user(name, "ava@example.com")

    def test_welcome_failure_does_not_block_registration(self, user_service, sender, store):
        sender.fail = True
        user = user_service.register_user("Ava Client", "ava@example.com")
        assert store.users.get(user.id) is not None


class TestMaintenance:
    def test_find_by_email(self, user_service, client):
        assert user_service.find_by_email("AVA@EXAMPLE.COM").id == client.id
        assert user_service.find_by_email("nobody@example.com") is None

    def test_update_own_profile(self, user_service, client):
        updated = user_service.update_profile(client.id, client.id, name="Ava C.", phone="0400")
        assert updated.name == "Ava C."
        assert updated.phone == "0400"

    def test_cannot_edit_someone_else(self, user_service, client, other_client):
        with pytest.raises(UnauthorizedError):
            user_service.update_profile(client.id, other_client.id, name="Mallory")

    def test_record_login(self, user_service, client, clock):
        clock.advance(hours=1)
        user = user_service.record_login(client.id)
        assert user.last_login == clock.now()

    def test_deactivated_user_cannot_log_in(self, user_service, client, admin):
        user_service.deactivate_user(client.id, admin.id)
        assert user_service.get_user(client.id).is_active is False
        with pytest.raises(UnauthorizedError):
            user_service.record_login(client.id)

    def test_unknown_user(self, user_service):
        with pytest.raises(NotFoundError):
            user_service.get_user("USR-MISSING")
