"""Account registration, profile edits, login stamps and soft deactivation."""

import logging
from typing import Optional

from lenslink.errors import UnauthorizedError, ValidationError
from lenslink.notifications import NotificationKind
from lenslink.schemas import User, UserRole
from lenslink.services.base import BaseService
from lenslink.utils import is_valid_email, new_id, normalize_email

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100


def _validate_name(value: Optional[str]) -> str:
    value = (value or "").strip()
    if not MIN_NAME_LENGTH <= len(value) <= MAX_NAME_LENGTH:
        raise ValidationError(
            f"Name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters",
            field="name",
        )
    return value


class UserService(BaseService):

    def register_user(
        self,
        name: str,
        email: str,
        role: str = UserRole.CLIENT.value,
        password_hash: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        """Create an account. Emails are unique regardless of case."""
        name = _validate_name(name)
        if not email or not is_valid_email(email):
            raise ValidationError("Please provide a valid email", field="email")
        email = normalize_email(email)
        try:
            user_role = UserRole(role)
        except ValueError:
            raise ValidationError(f"Invalid role: {role!r}", field="role") from None

        if self.store.users.find_one(lambda u: u.email == email):
            raise ValidationError("An account with this email already exists", field="email")

        now = self.clock.now()
        user = self.store.users.add(User(
            id=new_id("USR"),
            name=name,
            email=email,
            password_hash=password_hash,
            phone=phone,
            role=user_role,
            created_at=now,
            updated_at=now,
        ))
        logger.info("User registered: %s (%s)", user.id, user_role.value)
        self.notifier.dispatch(
            user.email,
            NotificationKind.WELCOME,
            {"recipient_name": user.name, "role": user_role.value},
        )
        return user

    def get_user(self, user_id: str) -> User:
        return self.store.users.require(user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        email = normalize_email(email)
        return self.store.users.find_one(lambda u: u.email == email)

    def update_profile(
        self,
        user_id: str,
        actor_id: str,
        name: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        actor = self.require_active_user(actor_id)
        if actor.id != user_id and actor.role != UserRole.ADMIN:
            raise UnauthorizedError("Not authorized to edit this profile")
        new_name = _validate_name(name) if name is not None else None

        def mutate(user: User) -> None:
            if new_name is not None:
                user.name = new_name
            if phone is not None:
                user.phone = phone.strip() or None

        return self.store.users.update(user_id, mutate, now=self.clock.now())

    def record_login(self, user_id: str) -> User:
        """Stamp ``last_login``; deactivated accounts cannot log in."""
        self.require_active_user(user_id)
        now = self.clock.now()

        def mutate(user: User) -> None:
            user.last_login = now

        return self.store.users.update(user_id, mutate, now=now)

    def deactivate_user(self, user_id: str, actor_id: str) -> User:
        """Soft-delete an account. Users may deactivate themselves; admins anyone."""
        actor = self.require_active_user(actor_id)
        if actor.id != user_id and actor.role != UserRole.ADMIN:
            raise UnauthorizedError("Not authorized to deactivate this account")

        def mutate(user: User) -> None:
            user.is_active = False

        user = self.store.users.update(user_id, mutate, now=self.clock.now())
        logger.info("User deactivated: %s by %s", user_id, actor_id)
        return user
