"""Profile self-service and admin user management over the credential store."""

import logging
from typing import Any

from app.core.exceptions import ConflictError, NotFoundError
from app.models.user import User
from app.schemas.auth import MessageResponse, UserOut
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

DELETE_MESSAGE = "User deleted successfully"


def sanitize_user(user: User | None) -> UserOut | None:
    """Drop password and refresh-token hashes; None passes through."""
    if user is None:
        return None
    return UserOut.model_validate(user)


class UsersService:
    """Field-level reads and updates; every returned user is sanitized."""

    def __init__(self, store: UserStore) -> None:
        self.store = store

    def get_profile(self, user_id: str) -> UserOut:
        user = self.store.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return sanitize_user(user)

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> UserOut:
        """Apply full_name/email changes to the caller's own account."""
        return self._update(user_id, changes)

    def list_users(self) -> list[UserOut]:
        """Active users only."""
        return [sanitize_user(u) for u in self.store.list_active()]

    def get_user(self, user_id: str) -> UserOut | None:
        if not user_id:
            return None
        return sanitize_user(self.store.get_by_id(user_id))

    def update_user(self, user_id: str, changes: dict[str, Any]) -> UserOut:
        """Admin update: profile fields plus role and is_active."""
        updated = self._update(user_id, changes)
        logger.info(
            "User updated by admin",
            extra={"user_id": user_id, "fields": ",".join(sorted(changes))},
        )
        return updated

    def delete_user(self, user_id: str) -> MessageResponse:
        user = self.store.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        self.store.delete(user)
        logger.info("User deleted", extra={"user_id": user_id})
        return MessageResponse(message=DELETE_MESSAGE)

    def _update(self, user_id: str, changes: dict[str, Any]) -> UserOut:
        user = self.store.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        email = changes.get("email")
        if email is not None and email != user.email:
            other = self.store.get_by_email(email)
            if other is not None and other.id != user.id:
                raise ConflictError("Email already in use")
        if not changes:
            return sanitize_user(user)
        return sanitize_user(self.store.update(user, changes))
