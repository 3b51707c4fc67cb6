"""
Authentication flow: signup, login, refresh-token rotation, logout and "who am I".

Session state per user is the stored refresh-token hash:
NoSession (NULL) -> login -> Active(h0) -> refresh -> Active(h1) -> logout -> NoSession.
Each refresh replaces the hash, so a refresh token is usable once. A stale token
fails with UnauthorizedError while a session exists and with ForbiddenError after logout.
"""

import logging
from typing import NamedTuple

from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from app.core.security import PasswordHasher, TokenIssuer, TokenPair
from app.models.user import User
from app.schemas.auth import MessageResponse, SignupResponse, UserOut
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

SIGNUP_MESSAGE = "User registered successfully"
LOGOUT_MESSAGE = "Logged out successfully"


class LoginResult(NamedTuple):
    """Sanitized user plus the freshly issued token pair."""

    user: UserOut
    access_token: str
    refresh_token: str


class AuthService:
    """Orchestrates credential checks and token rotation over the credential store."""

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.issuer = issuer

    def signup(self, email: str, password: str, full_name: str) -> SignupResponse:
        """Register a new user. Raises ConflictError if the email is taken."""
        if self.store.get_by_email(email) is not None:
            raise ConflictError("Email already in use")

        user = self.store.create(
            email=email,
            password_hash=self.hasher.hash(password),
            full_name=full_name,
        )
        logger.info("New user registered", extra={"user_id": user.id})
        return SignupResponse(user=UserOut.model_validate(user), message=SIGNUP_MESSAGE)

    def login(self, email: str, password: str) -> LoginResult:
        """
        Check credentials and open a session.

        Raises NotFoundError for an unknown email and UnauthorizedError for a wrong
        password. On success the hash of the new refresh token replaces any prior one.
        """
        user = self.store.get_by_email(email)
        if user is None:
            raise NotFoundError("User not found")
        if not self.hasher.verify(password, user.password_hash):
            logger.warning("Login rejected: bad password", extra={"user_id": user.id})
            raise UnauthorizedError("Invalid credentials")

        tokens = self._rotate(user)
        logger.info("User logged in", extra={"user_id": user.id})
        return LoginResult(
            user=UserOut.model_validate(user),
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
        )

    def refresh(self, user_id: str, presented_token: str) -> TokenPair:
        """
        Exchange a valid refresh token for a new pair and rotate the stored hash.

        Raises ForbiddenError when the user has no active session and
        UnauthorizedError when the token does not match the stored hash.
        """
        user = self.store.get_by_id(user_id)
        if user is None or not user.refresh_token_hash:
            raise ForbiddenError("Invalid refresh token")
        if not self.hasher.verify_token(presented_token, user.refresh_token_hash):
            logger.warning(
                "Refresh rejected: token does not match active session",
                extra={"user_id": user.id},
            )
            raise UnauthorizedError("Invalid refresh token")

        tokens = self._rotate(user)
        logger.info("Tokens refreshed", extra={"user_id": user.id})
        return tokens

    def logout(self, user_id: str) -> MessageResponse:
        """Clear the stored refresh-token hash. Idempotent."""
        self.store.set_refresh_token_hash(user_id, None)
        logger.info("User logged out", extra={"user_id": user_id})
        return MessageResponse(message=LOGOUT_MESSAGE)

    def get_me(self, user_id: str) -> UserOut:
        """Return the sanitized user. Raises NotFoundError if absent."""
        user = self.store.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserOut.model_validate(user)

    def _rotate(self, user: User) -> TokenPair:
        tokens = self.issuer.issue_pair(user)
        self.store.set_refresh_token_hash(
            user.id, self.hasher.hash_token(tokens.refresh_token)
        )
        return tokens
