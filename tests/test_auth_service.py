"""Tests for app.services.auth.AuthService against an in-memory SQLite credential store."""

import unittest

from pydantic import SecretStr
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from app.core.security import PasswordHasher, TokenIssuer
from app.models import Base, User
from app.services.auth import LOGOUT_MESSAGE, SIGNUP_MESSAGE, AuthService
from app.services.user_store import UserStore

SECRET_FIELDS = {"password_hash", "refresh_token_hash", "passwordHash", "refreshTokenHash"}


class AuthServiceTestCase(unittest.TestCase):
    """Fresh database and service per test."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.session = sessionmaker(bind=self.engine, autoflush=False)()
        settings = Settings(
            DATABASE_URL="sqlite://",
            JWT_ACCESS_SECRET=SecretStr("access-secret"),
            JWT_REFRESH_SECRET=SecretStr("refresh-secret"),
            BCRYPT_ROUNDS=4,
        )
        self.store = UserStore(self.session)
        self.issuer = TokenIssuer(settings)
        self.service = AuthService(self.store, PasswordHasher(4), self.issuer)

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()

    def _stored(self, user_id: str) -> User:
        self.session.expire_all()
        return self.session.get(User, user_id)


class TestSignup(AuthServiceTestCase):
    def test_creates_user_and_returns_sanitized_view(self) -> None:
        result = self.service.signup("a@x.com", "pw123456", "A")
        self.assertEqual(result.message, SIGNUP_MESSAGE)
        self.assertEqual(result.user.email, "a@x.com")
        self.assertEqual(result.user.full_name, "A")
        self.assertEqual(result.user.role, "user")
        self.assertTrue(result.user.is_active)
        dumped = result.model_dump(by_alias=True)
        self.assertFalse(SECRET_FIELDS & set(dumped["user"]))

    def test_password_is_stored_hashed(self) -> None:
        result = self.service.signup("a@x.com", "pw123456", "A")
        stored = self._stored(result.user.id)
        self.assertNotEqual(stored.password_hash, "pw123456")
        self.assertIsNone(stored.refresh_token_hash)

    def test_duplicate_email_conflicts(self) -> None:
        self.service.signup("a@x.com", "pw123456", "A")
        with self.assertRaises(ConflictError) as ctx:
            self.service.signup("a@x.com", "other-password", "B")
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(self.session.query(User).count(), 1)


class TestLogin(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user_id = self.service.signup("a@x.com", "pw123456", "A").user.id

    def test_success_returns_user_and_tokens_for_subject(self) -> None:
        result = self.service.login("a@x.com", "pw123456")
        self.assertEqual(result.user.id, self.user_id)
        self.assertEqual(self.issuer.decode_access(result.access_token)["sub"], self.user_id)
        self.assertEqual(self.issuer.decode_refresh(result.refresh_token)["sub"], self.user_id)
        self.assertFalse(SECRET_FIELDS & set(result.user.model_dump(by_alias=True)))

    def test_stores_hash_of_refresh_token_only(self) -> None:
        result = self.service.login("a@x.com", "pw123456")
        stored = self._stored(self.user_id)
        self.assertIsNotNone(stored.refresh_token_hash)
        self.assertNotEqual(stored.refresh_token_hash, result.refresh_token)
        self.assertTrue(
            self.service.hasher.verify_token(result.refresh_token, stored.refresh_token_hash)
        )

    def test_unknown_email_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.login("nobody@x.com", "pw123456")

    def test_wrong_password_unauthorized(self) -> None:
        with self.assertRaises(UnauthorizedError):
            self.service.login("a@x.com", "wrong-password")
        self.assertIsNone(self._stored(self.user_id).refresh_token_hash)

    def test_second_login_invalidates_first_refresh_token(self) -> None:
        first = self.service.login("a@x.com", "pw123456")
        self.service.login("a@x.com", "pw123456")
        with self.assertRaises(UnauthorizedError):
            self.service.refresh(self.user_id, first.refresh_token)


class TestRefreshRotation(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user_id = self.service.signup("a@x.com", "pw123456", "A").user.id

    def test_refresh_issues_new_distinct_pair(self) -> None:
        login = self.service.login("a@x.com", "pw123456")
        pair = self.service.refresh(self.user_id, login.refresh_token)
        self.assertNotEqual(pair.access_token, login.access_token)
        self.assertNotEqual(pair.refresh_token, login.refresh_token)
        self.assertEqual(self.issuer.decode_access(pair.access_token)["sub"], self.user_id)

    def test_rotated_token_is_single_use(self) -> None:
        rt0 = self.service.login("a@x.com", "pw123456").refresh_token
        rt1 = self.service.refresh(self.user_id, rt0).refresh_token
        with self.assertRaises(UnauthorizedError):
            self.service.refresh(self.user_id, rt0)
        # The current token still works after a rejected replay.
        self.service.refresh(self.user_id, rt1)

    def test_no_session_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            self.service.refresh(self.user_id, "anything")

    def test_unknown_user_forbidden(self) -> None:
        with self.assertRaises(ForbiddenError):
            self.service.refresh("missing-id", "anything")

    def test_garbage_token_unauthorized(self) -> None:
        self.service.login("a@x.com", "pw123456")
        with self.assertRaises(UnauthorizedError):
            self.service.refresh(self.user_id, "not-the-token")


class TestLogoutAndMe(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user_id = self.service.signup("a@x.com", "pw123456", "A").user.id

    def test_logout_clears_session(self) -> None:
        rt = self.service.login("a@x.com", "pw123456").refresh_token
        result = self.service.logout(self.user_id)
        self.assertEqual(result.message, LOGOUT_MESSAGE)
        self.assertIsNone(self._stored(self.user_id).refresh_token_hash)
        with self.assertRaises(ForbiddenError):
            self.service.refresh(self.user_id, rt)

    def test_logout_is_idempotent(self) -> None:
        self.service.logout(self.user_id)
        self.service.logout(self.user_id)
        self.service.logout("missing-id")
        self.assertIsNone(self._stored(self.user_id).refresh_token_hash)

    def test_get_me(self) -> None:
        me = self.service.get_me(self.user_id)
        self.assertEqual(me.email, "a@x.com")
        self.assertFalse(SECRET_FIELDS & set(me.model_dump(by_alias=True)))

    def test_get_me_missing(self) -> None:
        with self.assertRaises(NotFoundError):
            self.service.get_me("missing-id")


class TestScenario(AuthServiceTestCase):
    """signup -> login -> refresh -> logout -> refresh with old token."""

    def test_full_session_lifecycle(self) -> None:
        signup = self.service.signup("a@x.com", "pw123456", "A")
        login = self.service.login("a@x.com", "pw123456")
        self.assertEqual(login.user.id, signup.user.id)
        pair = self.service.refresh(signup.user.id, login.refresh_token)
        self.assertNotEqual(pair, (login.access_token, login.refresh_token))
        self.service.logout(signup.user.id)
        with self.assertRaises(ForbiddenError):
            self.service.refresh(signup.user.id, pair.refresh_token)


if __name__ == "__main__":
    unittest.main()
