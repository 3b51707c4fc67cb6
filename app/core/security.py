"""Password/refresh-token hashing and JWT issuance/verification for authentication."""

import hashlib
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, NamedTuple

import bcrypt
import jwt

if TYPE_CHECKING:
    from app.core.config import Settings
    from app.models.user import User

# Min/max lengths for input validation.
FULL_NAME_MIN_LEN = 2
FULL_NAME_MAX_LEN = 100
EMAIL_MAX_LEN = 100
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


class TokenPair(NamedTuple):
    """Signed access and refresh tokens issued together."""

    access_token: str
    refresh_token: str


class PasswordHasher:
    """Salted one-way hashing with bcrypt; verification uses bcrypt's constant-time compare."""

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        """Hash a plain-text secret for storage. Do not store plain values."""
        # Validation already limits password length; truncate to bcrypt's limit.
        data = plain.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(data, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Verify a plain value against a stored hash. Malformed hashes never verify."""
        data = plain.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(data, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def hash_token(self, token: str) -> str:
        """
        Hash a refresh token for storage.

        JWTs are longer than 72 bytes and tokens of one user share their header
        and leading claims, so the token is digested with SHA-256 first to make
        every byte count.
        """
        return self.hash(_digest(token))

    def verify_token(self, token: str, hashed: str) -> bool:
        """Verify a presented refresh token against the stored hash."""
        return self.verify(_digest(token), hashed)


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


class TokenIssuer:
    """Creates and verifies access/refresh JWTs signed with distinct secrets."""

    def __init__(self, settings: "Settings") -> None:
        self.settings = settings

    def _payload(self, user: "User", ttl: timedelta) -> dict[str, Any]:
        now = datetime.now(UTC)
        return {
            "sub": str(user.id),
            "role": user.role,
            "email": user.email,
            "iat": now,
            "exp": now + ttl,
            # Unique per token so a rotation inside the same second still yields new tokens.
            "jti": uuid.uuid4().hex,
        }

    def create_access_token(self, user: "User") -> str:
        """Create a JWT access token with sub (user id), role, email and exp."""
        payload = self._payload(
            user, timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        return jwt.encode(
            payload,
            self.settings.JWT_ACCESS_SECRET.get_secret_value(),
            algorithm=self.settings.JWT_ALGORITHM,
        )

    def create_refresh_token(self, user: "User") -> str:
        """Create a JWT refresh token; same claims as the access token, longer expiry."""
        payload = self._payload(
            user, timedelta(days=self.settings.REFRESH_TOKEN_EXPIRE_DAYS)
        )
        return jwt.encode(
            payload,
            self.settings.JWT_REFRESH_SECRET.get_secret_value(),
            algorithm=self.settings.JWT_ALGORITHM,
        )

    def issue_pair(self, user: "User") -> TokenPair:
        """Sign the access and refresh tokens concurrently; neither depends on the other."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            access = pool.submit(self.create_access_token, user)
            refresh = pool.submit(self.create_refresh_token, user)
            return TokenPair(access_token=access.result(), refresh_token=refresh.result())

    def decode_access(self, token: str) -> dict[str, Any]:
        """
        Decode and validate an access token; return payload (sub, role, email, exp, iat, jti).
        Raises jwt.PyJWTError on invalid or expired token.
        """
        return self._decode(token, self.settings.JWT_ACCESS_SECRET.get_secret_value())

    def decode_refresh(self, token: str) -> dict[str, Any]:
        """Decode and validate a refresh token. Raises jwt.PyJWTError on invalid or expired token."""
        return self._decode(token, self.settings.JWT_REFRESH_SECRET.get_secret_value())

    def _decode(self, token: str, secret: str) -> dict[str, Any]:
        return jwt.decode(
            token,
            secret,
            algorithms=[self.settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
