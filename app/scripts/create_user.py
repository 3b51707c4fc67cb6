"""
Create a user (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD FULL_NAME [role]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password "Site Admin" admin
"""
import argparse
import logging
import sys

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.core.config import get_settings
from app.core.database import SessionLocal, init_db
from app.core.security import (
    FULL_NAME_MAX_LEN,
    FULL_NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    PasswordHasher,
)
from app.models.user import ROLES, ROLE_USER
from app.services.user_store import UserStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Keystone user without the signup route.")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("full_name", help=f"Full name ({FULL_NAME_MIN_LEN}-{FULL_NAME_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(ROLES))
    args = parser.parse_args(argv)

    try:
        # Same validation and normalization as the signup and login bodies.
        email = TypeAdapter(EmailStr).validate_python(args.email.strip())
    except ValidationError:
        logger.error("Invalid email address: %s", args.email)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        logger.error("Password must be %s-%s characters.", PASSWORD_MIN_LEN, PASSWORD_MAX_LEN)
        return 1
    full_name = args.full_name.strip()
    if not (FULL_NAME_MIN_LEN <= len(full_name) <= FULL_NAME_MAX_LEN):
        logger.error("Full name must be %s-%s characters.", FULL_NAME_MIN_LEN, FULL_NAME_MAX_LEN)
        return 1

    init_db()
    hasher = PasswordHasher(get_settings().BCRYPT_ROUNDS)
    db = SessionLocal()
    try:
        store = UserStore(db)
        if store.get_by_email(email) is not None:
            logger.error("User '%s' already exists.", email)
            return 1
        user = store.create(
            email=email,
            password_hash=hasher.hash(args.password),
            full_name=full_name,
            role=args.role,
        )
        logger.info("Created user '%s' (id=%s) with role '%s'.", email, user.id, args.role)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
