"""ORM model for application users (credentials, session state and RBAC)."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, func

from app.models.base import Base

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    User account for cookie-based JWT authentication and role-based access control.

    password_hash and refresh_token_hash are bcrypt hashes and must never leave
    the service layer. refresh_token_hash is NULL when the user has no active session.
    role: 'admin' or 'user'
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    refresh_token_hash = Column(String(255), nullable=True)
    full_name = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_USER)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
