"""Credential store: persistence of user rows behind a small SQLAlchemy adapter."""

from typing import Any

from sqlalchemy.orm import Session

from app.models.user import ROLE_USER, User


class UserStore:
    """
    Reads and writes User rows through one request-scoped Session.

    Every mutation commits immediately; persistence errors propagate to the caller.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def create(
        self,
        email: str,
        password_hash: str,
        full_name: str,
        role: str = ROLE_USER,
    ) -> User:
        user = User(
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            role=role,
        )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def set_refresh_token_hash(self, user_id: str, token_hash: str | None) -> None:
        """Overwrite (or clear with None) the stored refresh-token hash. No-op for unknown ids."""
        self.session.query(User).filter(User.id == user_id).update(
            {User.refresh_token_hash: token_hash},
            synchronize_session="fetch",
        )
        self.session.commit()

    def update(self, user: User, fields: dict[str, Any]) -> User:
        for name, value in fields.items():
            setattr(user, name, value)
        self.session.commit()
        self.session.refresh(user)
        return user

    def list_active(self) -> list[User]:
        return (
            self.session.query(User)
            .filter(User.is_active.is_(True))
            .order_by(User.created_at, User.id)
            .all()
        )

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self.session.commit()
