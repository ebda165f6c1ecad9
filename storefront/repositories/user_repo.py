# storefront/repositories/user_repo.py
import uuid
from datetime import datetime

from sqlmodel import Session, select

from storefront.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def get_by_reset_token(
        self,
        session: Session,
        token: str,
        now: datetime,
        user_id: uuid.UUID | None = None,
    ) -> User | None:
        """
        Return the user holding `token` if it has not expired at `now`.

        The expiry comparison runs in SQL.
        """
        stmt = select(User).where(
            User.reset_token == token,
            User.reset_token_expiration > now,
        )
        if user_id is not None:
            stmt = stmt.where(User.id == user_id)
        return session.exec(stmt).first()

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
