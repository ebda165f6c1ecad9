# storefront/services/user_service.py
import uuid

from sqlmodel import Session

from storefront.core.errors import NotFoundError
from storefront.core.store import run_store_call
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import UserRoleUpdate


class UserService:
    """
    Profile reads and admin role management.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def get_me(self, current_user: User) -> User:
        """Return the current authenticated user."""
        return current_user

    async def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Raises:
            NotFoundError: if not found.
        """
        user = await run_store_call(self.repo.get_by_id, session, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        """
        Change user's role (admin only).

        Role validation is enforced by the schema (Literal).
        """
        user = await self.get_user(session, user_id)
        user.role = payload.role
        return await run_store_call(self.repo.update, session, user)
