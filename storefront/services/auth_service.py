# storefront/services/auth_service.py
import asyncio
import logging
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.errors import AuthenticationError, NotFoundError, ValidationError
from storefront.core.security import (
    create_access_token,
    generate_reset_token,
    get_password_hash,
    verify_password,
)
from storefront.core.store import run_store_call
from storefront.models.user import User
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.auth import NewPasswordRequest, SignupRequest

settings = get_settings()
logger = logging.getLogger(__name__)


def _default_name_from_email(email: str) -> str:
    """
    Derive a default display name from email.
    """
    if "@" in email:
        return email.split("@", 1)[0]
    return email


class AuthService:
    """
    Account lifecycle: signup, login, password reset.

    Mail is not sent here; routers schedule NotificationService calls as
    background tasks once the account change is committed.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    async def signup(self, session: Session, payload: SignupRequest) -> User:
        """
        Create a customer account.

        Raises:
            ValidationError: email already registered.
        """
        email = payload.email.lower()
        existing = await run_store_call(self.repo.get_by_email, session, email)
        if existing is not None:
            raise ValidationError("E-Mail exists already, please pick a different one.")

        user = User(
            email=email,
            name=_default_name_from_email(email)[:50],
            password_hash=await asyncio.to_thread(get_password_hash, payload.password),
            role="user",
        )
        user = await run_store_call(self.repo.create, session, user)
        logger.info("New account %s (%s)", user.id, user.email)
        return user

    async def login(self, session: Session, email: str, password: str) -> str:
        """
        Verify credentials and issue an access token.

        Raises:
            AuthenticationError: unknown email or wrong password.
        """
        user = await run_store_call(self.repo.get_by_email, session, email.lower())
        if user is None or not await asyncio.to_thread(
            verify_password, password, user.password_hash
        ):
            raise AuthenticationError("Invalid email or password")
        return create_access_token(user.id, user.email)

    async def request_password_reset(self, session: Session, email: str) -> tuple[User, str]:
        """
        Store a fresh reset token on the account and return (user, token).

        Raises:
            NotFoundError: no account with that email.
        """
        user = await run_store_call(self.repo.get_by_email, session, email.lower())
        if user is None:
            raise NotFoundError("No account with that email found.")

        token = generate_reset_token()
        user.reset_token = token
        user.reset_token_expiration = datetime.now(timezone.utc) + timedelta(
            minutes=settings.RESET_TOKEN_EXPIRE_MINUTES
        )
        user = await run_store_call(self.repo.update, session, user)
        logger.info("Password reset requested for %s", user.id)
        return user, token

    @staticmethod
    def reset_link(token: str) -> str:
        return f"{settings.PASSWORD_RESET_URL.rstrip('/')}/{token}"

    async def check_reset_token(self, session: Session, token: str) -> User:
        """
        Raises:
            NotFoundError: token unknown or expired.
        """
        user = await run_store_call(
            self.repo.get_by_reset_token, session, token, datetime.now(timezone.utc)
        )
        if user is None:
            raise NotFoundError("Invalid token. Try again.")
        return user

    async def set_new_password(self, session: Session, payload: NewPasswordRequest) -> User:
        """
        Replace the password of the user holding a valid token, then clear
        the token so the link works only once.

        Raises:
            NotFoundError: token / user mismatch or expired token.
        """
        user = await run_store_call(
            self.repo.get_by_reset_token,
            session,
            payload.token,
            datetime.now(timezone.utc),
            user_id=payload.user_id,
        )
        if user is None:
            raise NotFoundError("Invalid token. Try again.")

        user.password_hash = await asyncio.to_thread(get_password_hash, payload.password)
        user.reset_token = None
        user.reset_token_expiration = None
        user = await run_store_call(self.repo.update, session, user)
        logger.info("Password changed for %s", user.id)
        return user
