# storefront/core/auth.py
import uuid
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.errors import AuthenticationError, ForbiddenError
from storefront.core.identity import Identity
from storefront.database import get_session
from storefront.models.user import User

settings = get_settings()

# auto_error=False: a missing Authorization header means "guest",
# routes decide whether guests are allowed.
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry of a token issued by /auth/login.

    Raises:
        AuthenticationError(401): invalid or expired token.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALG])
    except JWTError:
        raise AuthenticationError("Invalid or expired token")


def _user_id_from_claims(claims: dict[str, Any]) -> uuid.UUID:
    sub = claims.get("sub")
    if not sub:
        raise AuthenticationError("Token missing sub")
    try:
        return uuid.UUID(sub)
    except ValueError:
        raise AuthenticationError("Invalid sub in token")


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    The user behind the bearer token, or None for guests.

    A valid token whose account no longer exists is rejected with 401.
    """
    if credentials is None:
        return None

    claims = decode_access_token(credentials.credentials)
    user = session.get(User, _user_id_from_claims(claims))
    if user is None:
        raise AuthenticationError("Unknown user")
    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    if user is None:
        raise AuthenticationError("Authentication required")
    return user


def require_admin(user: User = Depends(require_auth)) -> User:
    if user.role != "admin":
        raise ForbiddenError("Admin access required")
    return user


def require_user(user: User = Depends(require_auth)) -> User:
    """
    Only customers (role='user') have carts and orders; admins get 403.
    """
    if user.role != "user":
        raise ForbiddenError("Customer access required")
    return user


def current_identity(user: User = Depends(require_user)) -> Identity:
    """
    Request-scoped identity handed to the cart/order/invoice services.
    """
    return Identity(user_id=user.id, email=user.email)
