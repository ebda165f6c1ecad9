# storefront/core/errors.py
"""
Domain error taxonomy.

Business-rule and storage errors subclass HTTPException so services can raise
them directly and FastAPI turns them into responses with the right status.
NotificationError is not an HTTPException: it is always caught
where the notification is sent and never reaches a client.
"""

from fastapi import HTTPException, status


class ShopError(HTTPException):
    """Base class for errors that map to a fixed HTTP status."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "Request failed"

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
        )


class NotFoundError(ShopError):
    """Referenced product / order / user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ForbiddenError(ShopError):
    """Requester does not own the referenced order."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to access this resource"


class EmptyCartError(ShopError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Cart is empty"


class ValidationError(ShopError):
    """Malformed input that passed schema validation (e.g. negative quantity)."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "Invalid input"


class AuthenticationError(ShopError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid email or password"


class StorageError(ShopError):
    """
    Underlying persistence call failed.

    Distinct from business-rule errors; callers may retry.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage unavailable"


class StoreTimeoutError(StorageError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    default_detail = "Storage call timed out"


class NotificationError(Exception):
    """Sending an email failed. Non-fatal for the triggering operation."""
