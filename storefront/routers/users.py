# storefront/routers/users.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.core.auth import require_admin, require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.schemas.user import UserRead, UserRoleUpdate
from storefront.wiring import user_service as service

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    Auth:
      - Requires a bearer token from /auth/login.
    """
    return service.get_me(current_user)


# -------- Admin endpoints --------


@router.get(
    "/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
async def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a specific user by id (admin only).
    """
    return await service.get_user(session, user_id)


@router.patch(
    "/{user_id}/role",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
async def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
):
    """
    Update a user's role (admin only).

    Allowed roles: user, admin.
    Guests are anonymous and don't have rows.
    """
    return await service.update_role(session, user_id, payload)
