# storefront/routers/auth.py
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlmodel import Session

from storefront.database import get_session
from storefront.schemas.auth import (
    LoginRequest,
    MessageRead,
    NewPasswordRequest,
    ResetRequest,
    ResetTokenRead,
    SignupRequest,
    TokenRead,
)
from storefront.schemas.user import UserRead
from storefront.wiring import auth_service as service
from storefront.wiring import notification_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    payload: SignupRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
):
    """
    Create a customer account and send a welcome email.

    The email goes out after the response; a mail failure is only logged.
    """
    user = await service.signup(session, payload)
    background_tasks.add_task(notification_service.send_signup_welcome, user.email)
    return user


@router.post("/login", response_model=TokenRead)
async def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange email + password for a bearer token.
    """
    token = await service.login(session, payload.email, payload.password)
    return TokenRead(access_token=token)


@router.post("/reset", response_model=MessageRead)
async def request_reset(
    payload: ResetRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
):
    """
    Email a one-time password reset link.

    - 404 if no account uses the email.
    """
    user, token = await service.request_password_reset(session, payload.email)
    background_tasks.add_task(
        notification_service.send_password_reset,
        user.email,
        service.reset_link(token),
    )
    return MessageRead(message="Password reset email sent.")


@router.get("/reset/{token}", response_model=ResetTokenRead)
async def check_reset_token(
    token: str,
    session: Session = Depends(get_session),
):
    """
    Validate a reset link. The response carries what /auth/new-password needs.
    """
    user = await service.check_reset_token(session, token)
    return ResetTokenRead(user_id=user.id, token=token)


@router.post("/new-password", response_model=MessageRead)
async def set_new_password(
    payload: NewPasswordRequest,
    session: Session = Depends(get_session),
):
    await service.set_new_password(session, payload)
    return MessageRead(message="Password updated.")
