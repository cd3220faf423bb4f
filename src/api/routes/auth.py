"""Authentication routes - register, login, logout, current session."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import (
    clear_session_cookie,
    get_current_session,
    get_db_session,
    set_session_cookie,
)
from src.api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    SessionResponse,
    SessionUser,
    UserResponse,
)
from src.api.schemas.base import MessageResponse
from src.core.auth import SessionTokens, get_session_tokens
from src.core.config import Settings, get_settings
from src.domain import Session
from src.domain.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


def _session_user(session: Session) -> SessionUser:
    return SessionUser(id=session.user_id, name=session.name, email=session.email)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create an account from first name, last name, email and password.",
    responses={400: {"description": "Validation failed or email already in use"}},
)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    """Register a new user."""
    service = AuthService(session)
    user = await service.register(
        first_name=payload.first_name or "",
        last_name=payload.last_name or "",
        email=payload.email or "",
        password=payload.password or "",
    )
    return RegisterResponse(
        message="Registration successful",
        user=UserResponse(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        ),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="User login",
    description="Check email and password, then issue a session token (body and cookie).",
    responses={
        401: {"description": "Incorrect password"},
        404: {"description": "No account for this email"},
    },
)
async def login(
    payload: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
    tokens: SessionTokens = Depends(get_session_tokens),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    """Authenticate user and start a session."""
    service = AuthService(session)
    user_session = await service.authenticate(
        email=payload.email or "",
        password=payload.password or "",
    )

    token = tokens.issue(user_session)
    set_session_cookie(response, token, tokens=tokens, settings=settings)

    return LoginResponse(
        message="Login successful",
        user=_session_user(user_session),
        access_token=token,
        expires_in=tokens.ttl_seconds,
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
    description="Drop the session cookie. Bearer clients discard their token.",
)
async def logout(
    response: Response,
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    clear_session_cookie(response, settings=settings)
    return MessageResponse(message="Logged out")


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current session",
    description="Return the identity carried by the caller's session token.",
)
async def current_session(
    user_session: Session = Depends(get_current_session),
    tokens: SessionTokens = Depends(get_session_tokens),
) -> SessionResponse:
    return SessionResponse(user=_session_user(user_session), expires_in=tokens.ttl_seconds)
