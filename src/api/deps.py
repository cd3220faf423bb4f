from __future__ import annotations

from collections.abc import AsyncIterator

import structlog
from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import SessionTokens, get_session_tokens
from src.core.config import Settings, get_settings
from src.domain import Session
from src.infrastructure.db.session import get_session
from structlog.contextvars import bind_contextvars

bearer_scheme = HTTPBearer(auto_error=False)

SESSION_TOKEN_HEADER = "X-Session-Token"

logger = structlog.get_logger()


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


async def get_current_session(
    request: Request,
    response: Response,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
    tokens: SessionTokens = Depends(get_session_tokens),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> Session:
    """Resolve the caller's session from a bearer token or the session cookie.

    A valid session is renewed on every request: the fresh token is returned in
    the ``X-Session-Token`` header and, for cookie clients, in the cookie.
    """
    from_cookie = credentials is None
    token = (
        request.cookies.get(settings.session_cookie_name)
        if from_cookie
        else credentials.credentials
    )

    session = tokens.validate(token)
    bind_contextvars(user_id=session.user_id)

    renewed = tokens.renew(session)
    response.headers[SESSION_TOKEN_HEADER] = renewed
    if from_cookie:
        set_session_cookie(response, renewed, tokens=tokens, settings=settings)
    return session


def set_session_cookie(
    response: Response, token: str, *, tokens: SessionTokens, settings: Settings
) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=tokens.ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response, *, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
