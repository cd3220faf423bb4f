from __future__ import annotations

from datetime import UTC, datetime, timedelta
from functools import lru_cache

import jwt
from src.core.config import Settings, get_settings
from src.domain import Session
from src.domain.errors import UnauthenticatedError

_REQUIRED_CLAIMS = ["sub", "email", "exp", "iat"]


class SessionTokens:
    """Issues and validates signed, time-limited session tokens.

    The signing key and expiry policy live on the instance; build one per
    configuration and inject it where requests are authenticated.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        ttl_seconds: int = 3600,
        issuer: str | None = None,
    ) -> None:
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self._algorithm = algorithm
        self._issuer = issuer
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionTokens:
        return cls(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl_seconds=settings.session_ttl_seconds,
            issuer=settings.app_name,
        )

    def issue(self, session: Session, *, expires_delta: timedelta | None = None) -> str:
        """Serialize a session into a signed JWT."""
        now = datetime.now(UTC)
        ttl = expires_delta or timedelta(seconds=self.ttl_seconds)
        payload = {
            "sub": session.user_id,
            "name": session.name,
            "email": session.email,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        if self._issuer:
            payload["iss"] = self._issuer
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def validate(self, token: str | None) -> Session:
        """Recover the session carried by ``token``."""
        if not token:
            raise UnauthenticatedError("Missing session token")

        options = {"require": list(_REQUIRED_CLAIMS)}
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                issuer=self._issuer,
                options=options,
            )
        except jwt.ExpiredSignatureError as exc:
            raise UnauthenticatedError("Session expired") from exc
        except jwt.PyJWTError as exc:  # pragma: no cover - third-party raises numerous subclasses
            raise UnauthenticatedError("Invalid session token") from exc

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise UnauthenticatedError("Session token missing subject")

        return Session(
            user_id=user_id,
            name=str(payload.get("name", "")),
            email=str(payload["email"]),
        )

    def renew(self, session: Session) -> str:
        """Issue a fresh token for an already validated session."""
        return self.issue(session)


@lru_cache
def get_session_tokens() -> SessionTokens:
    """Return the token codec built from the cached settings."""
    return SessionTokens.from_settings(get_settings())
