"""Authentication service with password hashing and account registration."""

from __future__ import annotations

import asyncio
import re
from functools import lru_cache

import structlog
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain import Session, User
from src.domain.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from src.infrastructure.db.models import UserModel

logger = structlog.get_logger()

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8
MIN_PASSWORD_DIGITS = 2
# bcrypt ignores everything past this many bytes of the encoded password
MAX_PASSWORD_BYTES = 72


@lru_cache
def get_password_context() -> CryptContext:
    """Password hashing context with bcrypt (cost from settings, 12 by default)."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=get_settings().bcrypt_rounds,
    )


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return get_password_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Passwords over the bcrypt limit never match: registration refuses them, so
    a long input can only agree with a stored hash on a truncated prefix.
    """
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return get_password_context().verify(plain_password, hashed_password)


def validate_registration(first_name: str, last_name: str, email: str, password: str) -> None:
    """Raise ``ValidationError`` for the first rule the input violates.

    Rules are checked in a fixed order: required fields, password length,
    password digits, password byte limit, email shape.
    """
    if not all(value and value.strip() for value in (first_name, last_name, email)) or not password:
        raise ValidationError("All fields are required")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if sum(ch in "0123456789" for ch in password) < MIN_PASSWORD_DIGITS:
        raise ValidationError(f"Password must contain at least {MIN_PASSWORD_DIGITS} digits")

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")

    if not EMAIL_PATTERN.match(email.strip()):
        raise ValidationError("Please enter a valid email address")


class AuthService:
    """Service for registration and credential checks."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def register(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
    ) -> User:
        """Create an account and return it without the password hash.

        Raises:
            ValidationError: a field is missing or malformed.
            ConflictError: the email is already registered.
        """
        validate_registration(first_name, last_name, email, password)
        normalized_email = email.strip().lower()

        await logger.ainfo("register_attempt", email=normalized_email)

        if await self._find_by_email(normalized_email) is not None:
            await logger.awarning("register_duplicate_email", email=normalized_email)
            raise ConflictError()

        # bcrypt is deliberately slow; keep it off the event loop
        hashed_password = await asyncio.to_thread(hash_password, password)

        user = UserModel(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=normalized_email,
            hashed_password=hashed_password,
        )

        try:
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email
            await self.session.rollback()
            await logger.awarning("register_duplicate_email", email=normalized_email)
            raise ConflictError() from exc

        await logger.ainfo("register_success", user_id=user.id)
        return self._to_user(user)

    async def authenticate(self, *, email: str, password: str) -> Session:
        """Check credentials and return the session they grant.

        Raises:
            ValidationError: email or password missing.
            NotFoundError: no account for this email.
            InvalidCredentialsError: password does not match.
        """
        if not email or not email.strip() or not password:
            raise ValidationError("Email and password are required")

        normalized_email = email.strip().lower()
        await logger.ainfo("login_attempt", email=normalized_email)

        user = await self._find_by_email(normalized_email)
        if user is None:
            await logger.awarning("login_user_not_found", email=normalized_email)
            raise NotFoundError("No account found for this email")

        matches = await asyncio.to_thread(verify_password, password, user.hashed_password)
        if not matches:
            await logger.awarning("login_invalid_password", user_id=user.id)
            raise InvalidCredentialsError()

        await logger.ainfo("login_success", user_id=user.id)
        account = self._to_user(user)
        return Session(user_id=account.id, name=account.display_name, email=account.email)

    async def _find_by_email(self, email: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.email == email)
        return await self.session.scalar(stmt)

    @staticmethod
    def _to_user(user: UserModel) -> User:
        return User(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )
