"""Pydantic schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import Field

from .base import CamelModel

# --- Request Schemas ---
# Fields are optional at the schema level so that missing values reach the
# service and are reported with its ordered validation messages.


class RegisterRequest(CamelModel):
    """Request schema for user registration."""

    first_name: str | None = Field(None, max_length=128, description="First name")
    last_name: str | None = Field(None, max_length=128, description="Last name")
    email: str | None = Field(None, max_length=255, description="Email address, used to sign in")
    password: str | None = Field(
        None,
        max_length=128,
        description="At least 8 characters including 2 digits",
    )


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: str | None = Field(None, description="Account email")
    password: str | None = Field(None, description="Account password")


# --- Response Schemas ---


class UserResponse(CamelModel):
    """Registered account without credentials."""

    id: str = Field(..., description="User ID")
    first_name: str
    last_name: str
    email: str


class SessionUser(CamelModel):
    """Identity carried by a session."""

    id: str = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str


class RegisterResponse(CamelModel):
    """Response schema for user registration."""

    message: str = Field(default="Registration successful")
    user: UserResponse


class LoginResponse(CamelModel):
    """Response schema for user login."""

    message: str = Field(default="Login successful")
    user: SessionUser
    access_token: str = Field(..., description="Signed session token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds")


class SessionResponse(CamelModel):
    """Response schema for the current session."""

    user: SessionUser
    expires_in: int
