"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from app.core.security import (
    FULL_NAME_MAX_LEN,
    FULL_NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)


class CamelModel(BaseModel):
    """Base model exposing camelCase JSON keys while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignupRequest(CamelModel):
    """Credentials and profile for a new account."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    full_name: str = Field(
        ..., min_length=FULL_NAME_MIN_LEN, max_length=FULL_NAME_MAX_LEN, description="Full name"
    )


class LoginRequest(CamelModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class UserOut(CamelModel):
    """Sanitized user: every column except password_hash and refresh_token_hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str
    role: str
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SignupResponse(BaseModel):
    """Response for POST /auth/signup."""

    user: UserOut
    message: str


class LoginResponse(BaseModel):
    """Response for POST /auth/login; tokens travel in cookies, not the body."""

    user: UserOut


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class CurrentUser(BaseModel):
    """Authenticated caller (id, email, role) resolved from the access token."""

    id: str
    email: str
    role: str
