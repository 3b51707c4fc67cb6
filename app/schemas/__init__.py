"""Pydantic request/response schemas."""

from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    SignupResponse,
    UserOut,
)
from app.schemas.health import HealthResponse
from app.schemas.users import UpdateProfileRequest, UpdateUserRequest

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "SignupRequest",
    "SignupResponse",
    "UpdateProfileRequest",
    "UpdateUserRequest",
    "UserOut",
]
