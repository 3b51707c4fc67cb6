"""Request schemas for profile self-service and admin user management."""

from typing import Literal

from pydantic import ConfigDict, EmailStr, Field, field_validator

from app.core.security import EMAIL_MAX_LEN, FULL_NAME_MAX_LEN, FULL_NAME_MIN_LEN
from app.schemas.auth import CamelModel


class UpdateProfileRequest(CamelModel):
    """Fields a user may change on their own account. Omitted fields are left as-is."""

    model_config = ConfigDict(extra="forbid")

    full_name: str | None = Field(
        default=None, min_length=FULL_NAME_MIN_LEN, max_length=FULL_NAME_MAX_LEN
    )
    email: EmailStr | None = None

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, v: str | None) -> str | None:
        if v is not None and len(v) > EMAIL_MAX_LEN:
            raise ValueError(f"email must be at most {EMAIL_MAX_LEN} characters")
        return v


class UpdateUserRequest(UpdateProfileRequest):
    """Admin update: profile fields plus role and active flag."""

    role: Literal["user", "admin"] | None = None
    is_active: bool | None = None
