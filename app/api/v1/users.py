"""Profile self-service and admin user management."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.v1.auth import get_current_user, get_user_store, require_admin
from app.schemas.auth import CurrentUser, MessageResponse, UserOut
from app.schemas.users import UpdateProfileRequest, UpdateUserRequest
from app.services.user_store import UserStore
from app.services.users import UsersService

router = APIRouter()


def get_users_service(
    store: Annotated[UserStore, Depends(get_user_store)],
) -> UsersService:
    return UsersService(store)


@router.get("/profile", response_model=UserOut)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UsersService, Depends(get_users_service)],
) -> UserOut:
    return service.get_profile(current_user.id)


@router.patch("/profile", response_model=UserOut)
def update_profile(
    body: UpdateProfileRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[UsersService, Depends(get_users_service)],
) -> UserOut:
    """Change the caller's full name and/or email. Returns 409 if the email is taken."""
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    return service.update_profile(current_user.id, changes)


@router.get("", response_model=list[UserOut])
def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    service: Annotated[UsersService, Depends(get_users_service)],
) -> list[UserOut]:
    """List active users (admin only)."""
    return service.list_users()


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    service: Annotated[UsersService, Depends(get_users_service)],
) -> UserOut:
    user = service.get_user(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    body: UpdateUserRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    service: Annotated[UsersService, Depends(get_users_service)],
) -> UserOut:
    """Update profile fields, role or active flag of any user (admin only)."""
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    return service.update_user(user_id, changes)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    service: Annotated[UsersService, Depends(get_users_service)],
) -> MessageResponse:
    return service.delete_user(user_id)
