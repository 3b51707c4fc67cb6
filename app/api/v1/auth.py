"""Auth routes (signup, login, refresh, logout, me) and the token guards used by other routers."""

from typing import Annotated, NamedTuple

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.security import PasswordHasher, TokenIssuer, TokenPair
from app.models.user import ROLE_ADMIN
from app.schemas.auth import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    SignupResponse,
    UserOut,
)
from app.services.auth import AuthService
from app.services.user_store import UserStore

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"
REFRESH_MESSAGE = "Tokens refreshed successfully"

router = APIRouter()
security = HTTPBearer(auto_error=False)


class RefreshSession(NamedTuple):
    """Subject and raw token taken from a verified refresh-token cookie."""

    user_id: str
    token: str


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    return UserStore(db)


def get_token_issuer(settings: Annotated[Settings, Depends(get_settings)]) -> TokenIssuer:
    return TokenIssuer(settings)


def get_auth_service(
    store: Annotated[UserStore, Depends(get_user_store)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    return AuthService(store, PasswordHasher(settings.BCRYPT_ROUNDS), issuer)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> CurrentUser:
    """
    Dependency: require a valid access token and return the caller from its claims.

    The accessToken cookie is checked first, then an Authorization: Bearer header.
    Raises 401 if missing or invalid.
    """
    token = request.cookies.get(ACCESS_COOKIE)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise _unauthorized("Not authenticated")
    try:
        payload = issuer.decode_access(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    sub = payload.get("sub")
    if not sub:
        raise _unauthorized("Invalid token payload")
    return CurrentUser(
        id=str(sub),
        email=str(payload.get("email", "")),
        role=str(payload.get("role", "")),
    )


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[UserStore, Depends(get_user_store)],
) -> CurrentUser:
    """Dependency: require an authenticated user whose stored role is 'admin'. Raises 403 otherwise."""
    user = store.get_by_id(current_user.id)
    if user is None or user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def get_refresh_session(
    request: Request,
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> RefreshSession:
    """Dependency: require a refreshToken cookie with a valid signature. Raises 401 otherwise."""
    token = request.cookies.get(REFRESH_COOKIE)
    if not token:
        raise _unauthorized("Refresh token missing")
    try:
        payload = issuer.decode_refresh(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired refresh token")
    sub = payload.get("sub")
    if not sub:
        raise _unauthorized("Invalid token payload")
    return RefreshSession(user_id=str(sub), token=token)


def _set_auth_cookies(response: Response, tokens: TokenPair, settings: Settings) -> None:
    """Write both tokens as httpOnly cookies whose max-age matches the token expiry."""
    response.set_cookie(
        ACCESS_COOKIE,
        value=tokens.access_token,
        max_age=settings.access_token_max_age,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        value=tokens.refresh_token,
        max_age=settings.refresh_token_max_age,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def _clear_auth_cookies(response: Response, settings: Settings) -> None:
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(
            name,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite=settings.COOKIE_SAMESITE,
        )


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> SignupResponse:
    """Register a new account. Returns 409 if the email is already in use."""
    return service.signup(body.email, body.password, body.full_name)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> LoginResponse:
    """
    Authenticate with email and password.
    Sets accessToken and refreshToken httpOnly cookies; the body carries only the user.
    """
    result = service.login(body.email, body.password)
    _set_auth_cookies(
        response,
        TokenPair(access_token=result.access_token, refresh_token=result.refresh_token),
        settings,
    )
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(user=result.user)


@router.post("/refresh", response_model=MessageResponse)
def refresh(
    response: Response,
    session: Annotated[RefreshSession, Depends(get_refresh_session)],
    service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """Rotate the refresh token: the presented cookie is invalidated and both cookies are reissued."""
    tokens = service.refresh(session.user_id, session.token)
    _set_auth_cookies(response, tokens, settings)
    response.headers["Cache-Control"] = "no-store"
    return MessageResponse(message=REFRESH_MESSAGE)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    session: Annotated[RefreshSession, Depends(get_refresh_session)],
    service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """End the session and clear both cookies."""
    result = service.logout(session.user_id)
    _clear_auth_cookies(response, settings)
    return result


@router.get("/me", response_model=UserOut)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserOut:
    """Return the authenticated user. Returns 404 if the account no longer exists."""
    return service.get_me(current_user.id)
