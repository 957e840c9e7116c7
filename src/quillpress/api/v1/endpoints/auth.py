# src/quillpress/api/v1/endpoints/auth.py
"""Authentication endpoints for the QuillPress API."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from quillpress.api.v1.dependencies import (
    CredentialStoreDep,
    CurrentIdentityDep,
    TokenServiceDep,
)
from quillpress.core.errors import NotFound, Unauthorized
from quillpress.core.settings import settings
from quillpress.schemas.user import (
    AccountResponse,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _set_session_cookie(response: Response, token: str, max_age: int) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


@router.post(
    "/register",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=TokenResponse,
)
async def register_user(
    payload: RegisterRequest,
    store: CredentialStoreDep,
    tokens: TokenServiceDep,
) -> TokenResponse:
    """Create an account and return a session token for it."""
    account = store.register(
        username=payload.username,
        email=str(payload.email),
        first_name=payload.first_name,
        last_name=payload.last_name,
        password=payload.password,
    )
    return TokenResponse(token=tokens.issue(account.id), message="Registration successful")


@router.post(
    "/login",
    summary="Authenticate with username and password",
    status_code=status.HTTP_200_OK,
    response_model=TokenResponse,
)
async def login_user(
    payload: LoginRequest,
    response: Response,
    store: CredentialStoreDep,
    tokens: TokenServiceDep,
) -> TokenResponse:
    """Verify credentials, then return the token and set it as an HTTP-only cookie."""
    account = store.authenticate(payload.username, payload.password)
    token = tokens.issue(account.id)
    _set_session_cookie(response, token, tokens.ttl_seconds)
    return TokenResponse(token=token, message="Login successful")


@router.post("/logout", summary="Clear the session cookie")
async def logout_user(response: Response) -> dict[str, str]:
    """Expire the session cookie; tokens themselves stay valid until expiry."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return {"message": "Logged out"}


@router.get("/me", summary="Return the authenticated account", response_model=AccountResponse)
async def read_me(identity: CurrentIdentityDep, store: CredentialStoreDep) -> AccountResponse:
    """Return the caller's account without its password hash."""
    try:
        account = store.get(identity.account_id)
    except NotFound as err:
        # The token outlived its account.
        raise Unauthorized("Token is not valid") from err
    return AccountResponse.model_validate(account)
