"""Shared API dependencies: the authorization gate and service factories."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyCookie, APIKeyHeader
from sqlalchemy.orm import Session

from quillpress.core.errors import Unauthorized
from quillpress.core.security import InvalidToken, TokenService, get_token_service
from quillpress.core.settings import settings
from quillpress.db.session import get_db
from quillpress.models import Account
from quillpress.services.credentials import CredentialStore
from quillpress.services.posts import PostService
from quillpress.services.social import SocialService

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = "No token, authorization denied"
INVALID_TOKEN_MESSAGE = "Token is not valid"

# Token transport: HTTP-only cookie first, raw token header second.
cookie_scheme = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)
header_scheme = APIKeyHeader(name=settings.token_header_name, auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]


@dataclass(frozen=True)
class Identity:
    """Authenticated caller injected into downstream handlers."""

    account_id: int


def select_token(cookie_token: str | None, header_token: str | None) -> str | None:
    """Pick the token to verify; the cookie wins when both are present."""
    for candidate in (cookie_token, header_token):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def authenticate(token: str | None, tokens: TokenService) -> Identity:
    """Verify `token` and return the identity it carries.

    Raises:
        Unauthorized: if no token was supplied or it fails verification.
    """
    if token is None:
        raise Unauthorized(NO_TOKEN_MESSAGE)
    try:
        claims = tokens.verify(token)
    except InvalidToken as err:
        logger.debug("Rejected session token")
        raise Unauthorized(INVALID_TOKEN_MESSAGE) from err
    return Identity(account_id=claims.subject)


def _require_account(identity: Identity, db: Session) -> Identity:
    # A correctly signed token can outlive the account it names.
    if db.get(Account, identity.account_id) is None:
        logger.debug("Token subject %s has no account", identity.account_id)
        raise Unauthorized(INVALID_TOKEN_MESSAGE)
    return identity


def get_identity(
    tokens: TokenServiceDep,
    db: SessionDep,
    cookie_token: Annotated[str | None, Depends(cookie_scheme)] = None,
    header_token: Annotated[str | None, Depends(header_scheme)] = None,
) -> Identity:
    """Require an authenticated caller whose account still exists."""
    identity = authenticate(select_token(cookie_token, header_token), tokens)
    return _require_account(identity, db)


def get_optional_identity(
    tokens: TokenServiceDep,
    db: SessionDep,
    cookie_token: Annotated[str | None, Depends(cookie_scheme)] = None,
    header_token: Annotated[str | None, Depends(header_scheme)] = None,
) -> Identity | None:
    """Return the caller's identity, or None when the token is absent or unusable."""
    token = select_token(cookie_token, header_token)
    if token is None:
        return None
    try:
        return _require_account(authenticate(token, tokens), db)
    except Unauthorized:
        return None


def get_credential_store(db: SessionDep) -> CredentialStore:
    return CredentialStore(db)


def get_post_service(db: SessionDep) -> PostService:
    return PostService(db)


def get_social_service(db: SessionDep) -> SocialService:
    return SocialService(db)


# Type aliases for endpoint signatures
CurrentIdentityDep = Annotated[Identity, Depends(get_identity)]
OptionalIdentityDep = Annotated[Identity | None, Depends(get_optional_identity)]
CredentialStoreDep = Annotated[CredentialStore, Depends(get_credential_store)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]
SocialServiceDep = Annotated[SocialService, Depends(get_social_service)]
