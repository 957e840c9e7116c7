"""Password hashing and session token primitives."""

from __future__ import annotations

import time
from dataclasses import dataclass
from functools import lru_cache

from jose import JWTError, jwt
from passlib.context import CryptContext

from quillpress.core.settings import settings


class InvalidToken(ValueError):
    """Raised for any token that fails verification.

    Callers must not distinguish between the underlying causes.
    """


@lru_cache(maxsize=1)
def get_password_context() -> CryptContext:
    """Return the shared bcrypt context."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=settings.bcrypt_rounds,
    )


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of `password`."""
    return get_password_context().hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Compare `password` with a stored hash in constant time."""
    try:
        return get_password_context().verify(password, hashed)
    except (ValueError, TypeError):
        return False


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a session token."""

    subject: int
    issued_at: int
    expires_at: int


class TokenService:
    """Issue and verify signed, time-limited identity tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl_seconds: int = 3600) -> None:
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self._algorithm = algorithm
        self.ttl_seconds = ttl_seconds

    def issue(self, account_id: int, *, now: float | None = None) -> str:
        """Return a token for `account_id` expiring `ttl_seconds` after issuance."""
        issued_at = int(time.time() if now is None else now)
        claims = {
            "sub": str(account_id),
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        encoded: str = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        return encoded

    def verify(self, token: str, *, now: float | None = None) -> TokenClaims:
        """Return the claims of `token` or raise `InvalidToken`."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                # Expiry is checked below against `now`.
                options={"verify_exp": False},
            )
        except JWTError as err:
            raise InvalidToken("Token is not valid") from err

        subject = payload.get("sub")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(subject, str) or not subject.isdigit():
            raise InvalidToken("Token is not valid")
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            raise InvalidToken("Token is not valid")

        current = time.time() if now is None else now
        if current >= expires_at:
            raise InvalidToken("Token is not valid")

        return TokenClaims(subject=int(subject), issued_at=issued_at, expires_at=expires_at)


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """Return the process-wide token service built from settings."""
    return TokenService(
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
        ttl_seconds=settings.access_token_expire_seconds,
    )
