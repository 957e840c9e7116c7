"""Credential store: registration, password verification and profile edits."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, inspect, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quillpress.core.errors import DuplicateIdentity, NotFound, ValidationFailed
from quillpress.core.security import hash_password, verify_password
from quillpress.models import Account

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

# Compared against when the username does not exist so that the response time
# does not reveal whether the account is registered.
_DUMMY_HASH: str | None = None


def _dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = hash_password("quillpress-dummy-password")
    return _DUMMY_HASH


def _hash_if_modified(account: Account) -> None:
    """Hash the password column only if it changed in this unit of work."""
    history = inspect(account).attrs.password.history
    if not history.added:
        return
    account.password = hash_password(account.password)


class CredentialStore:
    """Persist accounts and verify their secrets."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, account_id: int) -> Account:
        """Return the account or raise `NotFound`."""
        account = self.db.get(Account, account_id)
        if account is None:
            raise NotFound("User not found")
        return account

    def find_by_username(self, username: str) -> Account | None:
        return self.db.query(Account).filter(Account.username == username.strip()).first()

    def register(
        self,
        username: str,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
    ) -> Account:
        """Create an account with a hashed password.

        Raises:
            DuplicateIdentity: if the username or email is already taken.
        """
        username = username.strip()
        email = email.strip().lower()
        if not password:
            raise ValidationFailed("Password is required")

        existing = (
            self.db.query(Account.id)
            .filter(or_(Account.username == username, func.lower(Account.email) == email))
            .first()
        )
        if existing is not None:
            raise DuplicateIdentity("User already exists")

        account = Account(
            username=username,
            email=email,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            password=password,
        )
        self.db.add(account)
        _hash_if_modified(account)
        try:
            self.db.commit()
        except IntegrityError as err:
            # A concurrent registration won the unique constraint.
            self.db.rollback()
            raise DuplicateIdentity("User already exists") from err
        self.db.refresh(account)
        logger.info("Registered account %s (%s)", account.id, account.username)
        return account

    def verify(self, username: str, password: str) -> bool:
        """Return True if the username exists and the password matches."""
        try:
            self.authenticate(username, password)
        except ValidationFailed:
            return False
        return True

    def authenticate(self, username: str, password: str) -> Account:
        """Return the account for valid credentials.

        Unknown usernames and wrong passwords fail identically.
        """
        account = self.find_by_username(username or "")
        if account is None:
            verify_password(password or "", _dummy_hash())
            raise ValidationFailed(INVALID_CREDENTIALS)
        if not verify_password(password or "", account.password):
            raise ValidationFailed(INVALID_CREDENTIALS)
        return account

    def update_profile(self, account: Account, changes: Mapping[str, Any]) -> Account:
        """Apply a sparse profile update, re-hashing only a changed password."""
        for key in ("first_name", "last_name"):
            if key in changes and changes[key] is not None:
                value = str(changes[key]).strip()
                if not value:
                    raise ValidationFailed(f"{key} must not be blank")
                setattr(account, key, value)

        if changes.get("email") is not None:
            email = str(changes["email"]).strip().lower()
            if email != account.email:
                taken = (
                    self.db.query(Account.id)
                    .filter(func.lower(Account.email) == email, Account.id != account.id)
                    .first()
                )
                if taken is not None:
                    raise DuplicateIdentity("Email already in use")
                account.email = email

        if changes.get("password"):
            account.password = changes["password"]

        _hash_if_modified(account)
        try:
            self.db.commit()
        except IntegrityError as err:
            self.db.rollback()
            raise DuplicateIdentity("Email already in use") from err
        self.db.refresh(account)
        return account

    def search(self, query: str | None) -> list[Account]:
        """Case-insensitive substring search over username and names."""
        q = self.db.query(Account)
        if query and query.strip():
            pattern = f"%{query.strip().lower()}%"
            q = q.filter(
                or_(
                    func.lower(Account.username).like(pattern),
                    func.lower(Account.first_name).like(pattern),
                    func.lower(Account.last_name).like(pattern),
                )
            )
        return q.order_by(Account.username).all()
