# tests/v1/test_dependencies.py
"""Tests for API dependencies module."""

import pytest

from quillpress.api.v1.dependencies import (
    INVALID_TOKEN_MESSAGE,
    NO_TOKEN_MESSAGE,
    Identity,
    authenticate,
    get_identity,
    get_optional_identity,
    select_token,
)
from quillpress.core.errors import Unauthorized


class TestSelectToken:
    """Cookie first, header second, blanks ignored."""

    def test_cookie_wins(self):
        assert select_token("from-cookie", "from-header") == "from-cookie"

    def test_header_fallback(self):
        assert select_token(None, "from-header") == "from-header"
        assert select_token("   ", "from-header") == "from-header"

    def test_nothing_supplied(self):
        assert select_token(None, None) is None
        assert select_token("", " ") is None


class TestAuthenticate:
    """The gate turns tokens into identities or Unauthorized."""

    def test_valid_token(self, token_service):
        identity = authenticate(token_service.issue(7), token_service)
        assert identity == Identity(account_id=7)

    def test_missing_token(self, token_service):
        with pytest.raises(Unauthorized) as exc_info:
            authenticate(None, token_service)
        assert exc_info.value.message == NO_TOKEN_MESSAGE

    def test_invalid_token(self, token_service):
        with pytest.raises(Unauthorized) as exc_info:
            authenticate("bogus", token_service)
        assert exc_info.value.message == INVALID_TOKEN_MESSAGE


def test_get_identity_prefers_cookie(token_service, db_session, test_user, other_user):
    identity = get_identity(
        token_service,
        db_session,
        cookie_token=token_service.issue(test_user.id),
        header_token=token_service.issue(other_user.id),
    )
    assert identity.account_id == test_user.id


def test_invalid_cookie_is_not_rescued_by_header(token_service, db_session, test_user):
    with pytest.raises(Unauthorized):
        get_identity(
            token_service,
            db_session,
            cookie_token="bogus",
            header_token=token_service.issue(test_user.id),
        )


def test_token_for_missing_account_is_rejected(token_service, db_session):
    with pytest.raises(Unauthorized) as exc_info:
        get_identity(token_service, db_session, header_token=token_service.issue(9999))
    assert exc_info.value.message == INVALID_TOKEN_MESSAGE


def test_optional_identity_treats_bad_tokens_as_anonymous(token_service, db_session, test_user):
    assert get_optional_identity(token_service, db_session) is None
    assert get_optional_identity(token_service, db_session, header_token="bogus") is None
    orphaned = token_service.issue(9999)
    assert get_optional_identity(token_service, db_session, header_token=orphaned) is None
    valid = token_service.issue(test_user.id)
    assert get_optional_identity(token_service, db_session, header_token=valid) == Identity(
        test_user.id
    )


def test_protected_route_accepts_cookie(client, test_user, token_service, test_settings):
    client.cookies.set(test_settings.session_cookie_name, token_service.issue(test_user.id))
    r = client.get("/api/v1/auth/me")
    assert r.status_code == 200
    assert r.json()["username"] == test_user.username
