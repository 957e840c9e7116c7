# tests/services/test_credentials.py
"""Tests for the credential store."""

import pytest

from quillpress.core.errors import DuplicateIdentity, NotFound, ValidationFailed
from quillpress.core.security import verify_password
from quillpress.models import Account


def test_register_hashes_and_normalizes(store):
    account = store.register(
        username="  dave ",
        email=" Dave@Example.COM ",
        first_name=" Dave ",
        last_name="Lee",
        password="pw-1234",
    )
    assert account.id is not None
    assert account.username == "dave"
    assert account.email == "dave@example.com"
    assert account.first_name == "Dave"
    assert account.password != "pw-1234"
    assert verify_password("pw-1234", account.password)


def test_register_rejects_duplicates(store, db_session, test_user):
    before = db_session.query(Account).count()
    with pytest.raises(DuplicateIdentity):
        store.register("alice", "other@example.com", "A", "B", "pw")
    with pytest.raises(DuplicateIdentity):
        store.register("someone", "ALICE@example.com", "A", "B", "pw")
    assert db_session.query(Account).count() == before


def test_register_requires_password(store):
    with pytest.raises(ValidationFailed):
        store.register("erin", "erin@example.com", "Erin", "Ng", "")


def test_verify(store, test_user, test_password):
    assert store.verify("alice", test_password) is True
    assert store.verify("alice", "nope") is False
    assert store.verify("nobody", test_password) is False


def test_authenticate_unknown_user_still_compares(store, mocker):
    spy = mocker.patch(
        "quillpress.services.credentials.verify_password",
        return_value=False,
    )
    with pytest.raises(ValidationFailed) as exc_info:
        store.authenticate("ghost", "whatever")
    assert exc_info.value.message == "Invalid credentials"
    spy.assert_called_once()


def test_get_missing_account(store):
    with pytest.raises(NotFound):
        store.get(12345)


def test_update_profile_rehashes_only_new_password(store, test_user, test_password):
    original_hash = test_user.password

    store.update_profile(test_user, {"first_name": "Alicia"})
    assert test_user.first_name == "Alicia"
    assert test_user.password == original_hash

    store.update_profile(test_user, {"password": "brand-new"})
    assert test_user.password != original_hash
    assert test_user.password != "brand-new"
    assert store.verify("alice", "brand-new")
    assert not store.verify("alice", test_password)


def test_update_profile_email_conflict(store, test_user, other_user):
    with pytest.raises(DuplicateIdentity):
        store.update_profile(test_user, {"email": other_user.email})


def test_update_profile_rejects_blank_name(store, test_user):
    with pytest.raises(ValidationFailed):
        store.update_profile(test_user, {"last_name": "   "})


def test_search(store, test_user, other_user):
    assert [a.username for a in store.search("ALI")] == ["alice"]
    assert [a.username for a in store.search(None)] == ["alice", "bob"]
    assert store.search("zzz") == []
