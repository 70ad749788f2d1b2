"""Tests for credential validation and session tokens."""

from __future__ import annotations

import pytest

from blogforge.auth.credentials import CredentialValidator, PublicUser, seed_user
from blogforge.auth.session import create_session_token, decode_session_token
from blogforge.config import DEFAULT_SESSION_SECRET, Settings
from blogforge.errors import ConfigurationError
from blogforge.storage.store import Store


@pytest.fixture
def validator(store: Store) -> CredentialValidator:
    seed_user(store, "editor@example.com", "correct horse", name="Ed", role="editor")
    return CredentialValidator(store)


def test_exact_password_is_accepted(validator: CredentialValidator) -> None:
    user = validator.validate("editor@example.com", "correct horse")

    assert isinstance(user, PublicUser)
    assert user.email == "editor@example.com"
    assert user.role == "editor"
    assert not hasattr(user, "password_hash")


@pytest.mark.parametrize(
    "password", ["", "correct", "Correct horse", "correct horse ", "wrong"]
)
def test_other_passwords_are_rejected(validator: CredentialValidator, password: str) -> None:
    assert validator.validate("editor@example.com", password) is None


def test_unknown_email_is_rejected(validator: CredentialValidator) -> None:
    assert validator.validate("nobody@example.com", "correct horse") is None
    assert validator.validate("", "correct horse") is None


def test_seed_user_resets_password(store: Store, validator: CredentialValidator) -> None:
    seed_user(store, "editor@example.com", "new password")

    assert validator.validate("editor@example.com", "correct horse") is None
    assert validator.validate("editor@example.com", "new password").role == "admin"


def test_session_token_round_trip(validator: CredentialValidator, settings: Settings) -> None:
    user = validator.validate("editor@example.com", "correct horse")

    claims = decode_session_token(create_session_token(user, settings), settings)

    assert claims["sub"] == user.id
    assert claims["email"] == "editor@example.com"


def test_session_token_rejects_other_secret(
    validator: CredentialValidator, settings: Settings
) -> None:
    user = validator.validate("editor@example.com", "correct horse")
    token = create_session_token(user, settings)
    other = settings.model_copy(update={"session_secret": "another-secret"})

    assert decode_session_token(token, other) is None
    assert decode_session_token("not-a-token", settings) is None


def test_default_session_secret_is_refused(settings: Settings) -> None:
    with pytest.raises(ConfigurationError):
        settings.model_copy(update={"session_secret": DEFAULT_SESSION_SECRET}).check_session_secret()
    with pytest.raises(ConfigurationError):
        settings.model_copy(update={"session_secret": ""}).check_session_secret()

    settings.check_session_secret()
