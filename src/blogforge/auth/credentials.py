"""Email/password validation against stored salted hashes."""

from __future__ import annotations

from pydantic import BaseModel
from passlib.context import CryptContext

from blogforge.storage.models import User
from blogforge.storage.store import Store

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

# Verified against on a lookup miss so both paths cost one hash
_DUMMY_HASH = pwd_context.hash("blogforge-dummy-password")


class PublicUser(BaseModel):
    """User fields safe to hand to a session."""

    id: str
    email: str
    name: str | None = None
    role: str = "editor"
    image: str | None = None

    @classmethod
    def from_user(cls, user: User) -> PublicUser:
        return cls(id=user.id, email=user.email, name=user.name, role=user.role, image=user.image)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


class CredentialValidator:
    def __init__(self, store: Store) -> None:
        self._store = store

    def validate(self, email: str, password: str) -> PublicUser | None:
        """Return the public user for a matching email/password, else None."""
        if not email or not password:
            return None
        user = self._store.get_user_by_email(email)
        if user is None:
            pwd_context.verify(password, _DUMMY_HASH)
            return None
        if not user.password_hash or not pwd_context.verify(password, user.password_hash):
            return None
        return PublicUser.from_user(user)


def seed_user(
    store: Store,
    email: str,
    password: str,
    *,
    name: str | None = None,
    role: str = "admin",
) -> User:
    """Create a user, or reset the password/name/role of an existing one."""
    user = store.get_user_by_email(email)
    if user is None:
        user = User(email=email.strip(), name=name, password_hash=hash_password(password), role=role)
    else:
        user.password_hash = hash_password(password)
        user.role = role
        if name is not None:
            user.name = name
    return store.save_user(user)
