"""Account service: registration, credential checks and profile CRUD."""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password
from app.models import Profile, User

logger = logging.getLogger(__name__)


class UsernameTakenError(Exception):
    """Registration attempted with a username that already exists."""

    def __init__(self, username: str) -> None:
        super().__init__(f"Username already in use: {username}")
        self.username = username


class InvalidCredentialsError(Exception):
    """Unknown username or wrong password. Deliberately does not say which."""


@dataclass(frozen=True)
class ProfilePatch:
    """Partial profile update: only fields that are set get written."""

    display_name: str | None = None
    bio: str | None = None

    def values(self) -> dict[str, str]:
        """Column values to update; None and empty strings are left out."""
        fields = {"display_name": self.display_name, "bio": self.bio}
        return {column: value for column, value in fields.items() if value}

    @property
    def is_empty(self) -> bool:
        return not self.values()


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def register_user(db: Session, username: str, password: str) -> User:
    """
    Create a user and its default profile in one transaction.

    Raises UsernameTakenError if the username exists, including when a
    concurrent registration wins the unique constraint at commit.
    """
    if get_user_by_username(db, username) is not None:
        raise UsernameTakenError(username)

    user = User(username=username, password_hash=hash_password(password))
    db.add(user)
    try:
        db.flush()
        db.add(Profile(user_id=user.id))
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise UsernameTakenError(username) from e
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("Registered user id=%s", user.id)
    return user


def authenticate_user(db: Session, username: str, password: str) -> User:
    """Return the user for valid credentials; raise InvalidCredentialsError otherwise."""
    user = get_user_by_username(db, username)
    if user is None:
        raise InvalidCredentialsError()
    if not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()
    return user


def get_profile_view(db: Session, user_id: int) -> dict[str, Any] | None:
    """Username plus profile fields for user_id, or None when either row is missing."""
    row = (
        db.query(User.username, Profile.display_name, Profile.bio)
        .join(Profile, Profile.user_id == User.id)
        .filter(User.id == user_id)
        .first()
    )
    if row is None:
        return None
    return {"username": row.username, "display_name": row.display_name, "bio": row.bio}


def update_profile(db: Session, user_id: int, patch: ProfilePatch) -> int:
    """Apply patch to the user's profile; return the number of rows changed."""
    values = patch.values()
    if not values:
        raise ValueError("ProfilePatch has no fields to update")
    updated = (
        db.query(Profile)
        .filter(Profile.user_id == user_id)
        .update(values, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_user(db: Session, user_id: int) -> int:
    """Delete the user and (by cascade) its profile; return rows deleted (0 or 1)."""
    user = db.get(User, user_id)
    if user is None:
        return 0
    db.delete(user)
    db.commit()
    logger.info("Deleted user id=%s", user_id)
    return 1
