"""Profile endpoints for the authenticated user: view, update, delete."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import CurrentUserId
from app.core.database import get_db
from app.core.errors import failure
from app.schemas.profile import (
    ProfileData,
    ProfileDeletedResponse,
    ProfileMessageResponse,
    ProfileUpdateRequest,
    ProfileViewResponse,
)
from app.services.accounts import delete_user, get_profile_view, update_profile

logger = logging.getLogger(__name__)
router = APIRouter()

SERVER_ERROR_MESSAGE = "An error has occurred. Please try again later."
# "Not updated" keeps the 300 status existing clients check for.
HTTP_300_NOT_UPDATED = status.HTTP_300_MULTIPLE_CHOICES


@contextmanager
def _profile_errors(action: str) -> Iterator[None]:
    """Turn any failure (store or otherwise) into the profile API's generic 500 body."""
    try:
        yield
    except Exception as e:
        logger.exception("Profile %s failed", action)
        raise failure(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE) from e


@router.get("/view", response_model=ProfileViewResponse)
def view_profile(
    user_id: CurrentUserId,
    db: Annotated[Session, Depends(get_db)],
) -> ProfileViewResponse:
    """Return username, display name and bio of the authenticated user."""
    with _profile_errors("view"):
        profile = get_profile_view(db, user_id)
    if profile is None:
        raise failure(status.HTTP_404_NOT_FOUND, "Profile not found.")
    return ProfileViewResponse(data=ProfileData(**profile))


@router.put("/update", response_model=ProfileMessageResponse)
def put_profile(
    body: ProfileUpdateRequest,
    user_id: CurrentUserId,
    db: Annotated[Session, Depends(get_db)],
) -> ProfileMessageResponse:
    """Update display name and/or bio. Fields left out (or empty) are unchanged."""
    patch = body.to_patch()
    if patch.is_empty:
        raise failure(status.HTTP_400_BAD_REQUEST, "No profile fields provided.")
    with _profile_errors("update"):
        updated = update_profile(db, user_id, patch)
    if updated == 0:
        logger.info("Profile update changed no rows for user id=%s", user_id)
        raise failure(HTTP_300_NOT_UPDATED, "Profile could not be updated.")
    return ProfileMessageResponse(message="Profile updated.")


@router.delete("/delete", response_model=ProfileDeletedResponse)
def delete_account(
    user_id: CurrentUserId,
    db: Annotated[Session, Depends(get_db)],
) -> ProfileDeletedResponse:
    """Permanently delete the authenticated user and their profile."""
    with _profile_errors("delete"):
        deleted = delete_user(db, user_id)
    if deleted == 0:
        raise failure(status.HTTP_404_NOT_FOUND, "User to delete not found.")
    return ProfileDeletedResponse()
