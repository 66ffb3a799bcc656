"""Request/response schemas for profile endpoints."""

from pydantic import BaseModel, Field

from app.services.accounts import ProfilePatch


class ProfileData(BaseModel):
    """Public view of a user's profile (never includes the password hash)."""

    username: str
    display_name: str | None = None
    bio: str | None = None


class ProfileViewResponse(BaseModel):
    success: bool = True
    data: ProfileData


class ProfileUpdateRequest(BaseModel):
    """Partial update; omitted or empty fields are left unchanged."""

    display_name: str | None = Field(
        default=None, alias="displayName", max_length=255, description="New display name"
    )
    bio: str | None = Field(default=None, max_length=255, description="New bio")

    def to_patch(self) -> ProfilePatch:
        return ProfilePatch(display_name=self.display_name, bio=self.bio)


class ProfileMessageResponse(BaseModel):
    success: bool = True
    message: str


class ProfileDeletedResponse(BaseModel):
    success: bool = True
    message: str = "User deleted."
    redirect: str = "/"
