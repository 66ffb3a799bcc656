"""ORM model for the one-to-one user profile."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.base import Base

DEFAULT_DISPLAY_NAME = "No name set yet."
DEFAULT_BIO = "No bio set yet."


class Profile(Base):
    """Display fields for a user. Created together with the user, never on its own."""

    __tablename__ = "user_profiles"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    display_name = Column(
        String(255),
        nullable=True,
        default=DEFAULT_DISPLAY_NAME,
        server_default=DEFAULT_DISPLAY_NAME,
    )
    bio = Column(
        String(255),
        nullable=True,
        default=DEFAULT_BIO,
        server_default=DEFAULT_BIO,
    )

    user = relationship("User", back_populates="profile")
