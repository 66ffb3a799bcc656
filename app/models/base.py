"""SQLAlchemy declarative Base shared by the users and user_profiles models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
