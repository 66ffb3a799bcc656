"""Core app configuration, database and session-token security."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.security import TokenCodec, hash_password, verify_password

__all__ = ["get_settings", "settings", "get_db", "TokenCodec", "hash_password", "verify_password"]
