"""Password hashing and the JWT session-token codec."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt

if TYPE_CHECKING:
    from app.core.config import Settings

# Bcrypt cost (rounds). Fixed for every stored hash.
BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of the password.
BCRYPT_MAX_PASSWORD_BYTES = 72

# Session lifetime; the auth cookie uses the same value as its Max-Age.
DEFAULT_TOKEN_TTL_SECONDS = 1800


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenVerificationError(Exception):
    """A session token could not be accepted."""

    reason = "invalid"


class TokenSignatureInvalid(TokenVerificationError):
    """Bad signature, wrong secret, tampered payload or malformed token."""

    reason = "signature_invalid"


class TokenExpired(TokenVerificationError):
    """Well-formed token whose exp claim is in the past."""

    reason = "expired"


@dataclass(frozen=True)
class TokenCodec:
    """
    Issues and verifies signed, expiring session tokens.

    The token is a JWT carrying {"id": <user id>, "iat", "exp"}. Nothing is
    stored server-side: a token stays valid until exp, even after logout.
    """

    secret: str
    algorithm: str = "HS256"
    ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenCodec":
        return cls(
            secret=settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
            ttl_seconds=settings.JWT_EXPIRE_SECONDS,
        )

    def issue(
        self,
        subject_id: int,
        ttl_seconds: int | None = None,
        now: datetime | None = None,
    ) -> str:
        """Create a token for subject_id expiring ttl_seconds (default: codec ttl) after now."""
        issued_at = now or datetime.now(UTC)
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        payload: dict[str, Any] = {
            "id": subject_id,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=ttl),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """
        Check signature and expiry; return the subject id.
        Raises TokenExpired or TokenSignatureInvalid.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "id"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired(str(e)) from e
        except jwt.PyJWTError as e:
            raise TokenSignatureInvalid(str(e)) from e

        subject_id = payload["id"]
        # bool is an int subclass; reject it along with strings and floats.
        if not isinstance(subject_id, int) or isinstance(subject_id, bool):
            raise TokenSignatureInvalid("Token id claim is not an integer")
        return subject_id
