import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC
from typing import Callable, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.models.user import Role

logger = logging.getLogger("taskgate.auth")

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Salted one-way password hashing backed by passlib's bcrypt scheme."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        """Hash a password after validating bcrypt's 72-byte limit.

        Raises ValueError if the UTF-8 encoding of the password exceeds 72 bytes.
        """
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
        return self._context.hash(password)

    def verify(self, password: str, hashed: Optional[str]) -> bool:
        """Verify a plaintext password against a stored hash.

        Any failure to verify, including an unrecognised or corrupt stored
        hash, is reported as a mismatch rather than an error.
        """
        if not password or not hashed:
            return False
        try:
            return self._context.verify(password, hashed)
        except (ValueError, TypeError):
            return False


@dataclass(frozen=True)
class Identity:
    """Who is making the request, as asserted by a verified token."""

    id: int
    role: Role


class VerificationError(Exception):
    pass


class InvalidSignature(VerificationError):
    pass


class Expired(VerificationError):
    pass


class Malformed(VerificationError):
    pass


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """Issue and verify HS256 JWTs carrying ``{id, role, iat, exp}``."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime
        self._clock = clock

    def issue(self, subject_id: int, role: Role) -> str:
        issued_at = int(self._clock().timestamp())
        payload = {
            "id": subject_id,
            "role": Role(role).value,
            "iat": issued_at,
            "exp": issued_at + int(self.lifetime.total_seconds()),  # JWT spec uses Unix timestamp
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        try:
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise Malformed(str(exc)) from exc

        try:
            # expiry is checked below against our own clock, rejecting at exp itself
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise InvalidSignature(str(exc)) from exc

        subject_id = claims.get("id")
        exp = claims.get("exp")
        if not isinstance(subject_id, int) or isinstance(subject_id, bool):
            raise Malformed("token has no integer id claim")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise Malformed("token has no numeric exp claim")
        try:
            role = Role(claims.get("role"))
        except ValueError as exc:
            raise Malformed("token carries an unknown role") from exc

        if self._clock().timestamp() >= exp:
            raise Expired("token has expired")
        return Identity(id=subject_id, role=role)
