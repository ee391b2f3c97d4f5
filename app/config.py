import os
from dataclasses import dataclass
from typing import Mapping, Optional


SAMESITE_VALUES = ("lax", "strict", "none")


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    secret_key: str
    # Default to local SQLite for dev/tests; override via env in Docker/Prod
    database_url: str = "sqlite:///./taskgate.db"
    port: int = 5000
    algorithm: str = "HS256"
    token_expire_hours: float = 24
    bcrypt_rounds: int = 10
    cookie_secure: bool = True
    cookie_samesite: str = "none"
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment once at startup.

    Raises RuntimeError when SECRET_KEY is missing or the cookie settings
    are unusable, so the process never starts half-configured.
    """
    env = os.environ if environ is None else environ
    secret = env.get("SECRET_KEY", "").strip()
    if not secret:
        raise RuntimeError("SECRET_KEY is not set; refusing to start")

    cookie_secure = _flag(env.get("COOKIE_SECURE", "true"))
    cookie_samesite = env.get("COOKIE_SAMESITE", Settings.cookie_samesite).strip().lower()
    if cookie_samesite not in SAMESITE_VALUES:
        raise RuntimeError(f"COOKIE_SAMESITE must be one of {', '.join(SAMESITE_VALUES)}, got {cookie_samesite!r}")
    if cookie_samesite == "none" and not cookie_secure:
        # browsers drop SameSite=None cookies that are not Secure
        raise RuntimeError("COOKIE_SAMESITE=none requires COOKIE_SECURE=true")

    return Settings(
        secret_key=secret,
        database_url=env.get("DATABASE_URL", Settings.database_url),
        port=int(env.get("PORT", Settings.port)),
        algorithm=env.get("ALGORITHM", Settings.algorithm),
        token_expire_hours=float(env.get("TOKEN_EXPIRE_HOURS", Settings.token_expire_hours)),
        bcrypt_rounds=int(env.get("BCRYPT_ROUNDS", Settings.bcrypt_rounds)),
        cookie_secure=cookie_secure,
        cookie_samesite=cookie_samesite,
        log_level=env.get("LOG_LEVEL", Settings.log_level).upper(),
    )
