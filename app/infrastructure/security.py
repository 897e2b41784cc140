"""Helpers for issuing and reading access tokens."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from app.config import Settings, get_settings

ALGORITHM = "HS256"


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
    *,
    settings: Settings | None = None,
) -> str:
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, *, settings: Settings | None = None) -> dict:
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


def create_user_token(user_id: int, *, settings: Settings | None = None) -> str:
    """Return a bearer token identifying ``user_id``."""

    return create_access_token({"sub": str(user_id)}, settings=settings)
