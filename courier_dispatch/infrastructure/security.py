"""Bearer token helpers for the request context."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from courier_dispatch.config import get_settings

ALGORITHM = "HS256"

settings = get_settings()


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def create_actor_token(actor_id: int, role: str, expires_delta: timedelta | None = None) -> str:
    """Return a token carrying ``actor_id`` as subject and ``role``."""

    return create_access_token({"sub": str(actor_id), "role": role}, expires_delta)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc
