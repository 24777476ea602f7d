"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from courier_dispatch.domain.entities import ROLES, Actor
from courier_dispatch.infrastructure.security import decode_access_token

# Tokens are issued by the external identity service.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_actor(token: str) -> Actor:
    """Build the request actor from the ``sub`` and ``role`` token claims."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_exception() from exc

    subject = payload.get("sub")
    role = payload.get("role")
    if subject is None or role not in ROLES:
        raise _credentials_exception()
    try:
        actor_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise _credentials_exception() from exc
    return Actor(id=actor_id, role=role)


def get_current_actor(token: str = Depends(oauth2_scheme)) -> Actor:
    """Return the authenticated actor from the provided token."""

    return resolve_actor(token)


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Ensure the authenticated actor has administrator privileges."""

    if not actor.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator privileges are required",
        )
    return actor
