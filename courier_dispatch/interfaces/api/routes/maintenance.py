"""Administrative housekeeping endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from courier_dispatch.application.use_cases.notifications import purge_expired
from courier_dispatch.application.use_cases.presence import expire_stale_presence
from courier_dispatch.domain.entities import Actor
from courier_dispatch.infrastructure.database import get_db
from courier_dispatch.interfaces.api.dependencies import require_admin
from courier_dispatch.interfaces.api.schemas import ExpirePresenceResult, PurgeResult

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


@router.post("/purge-notifications", response_model=PurgeResult)
def purge_notifications(actor: Actor = Depends(require_admin)) -> PurgeResult:
    """Remove notifications older than the retention window."""

    return PurgeResult(purged=purge_expired(actor=actor))


@router.post("/expire-presence", response_model=ExpirePresenceResult)
def expire_presence(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> ExpirePresenceResult:
    """Mark drivers whose heartbeat timed out as offline."""

    return ExpirePresenceResult(expired=expire_stale_presence(db))
