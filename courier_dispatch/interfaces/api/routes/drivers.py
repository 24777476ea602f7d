"""Routes for driver presence and driver dashboards."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from courier_dispatch.application.use_cases.orders import driver_order_stats
from courier_dispatch.application.use_cases.presence import (
    allow_online as allow_online_uc,
    force_offline as force_offline_uc,
    get_status as get_status_uc,
    heartbeat as heartbeat_uc,
    list_available as list_available_uc,
    presence_overview as presence_overview_uc,
    set_status as set_status_uc,
)
from courier_dispatch.domain.entities import Actor
from courier_dispatch.infrastructure.database import get_db
from courier_dispatch.interfaces.api.dependencies import get_current_actor, require_admin
from courier_dispatch.interfaces.api.schemas import (
    AvailableDriversRead,
    DriverOrderStatsRead,
    ForceOfflineRequest,
    PresenceOverviewRead,
    PresenceRead,
    PresenceUpdate,
)

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("/available", response_model=AvailableDriversRead)
def list_available_drivers(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> AvailableDriversRead:
    driver_ids = list_available_uc(db)
    return AvailableDriversRead(driver_ids=driver_ids, count=len(driver_ids))


@router.get("/overview", response_model=PresenceOverviewRead)
def read_presence_overview(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> PresenceOverviewRead:
    return PresenceOverviewRead.model_validate(presence_overview_uc(db, actor=actor))


@router.get("/{driver_id}/presence", response_model=PresenceRead)
def read_presence(
    driver_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> PresenceRead:
    return PresenceRead.from_status(get_status_uc(db, driver_id=driver_id, actor=actor))


@router.put("/{driver_id}/status", response_model=PresenceRead)
def update_status(
    driver_id: int,
    status_in: PresenceUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> PresenceRead:
    """Go online or offline."""

    presence = set_status_uc(
        db, driver_id=driver_id, status=status_in.status, actor=actor
    )
    return PresenceRead.from_status(presence)


@router.post("/{driver_id}/heartbeat", response_model=PresenceRead)
def record_heartbeat(
    driver_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> PresenceRead:
    return PresenceRead.from_status(heartbeat_uc(db, driver_id=driver_id, actor=actor))


@router.post("/{driver_id}/force-offline", response_model=PresenceRead)
def force_offline(
    driver_id: int,
    request: ForceOfflineRequest | None = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> PresenceRead:
    """Take a driver offline and keep it offline until allowed back."""

    presence = force_offline_uc(
        db,
        driver_id=driver_id,
        actor=actor,
        reason=request.reason if request else None,
    )
    return PresenceRead.from_status(presence)


@router.post("/{driver_id}/allow-online", response_model=PresenceRead)
def allow_online(
    driver_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> PresenceRead:
    return PresenceRead.from_status(allow_online_uc(db, driver_id=driver_id, actor=actor))


@router.get("/{driver_id}/stats", response_model=DriverOrderStatsRead)
def read_driver_stats(
    driver_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
) -> DriverOrderStatsRead:
    stats = driver_order_stats(db, driver_id=driver_id, actor=actor)
    return DriverOrderStatsRead.model_validate(stats)
