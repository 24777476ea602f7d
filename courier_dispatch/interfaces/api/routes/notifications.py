"""Endpoints and websocket handler for driver mailboxes."""

from __future__ import annotations

import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)

from courier_dispatch.application.use_cases.notifications import (
    delete_notification as delete_notification_uc,
    get_mailbox as get_mailbox_uc,
    mailbox_stats as mailbox_stats_uc,
    mark_read as mark_read_uc,
)
from courier_dispatch.domain.entities import Actor
from courier_dispatch.domain.exceptions import NotFoundError, ValidationError
from courier_dispatch.infrastructure.notifications import (
    notification_manager,
    serialize_notification,
)
from courier_dispatch.interfaces.api.dependencies import (
    get_current_actor,
    require_admin,
    resolve_actor,
)
from courier_dispatch.interfaces.api.schemas import (
    MailboxRead,
    MailboxStatsRead,
    NotificationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _target_driver(actor: Actor, driver_id: int | None) -> int:
    """Drivers address their own mailbox; administrators name the driver."""

    if actor.is_admin():
        if driver_id is None:
            raise ValidationError(["driver_id is required for administrators"])
        return driver_id
    return actor.id


@router.get("/", response_model=MailboxRead)
def read_mailbox(
    driver_id: int | None = Query(default=None),
    actor: Actor = Depends(get_current_actor),
) -> MailboxRead:
    """Return the caller's notifications, most recent first."""

    mailbox = get_mailbox_uc(driver_id=_target_driver(actor, driver_id), actor=actor)
    return MailboxRead.model_validate(mailbox)


@router.get("/stats", response_model=MailboxStatsRead)
def read_mailbox_stats(actor: Actor = Depends(require_admin)) -> MailboxStatsRead:
    return MailboxStatsRead.model_validate(mailbox_stats_uc(actor=actor))


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: int,
    driver_id: int | None = Query(default=None),
    actor: Actor = Depends(get_current_actor),
) -> NotificationRead:
    notification = mark_read_uc(
        driver_id=_target_driver(actor, driver_id),
        notification_id=notification_id,
        actor=actor,
    )
    return NotificationRead.model_validate(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    driver_id: int | None = Query(default=None),
    actor: Actor = Depends(get_current_actor),
) -> Response:
    delete_notification_uc(
        driver_id=_target_driver(actor, driver_id),
        notification_id=notification_id,
        actor=actor,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream new mailbox entries to the authenticated driver."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    try:
        actor = resolve_actor(token)
    except HTTPException:
        await websocket.close(code=1008)
        return
    if not actor.is_driver():
        await websocket.close(code=1008)
        return

    await notification_manager.connect(actor.id, websocket)
    try:
        pending = [
            notification
            for notification in get_mailbox_uc(driver_id=actor.id, actor=actor).notifications
            if not notification.read
        ]
        if pending:
            await websocket.send_json(
                {"type": "init", "data": [serialize_notification(n) for n in pending]}
            )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    for notification_id in ids:
                        try:
                            mark_read_uc(
                                driver_id=actor.id,
                                notification_id=notification_id,
                                actor=actor,
                            )
                        except NotFoundError:
                            logger.debug(
                                "Ack for missing notification %s of driver %s",
                                notification_id,
                                actor.id,
                            )
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(actor.id, websocket)
    except Exception:
        notification_manager.disconnect(actor.id, websocket)
        raise
