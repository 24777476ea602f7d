"""Persistence layer for driver presence records."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import case, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from courier_dispatch.domain.entities import DriverPresence
from courier_dispatch.infrastructure.models import DriverPresenceModel
from courier_dispatch.utils import ensure_utc_naive_datetime, from_utc_naive_datetime


class DriverPresenceRepository:
    """Store presence records and apply field-level presence updates.

    Updates touch only the columns they own, so concurrent writes for one
    driver resolve last-write-wins per column. Writes that must respect an
    administrative override carry ``force_offline = false`` in their ``WHERE``
    clause instead of checking it beforehand.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, driver_id: int) -> DriverPresence | None:
        model = self.session.get(DriverPresenceModel, driver_id, populate_existing=True)
        return self._to_entity(model) if model else None

    def ensure(self, driver_id: int, *, now: datetime) -> None:
        """Create an offline record for ``driver_id`` unless one already exists."""

        if self.session.get(DriverPresenceModel, driver_id) is not None:
            return
        model = DriverPresenceModel(
            driver_id=driver_id,
            online=False,
            force_offline=False,
            last_heartbeat=None,
            last_status_change=ensure_utc_naive_datetime(now),
            offline_reason=None,
        )
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            # Another request created the record first.
            self.session.rollback()

    def set_online(self, driver_id: int, *, now: datetime) -> bool:
        stamp = ensure_utc_naive_datetime(now)
        return self._update(
            driver_id,
            {"online": True, "last_heartbeat": stamp, "last_status_change": stamp},
            respect_override=True,
        )

    def set_offline(self, driver_id: int, *, now: datetime) -> bool:
        return self._update(
            driver_id,
            {
                "online": False,
                "last_heartbeat": None,
                "last_status_change": ensure_utc_naive_datetime(now),
            },
        )

    def record_heartbeat(self, driver_id: int, *, now: datetime) -> bool:
        stamp = ensure_utc_naive_datetime(now)
        # Bringing an offline driver online counts as a status change.
        status_change = case(
            (
                DriverPresenceModel.online.is_(True),
                DriverPresenceModel.last_status_change,
            ),
            else_=stamp,
        )
        return self._update(
            driver_id,
            {
                "online": True,
                "last_heartbeat": stamp,
                "last_status_change": status_change,
            },
            respect_override=True,
        )

    def force_offline(self, driver_id: int, *, reason: str, now: datetime) -> bool:
        return self._update(
            driver_id,
            {
                "online": False,
                "force_offline": True,
                "offline_reason": reason,
                "last_status_change": ensure_utc_naive_datetime(now),
            },
        )

    def allow_online(self, driver_id: int, *, now: datetime) -> bool:
        return self._update(
            driver_id,
            {
                "force_offline": False,
                "offline_reason": None,
                "last_status_change": ensure_utc_naive_datetime(now),
            },
        )

    def mark_offline_if_unchanged(
        self, driver_id: int, *, observed_heartbeat: datetime | None, now: datetime
    ) -> bool:
        """Flip a stale driver offline unless a newer heartbeat arrived meanwhile."""

        conditions = [
            DriverPresenceModel.driver_id == driver_id,
            DriverPresenceModel.online.is_(True),
        ]
        if observed_heartbeat is None:
            conditions.append(DriverPresenceModel.last_heartbeat.is_(None))
        else:
            conditions.append(
                DriverPresenceModel.last_heartbeat
                == ensure_utc_naive_datetime(observed_heartbeat)
            )
        statement = (
            update(DriverPresenceModel)
            .where(*conditions)
            .values(
                online=False,
                last_heartbeat=None,
                last_status_change=ensure_utc_naive_datetime(now),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(statement)
        self.session.commit()
        return result.rowcount == 1

    def list_online(self) -> Sequence[DriverPresence]:
        query = (
            self.session.query(DriverPresenceModel)
            .populate_existing()
            .filter(DriverPresenceModel.online.is_(True))
            .filter(DriverPresenceModel.force_offline.is_(False))
            .order_by(DriverPresenceModel.driver_id)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_all(self) -> Sequence[DriverPresence]:
        query = (
            self.session.query(DriverPresenceModel)
            .populate_existing()
            .order_by(DriverPresenceModel.driver_id)
        )
        return [self._to_entity(model) for model in query.all()]

    def _update(
        self, driver_id: int, values: dict[str, object], *, respect_override: bool = False
    ) -> bool:
        conditions = [DriverPresenceModel.driver_id == driver_id]
        if respect_override:
            conditions.append(DriverPresenceModel.force_offline.is_(False))
        statement = (
            update(DriverPresenceModel)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(statement)
        self.session.commit()
        return result.rowcount == 1

    @staticmethod
    def _to_entity(model: DriverPresenceModel) -> DriverPresence:
        return DriverPresence(
            driver_id=model.driver_id,
            online=model.online,
            force_offline=model.force_offline,
            last_heartbeat=from_utc_naive_datetime(model.last_heartbeat),
            last_status_change=from_utc_naive_datetime(model.last_status_change),
            offline_reason=model.offline_reason,
        )


__all__ = ["DriverPresenceRepository"]
