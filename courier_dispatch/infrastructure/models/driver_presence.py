"""SQLAlchemy model for driver presence records."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.sql import expression

from courier_dispatch.infrastructure.database import Base
from courier_dispatch.utils import ensure_utc_naive_datetime, now_in_app_timezone


def _utc_now():
    return ensure_utc_naive_datetime(now_in_app_timezone())


class DriverPresenceModel(Base):
    """Presence of one driver, keyed by the external user id.

    Timestamps are stored as naive UTC so heartbeat age survives clock changes.
    """

    __tablename__ = "driver_presence"

    driver_id = Column(Integer, primary_key=True, autoincrement=False)
    online = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    force_offline = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    last_heartbeat = Column(DateTime(), nullable=True)
    last_status_change = Column(
        DateTime(), nullable=False, default=_utc_now
    )
    offline_reason = Column(String(255), nullable=True)


__all__ = ["DriverPresenceModel"]
