"""SQLAlchemy model for the users exposed by the identity service."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from courier_dispatch.infrastructure.database import Base


class UserModel(Base):
    """Local projection of the externally owned user directory."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(30), nullable=True)
    role = Column(String(20), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["UserModel"]
