"""Schemas for maintenance endpoints."""

from pydantic import BaseModel


class PurgeResult(BaseModel):
    purged: int


class ExpirePresenceResult(BaseModel):
    expired: int


__all__ = ["PurgeResult", "ExpirePresenceResult"]
