from fastapi import FastAPI

from .drivers import router as drivers_router
from .maintenance import router as maintenance_router
from .notifications import router as notifications_router
from .orders import router as orders_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(orders_router)
    app.include_router(drivers_router)
    app.include_router(notifications_router)
    app.include_router(maintenance_router)
