from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.registration import router as registration_router

__all__ = ["health_router", "registration_router"]
