"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from cuadrante.presentation.api.v1.endpoints.health import router as health_router
from cuadrante.presentation.api.v1.endpoints.users import router as users_router
from cuadrante.presentation.api.v1.endpoints.calendar import router as calendar_router
from cuadrante.presentation.api.v1.endpoints.logs import router as logs_router
from cuadrante.presentation.api.v1.endpoints.uploads import router as uploads_router
from cuadrante.presentation.api.v1.endpoints.events import router as events_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(users_router)
router.include_router(calendar_router)
router.include_router(logs_router)
router.include_router(uploads_router)
router.include_router(events_router)
