"""Versioned API route modules."""

from fastapi import APIRouter

from skirmish.api.routes.battles import router as battles_router
from skirmish.api.routes.config import router as config_router
from skirmish.api.routes.metadata import router as metadata_router
from skirmish.api.routes.playback import router as playback_router
from skirmish.api.routes.setup import router as setup_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(battles_router, tags=["Battles"])
api_router.include_router(playback_router, tags=["Playback"])
api_router.include_router(setup_router, tags=["Setup"])
api_router.include_router(config_router, tags=["Config"])
api_router.include_router(metadata_router)

__all__ = ["api_router"]
