"""
Routers API pour TeamFuel.

Ce module regroupe tous les sous-routers et expose un router principal
a inclure dans l'application FastAPI.
"""
from fastapi import APIRouter

from teamfuel.api.routers.recalc_router import router as recalc_router
from teamfuel.api.routers.nutrition_router import router as nutrition_router
from teamfuel.api.routers._shared import limiter

router = APIRouter()

router.include_router(recalc_router)
router.include_router(nutrition_router)

__all__ = ["router", "limiter"]
