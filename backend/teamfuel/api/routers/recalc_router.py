"""
Route de recalcul quotidien (cron ou execution manuelle par un coach/admin).
Routes = validation + delegation au service. Pas de logique metier ici.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from teamfuel.core.settings import get_settings
from teamfuel.domain.services.batch_writer import BatchWriteError
from teamfuel.domain.services.recalc_service import RecalcOptions, recalc_service
from teamfuel.domain.services.run_lock import RecalcAlreadyRunning
from teamfuel.api.routers._shared import limiter, recalc_caller

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/recalc/activity-and-nutrition")
@limiter.limit(get_settings().RECALC_RATE_LIMIT)
async def recalc_activity_and_nutrition(
    request: Request,
    caller: str = Depends(recalc_caller),
):
    """Recalcule niveaux d'activite, metabolisme et cibles nutritionnelles (idempotent)."""
    # Corps optionnel : JSON invalide ou absent = options par defaut
    try:
        payload = await request.json()
    except Exception:
        payload = {}
    options = RecalcOptions.from_payload(payload)
    logger.info(f"Recalcul demande par {caller}: {options.model_dump(mode='json')}")

    try:
        summary = await run_in_threadpool(recalc_service.run, options)
        return JSONResponse(status_code=200, content=summary)
    except RecalcAlreadyRunning as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except BatchWriteError as e:
        logger.error(f"[recalc-activity-and-nutrition] {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": str(e), **e.to_dict()},
        )
    except Exception as e:
        logger.error(f"[recalc-activity-and-nutrition] {type(e).__name__}: {e}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": str(e)},
        )
