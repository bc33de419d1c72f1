"""
Routes de lecture des niveaux d'activite et cibles nutritionnelles de l'athlete connecte.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session, select

from teamfuel.core.database import get_session
from teamfuel.core.settings import get_settings
from teamfuel.auth.jwt import get_current_user_id
from teamfuel.domain.entities import (
    AthleteActivityLevelDaily,
    AthleteActivityLevelDailyRead,
    NutritionTargetsDaily,
    NutritionTargetsDailyRead,
)
from teamfuel.domain.services.recalc_window import local_today
from teamfuel.api.routers._shared import security

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_RANGE_DAYS = 14


def _date_range(date_from: Optional[date], date_to: Optional[date]) -> tuple[date, date]:
    if date_to is None:
        date_to = local_today(get_settings().RECALC_TIMEZONE) - timedelta(days=1)
    if date_from is None:
        date_from = date_to - timedelta(days=DEFAULT_RANGE_DAYS - 1)
    if date_from > date_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_from doit etre anterieure ou egale a date_to"
        )
    return date_from, date_to


@router.get("/activity-levels", response_model=List[AthleteActivityLevelDailyRead])
async def list_activity_levels(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    token: str = Depends(security),
    session: Session = Depends(get_session),
):
    """Niveaux d'activite quotidiens de l'utilisateur courant"""
    user_id = get_current_user_id(token.credentials)
    date_from, date_to = _date_range(date_from, date_to)
    return session.exec(
        select(AthleteActivityLevelDaily)
        .where(
            AthleteActivityLevelDaily.user_id == user_id,
            AthleteActivityLevelDaily.date >= date_from,
            AthleteActivityLevelDaily.date <= date_to,
        )
        .order_by(AthleteActivityLevelDaily.date)
    ).all()


@router.get("/nutrition/targets", response_model=List[NutritionTargetsDailyRead])
async def list_nutrition_targets(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    token: str = Depends(security),
    session: Session = Depends(get_session),
):
    """Cibles nutritionnelles quotidiennes de l'utilisateur courant"""
    user_id = get_current_user_id(token.credentials)
    date_from, date_to = _date_range(date_from, date_to)
    return session.exec(
        select(NutritionTargetsDaily)
        .where(
            NutritionTargetsDaily.user_id == user_id,
            NutritionTargetsDaily.date >= date_from,
            NutritionTargetsDaily.date <= date_to,
        )
        .order_by(NutritionTargetsDaily.date)
    ).all()
