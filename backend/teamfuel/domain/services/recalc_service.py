"""
Service de recalcul quotidien : niveaux d'activite et cibles nutritionnelles.

Pipeline (chaque etape ne consomme que les sorties des precedentes) :
  fenetre -> {roster, charges, compositions} -> charge glissante 14j
  -> classification par equipe -> BMR/TDEE -> macros -> upsert par lots
"""
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from uuid import uuid4

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from sqlmodel import Session

from teamfuel.core.database import new_session
from teamfuel.core.settings import Settings, get_settings
from teamfuel.domain.entities.activity_level_daily import AthleteActivityLevelDaily
from teamfuel.domain.entities.nutrition_daily import (
    NutritionDaily,
    NutritionGoal,
    NutritionTargetsDaily,
)
from teamfuel.domain.services.activity_level_service import (
    ActivityLevelResult,
    OverriddenLevel,
    classify_activity_levels,
)
from teamfuel.domain.services.batch_writer import upsert_rows
from teamfuel.domain.services.macro_planner import MacroPlan, plan_macros
from teamfuel.domain.services.metabolism import MetabolicEstimate, estimate_metabolism
from teamfuel.domain.services.recalc_inputs import AthleteRef, BodyComposition, load_inputs
from teamfuel.domain.services.recalc_window import (
    DEFAULT_BACKFILL_DAYS,
    RecalcWindow,
    coerce_backfill_days,
    local_today,
    resolve_window,
)
from teamfuel.domain.services.rolling_load import compute_rolling_loads
from teamfuel.domain.services.run_lock import RecalcRunLock

logger = logging.getLogger(__name__)

SKIP_NO_BODY_COMPOSITION = "no_body_composition"
SKIP_NO_WEIGHT = "no_weight"
SKIP_NO_HEIGHT = "no_height"


class RecalcOptions(BaseModel):
    """Options du corps de requete. Toute valeur invalide retombe sur le defaut."""
    backfill_days: int = Field(default=None, validate_default=True)
    default_goal: NutritionGoal = Field(default=NutritionGoal.MAINTAIN, validate_default=True)
    dry_run: bool = False

    @field_validator("backfill_days", mode="before")
    @classmethod
    def _coerce_backfill(cls, v: Any, info: ValidationInfo) -> int:
        ctx = info.context or {}
        return coerce_backfill_days(
            v,
            default=ctx.get("default_backfill_days", DEFAULT_BACKFILL_DAYS),
            maximum=ctx.get("max_backfill_days"),
        )

    @field_validator("default_goal", mode="before")
    @classmethod
    def _coerce_goal(cls, v: Any) -> str:
        valid = {g.value for g in NutritionGoal}
        return v if isinstance(v, str) and v in valid else NutritionGoal.MAINTAIN.value

    @field_validator("dry_run", mode="before")
    @classmethod
    def _coerce_dry_run(cls, v: Any) -> bool:
        return v is True

    @classmethod
    def from_payload(cls, payload: Any, settings: Optional[Settings] = None) -> "RecalcOptions":
        settings = settings or get_settings()
        data = payload if isinstance(payload, dict) else {}
        known = {k: data[k] for k in ("backfill_days", "default_goal", "dry_run") if k in data}
        return cls.model_validate(known, context={
            "default_backfill_days": settings.RECALC_DEFAULT_BACKFILL_DAYS,
            "max_backfill_days": settings.RECALC_MAX_BACKFILL_DAYS,
        })


@dataclass(frozen=True)
class NutritionResult:
    athlete: AthleteRef
    level: ActivityLevelResult
    metabolism: MetabolicEstimate
    macros: MacroPlan


def resolve_body_metrics(
    athlete: AthleteRef, body: Optional[BodyComposition]
) -> Tuple[Optional[Tuple[float, float, Optional[float]]], Optional[str]]:
    """(poids, taille, masse grasse) ou la raison du saut."""
    if body is None:
        return None, SKIP_NO_BODY_COMPOSITION
    if body.weight is None or body.weight <= 0:
        return None, SKIP_NO_WEIGHT
    height = body.height_cm if body.height_cm and body.height_cm > 0 else athlete.height_cm
    if height is None or height <= 0:
        return None, SKIP_NO_HEIGHT
    return (body.weight, height, body.body_fat_percent), None


def plan_nutrition(
    athletes: Sequence[AthleteRef],
    levels: Sequence[ActivityLevelResult],
    bodies: Dict[Any, BodyComposition],
    goal: NutritionGoal,
) -> Tuple[Tuple[NutritionResult, ...], Counter]:
    """Metabolisme + macros pour chaque niveau dont l'athlete a poids et taille."""
    by_id = {a.user_id: a for a in athletes}
    results: List[NutritionResult] = []
    skipped: Counter = Counter()

    for level in levels:
        athlete = by_id[level.user_id]
        metrics, reason = resolve_body_metrics(athlete, bodies.get(level.user_id))
        if metrics is None:
            skipped[reason] += 1
            logger.debug(f"Nutrition ignoree pour {level.user_id} le {level.date}: {reason}")
            continue
        weight, height, body_fat = metrics
        metabolism = estimate_metabolism(weight, height, body_fat, level.effective_level)
        results.append(NutritionResult(
            athlete=athlete,
            level=level,
            metabolism=metabolism,
            macros=plan_macros(weight, metabolism.tdee, goal),
        ))
    return tuple(results), skipped


def activity_row(result: ActivityLevelResult, created_at: datetime) -> Dict[str, Any]:
    p = result.percentiles.rounded() if result.percentiles else None
    effective = result.effective
    overridden = isinstance(effective, OverriddenLevel)
    return {
        "id": uuid4(),
        "user_id": result.user_id,
        "team_id": result.team_id,
        "date": result.date,
        "avg_load_14d": result.avg_load_14d,
        "team_p25": p.p25 if p else None,
        "team_p50": p.p50 if p else None,
        "team_p75": p.p75 if p else None,
        "activity_level_system": result.system_level.value,
        "activity_level_effective": effective.level.value,
        "effective_source": effective.source.value,
        "override_by": effective.by if overridden else None,
        "override_reason": effective.reason if overridden else None,
        "created_at": created_at,
    }


def nutrition_daily_row(result: NutritionResult, created_at: datetime) -> Dict[str, Any]:
    m = result.metabolism
    return {
        "id": uuid4(),
        "user_id": result.athlete.user_id,
        "team_id": result.athlete.team_id,
        "date": result.level.date,
        "weight": m.weight,
        "height_cm": m.height_cm,
        "body_fat_percent": m.body_fat_percent,
        "bmr": m.bmr,
        "tdee": m.tdee,
        "activity_level": m.activity_level.value,
        "created_at": created_at,
    }


def nutrition_target_row(result: NutritionResult, created_at: datetime) -> Dict[str, Any]:
    macros = result.macros
    return {
        "id": uuid4(),
        "user_id": result.athlete.user_id,
        "team_id": result.athlete.team_id,
        "date": result.level.date,
        "tdee": result.metabolism.tdee,
        "goal": macros.goal.value,
        "kcal_target": macros.kcal_target,
        "protein_g": macros.protein_g,
        "fat_g": macros.fat_g,
        "carbs_g": macros.carbs_g,
        "protein_kcal": macros.protein_kcal,
        "fat_kcal": macros.fat_kcal,
        "carbs_kcal": macros.carbs_kcal,
        "created_at": created_at,
    }


class RecalcService:
    """Orchestration d'un run complet de recalcul."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = new_session,
        settings: Optional[Settings] = None,
        run_lock: Optional[RecalcRunLock] = None,
    ):
        self.session_factory = session_factory
        self._settings = settings
        self._run_lock = run_lock

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _lock(self) -> Optional[RecalcRunLock]:
        if not self.settings.RECALC_RUN_LOCK_ENABLED:
            return None
        if self._run_lock is None:
            self._run_lock = RecalcRunLock(ttl_seconds=self.settings.RECALC_RUN_LOCK_TTL_SECONDS)
        return self._run_lock

    def run(self, options: RecalcOptions, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Execute le recalcul et retourne le resume JSON."""
        lock = self._lock()
        if lock is None:
            return self._run(options, now)
        with lock.hold():
            return self._run(options, now)

    def _run(self, options: RecalcOptions, now: Optional[datetime]) -> Dict[str, Any]:
        settings = self.settings
        now = now or datetime.now(timezone.utc)
        goal = options.default_goal

        window = resolve_window(options.backfill_days, settings.RECALC_TIMEZONE, now)
        logger.info(
            f"Recalcul activite/nutrition {window.start_date} -> {window.end_date} "
            f"({window.days} jours, objectif={goal.value}, dry_run={options.dry_run})"
        )

        inputs = load_inputs(
            self.session_factory,
            window,
            today=local_today(settings.RECALC_TIMEZONE, now),
            now=now,
            parallel=settings.RECALC_PARALLEL_LOADS,
        )
        if not inputs.athletes:
            logger.info("Aucun athlete eligible, rien a recalculer")
            summary = self._summary(window, goal, options, 0, [], [], [], Counter(), {})
            summary["message"] = "No athlete users found"
            return summary

        rolling = compute_rolling_loads(inputs.athletes, inputs.load_history, window.dates())
        levels = classify_activity_levels(rolling)
        nutrition, skipped = plan_nutrition(inputs.athletes, levels, inputs.body_compositions, goal)
        if skipped:
            logger.info(f"Nutrition ignoree (donnees manquantes): {dict(skipped)}")

        created_at = datetime.now(timezone.utc)
        activity_rows = [activity_row(r, created_at) for r in levels]
        daily_rows = [nutrition_daily_row(r, created_at) for r in nutrition]
        target_rows = [nutrition_target_row(r, created_at) for r in nutrition]

        chunks: Dict[str, int] = {}
        if not options.dry_run:
            chunks = self._write(activity_rows, daily_rows, target_rows)

        summary = self._summary(
            window, goal, options, len(inputs.athletes),
            activity_rows, daily_rows, target_rows, skipped, chunks,
        )
        logger.info(f"Recalcul termine: {summary}")
        return summary

    def _write(self, activity_rows, daily_rows, target_rows) -> Dict[str, int]:
        chunk_size = self.settings.RECALC_CHUNK_SIZE
        with self.session_factory() as session:
            return {
                AthleteActivityLevelDaily.__tablename__: upsert_rows(
                    session, AthleteActivityLevelDaily, activity_rows, chunk_size),
                NutritionDaily.__tablename__: upsert_rows(
                    session, NutritionDaily, daily_rows, chunk_size),
                NutritionTargetsDaily.__tablename__: upsert_rows(
                    session, NutritionTargetsDaily, target_rows, chunk_size),
            }

    @staticmethod
    def _summary(
        window: RecalcWindow,
        goal: NutritionGoal,
        options: RecalcOptions,
        athletes: int,
        activity_rows: list,
        daily_rows: list,
        target_rows: list,
        skipped: Counter,
        chunks: Dict[str, int],
    ) -> Dict[str, Any]:
        return {
            "ok": True,
            "startDate": window.start_date.isoformat(),
            "endDate": window.end_date.isoformat(),
            "athletes": athletes,
            "activity_upserted": len(activity_rows),
            "nutrition_daily_upserted": len(daily_rows),
            "nutrition_targets_upserted": len(target_rows),
            "default_goal": goal.value,
            "nutrition_skipped": dict(skipped),
            "chunks_committed": chunks,
            "dry_run": options.dry_run,
        }


recalc_service = RecalcService()
