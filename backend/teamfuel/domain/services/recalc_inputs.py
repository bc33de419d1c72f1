"""
Chargement des donnees sources du recalcul quotidien.

Trois lectures independantes : roster des athletes, historique de charge et
derniere composition corporelle. Elles ne dependent que de la fenetre et
peuvent donc etre lancees en parallele, chacune avec sa propre session.
"""
import logging
import math
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date as date_type, datetime, timezone
from typing import Callable, Dict, Optional, Tuple
from uuid import UUID

from sqlmodel import Session, select

from teamfuel.domain.entities.user import User, UserRole
from teamfuel.domain.entities.training_record import TrainingRecord
from teamfuel.domain.entities.inbody_record import InbodyRecord
from teamfuel.domain.services.recalc_window import RecalcWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AthleteRef:
    """Athlete eligible : role athlete, actif, rattache a une equipe."""
    user_id: UUID
    team_id: UUID
    height_cm: Optional[float] = None


@dataclass(frozen=True)
class BodyComposition:
    """Derniere mesure de composition corporelle connue d'un athlete."""
    user_id: UUID
    measured_at: date_type
    weight: Optional[float] = None
    height_cm: Optional[float] = None
    body_fat_percent: Optional[float] = None


@dataclass(frozen=True)
class LoadHistory:
    """Charges journalieres creuses : {user_id: {date: load}}. Jour absent = 0."""
    daily: Dict[UUID, Dict[date_type, float]] = field(default_factory=dict)

    def load_on(self, user_id: UUID, day: date_type) -> float:
        return self.daily.get(user_id, {}).get(day, 0.0)

    @property
    def observations(self) -> int:
        return sum(len(days) for days in self.daily.values())


@dataclass(frozen=True)
class RecalcInputs:
    athletes: Tuple[AthleteRef, ...]
    load_history: LoadHistory
    body_compositions: Dict[UUID, BodyComposition]


def _eligible_athletes():
    return (
        User.role == UserRole.ATHLETE.value,
        User.is_active == True,  # noqa: E712
        User.team_id.is_not(None),
    )


def load_roster(session: Session) -> Tuple[AthleteRef, ...]:
    """Athletes actifs avec une equipe. Sans equipe : exclus de tout le pipeline."""
    users = session.exec(
        select(User).where(*_eligible_athletes()).order_by(User.id)
    ).all()
    return tuple(
        AthleteRef(user_id=u.id, team_id=u.team_id, height_cm=_positive(u.height_cm))
        for u in users
    )


def _clean_load(value) -> float:
    if value is None:
        return 0.0
    v = float(value)
    if not math.isfinite(v) or v < 0:
        return 0.0
    return v


def _positive(value) -> Optional[float]:
    """Poids ou taille exploitable, None sinon (absent, nul, negatif, non fini)."""
    if value is None:
        return None
    v = float(value)
    return v if math.isfinite(v) and v > 0 else None


def _body_fat(value) -> Optional[float]:
    """Taux de masse grasse dans [0, 100), None sinon."""
    if value is None:
        return None
    v = float(value)
    return v if math.isfinite(v) and 0 <= v < 100 else None


def load_training_history(
    session: Session, date_from: date_type, date_to: date_type
) -> LoadHistory:
    """Charges des athletes eligibles sur [date_from, date_to], cumulees par jour."""
    rows = session.exec(
        select(TrainingRecord.user_id, TrainingRecord.date, TrainingRecord.load)
        .join(User, User.id == TrainingRecord.user_id)
        .where(
            *_eligible_athletes(),
            TrainingRecord.date >= date_from,
            TrainingRecord.date <= date_to,
        )
    ).all()

    daily: Dict[UUID, Dict[date_type, float]] = defaultdict(lambda: defaultdict(float))
    for user_id, day, load in rows:
        daily[user_id][day] += _clean_load(load)

    return LoadHistory(daily={uid: dict(days) for uid, days in daily.items()})


def load_latest_body_compositions(
    session: Session, today: date_type, now: datetime
) -> Dict[UUID, BodyComposition]:
    """Mesure la plus recente (date puis horodatage) a ou avant maintenant, par athlete."""
    now_utc = now.astimezone(timezone.utc) if now.tzinfo else now.replace(tzinfo=timezone.utc)
    rows = session.exec(
        select(InbodyRecord)
        .join(User, User.id == InbodyRecord.user_id)
        .where(
            *_eligible_athletes(),
            InbodyRecord.measured_at <= today,
            (InbodyRecord.measured_at_ts.is_(None)) | (InbodyRecord.measured_at_ts <= now_utc),
        )
        .order_by(
            InbodyRecord.user_id,
            InbodyRecord.measured_at.desc(),
            InbodyRecord.measured_at_ts.desc().nulls_last(),
        )
    ).all()

    latest: Dict[UUID, BodyComposition] = {}
    for r in rows:
        if r.user_id in latest:
            continue
        latest[r.user_id] = BodyComposition(
            user_id=r.user_id,
            measured_at=r.measured_at,
            weight=_positive(r.weight),
            height_cm=_positive(r.height),
            body_fat_percent=_body_fat(r.body_fat_percent),
        )
    return latest


def load_inputs(
    session_factory: Callable[[], Session],
    window: RecalcWindow,
    today: date_type,
    now: datetime,
    parallel: bool = True,
) -> RecalcInputs:
    """Execute les trois lectures et assemble les entrees du pipeline."""

    def _roster():
        with session_factory() as session:
            return load_roster(session)

    def _history():
        with session_factory() as session:
            return load_training_history(session, window.load_start, window.end_date)

    def _bodies():
        with session_factory() as session:
            return load_latest_body_compositions(session, today, now)

    if parallel:
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="recalc-load") as pool:
            roster_f = pool.submit(_roster)
            history_f = pool.submit(_history)
            bodies_f = pool.submit(_bodies)
            athletes, history, bodies = roster_f.result(), history_f.result(), bodies_f.result()
    else:
        athletes, history, bodies = _roster(), _history(), _bodies()

    logger.info(
        f"Entrees chargees: {len(athletes)} athletes, {history.observations} charges "
        f"({window.load_start} -> {window.end_date}), {len(bodies)} compositions corporelles"
    )
    return RecalcInputs(athletes=athletes, load_history=history, body_compositions=bodies)
