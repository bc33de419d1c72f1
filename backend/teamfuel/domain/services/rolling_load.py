"""
Charge glissante : moyenne arithmetique des 14 derniers jours calendaires.

Volontairement une simple moyenne (pas d'EWMA) pour que les coachs puissent
verifier le chiffre a la main. Un jour sans saisie compte pour 0.
"""
from dataclasses import dataclass
from datetime import date as date_type, timedelta
from typing import Iterable, List, Tuple
from uuid import UUID

from teamfuel.domain.services.recalc_inputs import AthleteRef, LoadHistory
from teamfuel.domain.services.recalc_window import ROLLING_WINDOW_DAYS
from teamfuel.domain.services.rounding import round_half_up


@dataclass(frozen=True)
class RollingLoad:
    user_id: UUID
    team_id: UUID
    date: date_type
    avg_load_14d: float


def rolling_mean(
    history: LoadHistory,
    user_id: UUID,
    end_date: date_type,
    window_days: int = ROLLING_WINDOW_DAYS,
) -> float:
    """Moyenne sur window_days jours se terminant a end_date inclus, arrondie a 0.1."""
    total = sum(
        history.load_on(user_id, end_date - timedelta(days=i))
        for i in range(window_days)
    )
    return round_half_up(total / window_days, 1)


def compute_rolling_loads(
    athletes: Iterable[AthleteRef],
    history: LoadHistory,
    dates: Iterable[date_type],
) -> Tuple[RollingLoad, ...]:
    """Valeur glissante pour chaque (date, athlete), toujours definie."""
    athletes = list(athletes)
    values: List[RollingLoad] = []
    for day in dates:
        for athlete in athletes:
            values.append(RollingLoad(
                user_id=athlete.user_id,
                team_id=athlete.team_id,
                date=day,
                avg_load_14d=rolling_mean(history, athlete.user_id, day),
            ))
    return tuple(values)
