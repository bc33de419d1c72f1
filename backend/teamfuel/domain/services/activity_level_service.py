"""
Classification du niveau d'activite relatif a l'equipe.

Pour chaque jour, les charges glissantes sont regroupees par equipe ; les
quartiles (interpolation lineaire, type R-7) servent de bornes :

    low        valeur <= p25
    moderate   p25 < valeur <= p50
    high       p50 < valeur <= p75
    very_high  valeur > p75

Les egalites vont a la categorie la moins intense. En dessous de 3 athletes
les percentiles ne sont pas calcules et tout le monde est "moderate".
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date as date_type
from typing import Dict, List, Optional, Sequence, Tuple, Union
from uuid import UUID

import numpy as np

from teamfuel.domain.entities.activity_level_daily import ActivityLevel, LevelSource
from teamfuel.domain.services.rolling_load import RollingLoad
from teamfuel.domain.services.rounding import round_half_up

logger = logging.getLogger(__name__)

MIN_GROUP_SIZE = 3
QUARTILES = (0.25, 0.50, 0.75)
SMALL_GROUP_LEVEL = ActivityLevel.MODERATE


@dataclass(frozen=True)
class TeamPercentiles:
    p25: float
    p50: float
    p75: float

    def rounded(self) -> "TeamPercentiles":
        return TeamPercentiles(
            p25=round_half_up(self.p25, 1),
            p50=round_half_up(self.p50, 1),
            p75=round_half_up(self.p75, 1),
        )


@dataclass(frozen=True)
class ComputedLevel:
    """Niveau effectif = niveau systeme."""
    level: ActivityLevel
    source = LevelSource.COMPUTED


@dataclass(frozen=True)
class OverriddenLevel:
    """Reserve aux futures corrections manuelles ; le recalcul n'en produit jamais."""
    level: ActivityLevel
    by: UUID
    reason: str
    source = LevelSource.OVERRIDE


EffectiveLevel = Union[ComputedLevel, OverriddenLevel]


@dataclass(frozen=True)
class ActivityLevelResult:
    user_id: UUID
    team_id: UUID
    date: date_type
    avg_load_14d: float
    percentiles: Optional[TeamPercentiles]
    system_level: ActivityLevel
    effective: EffectiveLevel

    @property
    def effective_level(self) -> ActivityLevel:
        return self.effective.level


def team_percentiles(values: Sequence[float]) -> Optional[TeamPercentiles]:
    """Quartiles d'une equipe, None si moins de MIN_GROUP_SIZE valeurs."""
    if len(values) < MIN_GROUP_SIZE:
        return None
    p25, p50, p75 = np.quantile(np.asarray(values, dtype=float), QUARTILES)
    return TeamPercentiles(p25=float(p25), p50=float(p50), p75=float(p75))


def level_from_percentiles(value: float, percentiles: TeamPercentiles) -> ActivityLevel:
    if value <= percentiles.p25:
        return ActivityLevel.LOW
    if value <= percentiles.p50:
        return ActivityLevel.MODERATE
    if value <= percentiles.p75:
        return ActivityLevel.HIGH
    return ActivityLevel.VERY_HIGH


def classify_day(rolling: Sequence[RollingLoad]) -> List[ActivityLevelResult]:
    """Classe les valeurs d'un meme jour, equipe par equipe."""
    by_team: Dict[UUID, List[float]] = {}
    for r in rolling:
        by_team.setdefault(r.team_id, []).append(r.avg_load_14d)

    percentiles = {team_id: team_percentiles(vals) for team_id, vals in by_team.items()}

    results = []
    for r in rolling:
        p = percentiles[r.team_id]
        system_level = level_from_percentiles(r.avg_load_14d, p) if p else SMALL_GROUP_LEVEL
        results.append(ActivityLevelResult(
            user_id=r.user_id,
            team_id=r.team_id,
            date=r.date,
            avg_load_14d=r.avg_load_14d,
            percentiles=p,
            system_level=system_level,
            effective=ComputedLevel(system_level),
        ))
    return results


def classify_activity_levels(rolling: Sequence[RollingLoad]) -> Tuple[ActivityLevelResult, ...]:
    """Classe toutes les valeurs glissantes ; chaque jour est traite independamment."""
    by_date: "OrderedDict[date_type, List[RollingLoad]]" = OrderedDict()
    for r in rolling:
        by_date.setdefault(r.date, []).append(r)

    results: List[ActivityLevelResult] = []
    for day, values in by_date.items():
        day_results = classify_day(values)
        small = sum(1 for res in day_results if res.percentiles is None)
        if small:
            logger.debug(f"{day}: {small} athletes dans des equipes < {MIN_GROUP_SIZE}, niveau par defaut")
        results.extend(day_results)
    return tuple(results)
