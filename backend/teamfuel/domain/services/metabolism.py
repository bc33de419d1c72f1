"""
Estimation du metabolisme : masse maigre, BMR et TDEE.

BMR Katch-McArdle (370 + 21.6 * masse maigre) quand le taux de masse grasse
est connu, sinon approximation 22 kcal/kg. Les facteurs d'activite sont
calibres pour des populations sportives.
"""
from dataclasses import dataclass
from typing import Optional

from teamfuel.domain.entities.activity_level_daily import ActivityLevel
from teamfuel.domain.services.rounding import round_half_up, round_int

KATCH_MCARDLE_BASE = 370
KATCH_MCARDLE_PER_KG_LEAN = 21.6
FALLBACK_KCAL_PER_KG = 22

ACTIVITY_FACTORS = {
    ActivityLevel.LOW: 1.2,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.HIGH: 1.725,
    ActivityLevel.VERY_HIGH: 1.9,
}


@dataclass(frozen=True)
class MetabolicEstimate:
    weight: float
    height_cm: float
    body_fat_percent: Optional[float]
    lean_mass: Optional[float]
    bmr: int
    tdee: int
    activity_level: ActivityLevel


def lean_mass(weight: float, body_fat_percent: Optional[float]) -> Optional[float]:
    """Masse maigre (kg, 0.1 pres). None sans taux de masse grasse exploitable."""
    if body_fat_percent is None or not 0 <= body_fat_percent < 100:
        return None
    return round_half_up(weight * (1 - body_fat_percent / 100), 1)


def basal_metabolic_rate(weight: float, lean_mass_kg: Optional[float]) -> int:
    if lean_mass_kg is not None:
        return round_int(KATCH_MCARDLE_BASE + KATCH_MCARDLE_PER_KG_LEAN * lean_mass_kg)
    return round_int(FALLBACK_KCAL_PER_KG * weight)


def activity_factor(level: ActivityLevel) -> float:
    return ACTIVITY_FACTORS[ActivityLevel(level)]


def total_daily_energy_expenditure(bmr: int, level: ActivityLevel) -> int:
    return round_int(bmr * activity_factor(level))


def estimate_metabolism(
    weight: float,
    height_cm: float,
    body_fat_percent: Optional[float],
    level: ActivityLevel,
) -> MetabolicEstimate:
    """BMR et TDEE d'un athlete dont poids et taille sont connus."""
    lean = lean_mass(weight, body_fat_percent)
    bmr = basal_metabolic_rate(weight, lean)
    return MetabolicEstimate(
        weight=weight,
        height_cm=height_cm,
        body_fat_percent=body_fat_percent if lean is not None else None,
        lean_mass=lean,
        bmr=bmr,
        tdee=total_daily_energy_expenditure(bmr, level),
        activity_level=ActivityLevel(level),
    )
