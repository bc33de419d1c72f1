"""
Planification des macros : cible calorique et repartition P/L/G.

cut / bulk : -10% / +10% du TDEE, plafonne a 500 kcal.
Proteines et lipides en g/kg selon l'objectif, le reste en glucides
(jamais negatif : si P+L depassent la cible, les glucides tombent a 0).
"""
import math
from dataclasses import dataclass

from teamfuel.domain.entities.nutrition_daily import NutritionGoal
from teamfuel.domain.services.rounding import round_int

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_FAT = 9
KCAL_PER_G_CARBS = 4

GOAL_ADJUSTMENT_RATIO = 0.10
MAX_GOAL_ADJUSTMENT_KCAL = 500

PROTEIN_G_PER_KG = {
    NutritionGoal.CUT: 2.0,
    NutritionGoal.MAINTAIN: 1.8,
    NutritionGoal.BULK: 1.8,
}
FAT_G_PER_KG = {
    NutritionGoal.CUT: 0.8,
    NutritionGoal.MAINTAIN: 0.9,
    NutritionGoal.BULK: 1.0,
}


@dataclass(frozen=True)
class MacroPlan:
    goal: NutritionGoal
    kcal_target: int
    protein_g: int
    fat_g: int
    carbs_g: int
    protein_kcal: int
    fat_kcal: int
    carbs_kcal: int


def clamp_delta_kcal(delta: float, max_abs: float = MAX_GOAL_ADJUSTMENT_KCAL) -> float:
    return max(-max_abs, min(max_abs, delta))


def calorie_target(tdee: int, goal: NutritionGoal) -> int:
    goal = NutritionGoal(goal)
    if goal == NutritionGoal.CUT:
        return round_int(tdee + clamp_delta_kcal(-tdee * GOAL_ADJUSTMENT_RATIO))
    if goal == NutritionGoal.BULK:
        return round_int(tdee + clamp_delta_kcal(tdee * GOAL_ADJUSTMENT_RATIO))
    return int(tdee)


def plan_macros(weight_kg: float, tdee: int, goal: NutritionGoal) -> MacroPlan:
    goal = NutritionGoal(goal)
    kcal_target = calorie_target(tdee, goal)

    protein_g = round_int(weight_kg * PROTEIN_G_PER_KG[goal])
    fat_g = round_int(weight_kg * FAT_G_PER_KG[goal])
    protein_kcal = protein_g * KCAL_PER_G_PROTEIN
    fat_kcal = fat_g * KCAL_PER_G_FAT

    remaining_kcal = max(0, kcal_target - protein_kcal - fat_kcal)
    carbs_g = math.floor(remaining_kcal / KCAL_PER_G_CARBS)

    return MacroPlan(
        goal=goal,
        kcal_target=kcal_target,
        protein_g=protein_g,
        fat_g=fat_g,
        carbs_g=carbs_g,
        protein_kcal=protein_kcal,
        fat_kcal=fat_kcal,
        carbs_kcal=carbs_g * KCAL_PER_G_CARBS,
    )
