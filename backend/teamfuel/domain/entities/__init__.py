"""
Initialisation des entités du domaine
"""

from .user import User, UserRead, UserRole
from .training_record import TrainingRecord
from .inbody_record import InbodyRecord
from .activity_level_daily import (
    AthleteActivityLevelDaily,
    AthleteActivityLevelDailyRead,
    ActivityLevel,
    LevelSource,
)
from .nutrition_daily import (
    NutritionDaily,
    NutritionTargetsDaily,
    NutritionTargetsDailyRead,
    NutritionGoal,
)

__all__ = [
    "User", "UserRead", "UserRole",
    "TrainingRecord",
    "InbodyRecord",
    "AthleteActivityLevelDaily", "AthleteActivityLevelDailyRead", "ActivityLevel", "LevelSource",
    "NutritionDaily", "NutritionTargetsDaily", "NutritionTargetsDailyRead", "NutritionGoal",
]
