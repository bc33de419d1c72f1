"""
Entités NutritionDaily / NutritionTargetsDaily - Domain Layer
Metabolisme estime et cibles macro-nutritionnelles quotidiennes.
"""
from sqlmodel import SQLModel, Field, DateTime, UniqueConstraint
from typing import Optional
from uuid import UUID, uuid4
from datetime import date as date_type, datetime, timezone
from enum import Enum


class NutritionGoal(str, Enum):
    """Objectif nutritionnel"""
    MAINTAIN = "maintain"
    CUT = "cut"
    BULK = "bulk"


class NutritionDaily(SQLModel, table=True):
    """Snapshot metabolique (BMR, TDEE) d'un athlete pour un jour."""
    __tablename__ = "nutrition_daily"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_nutrition_daily_user_date"),
    )

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    team_id: UUID = Field(index=True)
    date: date_type = Field(index=True)

    weight: float
    height_cm: float
    body_fat_percent: Optional[float] = None
    bmr: int
    tdee: int
    activity_level: str

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )


class NutritionTargetsDaily(SQLModel, table=True):
    """Cibles caloriques et macros (P/L/G) d'un athlete pour un jour."""
    __tablename__ = "nutrition_targets_daily"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_nutrition_targets_user_date"),
    )

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    team_id: UUID = Field(index=True)
    date: date_type = Field(index=True)

    tdee: int
    goal: str = Field(default=NutritionGoal.MAINTAIN.value)
    kcal_target: int
    protein_g: int
    fat_g: int
    carbs_g: int
    protein_kcal: int
    fat_kcal: int
    carbs_kcal: int

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )


class NutritionTargetsDailyRead(SQLModel):
    """Schéma pour lire les cibles nutritionnelles (réponse API)."""
    user_id: UUID
    team_id: UUID
    date: date_type
    tdee: int
    goal: str
    kcal_target: int
    protein_g: int
    fat_g: int
    carbs_g: int
    protein_kcal: int
    fat_kcal: int
    carbs_kcal: int
