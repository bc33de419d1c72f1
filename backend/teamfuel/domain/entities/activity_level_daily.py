"""
Entité AthleteActivityLevelDaily - Domain Layer
Niveau d'activite quotidien d'un athlete, relatif aux percentiles de son equipe.
"""
from sqlmodel import SQLModel, Field, DateTime, UniqueConstraint
from typing import Optional
from uuid import UUID, uuid4
from datetime import date as date_type, datetime, timezone
from enum import Enum


class ActivityLevel(str, Enum):
    """Niveaux d'activite, du moins au plus intense"""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class LevelSource(str, Enum):
    """Origine du niveau effectif"""
    COMPUTED = "computed"
    OVERRIDE = "override"


class AthleteActivityLevelDaily(SQLModel, table=True):
    """Une entrée par athlete et par jour, recalculee a chaque run."""
    __tablename__ = "athlete_activity_level_daily"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_activity_level_user_date"),
    )

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    team_id: UUID = Field(index=True)
    date: date_type = Field(index=True)

    avg_load_14d: float = 0.0
    team_p25: Optional[float] = None
    team_p50: Optional[float] = None
    team_p75: Optional[float] = None

    activity_level_system: str = Field(default=ActivityLevel.MODERATE.value)
    activity_level_effective: str = Field(default=ActivityLevel.MODERATE.value)
    effective_source: str = Field(default=LevelSource.COMPUTED.value)
    override_by: Optional[UUID] = None
    override_reason: Optional[str] = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )


class AthleteActivityLevelDailyRead(SQLModel):
    """Schéma pour lire le niveau d'activite (réponse API)."""
    user_id: UUID
    team_id: UUID
    date: date_type
    avg_load_14d: float
    team_p25: Optional[float]
    team_p50: Optional[float]
    team_p75: Optional[float]
    activity_level_system: str
    activity_level_effective: str
    effective_source: str
