"""
Entité TrainingRecord - Domain Layer
Charge d'entrainement journaliere saisie par l'athlete (intensite x duree).
"""
from sqlmodel import SQLModel, Field, DateTime
from typing import Optional
from uuid import UUID, uuid4
from datetime import date as date_type, datetime, timezone


class TrainingRecord(SQLModel, table=True):
    """Une seance (ou le cumul d'une journee) d'entrainement."""
    __tablename__ = "training_records"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    date: date_type = Field(index=True)

    duration_min: Optional[float] = None
    rpe: Optional[float] = None
    load: Optional[float] = None  # sRPE = rpe * duration_min

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
