"""
Entité InbodyRecord - Domain Layer
Mesure de composition corporelle (impedancemetrie InBody ou saisie manuelle).
"""
from sqlmodel import SQLModel, Field, DateTime
from typing import Optional
from uuid import UUID, uuid4
from datetime import date as date_type, datetime, timezone


class InbodyRecord(SQLModel, table=True):
    """Mesure de composition corporelle, plusieurs lignes historiques par utilisateur."""
    __tablename__ = "inbody_records"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    measured_at: date_type = Field(index=True)
    measured_at_ts: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    height: Optional[float] = None  # cm
    weight: Optional[float] = None  # kg
    body_fat_percent: Optional[float] = None  # 0-100

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
