"""
Entité User - Domain Layer
Profil utilisateur tel que publie par le service d'equipes (lecture seule ici).
"""
from sqlmodel import SQLModel, Field, DateTime
from typing import Optional
from datetime import datetime, timezone
from uuid import UUID, uuid4
from enum import Enum


class UserRole(str, Enum):
    """Roles d'un membre d'organisation"""
    ATHLETE = "athlete"
    COACH = "coach"
    ADMIN = "admin"


class User(SQLModel, table=True):
    """Membre d'une organisation, rattache (ou non) a une equipe"""
    __tablename__ = "users"

    id: Optional[UUID] = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    full_name: str = ""
    role: str = Field(default=UserRole.ATHLETE.value, index=True)
    team_id: Optional[UUID] = Field(default=None, index=True)
    height_cm: Optional[float] = None
    is_active: bool = Field(default=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )


class UserRead(SQLModel):
    """Schéma pour lire un utilisateur (réponse API)"""
    id: UUID
    email: str
    full_name: str
    role: str
    team_id: Optional[UUID]
    height_cm: Optional[float]
