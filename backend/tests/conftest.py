"""
Configuration pytest et fixtures partagees.

Les variables d'environnement obligatoires sont posees avant tout import de
l'application (settings, engine et JWTManager sont instancies a l'import).
"""
import os
import tempfile
from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

_TMP_DIR = tempfile.mkdtemp(prefix="teamfuel-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'app.db')}"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["RECALC_ADMIN_SECRET"] = "operator-secret"
os.environ["RECALC_RATE_LIMIT"] = "1000/minute"
os.environ["RECALC_RUN_LOCK_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
from sqlmodel import Session, SQLModel, create_engine

import teamfuel.domain.entities  # noqa: F401
from teamfuel.core.settings import get_settings
from teamfuel.domain.entities import InbodyRecord, TrainingRecord, User


@pytest.fixture
def db_engine(tmp_path):
    """Base SQLite fichier dediee au test (partageable entre threads de chargement)."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'recalc.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return lambda: Session(db_engine)


@pytest.fixture
def session(db_engine):
    with Session(db_engine) as s:
        yield s


@pytest.fixture
def settings():
    return get_settings().model_copy(update={
        "RECALC_TIMEZONE": "Asia/Tokyo",
        "RECALC_CHUNK_SIZE": 500,
        "RECALC_PARALLEL_LOADS": True,
        "RECALC_RUN_LOCK_ENABLED": False,
    })


def add_athlete(
    session: Session,
    team_id: Optional[UUID],
    height_cm: Optional[float] = None,
    role: str = "athlete",
    is_active: bool = True,
) -> User:
    user = User(
        email=f"{uuid4().hex[:12]}@example.com",
        full_name="Athlete",
        role=role,
        team_id=team_id,
        height_cm=height_cm,
        is_active=is_active,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def add_load(session: Session, user_id: UUID, day: date, load: Optional[float]) -> None:
    session.add(TrainingRecord(user_id=user_id, date=day, load=load))
    session.commit()


def add_inbody(
    session: Session,
    user_id: UUID,
    measured_at: date,
    weight: Optional[float] = None,
    height: Optional[float] = None,
    body_fat_percent: Optional[float] = None,
    measured_at_ts: Optional[datetime] = None,
) -> None:
    session.add(InbodyRecord(
        user_id=user_id,
        measured_at=measured_at,
        measured_at_ts=measured_at_ts,
        weight=weight,
        height=height,
        body_fat_percent=body_fat_percent,
    ))
    session.commit()
