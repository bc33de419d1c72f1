"""
Configuration centralisee pour l'API TeamFuel
Utilise pydantic-settings pour la gestion des variables d'environnement
"""
from pydantic_settings import BaseSettings
from pydantic import Field, model_validator
from typing import List


class Settings(BaseSettings):
    """Configuration de l'application"""

    # Database
    DATABASE_URL: str = Field(
        description="URL de la base de données (PostgreSQL en production)"
    )

    # JWT Configuration (tokens emis par le service d'authentification)
    JWT_SECRET_KEY: str = Field(
        description="Clé secrète pour vérifier les JWT (obligatoire, pas de valeur par défaut)"
    )
    JWT_ALGORITHM: str = Field(default="HS256")

    # Recalcul quotidien
    RECALC_ADMIN_SECRET: str = Field(
        default="",
        description="Secret operateur attendu dans le header x-admin-secret (vide = desactive)"
    )
    RECALC_TIMEZONE: str = Field(
        default="Asia/Tokyo",
        description="Calendrier civil utilise pour determiner 'hier' et les dates persistees"
    )
    RECALC_DEFAULT_BACKFILL_DAYS: int = Field(default=30, ge=1)
    RECALC_MAX_BACKFILL_DAYS: int = Field(
        default=366,
        ge=1,
        description="Fenetre maximale de recalcul, les demandes plus longues sont tronquees"
    )
    RECALC_CHUNK_SIZE: int = Field(default=500, ge=1)
    RECALC_PARALLEL_LOADS: bool = Field(
        default=True,
        description="Charge roster, charges et compositions corporelles en parallele"
    )
    RECALC_RATE_LIMIT: str = Field(default="6/minute")

    # Verrou de run (optionnel)
    REDIS_URL: str = Field(
        default="redis://localhost:6379",
        description="URL de connexion Redis (utilisee par le verrou de recalcul)"
    )
    RECALC_RUN_LOCK_ENABLED: bool = Field(default=False)
    RECALC_RUN_LOCK_TTL_SECONDS: int = Field(default=900, ge=1)

    # URLs de l'application
    FRONTEND_URL: str = Field(
        default="http://localhost:3000",
        description="URL du frontend (CORS)"
    )

    # CORS
    ALLOWED_ORIGINS: List[str] = Field(
        default=[],
        description="Origines autorisées pour CORS (configuré automatiquement selon ENVIRONMENT si vide)"
    )

    # Monitoring (Sentry)
    SENTRY_DSN: str = Field(
        default="",
        description="DSN Sentry pour le error tracking (vide = Sentry desactive)"
    )

    # Application
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")
    LOG_LEVEL: str = Field(
        default="",
        description="Niveau de logging (auto-configuré selon ENVIRONMENT si vide)"
    )

    @model_validator(mode="after")
    def _configure_environment(self) -> "Settings":
        """Configure DEBUG et LOG_LEVEL selon ENVIRONMENT."""
        is_prod = self.ENVIRONMENT == "production"
        # En production, forcer DEBUG=False
        if is_prod:
            self.DEBUG = False
        if not self.LOG_LEVEL:
            self.LOG_LEVEL = "WARNING" if is_prod else "INFO"
        return self

    @model_validator(mode="after")
    def _set_default_origins(self) -> "Settings":
        """Définit les origines CORS par défaut selon ENVIRONMENT si non configurées."""
        if not self.ALLOWED_ORIGINS:
            if self.ENVIRONMENT == "production":
                self.ALLOWED_ORIGINS = []
            else:
                self.ALLOWED_ORIGINS = [
                    "http://localhost:3000",
                    "http://127.0.0.1:3000",
                    "http://localhost:5173",
                ]
        # Toujours inclure FRONTEND_URL dans les origines autorisees
        frontend = self.FRONTEND_URL.rstrip("/")
        if frontend and frontend not in self.ALLOWED_ORIGINS:
            self.ALLOWED_ORIGINS.append(frontend)
        return self

    class Config:
        env_file = ".env"
        case_sensitive = True


def get_settings() -> Settings:
    """Récupère la configuration"""
    return Settings()
