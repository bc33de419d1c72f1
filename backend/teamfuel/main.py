"""
Application FastAPI principale pour TeamFuel
Point d'entrée de l'API backend (recalcul quotidien activite / nutrition)
"""
import logging
from logging.handlers import RotatingFileHandler
import sys
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.requests import Request
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
import sentry_sdk

from teamfuel.core.settings import get_settings
from teamfuel.api.routers import router, limiter
from teamfuel.core.database import create_db_and_tables, engine
from teamfuel.core.redis import check_redis_health

settings = get_settings()

# Initialiser Sentry (uniquement si SENTRY_DSN est configure)
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=0.2 if settings.ENVIRONMENT == "production" else 1.0,
        send_default_pii=False,
    )

# Configuration du logging conditionnée par ENVIRONMENT
_log_level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

_handler = logging.StreamHandler(sys.stdout)

if settings.ENVIRONMENT == "production":
    from pythonjsonlogger import jsonlogger
    _handler.setFormatter(jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "level"},
    ))
else:
    _handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))

_handlers: list[logging.Handler] = [_handler]
if settings.ENVIRONMENT not in ("production", "test"):
    _handlers.append(RotatingFileHandler(
        'app.log', maxBytes=5_000_000, backupCount=3,
    ))

logging.basicConfig(
    level=_log_level,
    handlers=_handlers,
)

# En production, réduire le bruit des modules tiers
if settings.ENVIRONMENT == "production":
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestionnaire de cycle de vie de l'application"""
    logger.info("Démarrage de TeamFuel API v1.0.0")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    create_db_and_tables()
    logger.info("Base de données initialisée")

    if settings.RECALC_RUN_LOCK_ENABLED and not check_redis_health():
        logger.warning("Redis non disponible : les recalculs tourneront sans verrou")

    yield

    logger.info("Arrêt de TeamFuel API")

app = FastAPI(
    title="TeamFuel API",
    description="Niveaux d'activite par equipe et cibles nutritionnelles quotidiennes",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    lifespan=lifespan
)

# Rate limiting
app.state.limiter = limiter


async def _custom_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Retourne un 429 propre avec headers Retry-After et X-RateLimit-*."""
    response = JSONResponse(
        status_code=429,
        content={
            "detail": "Trop de requetes",
            "message": f"Rate limit exceeded: {exc.detail}",
        },
    )
    response = request.app.state.limiter._inject_headers(
        response, request.state.view_rate_limit
    )
    return response


app.add_exception_handler(RateLimitExceeded, _custom_rate_limit_handler)

# Configuration CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Inclure les routes
app.include_router(router, prefix="/api/v1")


def _check_database() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as exc:
        logger.warning(f"Database health check échoué: {exc}")
        return False


@app.get("/health")
@limiter.exempt
async def health_check():
    """Point de santé de l'API"""
    db_ok = _check_database()
    services = {"database": "connected" if db_ok else "disconnected"}
    if settings.RECALC_RUN_LOCK_ENABLED:
        services["redis"] = "connected" if check_redis_health() else "disconnected"
    healthy = db_ok and services.get("redis", "connected") == "connected"
    return JSONResponse(
        content={
            "status": "healthy" if healthy else "degraded",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
            "services": services,
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc):
    """Gestionnaire global des exceptions"""
    logger.error(f"Erreur non gérée: {type(exc).__name__}: {str(exc)}", exc_info=True)
    content = {"ok": False, "error": "Erreur interne du serveur"}
    if settings.DEBUG:
        content["type"] = type(exc).__name__
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)

if __name__ == "__main__":
    import uvicorn
    logger.info("Lancement de l'application sur le port 8000")
    uvicorn.run(
        "teamfuel.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
