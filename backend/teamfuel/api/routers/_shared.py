"""
Utilitaires partages entre les routers API.
"""
import hmac
import logging
from fastapi import Request, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from slowapi import Limiter
from slowapi.util import get_remote_address
from jose import JWTError, jwt as jose_jwt

from teamfuel.auth.jwt import get_current_user_id
from teamfuel.core.settings import get_settings

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)

ADMIN_SECRET_HEADER = "x-admin-secret"


async def security(request: Request) -> HTTPAuthorizationCredentials:
    """Extrait le JWT depuis le header Bearer ou le cookie access_token."""
    # 1. Essayer le header Authorization: Bearer <token>
    creds = await _bearer_scheme(request)
    if creds:
        return creds

    # 2. Fallback sur le cookie httpOnly
    token = request.cookies.get("access_token")
    if token:
        return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def recalc_caller(request: Request) -> str:
    """Autorise un recalcul : JWT de session transmis, ou secret operateur (cron).

    Retourne l'identite de l'appelant pour les logs.
    """
    expected = get_settings().RECALC_ADMIN_SECRET
    provided = request.headers.get(ADMIN_SECRET_HEADER, "")
    if expected and provided and hmac.compare_digest(provided, expected):
        return "operator"

    creds = await _bearer_scheme(request)
    if creds:
        return f"user:{get_current_user_id(creds.credentials)}"

    logger.warning(f"Recalcul refuse: pas de credentials valides ({get_remote_address(request)})")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_token_from_request(request: Request) -> str | None:
    """Extrait le JWT brut depuis header ou cookie (pour le rate limiter)."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:]
    return request.cookies.get("access_token")


def _get_user_or_ip(request: Request) -> str:
    """Key function pour le rate limiter : retourne le user_id JWT si present, sinon l'IP."""
    token = _extract_token_from_request(request)
    if token:
        try:
            settings = get_settings()
            payload = jose_jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
            user_id = payload.get("sub")
            if user_id:
                return f"user:{user_id}"
        except JWTError:
            pass
    return get_remote_address(request)


limiter = Limiter(key_func=_get_user_or_ip, default_limits=["100/minute"], headers_enabled=True)
