"""
Verification des tokens d'acces emis par le service d'authentification
"""
from uuid import UUID

from fastapi import HTTPException, status
from jose import JWTError, jwt

from teamfuel.core.settings import get_settings

# Claims sans lesquels un token est refuse
REQUIRED_CLAIMS = {"require_exp": True, "require_sub": True}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class JWTManager:
    """Lecture seule : TeamFuel ne fait que verifier les tokens d'acces."""

    def __init__(self):
        settings = get_settings()
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM

    def verify_access_token(self, token: str) -> UUID:
        """Decode le token et retourne l'identifiant de l'utilisateur (claim sub)."""
        try:
            payload = jwt.decode(
                token, self.secret_key, algorithms=[self.algorithm], options=REQUIRED_CLAIMS
            )
        except JWTError:
            raise _unauthorized("Could not validate credentials")

        if payload.get("type") != "access":
            raise _unauthorized("Invalid token type. Expected access")
        if not payload.get("email"):
            raise _unauthorized("Invalid token payload")

        try:
            return UUID(str(payload["sub"]))
        except ValueError:
            raise _unauthorized("Invalid token subject")


# Instance globale
jwt_manager = JWTManager()


def get_current_user_id(token: str) -> UUID:
    """Identifiant de l'utilisateur porte par le token (pour dependency injection)"""
    return jwt_manager.verify_access_token(token)
