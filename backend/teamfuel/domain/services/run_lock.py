"""
RecalcRunLock : verrou consultatif Redis pour un run de recalcul.

Sans verrou, deux runs qui se chevauchent reecrivent les memes cles : le
resultat reste deterministe a donnees sources identiques, mais reflete la
lecture la plus tardive si les sources changent en cours de route. Active via
RECALC_RUN_LOCK_ENABLED, le verrou refuse un second run concurrent.
"""
import logging
from contextlib import contextmanager
from typing import Iterator
from uuid import uuid4

import redis

from teamfuel.core.redis import get_redis_client

logger = logging.getLogger(__name__)

LOCK_KEY = "teamfuel:recalc:lock"


class RecalcAlreadyRunning(Exception):
    """Un autre run de recalcul detient le verrou."""


class RecalcRunLock:
    """Verrou SET NX EX, libere uniquement par son detenteur."""

    def __init__(self, redis_client: redis.Redis | None = None, ttl_seconds: int = 900):
        self._redis: redis.Redis | None = redis_client
        self.ttl_seconds = ttl_seconds

    def _get_redis(self) -> redis.Redis:
        """Retourne le client Redis (lazy init)."""
        if self._redis is None:
            self._redis = get_redis_client()
        return self._redis

    def acquire(self) -> str | None:
        """Pose le verrou. Retourne le jeton, None s'il est deja pris, "" si Redis est indisponible."""
        token = uuid4().hex
        try:
            acquired = self._get_redis().set(LOCK_KEY, token, nx=True, ex=self.ttl_seconds)
        except redis.RedisError as exc:
            logger.warning(f"Verrou de recalcul indisponible, run sans verrou: {exc}")
            return ""
        return token if acquired else None

    def release(self, token: str) -> None:
        if not token:
            return
        try:
            client = self._get_redis()
            if client.get(LOCK_KEY) == token:
                client.delete(LOCK_KEY)
        except redis.RedisError as exc:
            logger.warning(f"Liberation du verrou impossible (expiration dans {self.ttl_seconds}s): {exc}")

    @contextmanager
    def hold(self) -> Iterator[None]:
        token = self.acquire()
        if token is None:
            raise RecalcAlreadyRunning("Un recalcul est deja en cours")
        try:
            yield
        finally:
            self.release(token)
