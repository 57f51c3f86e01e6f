"""Cart snapshot persistence in Upstash Redis."""
import json
from typing import Optional

from skinhub.db import get_redis, RedisKeys, TTL
from skinhub.errors import ERROR_STORAGE_UNAVAILABLE
from skinhub.logging import get_logger, sanitize_for_logging
from .service import CartManager, RestoreResult

logger = get_logger(__name__)


class CartStorageError(RuntimeError):
    """Redis could not be reached or rejected the request."""


class CartStore:
    """
    Saves and loads serialized carts per session.

    The engine never touches Redis itself; routers call save() after a
    mutation and load() when a session is first seen in this process.
    """

    def __init__(self, redis=None, ttl: int = TTL.CART):
        self._redis = redis  # Lazy initialization
        self.ttl = ttl

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    async def load(self, session_id: str, manager: Optional[CartManager] = None) -> tuple[CartManager, RestoreResult]:
        """
        Restore a session's cart into `manager` (or a new one).

        A missing key yields an empty cart. Corrupted JSON is deleted.
        """
        manager = manager if manager is not None else CartManager()
        key = RedisKeys.cart_key(session_id)
        try:
            data = await self.redis.get(key)
        except Exception as e:
            logger.error("Failed to read cart %s: %s", sanitize_for_logging(session_id), e)
            raise CartStorageError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e

        if not data:
            return manager, manager.restore([])

        try:
            snapshot = json.loads(data)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning("Corrupted cart data for session %s: %s", sanitize_for_logging(session_id), e)
            await self.delete(session_id)
            return manager, manager.restore([])

        return manager, manager.restore(snapshot)

    async def save(self, session_id: str, manager: CartManager) -> None:
        """Write the cart snapshot with TTL; an empty cart deletes the key."""
        snapshot = manager.serialize()
        if not snapshot:
            await self.delete(session_id)
            return
        try:
            await self.redis.set(RedisKeys.cart_key(session_id), json.dumps(snapshot), ex=self.ttl)
        except Exception as e:
            logger.error("Failed to save cart %s: %s", sanitize_for_logging(session_id), e)
            raise CartStorageError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e

    async def delete(self, session_id: str) -> None:
        try:
            await self.redis.delete(RedisKeys.cart_key(session_id))
        except Exception as e:
            logger.error("Failed to delete cart %s: %s", sanitize_for_logging(session_id), e)
            raise CartStorageError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e
