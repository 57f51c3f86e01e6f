"""
Redis Module - Upstash Redis client for cart snapshots.

Provides a lazily created async Upstash client plus key and TTL helpers.
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from skinhub import config

_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Raises:
        ValueError: UPSTASH_REDIS_REST_URL / UPSTASH_REDIS_REST_TOKEN not set
    """
    global _redis_client

    if _redis_client is None:
        if not config.redis_configured():
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(
            url=config.UPSTASH_REDIS_REST_URL,
            token=config.UPSTASH_REDIS_REST_TOKEN,
        )

    return _redis_client


class RedisKeys:
    """Redis key builders."""

    @staticmethod
    def cart_key(session_id: str) -> str:
        return f"{config.CART_KEY_PREFIX}:{session_id}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    CART = config.CART_TTL_SECONDS
