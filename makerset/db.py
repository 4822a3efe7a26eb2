"""
Database Module - Upstash Redis Client

Provides the singleton async Upstash Redis client used as the durable
key-value store for persisted carts.
"""

import os
from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from makerset.config import CART_MAX_AGE_DAYS


# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisKeys:
    """Redis key prefixes for persisted cart data."""

    CART = "makerset_cart:"  # makerset_cart:{profile_id}
    CART_TIMESTAMP = "makerset_cart_timestamp:"  # makerset_cart_timestamp:{profile_id}

    @staticmethod
    def cart_key(profile_id: str) -> str:
        return f"{RedisKeys.CART}{profile_id}"

    @staticmethod
    def cart_timestamp_key(profile_id: str) -> str:
        return f"{RedisKeys.CART_TIMESTAMP}{profile_id}"


# TTL constants (in seconds)
class TTL:
    """Time-to-live constants for Redis keys."""

    CART = CART_MAX_AGE_DAYS * 86400  # matches the cart expiry window
