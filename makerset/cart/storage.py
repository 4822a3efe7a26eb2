"""Redis persistence for the cart blob and its timestamp."""
import json
import time
from dataclasses import dataclass
from typing import List, Optional

from makerset.db import get_redis, RedisKeys, TTL
from .models import CartItem


class CorruptedCartError(ValueError):
    """Persisted cart data could not be decoded."""


@dataclass
class StoredCart:
    """Raw persisted cart: JSON blob plus save time in epoch milliseconds."""
    blob: str
    saved_at: int


def now_ms() -> int:
    return int(time.time() * 1000)


def encode_items(items: List[CartItem]) -> str:
    return json.dumps([item.to_dict() for item in items])


def decode_items(blob: str) -> List[CartItem]:
    """Parse a persisted blob. Raises CorruptedCartError on any malformed content."""
    try:
        raw_items = json.loads(blob)
        if not isinstance(raw_items, list):
            raise TypeError("cart blob is not a list")
        items = [CartItem.from_dict(raw) for raw in raw_items]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise CorruptedCartError(str(e)) from e

    # Fee rows are re-derived on load, so only regular lines must be unique
    set_ids = [item.set_id for item in items if not item.is_handling_fee]
    if len(set_ids) != len(set(set_ids)):
        raise CorruptedCartError("duplicate set_id in cart blob")
    return items


class CartStorage:
    """
    Durable cart storage for one browser profile.

    Keys expire after the cart max age, so abandoned carts are also
    dropped by Redis itself.
    """

    def __init__(self, profile_id: str, redis=None):
        self.profile_id = profile_id
        self._redis = redis  # Lazy initialization when None

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    @property
    def cart_key(self) -> str:
        return RedisKeys.cart_key(self.profile_id)

    @property
    def timestamp_key(self) -> str:
        return RedisKeys.cart_timestamp_key(self.profile_id)

    async def read_timestamp(self) -> Optional[int]:
        """Saved-at time in epoch ms, or None if nothing is stored."""
        raw = await self.redis.get(self.timestamp_key)
        if raw is None or raw == "":
            return None
        try:
            return int(raw)
        except (TypeError, ValueError) as e:
            raise CorruptedCartError(f"bad cart timestamp: {raw!r}") from e

    async def load(self) -> Optional[StoredCart]:
        """Return the stored blob and timestamp, or None if either is missing."""
        blob = await self.redis.get(self.cart_key)
        saved_at = await self.read_timestamp()
        if not blob or saved_at is None:
            return None
        return StoredCart(blob=blob, saved_at=saved_at)

    async def save(self, items: List[CartItem], saved_at: int) -> None:
        await self.redis.set(self.cart_key, encode_items(items), ex=TTL.CART)
        await self.redis.set(self.timestamp_key, str(saved_at), ex=TTL.CART)

    async def clear(self) -> None:
        await self.redis.delete(self.cart_key, self.timestamp_key)
