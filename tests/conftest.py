"""Pytest configuration and fixtures"""
import os
import pytest
from decimal import Decimal
from unittest.mock import Mock, AsyncMock

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("MAKERSET_API_URL", "http://testserver/api")

from makerset.cart.service import CartStore
from makerset.cart.storage import CartStorage

# 2026-01-01T00:00:00Z in epoch ms
START_MS = 1767225600000


class FakeRedis:
    """In-memory stand-in for the async Upstash client (get/set/delete only)."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                self.ttls.pop(key, None)
                removed += 1
        return removed


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def auth_state():
    """Mutable sign-in flag read by the store."""
    return {"authenticated": True}


@pytest.fixture
def mock_api():
    """Mock MakerSet API client"""
    api = Mock()
    api.is_authenticated = True
    api.get_set = AsyncMock()
    api.reserve_stock = AsyncMock(return_value={"reserved": True})
    api.release_reservations = AsyncMock(return_value={"released": True})
    api.validate_stock = AsyncMock()
    api.get_setting = AsyncMock(return_value={"setting": {"setting_value": "15"}})
    api.create_order = AsyncMock(return_value={"order_id": 101})
    api.close = AsyncMock()
    return api


@pytest.fixture
def make_store(mock_api, fake_redis, clock, auth_state):
    """Factory building an initialized CartStore over the fakes."""

    async def _make(shipping_cost=Decimal("15"), profile_id="profile-1"):
        store = CartStore(
            mock_api,
            CartStorage(profile_id, redis=fake_redis),
            is_authenticated=lambda: auth_state["authenticated"],
            shipping_cost=shipping_cost,
            clock=clock,
        )
        return await store.init()

    return _make


@pytest.fixture
def make_set():
    """Factory for catalog set payloads as the sets API returns them."""

    def _make(set_id=1, provider_id=5, price="10.00", parts=None, **extra):
        data = {
            "set_id": set_id,
            "name": f"Robot Kit {set_id}",
            "description": "Build a line-following robot",
            "category": "Robotics",
            "difficulty_level": "beginner",
            "recommended_age_min": 8,
            "recommended_age_max": 14,
            "estimated_duration_minutes": 90,
            "base_price": price,
            "media": [{"file_url": f"/uploads/set-{set_id}.jpg"}],
            "parts": parts if parts is not None else [
                {"part_id": 11, "part_name": "Motor", "part_number": "M-1", "is_optional": False},
                {"part_id": 12, "part_name": "Sticker", "part_number": "S-1", "is_optional": True},
            ],
            "provider_id": provider_id,
            "provider_code": f"PRV{provider_id}" if provider_id is not None else None,
            "provider_company": f"Provider {provider_id} GmbH" if provider_id is not None else None,
        }
        data.update(extra)
        return data

    return _make


@pytest.fixture
def sample_validation_ok():
    return {
        "valid": True,
        "results": [{"set_id": 1, "valid": True, "parts_configured": True}],
        "summary": {"total_items": 1, "valid_items": 1, "invalid_items": 0},
    }
