"""Tests for the MakerSet API client"""
import json
import httpx
import pytest
from decimal import Decimal

from makerset.services.api import MakerSetApi, normalize_api_base_url


def make_api(handler, token="user-token"):
    return MakerSetApi(
        base_url="http://testserver/api",
        token=token,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_get_set_unwraps_envelope():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"set": {
            "set_id": 4,
            "name": "Weather Station",
            "base_price": "49.90",
            "parts": [{"part_id": 1, "part_number": "T-100", "is_required": 1}],
        }})

    api = make_api(handler)
    catalog_set = await api.get_set(4)
    await api.close()

    assert requests[0].method == "GET"
    assert requests[0].url.path == "/api/sets/4"
    assert requests[0].headers["Authorization"] == "Bearer user-token"
    assert catalog_set.base_price == Decimal("49.90")
    assert catalog_set.parts[0].part_name == "T-100"
    assert catalog_set.parts[0].required


@pytest.mark.asyncio
async def test_validate_stock_posts_sets():
    captured = {}

    def handler(request):
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "valid": False,
            "results": [{
                "set_id": 4,
                "valid": False,
                "parts_configured": True,
                "insufficient_parts": [{
                    "part_id": 1, "part_number": "T-100", "part_name": "Sensor",
                    "required": 3, "available": 1, "shortfall": 2,
                }],
            }],
            "summary": {"total_items": 1, "valid_items": 0, "invalid_items": 1},
        })

    api = make_api(handler)
    response = await api.validate_stock([{"set_id": 4, "quantity": 3}])
    await api.close()

    assert captured["body"] == {"sets": [{"set_id": 4, "quantity": 3}]}
    assert not response.valid
    assert response.results[0].insufficient_parts[0].shortfall == 2
    assert response.summary.invalid_items == 1


@pytest.mark.asyncio
async def test_reservation_endpoints():
    calls = []

    def handler(request):
        calls.append((request.method, request.url.path, request.content))
        if request.method == "POST":
            return httpx.Response(200, json={"reserved": True, "set_id": 4, "quantity": 2})
        return httpx.Response(200, json={"released": True})

    api = make_api(handler)
    await api.reserve_stock(4, 2)
    await api.release_reservations()
    await api.close()

    assert calls[0][:2] == ("POST", "/api/cart/reserve")
    assert json.loads(calls[0][2]) == {"set_id": 4, "quantity": 2}
    assert calls[1][:2] == ("DELETE", "/api/cart/reservations")


@pytest.mark.asyncio
async def test_error_status_raises():
    api = make_api(lambda request: httpx.Response(500, json={"error": "Failed to reserve"}))

    with pytest.raises(httpx.HTTPStatusError):
        await api.reserve_stock(4, 1)
    await api.close()


@pytest.mark.asyncio
async def test_no_auth_header_without_token():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"value": "15"})

    api = make_api(handler, token=None)
    await api.get_setting("shipping_handling_cost")
    await api.close()

    assert seen["auth"] is None
    assert not api.is_authenticated


@pytest.mark.asyncio
async def test_public_url_is_normalized_to_api_base():
    paths = []

    def handler(request):
        paths.append(request.url.path)
        return httpx.Response(200, json={"setting": {"setting_value": "15"}})

    api = MakerSetApi(
        base_url="http://testserver/",
        transport=httpx.MockTransport(handler),
    )
    await api.get_setting("shipping_handling_cost")
    await api.close()

    assert api.base_url == "http://testserver/api"
    assert paths == ["/api/settings/shipping_handling_cost"]


def test_set_token():
    api = MakerSetApi(base_url="http://testserver/api")
    api.set_token("abc")

    assert api.is_authenticated


@pytest.mark.parametrize("url,expected", [
    ("https://shop.example.com", "https://shop.example.com/api"),
    ("https://shop.example.com/", "https://shop.example.com/api"),
    ("https://shop.example.com/api/", "https://shop.example.com/api"),
    ("  ", "http://testserver/api"),
])
def test_normalize_api_base_url(url, expected):
    assert normalize_api_base_url(url) == expected
