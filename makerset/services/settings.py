"""Shipping & handling cost lookup from system settings."""
from decimal import Decimal

import httpx

from makerset.config import (
    DEFAULT_SHIPPING_COST,
    MAKERSET_SETTINGS_TIMEOUT,
    SHIPPING_COST_SETTING_KEY,
)
from makerset.logging import get_logger
from makerset.services.money import parse_decimal

logger = get_logger(__name__)


def _extract_setting_value(data) -> object:
    """Pull the raw value out of either settings response shape."""
    if not isinstance(data, dict):
        return None
    setting = data.get("setting")
    if isinstance(setting, dict) and setting.get("setting_value") not in (None, ""):
        return setting["setting_value"]
    return data.get("value")


async def get_shipping_handling_cost(
    api,
    default: Decimal = DEFAULT_SHIPPING_COST,
    timeout: float = MAKERSET_SETTINGS_TIMEOUT,
) -> Decimal:
    """
    Load the per-order handling cost.

    Falls back to ``default`` if the lookup fails, times out, or the
    value is missing, malformed or negative.
    """
    try:
        data = await api.get_setting(SHIPPING_COST_SETTING_KEY, timeout=timeout)
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to load shipping cost, using default {default}: {e}")
        return default

    cost = parse_decimal(_extract_setting_value(data))
    if cost is None or cost < 0:
        logger.warning(f"Malformed shipping cost setting, using default {default}")
        return default

    logger.info(f"Loaded shipping cost from settings: {cost}")
    return cost
