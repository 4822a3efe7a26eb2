"""
MakerSet client configuration.

Values are read from the environment once, at import time.
"""

import os
from decimal import Decimal

# REST backend
MAKERSET_API_URL = os.environ.get("MAKERSET_API_URL", "http://localhost:5001/api")
MAKERSET_API_TIMEOUT = float(os.environ.get("MAKERSET_API_TIMEOUT", "10"))
MAKERSET_SETTINGS_TIMEOUT = float(os.environ.get("MAKERSET_SETTINGS_TIMEOUT", "5"))

# Cart policy
CART_MAX_AGE_DAYS = 7
CART_MAX_AGE_MS = CART_MAX_AGE_DAYS * 24 * 60 * 60 * 1000

# Used when the shipping_handling_cost setting cannot be loaded
DEFAULT_SHIPPING_COST = Decimal("15")
SHIPPING_COST_SETTING_KEY = "shipping_handling_cost"

# Display name for sets sold by the platform itself (provider_id is None)
PLATFORM_PROVIDER_NAME = "MakerSet Platform"
UNKNOWN_PROVIDER_NAME = "Unknown Provider"
