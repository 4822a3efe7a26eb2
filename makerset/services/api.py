"""
MakerSet API Client

HTTP client for the MakerSet REST backend endpoints the cart consumes:
sets, stock reservation, stock validation, settings and orders.
"""

from typing import Any, Optional

import httpx

from makerset.config import MAKERSET_API_URL, MAKERSET_API_TIMEOUT
from makerset.logging import get_logger, sanitize_string_for_logging
from makerset.models import CatalogSet, StockValidationResponse

logger = get_logger(__name__)


def normalize_api_base_url(url: Optional[str]) -> str:
    """
    Normalize a public URL into an API base URL.

    Trailing slashes are stripped and "/api" is appended unless already
    present. Blank input falls back to MAKERSET_API_URL.
    """
    base = (url or "").strip().rstrip("/")
    if not base:
        return MAKERSET_API_URL.rstrip("/")
    return base if base.endswith("/api") else f"{base}/api"


class MakerSetApi:
    """
    Client for the MakerSet REST backend.

    Authenticated requests carry the user's bearer token.
    """

    def __init__(
        self,
        base_url: Optional[str] = MAKERSET_API_URL,
        token: Optional[str] = None,
        timeout: float = MAKERSET_API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: Public or API base URL; normalized to end in /api
            token: Bearer token of the signed-in user, if any
            timeout: Default request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = normalize_api_base_url(base_url)
        self.token = token
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def is_authenticated(self) -> bool:
        """True if a user token is set."""
        return bool(self.token)

    def set_token(self, token: Optional[str]) -> None:
        """Set or clear the bearer token after sign-in/sign-out."""
        self.token = token

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body."""
        url = f"{self.base_url}{path}"
        kwargs: dict[str, Any] = {"headers": self._headers()}
        if body is not None:
            kwargs["json"] = body
        if timeout is not None:
            kwargs["timeout"] = timeout

        response = await self._http_client.request(method, url, **kwargs)

        if response.status_code >= 400:
            logger.error(
                f"Request failed: {method} {path} -> {response.status_code} - "
                f"{sanitize_string_for_logging(response.text, 200)}"
            )
            response.raise_for_status()

        if not response.content:
            return {}
        return response.json()

    # ==================== Sets ====================

    async def get_set(self, set_id: int) -> CatalogSet:
        """Get full set details, including parts."""
        data = await self._request("GET", f"/sets/{set_id}")
        if isinstance(data, dict) and isinstance(data.get("set"), dict):
            data = data["set"]
        return CatalogSet.model_validate(data)

    async def validate_stock(self, items: list[dict]) -> StockValidationResponse:
        """
        Validate stock for cart lines.

        Args:
            items: [{"set_id": int, "quantity": int}, ...]
        """
        data = await self._request("POST", "/sets/validate-stock", body={"sets": items})
        return StockValidationResponse.model_validate(data)

    # ==================== Cart reservations ====================

    async def reserve_stock(self, set_id: int, quantity: int) -> dict:
        """Place a time-bounded hold on stock for a set."""
        return await self._request(
            "POST",
            "/cart/reserve",
            body={"set_id": set_id, "quantity": quantity},
        )

    async def release_reservations(self) -> dict:
        """Release every reservation held by the current user."""
        return await self._request("DELETE", "/cart/reservations")

    # ==================== Settings ====================

    async def get_setting(self, key: str, timeout: Optional[float] = None) -> dict:
        """Get a public system setting."""
        return await self._request("GET", f"/settings/{key}", timeout=timeout)

    # ==================== Orders ====================

    async def create_order(self, payload: dict) -> dict:
        """Place an order."""
        return await self._request("POST", "/orders", body=payload)
