"""Server-side stock reservation coordination.

Reservations are optimistic: a failed reserve or release is reported
in the result and logged, never raised. Stock is checked authoritatively
by validate-stock at checkout.
"""
from dataclasses import dataclass
from typing import Optional

import httpx

from makerset.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReservationResult:
    """Outcome of a reservation attempt."""
    set_id: int
    quantity: int
    reserved: bool
    error: Optional[str] = None

    @property
    def soft_failed(self) -> bool:
        return not self.reserved


class StockReservations:
    """Reserve and release stock through the cart reservation endpoints."""

    def __init__(self, api):
        self.api = api

    async def try_reserve(self, set_id: int, quantity: int) -> ReservationResult:
        try:
            await self.api.reserve_stock(set_id, quantity)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                f"Stock reservation failed for set {set_id}, continuing without hold: {e}"
            )
            return ReservationResult(set_id=set_id, quantity=quantity, reserved=False, error=str(e))

        logger.info(f"Stock reserved for set {set_id} (qty {quantity})")
        return ReservationResult(set_id=set_id, quantity=quantity, reserved=True)

    async def release_all(self) -> bool:
        """Release every reservation. Safe to call with none outstanding."""
        try:
            await self.api.release_reservations()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error releasing reservations: {e}")
            return False

        logger.info("Released cart reservations")
        return True
