"""Cart store: single-provider cart state with Redis persistence."""
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, List, Mapping, Optional, Union

import httpx

from makerset.config import CART_MAX_AGE_MS, MAKERSET_API_URL
from makerset.errors import (
    LoginRequiredError,
    NoRequiredPartsError,
    PartsNotConfiguredError,
    ProviderConflictError,
    StockValidationError,
)
from makerset.logging import get_logger, sanitize_string_for_logging
from makerset.models import CatalogSet, StockValidationResponse
from makerset.services.api import MakerSetApi
from makerset.services.money import add, to_decimal
from makerset.services.settings import get_shipping_handling_cost
from .models import (
    CartItem,
    HANDLING_FEE_SET_ID,
    has_single_provider,
    regular_items,
    with_handling_fee,
)
from .providers import provider_name_for
from .reservation import StockReservations
from .storage import CartStorage, CorruptedCartError, decode_items, now_ms

logger = get_logger(__name__)


@dataclass(frozen=True)
class ShippingInfo:
    cost: Decimal
    provider_count: int
    description: str


@dataclass(frozen=True)
class CurrentProvider:
    provider_id: Optional[int]
    provider_name: str


class CartStore:
    """
    Shopping cart for one browser profile.

    Features:
    - One provider per cart; sets from another provider are rejected
    - Handling-fee line derived from the shipping cost setting
    - Persisted to Redis after every change, expires after 7 days
    - Optimistic stock reservation, authoritative validation at checkout

    All mutations are expected to run on a single event loop. Every
    precondition is checked before state changes, so a rejected call
    leaves the cart untouched.
    """

    def __init__(
        self,
        api: MakerSetApi,
        storage: CartStorage,
        is_authenticated: Optional[Callable[[], bool]] = None,
        shipping_cost: Optional[Decimal] = None,
        clock: Callable[[], int] = now_ms,
        owns_api: bool = False,
    ):
        """
        Args:
            api: Backend client for sets, reservations, validation and settings
            storage: Durable storage of this profile's cart
            is_authenticated: Returns True if a user is signed in
                (defaults to the API client having a token)
            shipping_cost: Fixed handling cost; looked up from settings on init() if None
            clock: Current time in epoch milliseconds
            owns_api: Close the API client on dispose()
        """
        self.api = api
        self.storage = storage
        self._is_authenticated = is_authenticated or (lambda: api.is_authenticated)
        self._clock = clock
        self._owns_api = owns_api
        self._reservations = StockReservations(api)

        self._items: List[CartItem] = []
        self._discount = Decimal("0")
        self._discount_code: Optional[str] = None
        self._shipping_cost: Optional[Decimal] = (
            to_decimal(shipping_cost) if shipping_cost is not None else None
        )
        self._initialized = False
        self._disposed = False

    # ==================== Lifecycle ====================

    async def init(self) -> "CartStore":
        """Load the shipping cost once and rehydrate the persisted cart."""
        if self._initialized:
            return self
        if self._shipping_cost is None:
            self._shipping_cost = await get_shipping_handling_cost(self.api)
        await self._rehydrate()
        self._initialized = True
        return self

    async def dispose(self) -> None:
        """Detach the store; in-flight adds finishing later are discarded."""
        self._disposed = True
        if self._owns_api:
            await self.api.close()

    async def _rehydrate(self) -> None:
        try:
            stored = await self.storage.load()
        except CorruptedCartError as e:
            logger.warning(f"Corrupted cart timestamp for profile {self.storage.profile_id}: {e}")
            await self._erase()
            return
        except Exception as e:
            logger.error(f"Failed to load cart from Redis, starting empty: {e}")
            return

        if stored is None:
            return

        if self._clock() - stored.saved_at >= CART_MAX_AGE_MS:
            logger.info(f"Cart for profile {self.storage.profile_id} expired, discarding")
            await self._erase()
            return

        try:
            items = decode_items(stored.blob)
        except CorruptedCartError as e:
            logger.warning(f"Corrupted cart data for profile {self.storage.profile_id}: {e}")
            await self._erase()
            return

        if not has_single_provider(items):
            logger.warning("Cart contains items from different providers, clearing cart")
            await self._erase()
            return

        self._items = with_handling_fee(items, self.shipping_cost)

    async def _persist(self) -> None:
        try:
            await self.storage.save(self._items, self._clock())
        except Exception as e:
            logger.error(f"Failed to save cart to Redis: {e}")

    async def _erase(self) -> None:
        try:
            await self.storage.clear()
        except Exception as e:
            logger.error(f"Failed to clear cart from Redis: {e}")

    # ==================== State ====================

    @property
    def items(self) -> List[CartItem]:
        return list(self._items)

    @property
    def discount(self) -> Decimal:
        return self._discount

    @property
    def discount_code(self) -> Optional[str]:
        return self._discount_code

    @property
    def shipping_cost(self) -> Decimal:
        return self._shipping_cost if self._shipping_cost is not None else Decimal("0")

    # ==================== Mutations ====================

    async def add_to_cart(
        self,
        catalog_set: Union[CatalogSet, Mapping],
        quantity: int = 1,
    ) -> Optional[CartItem]:
        """
        Add a set to the cart, merging with an existing line for the same set.

        Returns the resulting cart line, or None if the store was disposed
        while the call was in flight.

        Raises:
            LoginRequiredError: No user is signed in
            ValueError: quantity is not a positive integer, or the set uses the reserved handling-fee id
            PartsNotConfiguredError: The set has no parts
            NoRequiredPartsError: All parts of the set are optional
            ProviderConflictError: The cart holds sets from another provider
        """
        if not self._is_authenticated():
            raise LoginRequiredError()
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError("quantity must be a positive integer")

        if not isinstance(catalog_set, CatalogSet):
            catalog_set = CatalogSet.model_validate(catalog_set)
        if catalog_set.set_id == HANDLING_FEE_SET_ID:
            raise ValueError(f"set_id {HANDLING_FEE_SET_ID} is reserved for the handling fee")

        if not catalog_set.parts:
            catalog_set = await self._with_parts(catalog_set)

        await self._reservations.try_reserve(catalog_set.set_id, quantity)

        if self._disposed:
            logger.info(f"Cart disposed, discarding add of set {catalog_set.set_id}")
            return None

        if not catalog_set.parts:
            raise PartsNotConfiguredError()
        if not any(part.required for part in catalog_set.parts):
            raise NoRequiredPartsError()
        self._check_provider(catalog_set)

        existing = self.get_cart_item(catalog_set.set_id)
        if existing:
            merged = replace(existing, quantity=existing.quantity + quantity)
            items = [merged if item.set_id == merged.set_id else item for item in self._items]
        else:
            items = self._items + [CartItem.from_set(catalog_set, quantity)]

        self._items = with_handling_fee(items, self.shipping_cost)
        logger.info(
            f"Added set {catalog_set.set_id} "
            f"({sanitize_string_for_logging(catalog_set.name)}) x{quantity} to cart"
        )
        await self._persist()
        return self.get_cart_item(catalog_set.set_id)

    async def _with_parts(self, catalog_set: CatalogSet) -> CatalogSet:
        """Backfill the parts list from the full set detail."""
        try:
            full_set = await self.api.get_set(catalog_set.set_id)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch parts for set {catalog_set.set_id}: {e}")
            return catalog_set

        if not full_set.parts:
            return catalog_set
        return catalog_set.model_copy(update={"parts": full_set.parts})

    def _check_provider(self, catalog_set: CatalogSet) -> None:
        regular = regular_items(self._items)
        if not regular:
            return
        if regular[0].provider_id != catalog_set.provider_id:
            existing_name = provider_name_for(regular[0])
            incoming_name = provider_name_for(catalog_set)
            logger.info(
                f"Provider restriction violated: cart has {regular[0].provider_id}, "
                f"got {catalog_set.provider_id}"
            )
            raise ProviderConflictError(existing_name, incoming_name)

    async def remove_from_cart(self, set_id: int) -> None:
        """Remove a set from the cart. Unknown ids and the handling fee are ignored."""
        if set_id == HANDLING_FEE_SET_ID or not self.is_in_cart(set_id):
            return
        items = [item for item in self._items if item.set_id != set_id]
        self._items = with_handling_fee(items, self.shipping_cost)
        await self._persist()

    async def update_quantity(self, set_id: int, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError("quantity must be an integer")
        if quantity <= 0:
            await self.remove_from_cart(set_id)
            return
        if set_id == HANDLING_FEE_SET_ID or not self.is_in_cart(set_id):
            return

        items = [
            replace(item, quantity=quantity) if item.set_id == set_id else item
            for item in self._items
        ]
        self._items = with_handling_fee(items, self.shipping_cost)
        await self._persist()

    async def clear_cart(self) -> None:
        """
        Empty the cart and erase it from storage.

        Reservations are released first when a user is signed in. The
        discount is kept; only remove_discount() clears it.
        """
        if self._is_authenticated():
            await self._reservations.release_all()
        self._items = []
        await self._erase()

    async def clear_expired_cart(self) -> bool:
        """Clear the cart if its stored timestamp is past the max age. Returns True if cleared."""
        try:
            saved_at = await self.storage.read_timestamp()
        except Exception as e:
            logger.error(f"Error checking cart expiration: {e}")
            return False

        if saved_at is None or self._clock() - saved_at < CART_MAX_AGE_MS:
            return False

        logger.info(f"Cart for profile {self.storage.profile_id} expired, clearing")
        await self.clear_cart()
        return True

    def apply_discount(self, code: str, amount) -> None:
        self._discount = to_decimal(amount)
        self._discount_code = code

    def remove_discount(self) -> None:
        self._discount = Decimal("0")
        self._discount_code = None

    # ==================== Queries ====================

    def get_total_items(self) -> int:
        """Total units in the cart, handling fee included."""
        return sum(item.quantity for item in self._items)

    def get_total_price(self) -> Decimal:
        """Sum of line totals, handling fee included."""
        total = Decimal("0")
        for item in self._items:
            total = add(total, item.total_price)
        return total

    def is_in_cart(self, set_id: int) -> bool:
        return any(item.set_id == set_id for item in self._items)

    def get_cart_item(self, set_id: int) -> Optional[CartItem]:
        return next((item for item in self._items if item.set_id == set_id), None)

    def get_shipping_info(self) -> ShippingInfo:
        if not regular_items(self._items):
            return ShippingInfo(cost=Decimal("0"), provider_count=0, description="No items in cart")
        return ShippingInfo(
            cost=self.shipping_cost,
            provider_count=1,
            description="Single shipment from one provider",
        )

    def get_current_provider(self) -> Optional[CurrentProvider]:
        regular = regular_items(self._items)
        if not regular:
            return None
        first = regular[0]
        return CurrentProvider(provider_id=first.provider_id, provider_name=provider_name_for(first))

    async def validate_stock(self) -> StockValidationResponse:
        """
        Check stock for every set in the cart against the server.

        Raises:
            StockValidationError: The server could not be reached or
                returned an unusable response
        """
        regular = regular_items(self._items)
        if not regular:
            return StockValidationResponse.empty()

        payload = [{"set_id": item.set_id, "quantity": item.quantity} for item in regular]
        try:
            return await self.api.validate_stock(payload)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error validating stock: {e}")
            raise StockValidationError() from e


async def create_cart_store(
    profile_id: str,
    token: Optional[str] = None,
    base_url: str = MAKERSET_API_URL,
    redis=None,
) -> CartStore:
    """Build the API client, storage and store for one profile and initialize it."""
    api = MakerSetApi(base_url=base_url, token=token)
    storage = CartStorage(profile_id, redis=redis)
    store = CartStore(api, storage, owns_api=True)
    return await store.init()
