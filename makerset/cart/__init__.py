"""Cart package: models, storage, store and checkout."""
from .models import CartItem, HANDLING_FEE_SET_ID, build_handling_fee_item
from .providers import resolve_provider_name
from .reservation import ReservationResult, StockReservations
from .storage import CartStorage
from .service import CartStore, CurrentProvider, ShippingInfo, create_cart_store
from .checkout import CustomerInfo, build_order_payload, describe_stock_issues, place_order

__all__ = [
    "CartItem",
    "HANDLING_FEE_SET_ID",
    "build_handling_fee_item",
    "resolve_provider_name",
    "ReservationResult",
    "StockReservations",
    "CartStorage",
    "CartStore",
    "CurrentProvider",
    "ShippingInfo",
    "create_cart_store",
    "CustomerInfo",
    "build_order_payload",
    "describe_stock_issues",
    "place_order",
]
