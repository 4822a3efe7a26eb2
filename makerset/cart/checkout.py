"""Checkout: stock re-validation, order payload and placement."""
from typing import List, Optional

from pydantic import BaseModel, field_validator

from makerset.errors import EmptyCartError, StockUnavailableError
from makerset.logging import get_logger
from makerset.models import StockValidationResponse
from makerset.services.money import round_money, to_float
from .models import CartItem, regular_items

logger = get_logger(__name__)


class CustomerInfo(BaseModel):
    """Customer details collected by the checkout form."""
    company_name: str
    customer_first_name: str
    customer_last_name: str
    customer_email: str
    customer_phone: str
    shipping_address: str
    notes: Optional[str] = None

    @field_validator(
        "company_name",
        "customer_first_name",
        "customer_last_name",
        "customer_email",
        "customer_phone",
        "shipping_address",
    )
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


def describe_stock_issues(response: StockValidationResponse, items: List[CartItem]) -> List[str]:
    """One human-readable line per set that failed stock validation."""
    names = {item.set_id: item.set_name for item in items}
    messages = []
    for result in response.results:
        if result.valid:
            continue
        item_name = names.get(result.set_id) or f"Set {result.set_id}"
        if result.parts_configured is False:
            messages.append(f"{item_name}: No parts configured for this set")
        elif result.insufficient_parts:
            details = ", ".join(
                f"{part.part_name} ({part.part_number}): need {part.required}, have {part.available}"
                for part in result.insufficient_parts
            )
            messages.append(f"{item_name}: Insufficient stock - {details}")
        else:
            messages.append(f"{item_name}: {result.error}")
    return messages


def build_order_payload(store, customer: CustomerInfo, customer_id: int) -> dict:
    """Build the POST /orders body from the cart contents."""
    provider = store.get_current_provider()
    items = store.items
    first = next(iter(regular_items(items)), None)

    order_items = [
        {
            "set_id": item.set_id,
            "quantity": item.quantity,
            "unit_price": to_float(item.display_price or item.price or item.unit_price),
            "line_total": to_float(round_money(item.total_price)),
            "provider_set_id": item.provider_set_id,
            "provider_id": item.provider_id,
        }
        for item in items
    ]

    return {
        "customer_id": customer_id,
        "provider_id": provider.provider_id if provider else None,
        "provider_code": first.provider_code if first else None,
        "company_name": customer.company_name,
        "customer_first_name": customer.customer_first_name,
        "customer_last_name": customer.customer_last_name,
        "customer_email": customer.customer_email,
        "customer_phone": customer.customer_phone,
        "shipping_address": customer.shipping_address,
        "billing_address": customer.shipping_address,
        "notes": customer.notes,
        "payment_method": "credit_card",
        "items": order_items,
        "total_amount": to_float(round_money(store.get_total_price())),
        # Customer places order, admin confirms payment
        "status": "pending_payment",
        "set_type": "admin" if provider and provider.provider_id is None else "provider",
    }


async def place_order(store, customer: CustomerInfo, customer_id: int) -> dict:
    """
    Re-validate stock, submit the order and clear the cart.

    Raises:
        EmptyCartError: Nothing to order
        StockValidationError: Stock could not be validated
        StockUnavailableError: At least one set is short on parts
    """
    if not regular_items(store.items):
        raise EmptyCartError()

    validation = await store.validate_stock()
    if not validation.valid:
        issues = describe_stock_issues(validation, store.items)
        logger.info(f"Order blocked by stock issues on {len(issues)} set(s)")
        raise StockUnavailableError(issues)

    payload = build_order_payload(store, customer, customer_id)
    order = await store.api.create_order(payload)
    logger.info(f"Order placed for customer {customer_id}")
    await store.clear_cart()
    return order
