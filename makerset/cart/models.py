"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, List

from makerset.models import CatalogSet
from makerset.services.money import parse_decimal, to_decimal, multiply

# Reserved set_id of the synthetic handling-fee line
HANDLING_FEE_SET_ID = -1

HANDLING_FEE_NAME = "Handling, Packaging & Transport"
HANDLING_FEE_DESCRIPTION = "Handling, packaging, and transport costs for your order"


@dataclass
class CartItem:
    """Single line in the cart. Descriptive fields are a snapshot taken at add time."""
    set_id: int
    quantity: int
    unit_price: Decimal
    set_name: str = ""
    set_description: str = ""
    category: str = ""
    difficulty_level: str = ""
    recommended_age_min: int = 0
    recommended_age_max: int = 0
    estimated_duration_minutes: int = 0
    image_url: Optional[str] = None
    # Provider fields (provider_id None = platform)
    provider_set_id: Optional[int] = None
    provider_id: Optional[int] = None
    provider_company: Optional[str] = None
    provider_name: Optional[str] = None
    provider_code: Optional[str] = None
    display_price: Optional[Decimal] = None
    price: Optional[Decimal] = None
    available_quantity: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError("quantity must be a positive integer")
        self.unit_price = to_decimal(self.unit_price)
        self.display_price = parse_decimal(self.display_price)
        self.price = parse_decimal(self.price)

    @property
    def is_handling_fee(self) -> bool:
        return self.set_id == HANDLING_FEE_SET_ID

    @property
    def total_price(self) -> Decimal:
        """Total price for all units, always derived from quantity and unit price."""
        return multiply(self.unit_price, self.quantity)

    @classmethod
    def from_set(cls, catalog_set: CatalogSet, quantity: int) -> "CartItem":
        """Snapshot a catalog set into a new cart line."""
        # Provider price first, then list price, then base price
        unit_price = next(
            (p for p in (catalog_set.display_price, catalog_set.price, catalog_set.base_price) if p),
            Decimal("0"),
        )
        return cls(
            set_id=catalog_set.set_id,
            quantity=quantity,
            unit_price=unit_price,
            set_name=catalog_set.name or "Unnamed Set",
            set_description=catalog_set.description or "",
            category=catalog_set.category or "",
            difficulty_level=catalog_set.difficulty_level or "",
            recommended_age_min=catalog_set.recommended_age_min or 0,
            recommended_age_max=catalog_set.recommended_age_max or 0,
            estimated_duration_minutes=catalog_set.estimated_duration_minutes or 0,
            image_url=catalog_set.image_url,
            provider_set_id=catalog_set.provider_set_id,
            provider_id=catalog_set.provider_id,
            provider_company=catalog_set.provider_company,
            provider_name=catalog_set.provider_name,
            provider_code=catalog_set.provider_code,
            display_price=catalog_set.display_price,
            price=catalog_set.price,
            available_quantity=catalog_set.available_quantity,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "set_id": self.set_id,
            "set_name": self.set_name,
            "set_description": self.set_description,
            "category": self.category,
            "difficulty_level": self.difficulty_level,
            "recommended_age_min": self.recommended_age_min,
            "recommended_age_max": self.recommended_age_max,
            "estimated_duration_minutes": self.estimated_duration_minutes,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "total_price": str(self.total_price),
            "image_url": self.image_url,
            "provider_set_id": self.provider_set_id,
            "provider_id": self.provider_id,
            "provider_company": self.provider_company,
            "provider_name": self.provider_name,
            "provider_code": self.provider_code,
            "display_price": str(self.display_price) if self.display_price is not None else None,
            "price": str(self.price) if self.price is not None else None,
            "available_quantity": self.available_quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartItem":
        """Create from dictionary. A stored total_price is ignored."""
        return cls(
            set_id=int(data["set_id"]),
            quantity=_stored_quantity(data["quantity"]),
            unit_price=to_decimal(data["unit_price"]),
            set_name=data.get("set_name") or "",
            set_description=data.get("set_description") or "",
            category=data.get("category") or "",
            difficulty_level=data.get("difficulty_level") or "",
            recommended_age_min=int(data.get("recommended_age_min") or 0),
            recommended_age_max=int(data.get("recommended_age_max") or 0),
            estimated_duration_minutes=int(data.get("estimated_duration_minutes") or 0),
            image_url=data.get("image_url"),
            provider_set_id=data.get("provider_set_id"),
            provider_id=data.get("provider_id"),
            provider_company=data.get("provider_company"),
            provider_name=data.get("provider_name"),
            provider_code=data.get("provider_code"),
            display_price=data.get("display_price"),
            price=data.get("price"),
            available_quantity=data.get("available_quantity"),
        )


def _stored_quantity(value) -> int:
    """Read a persisted quantity, rejecting non-integral values instead of truncating."""
    if isinstance(value, bool):
        raise ValueError(f"invalid stored quantity: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"non-integral stored quantity: {value!r}")
        return int(value)
    return int(value)


def build_handling_fee_item(cost: Decimal) -> CartItem:
    """Create the synthetic handling-fee line priced at the given cost."""
    return CartItem(
        set_id=HANDLING_FEE_SET_ID,
        quantity=1,
        unit_price=cost,
        set_name=HANDLING_FEE_NAME,
        set_description=HANDLING_FEE_DESCRIPTION,
        category="Service",
        difficulty_level="N/A",
    )


def regular_items(items: List[CartItem]) -> List[CartItem]:
    """Items that are real catalog sets (handling fee excluded)."""
    return [item for item in items if not item.is_handling_fee]


def with_handling_fee(items: List[CartItem], cost: Decimal) -> List[CartItem]:
    """
    Return items with exactly one handling-fee line appended, or none at
    all if no regular items remain.
    """
    regular = regular_items(items)
    if not regular:
        return regular
    return regular + [build_handling_fee_item(cost)]


def has_single_provider(items: List[CartItem]) -> bool:
    """True if every regular item shares one provider_id (None included)."""
    provider_ids = {item.provider_id for item in regular_items(items)}
    return len(provider_ids) <= 1
