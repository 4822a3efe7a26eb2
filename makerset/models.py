"""Backend Models - Pydantic models for MakerSet API payloads."""
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, field_validator, model_validator

from makerset.services.money import parse_decimal


class SetPart(BaseModel):
    """Part entry of a set's bill of materials."""
    part_id: Optional[int] = None
    part_name: str = ""
    name: Optional[str] = None
    part_number: Optional[str] = None
    quantity: Optional[int] = None
    # The API sends either flag depending on the endpoint
    is_optional: Optional[bool] = None
    is_required: Optional[bool] = None

    class Config:
        extra = "ignore"

    @model_validator(mode="after")
    def fill_part_name(self):
        if not self.part_name:
            self.part_name = self.name or self.part_number or ""
        return self

    @property
    def required(self) -> bool:
        """True if the part must be present for the set to ship."""
        if self.is_optional is not None:
            return not self.is_optional
        return bool(self.is_required)


class SetMedia(BaseModel):
    """Media attached to a set."""
    file_url: Optional[str] = None

    class Config:
        extra = "ignore"


class CatalogSet(BaseModel):
    """Catalog set as returned by the sets endpoints."""
    set_id: int
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    difficulty_level: Optional[str] = None
    recommended_age_min: Optional[int] = None
    recommended_age_max: Optional[int] = None
    estimated_duration_minutes: Optional[int] = None
    base_price: Optional[Decimal] = None
    price: Optional[Decimal] = None
    display_price: Optional[Decimal] = None  # Provider price, if listed by a provider
    media: list[SetMedia] = []
    parts: list[SetPart] = []
    # Provider fields (provider_id None = sold by the platform)
    provider_set_id: Optional[int] = None
    provider_id: Optional[int] = None
    provider_company: Optional[str] = None
    provider_name: Optional[str] = None
    provider_code: Optional[str] = None
    available_quantity: Optional[int] = None

    class Config:
        extra = "ignore"

    @field_validator("base_price", "price", "display_price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return parse_decimal(v)

    @field_validator("media", "parts", mode="before")
    @classmethod
    def none_to_empty_list(cls, v):
        return v or []

    @property
    def image_url(self) -> Optional[str]:
        return self.media[0].file_url if self.media else None


class InsufficientPart(BaseModel):
    """Part shortfall reported by stock validation."""
    part_id: Optional[int] = None
    part_number: str = ""
    part_name: str = ""
    required: int = 0
    available: int = 0
    shortfall: int = 0

    class Config:
        extra = "ignore"


class StockValidationResult(BaseModel):
    """Per-set stock validation outcome."""
    set_id: int
    valid: bool
    error: Optional[str] = None
    parts_configured: Optional[bool] = None
    insufficient_parts: list[InsufficientPart] = []

    class Config:
        extra = "ignore"

    @field_validator("insufficient_parts", mode="before")
    @classmethod
    def none_to_empty_list(cls, v):
        return v or []


class StockValidationSummary(BaseModel):
    total_items: int = 0
    valid_items: int = 0
    invalid_items: int = 0


class StockValidationResponse(BaseModel):
    """Response of POST /sets/validate-stock."""
    valid: bool
    results: list[StockValidationResult] = []
    summary: StockValidationSummary = StockValidationSummary()

    class Config:
        extra = "ignore"

    @classmethod
    def empty(cls) -> "StockValidationResponse":
        """Trivially valid response for an empty cart."""
        return cls(valid=True, results=[], summary=StockValidationSummary())
