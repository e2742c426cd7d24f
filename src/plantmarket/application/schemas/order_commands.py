from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from plantmarket.config import settings
from plantmarket.domain.entities.shipping_address import ShippingAddress
from plantmarket.domain.enums.thread_context import OfferType
from plantmarket.domain.rules.offers import MAX_OFFER_AMOUNT_EUR, normalize_shipping_address


class OfferInput(BaseModel):
    """First offer sent when a buyer opens a listing or wanted conversation."""

    offer_type: OfferType
    amount_eur: Decimal | None = Field(
        default=None, gt=0, le=MAX_OFFER_AMOUNT_EUR, decimal_places=2
    )
    swap_text: str | None = None

    @field_validator("swap_text")
    @classmethod
    def _strip_swap_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def _check_offer_payload(self) -> "OfferInput":
        if self.offer_type is OfferType.PRICE and self.amount_eur is None:
            raise ValueError("Enter a valid amount.")
        if self.offer_type is OfferType.SWAP and not self.swap_text:
            raise ValueError("Describe what you are offering in exchange.")
        return self


class ShippingAddressInput(BaseModel):
    name: str
    street: str
    city: str
    zip: str
    country: str
    phone: str | None = None
    save_as_default: bool = False

    @model_validator(mode="after")
    def _require_address_fields(self) -> "ShippingAddressInput":
        if self._normalized() is None:
            raise ValueError("Fill in all required address fields.")
        return self

    def _normalized(self) -> ShippingAddress | None:
        return normalize_shipping_address(
            name=self.name,
            street=self.street,
            city=self.city,
            zip=self.zip,
            country=self.country,
            phone=self.phone,
        )

    def to_address(self) -> ShippingAddress:
        address = self._normalized()
        if address is None:
            raise ValueError("Fill in all required address fields.")
        return address


class MarkShippedInput(BaseModel):
    tracking_number: str | None = None

    @field_validator("tracking_number")
    @classmethod
    def _check_tracking_number(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if len(value) > settings.tracking_number_max_length:
            raise ValueError("Tracking number is too long.")
        return value
