"""Parsing and formatting helpers for offers and shipping addresses."""
import re
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from plantmarket.domain.entities.shipping_address import ShippingAddress

_CENT = Decimal("0.01")

# Upper bound for a single offer; keeps cent rounding inside the decimal context precision.
MAX_OFFER_AMOUNT_EUR = Decimal("999999999.99")

# Leading number of a string, the way a browser parseFloat reads "25 €" or "12,5".
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+(?:[.,]\d*)?|[.,]\d+)(?:[eE][+-]?\d+)?")


def parse_positive_amount(value: Any) -> Decimal | None:
    """
    Parse an offer amount into euros rounded to the cent.

    Accepts numbers and strings using either ``.`` or ``,`` as the decimal
    separator. A string only needs to start with a number, so ``"25 €"`` is 25.
    Returns None for anything that is not a finite positive amount up to
    ``MAX_OFFER_AMOUNT_EUR``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        raw = str(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value.strip())
        if match is None:
            return None
        raw = match.group(0).replace(",", ".", 1)
    else:
        return None

    try:
        amount = Decimal(raw)
    except InvalidOperation:
        return None

    if not amount.is_finite() or amount <= 0 or amount > MAX_OFFER_AMOUNT_EUR:
        return None
    rounded = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    return rounded if rounded > 0 else None


def offer_amount_from_message(metadata: Mapping[str, Any] | None, body: str | None) -> Decimal | None:
    """Amount of a price offer: metadata ``amount_eur``, then ``amount``, then the body."""
    metadata = metadata or {}
    for candidate in (metadata.get("amount_eur"), metadata.get("amount"), body):
        amount = parse_positive_amount(candidate)
        if amount is not None:
            return amount
    return None


def normalize_shipping_address(
    *,
    name: str,
    street: str,
    city: str,
    zip: str,
    country: str,
    phone: str | None = None,
) -> ShippingAddress | None:
    """Trim every field; None when any required field ends up blank."""
    fields = {
        "name": name.strip(),
        "street": street.strip(),
        "city": city.strip(),
        "zip": zip.strip(),
        "country": country.strip(),
    }
    if not all(fields.values()):
        return None
    return ShippingAddress(**fields, phone=(phone or "").strip() or None)


def format_address_for_thread(address: ShippingAddress) -> str:
    lines = [
        "Shipping address:",
        address.name,
        address.street,
        f"{address.zip} {address.city}",
        address.country,
    ]
    if address.phone:
        lines.append(f"Phone: {address.phone}")
    return "\n".join(lines)


def format_eur(amount: Decimal) -> str:
    """``12`` -> ``"12 €"``, ``12.5`` -> ``"12.50 €"``."""
    try:
        quantized = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Too many digits to carry cents.
        return f"{amount:.0f} €"
    if quantized == quantized.to_integral_value():
        return f"{quantized:.0f} €"
    return f"{quantized:.2f} €"
