from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ShippingAddress:
    """Where the seller sends the package. All fields except phone are required."""

    name: str
    street: str
    city: str
    zip: str
    country: str
    phone: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)
