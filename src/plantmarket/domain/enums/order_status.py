from enum import Enum


class OrderStatus(str, Enum):
    """States of the negotiated sale between a buyer and a seller."""

    NEGOTIATING = "negotiating"
    PRICE_ACCEPTED = "price_accepted"
    ADDRESS_PROVIDED = "address_provided"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Terminal in practice; the state machine still permits re-assertion."""
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


class OrderActor(str, Enum):
    """Role of the party attempting an order transition."""

    BUYER = "buyer"
    SELLER = "seller"
    OTHER = "other"


def as_order_status(value: object) -> OrderStatus | None:
    """Return the matching OrderStatus, or None for anything unrecognised."""
    try:
        return OrderStatus(value)
    except ValueError:
        return None


def as_order_actor(value: object) -> OrderActor | None:
    try:
        return OrderActor(value)
    except ValueError:
        return None
