from enum import Enum


class ThreadContext(str, Enum):
    """What a conversation is about."""

    LISTING = "listing"
    WANTED = "wanted"
    DIRECT = "direct"


class MessageType(str, Enum):
    TEXT = "text"
    OFFER_PRICE = "offer_price"
    OFFER_SWAP = "offer_swap"
    ORDER_STATUS = "order_status"
    SYSTEM = "system"

    @property
    def is_offer(self) -> bool:
        return self in (MessageType.OFFER_PRICE, MessageType.OFFER_SWAP)


class OfferType(str, Enum):
    PRICE = "price"
    SWAP = "swap"


class WantedRequestStatus(str, Enum):
    ACTIVE = "active"
    FULFILLED = "fulfilled"
    CLOSED = "closed"
