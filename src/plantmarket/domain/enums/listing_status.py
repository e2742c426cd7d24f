from enum import Enum


class ListingLifecycleStatus(str, Enum):
    """Visibility and saleability of a listing."""

    ACTIVE = "active"
    RESERVED = "reserved"
    SOLD = "sold"
    EXPIRED = "expired"
    REMOVED = "removed"

    @property
    def is_public(self) -> bool:
        return self is PUBLIC_LISTING_STATUS


class ListingType(str, Enum):
    FIXED = "fixed"
    AUCTION = "auction"


PUBLIC_LISTING_STATUS = ListingLifecycleStatus.ACTIVE


def is_public_listing_status(status: str | None) -> bool:
    """Only active listings show up in public feeds and search."""
    return status == PUBLIC_LISTING_STATUS
