from plantmarket.domain.enums.listing_status import ListingLifecycleStatus
from plantmarket.domain.enums.order_status import OrderStatus, as_order_status

# Order statuses that take the listing off the market for everyone else.
RESERVING_ORDER_STATUSES: frozenset[OrderStatus] = frozenset(
    {OrderStatus.PRICE_ACCEPTED, OrderStatus.ADDRESS_PROVIDED, OrderStatus.SHIPPED}
)


def listing_status_for_order_transition(
    next_order_status: OrderStatus | str,
    previous_order_status: OrderStatus | str | None = None,
) -> ListingLifecycleStatus:
    """Project an order status change onto the public status of its listing.

    Total over the order vocabulary; unrecognised values fall back to ``active``.
    """
    next_status = as_order_status(next_order_status)
    previous_status = as_order_status(previous_order_status)

    if next_status is OrderStatus.DELIVERED:
        return ListingLifecycleStatus.SOLD

    if next_status in RESERVING_ORDER_STATUSES:
        return ListingLifecycleStatus.RESERVED

    if next_status is OrderStatus.CANCELLED:
        # Cancelled after shipment: the item may already be with the buyer,
        # keep the listing off the public feed until reconciled.
        if previous_status is OrderStatus.SHIPPED:
            return ListingLifecycleStatus.RESERVED
        return ListingLifecycleStatus.ACTIVE

    return ListingLifecycleStatus.ACTIVE
