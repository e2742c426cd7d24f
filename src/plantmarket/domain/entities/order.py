from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from plantmarket.domain.entities.shipping_address import ShippingAddress
from plantmarket.domain.enums.order_status import OrderActor, OrderStatus
from plantmarket.domain.enums.thread_context import OfferType
from plantmarket.domain.events.domain_events import (
    DomainEvent,
    OrderCreatedEvent,
    OrderStatusChangedEvent,
)
from plantmarket.domain.state_machine.order_state_machine import OrderStateMachine

_state_machine = OrderStateMachine()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """
    The negotiated sale of one listing between a buyer and a seller, bound to
    the listing conversation it was negotiated in.

    Emits domain events on state transitions; callers are responsible for
    collecting and publishing them.
    """

    # Identity
    id: UUID = field(default_factory=uuid4)
    thread_id: UUID = field(default_factory=uuid4)
    listing_id: UUID = field(default_factory=uuid4)

    # Parties
    buyer_id: str = ""
    seller_id: str = ""

    # State
    status: OrderStatus = OrderStatus.NEGOTIATING

    # Deal details
    accepted_price_eur: Decimal | None = None
    accepted_offer_type: OfferType | None = None
    shipping_address: ShippingAddress | None = None
    tracking_number: str | None = None
    cancel_reason: str | None = None

    # Timestamps
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    status_changed_at: datetime = field(default_factory=_utcnow)

    # Lifecycle timestamps
    price_accepted_at: datetime | None = None
    address_provided_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None

    # Pending domain events (collected and cleared by the application layer)
    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def start_negotiation(
        cls,
        *,
        thread_id: UUID,
        listing_id: UUID,
        buyer_id: str,
        seller_id: str,
    ) -> "Order":
        order = cls(
            thread_id=thread_id,
            listing_id=listing_id,
            buyer_id=str(buyer_id),
            seller_id=str(seller_id),
        )
        order._events.append(
            OrderCreatedEvent(
                order_id=order.id,
                thread_id=thread_id,
                listing_id=listing_id,
                buyer_id=order.buyer_id,
                seller_id=order.seller_id,
            )
        )
        return order

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def actor_for(self, user_id: str | UUID) -> OrderActor:
        """Resolve the role ``user_id`` plays in this order."""
        user = str(user_id)
        if user == self.buyer_id:
            return OrderActor.BUYER
        if user == self.seller_id:
            return OrderActor.SELLER
        return OrderActor.OTHER

    @property
    def has_shipping_address(self) -> bool:
        return self.shipping_address is not None

    # -------------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------------

    def transition_to(
        self,
        new_status: OrderStatus,
        actor: OrderActor,
        *,
        has_shipping_address: bool | None = None,
    ) -> OrderStatus:
        """
        Validate and apply a transition; return the status it replaced.

        Re-asserting the current status is accepted where the state machine
        allows it but leaves timestamps and events untouched.
        """
        if has_shipping_address is None:
            has_shipping_address = self.has_shipping_address
        _state_machine.validate_transition(self.status, new_status, actor, has_shipping_address)

        old_status = self.status
        now = _utcnow()
        self.updated_at = now
        if new_status == old_status:
            return old_status

        self.status = new_status
        self.status_changed_at = now

        self._apply_lifecycle_timestamp(new_status, now)

        self._events.append(
            OrderStatusChangedEvent(
                order_id=self.id,
                thread_id=self.thread_id,
                listing_id=self.listing_id,
                from_status=old_status,
                to_status=new_status,
                actor=actor,
            )
        )
        return old_status

    def accept_price(
        self,
        actor: OrderActor,
        amount_eur: Decimal,
        offer_type: OfferType = OfferType.PRICE,
    ) -> OrderStatus:
        previous = self.transition_to(OrderStatus.PRICE_ACCEPTED, actor)
        self.accepted_price_eur = amount_eur
        self.accepted_offer_type = offer_type
        self.cancel_reason = None
        return previous

    def provide_shipping_address(
        self, actor: OrderActor, address: ShippingAddress | None
    ) -> OrderStatus:
        previous = self.transition_to(
            OrderStatus.ADDRESS_PROVIDED,
            actor,
            has_shipping_address=address is not None,
        )
        self.shipping_address = address
        return previous

    def mark_shipped(self, actor: OrderActor, tracking_number: str | None = None) -> OrderStatus:
        previous = self.transition_to(OrderStatus.SHIPPED, actor)
        self.tracking_number = tracking_number
        return previous

    def confirm_delivery(self, actor: OrderActor) -> OrderStatus:
        return self.transition_to(OrderStatus.DELIVERED, actor)

    def cancel(self, actor: OrderActor, reason: str | None = None) -> OrderStatus:
        previous = self.transition_to(OrderStatus.CANCELLED, actor)
        self.cancel_reason = reason
        return previous

    def _apply_lifecycle_timestamp(self, status: OrderStatus, now: datetime) -> None:
        mapping: dict[OrderStatus, str] = {
            OrderStatus.PRICE_ACCEPTED: "price_accepted_at",
            OrderStatus.ADDRESS_PROVIDED: "address_provided_at",
            OrderStatus.SHIPPED: "shipped_at",
            OrderStatus.DELIVERED: "delivered_at",
            OrderStatus.CANCELLED: "cancelled_at",
        }
        attr = mapping.get(status)
        if attr:
            setattr(self, attr, now)

    # -------------------------------------------------------------------------
    # Event collection
    # -------------------------------------------------------------------------

    def collect_events(self) -> list[DomainEvent]:
        """Return pending events and clear the internal buffer."""
        events = list(self._events)
        self._events.clear()
        return events
