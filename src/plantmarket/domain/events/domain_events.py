from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from plantmarket.domain.enums.listing_status import ListingLifecycleStatus
from plantmarket.domain.enums.order_status import OrderActor, OrderStatus
from plantmarket.domain.enums.thread_context import ThreadContext


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class OrderCreatedEvent(DomainEvent):
    """Published when negotiation on a listing thread turns into an order."""

    order_id: UUID = field(default_factory=uuid4)
    thread_id: UUID = field(default_factory=uuid4)
    listing_id: UUID = field(default_factory=uuid4)
    buyer_id: str = ""
    seller_id: str = ""


@dataclass(frozen=True)
class OrderStatusChangedEvent(DomainEvent):
    """Published whenever an order moves between statuses."""

    order_id: UUID = field(default_factory=uuid4)
    thread_id: UUID = field(default_factory=uuid4)
    listing_id: UUID = field(default_factory=uuid4)
    from_status: OrderStatus = OrderStatus.NEGOTIATING
    to_status: OrderStatus = OrderStatus.NEGOTIATING
    actor: OrderActor = OrderActor.OTHER


@dataclass(frozen=True)
class ListingStatusChangedEvent(DomainEvent):
    """Published when an order outcome changes the public status of a listing."""

    listing_id: UUID = field(default_factory=uuid4)
    from_status: ListingLifecycleStatus = ListingLifecycleStatus.ACTIVE
    to_status: ListingLifecycleStatus = ListingLifecycleStatus.ACTIVE
    order_status: OrderStatus | None = None


@dataclass(frozen=True)
class ThreadOpenedEvent(DomainEvent):
    """Published when a new conversation is created."""

    thread_id: UUID = field(default_factory=uuid4)
    context: ThreadContext = ThreadContext.DIRECT
    thread_key: str = ""
    opened_by: str = ""
