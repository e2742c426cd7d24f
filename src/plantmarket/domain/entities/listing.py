from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from plantmarket.domain.enums.listing_status import ListingLifecycleStatus, ListingType
from plantmarket.domain.enums.order_status import OrderStatus
from plantmarket.domain.events.domain_events import DomainEvent, ListingStatusChangedEvent
from plantmarket.domain.state_machine.listing_lifecycle import (
    listing_status_for_order_transition,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Listing:
    """A plant offered for sale or auction by its seller."""

    id: UUID = field(default_factory=uuid4)
    seller_id: str = ""
    title: str = ""
    listing_type: ListingType = ListingType.FIXED
    status: ListingLifecycleStatus = ListingLifecycleStatus.ACTIVE

    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    status_changed_at: datetime = field(default_factory=_utcnow)

    _events: list[DomainEvent] = field(default_factory=list, repr=False, compare=False)

    @property
    def is_public(self) -> bool:
        return self.status.is_public

    def apply_order_status(
        self,
        next_order_status: OrderStatus,
        previous_order_status: OrderStatus | None = None,
    ) -> ListingLifecycleStatus:
        """Move the listing to the status its order outcome implies."""
        new_status = listing_status_for_order_transition(next_order_status, previous_order_status)
        if new_status == self.status:
            return new_status

        old_status = self.status
        now = _utcnow()
        self.status = new_status
        self.status_changed_at = now
        self.updated_at = now
        self._events.append(
            ListingStatusChangedEvent(
                listing_id=self.id,
                from_status=old_status,
                to_status=new_status,
                order_status=next_order_status,
            )
        )
        return new_status

    def collect_events(self) -> list[DomainEvent]:
        events = list(self._events)
        self._events.clear()
        return events
