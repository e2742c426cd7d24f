"""
Shared plumbing for the order use cases.

Each order action loads the listing conversation, lets the Order aggregate
validate the transition, projects the listing status, then saves, posts the
thread messages and publishes the collected events.
"""
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any
from uuid import UUID

import structlog

from plantmarket.application.interfaces.event_publisher import EventPublisher
from plantmarket.application.interfaces.listing_repository import ListingRepository
from plantmarket.application.interfaces.message_repository import MessageRepository
from plantmarket.application.interfaces.order_repository import OrderRepository
from plantmarket.application.interfaces.thread_repository import ThreadRepository
from plantmarket.application.use_cases.errors import (
    ListingNotFoundError,
    NotAListingThreadError,
    ThreadAccessError,
    ThreadNotFoundError,
)
from plantmarket.domain.entities.chat_message import ChatMessage
from plantmarket.domain.entities.listing import Listing
from plantmarket.domain.entities.order import Order
from plantmarket.domain.entities.thread import Thread
from plantmarket.domain.enums.listing_status import ListingLifecycleStatus
from plantmarket.domain.enums.order_status import OrderActor, OrderStatus
from plantmarket.domain.enums.thread_context import MessageType, ThreadContext
from plantmarket.domain.state_machine.order_state_machine import OrderTransitionRejectedError

logger = structlog.get_logger(__name__)


@dataclass
class OrderContext:
    thread: Thread
    listing: Listing
    buyer_id: str
    seller_id: str
    order: Order | None

    def actor_for(self, user_id: str) -> OrderActor:
        if user_id == self.seller_id:
            return OrderActor.SELLER
        if user_id == self.buyer_id:
            return OrderActor.BUYER
        return OrderActor.OTHER


@dataclass
class OrderActionOutput:
    order_id: UUID
    thread_id: UUID
    from_status: OrderStatus
    to_status: OrderStatus
    listing_status: ListingLifecycleStatus


@contextmanager
def logged_rejection(thread_id: UUID, user_id: str) -> Iterator[None]:
    """Log a rejected transition and let it propagate to the caller."""
    try:
        yield
    except OrderTransitionRejectedError as exc:
        logger.info(
            "order_transition_rejected",
            thread_id=str(thread_id),
            user_id=user_id,
            from_status=str(getattr(exc.from_status, "value", exc.from_status)),
            to_status=str(getattr(exc.to_status, "value", exc.to_status)),
            reason=exc.reason,
        )
        raise


def status_message(
    order: Order,
    sender_id: str,
    body: str,
    listing_status: ListingLifecycleStatus,
    **extra: Any,
) -> ChatMessage:
    """The ``order_status`` message posted into the thread after a transition."""
    return ChatMessage(
        thread_id=order.thread_id,
        sender_id=sender_id,
        body=body,
        message_type=MessageType.ORDER_STATUS,
        metadata={
            "order_id": str(order.id),
            "order_status": order.status.value,
            "listing_status": listing_status.value,
            **extra,
        },
    )


def system_message(order: Order, sender_id: str, body: str, **metadata: Any) -> ChatMessage:
    return ChatMessage(
        thread_id=order.thread_id,
        sender_id=sender_id,
        body=body,
        message_type=MessageType.SYSTEM,
        metadata={"order_id": str(order.id), **metadata},
    )


class OrderAction:
    """Base for use cases that drive an order through the state machine."""

    def __init__(
        self,
        thread_repo: ThreadRepository,
        listing_repo: ListingRepository,
        order_repo: OrderRepository,
        message_repo: MessageRepository,
        event_publisher: EventPublisher,
    ) -> None:
        self._thread_repo = thread_repo
        self._listing_repo = listing_repo
        self._order_repo = order_repo
        self._message_repo = message_repo
        self._event_publisher = event_publisher

    async def _load_context(self, thread_id: UUID, user_id: str) -> OrderContext:
        thread = await self._thread_repo.get_by_id(thread_id)
        if thread is None:
            raise ThreadNotFoundError(thread_id)
        if not thread.is_participant(user_id):
            raise ThreadAccessError(thread_id, user_id)
        if thread.context is not ThreadContext.LISTING or thread.listing_id is None:
            raise NotAListingThreadError(thread_id)

        listing = await self._listing_repo.get_by_id(thread.listing_id)
        if listing is None:
            raise ListingNotFoundError(thread.listing_id)

        seller_id = listing.seller_id
        buyer_id = thread.user2_id if thread.user1_id == seller_id else thread.user1_id
        order = await self._order_repo.get_by_thread_id(thread.id)

        return OrderContext(
            thread=thread,
            listing=listing,
            buyer_id=buyer_id,
            seller_id=seller_id,
            order=order,
        )

    @staticmethod
    def _project_listing(
        ctx: OrderContext, order: Order, previous_status: OrderStatus
    ) -> ListingLifecycleStatus:
        """Apply the order outcome to the listing; a re-asserted status leaves it untouched."""
        if previous_status == order.status:
            return ctx.listing.status
        return ctx.listing.apply_order_status(order.status, previous_status)

    async def _commit(
        self,
        ctx: OrderContext,
        order: Order,
        *,
        previous_status: OrderStatus,
        expected_status: OrderStatus | None,
        messages: list[ChatMessage],
        user_id: str,
    ) -> OrderActionOutput:
        # StaleOrderError from the repository propagates: nothing else is written.
        await self._order_repo.save(order, expected_status=expected_status)
        if previous_status != order.status:
            await self._listing_repo.save(ctx.listing)
        if messages:
            await self._message_repo.add_many(messages)

        events = order.collect_events() + ctx.listing.collect_events()
        await self._event_publisher.publish_many(events)

        logger.info(
            "order_status_transitioned",
            order_id=str(order.id),
            thread_id=str(order.thread_id),
            listing_id=str(order.listing_id),
            from_status=previous_status.value,
            to_status=order.status.value,
            listing_status=ctx.listing.status.value,
            triggered_by=user_id,
        )

        return OrderActionOutput(
            order_id=order.id,
            thread_id=order.thread_id,
            from_status=previous_status,
            to_status=order.status,
            listing_status=ctx.listing.status,
        )
