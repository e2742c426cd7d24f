"""
Use cases that open (or reopen) a conversation.

A conversation is identified by its thread key, so asking twice for the same
pair and context returns the same thread. Storage enforces key uniqueness; a
concurrent insert that loses the race resolves to the winner's thread.
"""
from dataclasses import dataclass
from uuid import UUID

import structlog

from plantmarket.application.interfaces.event_publisher import EventPublisher
from plantmarket.application.interfaces.listing_repository import ListingRepository
from plantmarket.application.interfaces.message_repository import MessageRepository
from plantmarket.application.interfaces.thread_repository import (
    ThreadKeyConflictError,
    ThreadRepository,
)
from plantmarket.application.interfaces.wanted_request_repository import (
    WantedRequestRepository,
)
from plantmarket.application.schemas.order_commands import OfferInput
from plantmarket.application.use_cases.errors import (
    ListingNotFoundError,
    SelfConversationError,
    WantedRequestInactiveError,
    WantedRequestNotFoundError,
)
from plantmarket.domain.entities.chat_message import ChatMessage
from plantmarket.domain.entities.thread import Thread
from plantmarket.domain.enums.thread_context import MessageType, OfferType
from plantmarket.domain.events.domain_events import ThreadOpenedEvent

logger = structlog.get_logger(__name__)


@dataclass
class GetOrCreateThreadOutput:
    thread: Thread
    created: bool


@dataclass
class GetOrCreateListingThreadInput:
    listing_id: UUID
    user_id: str
    offer: OfferInput | None = None


@dataclass
class GetOrCreateWantedThreadInput:
    wanted_request_id: UUID
    user_id: str
    offer: OfferInput | None = None


@dataclass
class GetOrCreateDirectThreadInput:
    user_id: str
    other_user_id: str


def offer_message(thread_id: UUID, sender_id: str, offer: OfferInput) -> ChatMessage:
    """Build the opening offer message for a new thread."""
    if offer.offer_type is OfferType.PRICE and offer.amount_eur is not None:
        return ChatMessage(
            thread_id=thread_id,
            sender_id=sender_id,
            body=f"{offer.amount_eur:.2f}",
            message_type=MessageType.OFFER_PRICE,
            metadata={"amount_eur": str(offer.amount_eur)},
        )
    return ChatMessage(
        thread_id=thread_id,
        sender_id=sender_id,
        body=offer.swap_text or "",
        message_type=MessageType.OFFER_SWAP,
        metadata={"swap_for_text": offer.swap_text},
    )


class _ThreadOpener:
    def __init__(
        self,
        thread_repo: ThreadRepository,
        message_repo: MessageRepository,
        event_publisher: EventPublisher,
    ) -> None:
        self._thread_repo = thread_repo
        self._message_repo = message_repo
        self._event_publisher = event_publisher

    async def _get_or_create(
        self,
        candidate: Thread,
        opened_by: str,
        offer: OfferInput | None = None,
    ) -> GetOrCreateThreadOutput:
        existing = await self._thread_repo.get_by_key(candidate.thread_key)
        if existing is not None:
            return GetOrCreateThreadOutput(thread=existing, created=False)

        try:
            await self._thread_repo.add(candidate)
        except ThreadKeyConflictError:
            logger.info("thread_key_conflict", thread_key=candidate.thread_key)
            existing = await self._thread_repo.get_by_key(candidate.thread_key)
            if existing is None:
                raise
            return GetOrCreateThreadOutput(thread=existing, created=False)

        if offer is not None:
            await self._message_repo.add_many([offer_message(candidate.id, opened_by, offer)])

        await self._event_publisher.publish(
            ThreadOpenedEvent(
                thread_id=candidate.id,
                context=candidate.context,
                thread_key=candidate.thread_key,
                opened_by=opened_by,
            )
        )

        logger.info(
            "thread_created",
            thread_id=str(candidate.id),
            context=candidate.context.value,
            thread_key=candidate.thread_key,
            opened_by=opened_by,
            with_offer=offer is not None,
        )
        return GetOrCreateThreadOutput(thread=candidate, created=True)


class GetOrCreateListingThread(_ThreadOpener):
    """Use case: a buyer contacts the seller about a listing."""

    def __init__(
        self,
        thread_repo: ThreadRepository,
        message_repo: MessageRepository,
        event_publisher: EventPublisher,
        listing_repo: ListingRepository,
    ) -> None:
        super().__init__(thread_repo, message_repo, event_publisher)
        self._listing_repo = listing_repo

    async def execute(self, input_data: GetOrCreateListingThreadInput) -> GetOrCreateThreadOutput:
        listing = await self._listing_repo.get_by_id(input_data.listing_id)
        if listing is None:
            raise ListingNotFoundError(input_data.listing_id)
        if listing.seller_id == input_data.user_id:
            raise SelfConversationError("You cannot start a conversation about your own listing.")

        candidate = Thread.for_listing(listing.id, input_data.user_id, listing.seller_id)
        return await self._get_or_create(candidate, input_data.user_id, input_data.offer)


class GetOrCreateWantedThread(_ThreadOpener):
    """Use case: a seller answers a wanted request."""

    def __init__(
        self,
        thread_repo: ThreadRepository,
        message_repo: MessageRepository,
        event_publisher: EventPublisher,
        wanted_repo: WantedRequestRepository,
    ) -> None:
        super().__init__(thread_repo, message_repo, event_publisher)
        self._wanted_repo = wanted_repo

    async def execute(self, input_data: GetOrCreateWantedThreadInput) -> GetOrCreateThreadOutput:
        wanted = await self._wanted_repo.get_by_id(input_data.wanted_request_id)
        if wanted is None:
            raise WantedRequestNotFoundError(input_data.wanted_request_id)
        if wanted.owner_id == input_data.user_id:
            raise SelfConversationError("You cannot answer your own wanted request.")
        if not wanted.is_active:
            raise WantedRequestInactiveError(wanted.id)

        candidate = Thread.for_wanted(wanted.id, input_data.user_id, wanted.owner_id)
        return await self._get_or_create(candidate, input_data.user_id, input_data.offer)


class GetOrCreateDirectThread(_ThreadOpener):
    """Use case: one user messages another outside any listing or wanted request."""

    async def execute(self, input_data: GetOrCreateDirectThreadInput) -> GetOrCreateThreadOutput:
        if str(input_data.user_id) == str(input_data.other_user_id):
            raise SelfConversationError("You cannot start a conversation with yourself.")

        candidate = Thread.direct(input_data.user_id, input_data.other_user_id)
        return await self._get_or_create(candidate, input_data.user_id)
