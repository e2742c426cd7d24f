"""Unit tests for the get-or-create conversation use cases."""
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from plantmarket.application.interfaces.thread_repository import ThreadKeyConflictError
from plantmarket.application.schemas.order_commands import OfferInput
from plantmarket.application.use_cases.errors import (
    ListingNotFoundError,
    SelfConversationError,
    WantedRequestInactiveError,
    WantedRequestNotFoundError,
)
from plantmarket.application.use_cases.get_or_create_thread import (
    GetOrCreateDirectThread,
    GetOrCreateDirectThreadInput,
    GetOrCreateListingThread,
    GetOrCreateListingThreadInput,
    GetOrCreateWantedThread,
    GetOrCreateWantedThreadInput,
)
from plantmarket.domain.entities.listing import Listing
from plantmarket.domain.entities.thread import Thread
from plantmarket.domain.entities.wanted_request import WantedRequest
from plantmarket.domain.enums.thread_context import (
    MessageType,
    ThreadContext,
    WantedRequestStatus,
)
from plantmarket.domain.events.domain_events import ThreadOpenedEvent


def _make_thread_repo(existing: Thread | None = None) -> MagicMock:
    repo = MagicMock()
    repo.get_by_key = AsyncMock(return_value=existing)
    repo.add = AsyncMock()
    return repo


def _make_message_repo() -> MagicMock:
    repo = MagicMock()
    repo.add_many = AsyncMock()
    return repo


def _make_publisher() -> MagicMock:
    pub = MagicMock()
    pub.publish = AsyncMock()
    return pub


def _make_listing_repo(listing: Listing | None) -> MagicMock:
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=listing)
    return repo


def _make_wanted_repo(wanted: WantedRequest | None) -> MagicMock:
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=wanted)
    return repo


class TestGetOrCreateListingThread:
    @pytest.mark.asyncio
    async def test_creates_thread_with_price_offer(self) -> None:
        listing = Listing(seller_id="seller-1", title="Calathea")
        thread_repo = _make_thread_repo()
        message_repo = _make_message_repo()
        publisher = _make_publisher()
        use_case = GetOrCreateListingThread(
            thread_repo, message_repo, publisher, _make_listing_repo(listing)
        )

        result = await use_case.execute(
            GetOrCreateListingThreadInput(
                listing_id=listing.id,
                user_id="buyer-1",
                offer=OfferInput(offer_type="price", amount_eur=Decimal("18")),
            )
        )

        assert result.created is True
        assert result.thread.context == ThreadContext.LISTING
        assert result.thread.thread_key == f"listing:{listing.id}:buyer-1:seller-1"
        thread_repo.add.assert_awaited_once_with(result.thread)

        messages = message_repo.add_many.call_args.args[0]
        assert len(messages) == 1
        assert messages[0].message_type == MessageType.OFFER_PRICE
        assert messages[0].body == "18.00"
        assert messages[0].metadata == {"amount_eur": "18"}

        event = publisher.publish.call_args.args[0]
        assert isinstance(event, ThreadOpenedEvent)
        assert event.opened_by == "buyer-1"

    @pytest.mark.asyncio
    async def test_returns_existing_thread_without_posting_offer(self) -> None:
        listing = Listing(seller_id="seller-1")
        existing = Thread.for_listing(listing.id, "buyer-1", "seller-1")
        thread_repo = _make_thread_repo(existing)
        message_repo = _make_message_repo()
        publisher = _make_publisher()
        use_case = GetOrCreateListingThread(
            thread_repo, message_repo, publisher, _make_listing_repo(listing)
        )

        result = await use_case.execute(
            GetOrCreateListingThreadInput(
                listing_id=listing.id,
                user_id="buyer-1",
                offer=OfferInput(offer_type="swap", swap_text="Two cuttings"),
            )
        )

        assert result.created is False
        assert result.thread is existing
        thread_repo.add.assert_not_awaited()
        message_repo.add_many.assert_not_awaited()
        publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_key_conflict_returns_winner(self) -> None:
        listing = Listing(seller_id="seller-1")
        winner = Thread.for_listing(listing.id, "buyer-1", "seller-1")
        thread_repo = _make_thread_repo()
        thread_repo.get_by_key = AsyncMock(side_effect=[None, winner])
        thread_repo.add = AsyncMock(side_effect=ThreadKeyConflictError(winner.thread_key))
        message_repo = _make_message_repo()
        use_case = GetOrCreateListingThread(
            thread_repo, message_repo, _make_publisher(), _make_listing_repo(listing)
        )

        result = await use_case.execute(
            GetOrCreateListingThreadInput(
                listing_id=listing.id,
                user_id="buyer-1",
                offer=OfferInput(offer_type="price", amount_eur=Decimal("5")),
            )
        )

        assert result.created is False
        assert result.thread is winner
        message_repo.add_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_key_conflict_without_row_reraises(self) -> None:
        listing = Listing(seller_id="seller-1")
        thread_repo = _make_thread_repo()
        thread_repo.add = AsyncMock(side_effect=ThreadKeyConflictError("listing:x:a:b"))
        use_case = GetOrCreateListingThread(
            thread_repo, _make_message_repo(), _make_publisher(), _make_listing_repo(listing)
        )

        with pytest.raises(ThreadKeyConflictError):
            await use_case.execute(
                GetOrCreateListingThreadInput(listing_id=listing.id, user_id="buyer-1")
            )

    @pytest.mark.asyncio
    async def test_seller_cannot_message_own_listing(self) -> None:
        listing = Listing(seller_id="seller-1")
        use_case = GetOrCreateListingThread(
            _make_thread_repo(), _make_message_repo(), _make_publisher(), _make_listing_repo(listing)
        )
        with pytest.raises(SelfConversationError):
            await use_case.execute(
                GetOrCreateListingThreadInput(listing_id=listing.id, user_id="seller-1")
            )

    @pytest.mark.asyncio
    async def test_missing_listing(self) -> None:
        use_case = GetOrCreateListingThread(
            _make_thread_repo(), _make_message_repo(), _make_publisher(), _make_listing_repo(None)
        )
        with pytest.raises(ListingNotFoundError):
            await use_case.execute(
                GetOrCreateListingThreadInput(listing_id=uuid4(), user_id="buyer-1")
            )


class TestGetOrCreateWantedThread:
    @pytest.mark.asyncio
    async def test_creates_thread_with_swap_offer(self) -> None:
        wanted = WantedRequest(owner_id="collector", plant_name="Hoya kerrii")
        message_repo = _make_message_repo()
        use_case = GetOrCreateWantedThread(
            _make_thread_repo(), message_repo, _make_publisher(), _make_wanted_repo(wanted)
        )

        result = await use_case.execute(
            GetOrCreateWantedThreadInput(
                wanted_request_id=wanted.id,
                user_id="grower",
                offer=OfferInput(offer_type="swap", swap_text="Rooted cutting"),
            )
        )

        assert result.created is True
        assert result.thread.wanted_request_id == wanted.id
        messages = message_repo.add_many.call_args.args[0]
        assert messages[0].message_type == MessageType.OFFER_SWAP
        assert messages[0].metadata == {"swap_for_text": "Rooted cutting"}

    @pytest.mark.asyncio
    async def test_inactive_request(self) -> None:
        wanted = WantedRequest(owner_id="collector", status=WantedRequestStatus.FULFILLED)
        use_case = GetOrCreateWantedThread(
            _make_thread_repo(), _make_message_repo(), _make_publisher(), _make_wanted_repo(wanted)
        )
        with pytest.raises(WantedRequestInactiveError):
            await use_case.execute(
                GetOrCreateWantedThreadInput(wanted_request_id=wanted.id, user_id="grower")
            )

    @pytest.mark.asyncio
    async def test_missing_request(self) -> None:
        use_case = GetOrCreateWantedThread(
            _make_thread_repo(), _make_message_repo(), _make_publisher(), _make_wanted_repo(None)
        )
        with pytest.raises(WantedRequestNotFoundError):
            await use_case.execute(
                GetOrCreateWantedThreadInput(wanted_request_id=uuid4(), user_id="grower")
            )

    @pytest.mark.asyncio
    async def test_owner_cannot_answer_own_request(self) -> None:
        wanted = WantedRequest(owner_id="collector")
        use_case = GetOrCreateWantedThread(
            _make_thread_repo(), _make_message_repo(), _make_publisher(), _make_wanted_repo(wanted)
        )
        with pytest.raises(SelfConversationError):
            await use_case.execute(
                GetOrCreateWantedThreadInput(wanted_request_id=wanted.id, user_id="collector")
            )


class TestGetOrCreateDirectThread:
    @pytest.mark.asyncio
    async def test_same_thread_from_either_side(self) -> None:
        thread_repo = _make_thread_repo()
        use_case = GetOrCreateDirectThread(thread_repo, _make_message_repo(), _make_publisher())

        first = await use_case.execute(GetOrCreateDirectThreadInput(user_id="b", other_user_id="a"))

        thread_repo.get_by_key = AsyncMock(return_value=first.thread)
        second = await use_case.execute(GetOrCreateDirectThreadInput(user_id="a", other_user_id="b"))

        assert first.created is True
        assert second.created is False
        assert second.thread.thread_key == "direct:a:b"
        thread_repo.get_by_key.assert_awaited_once_with("direct:a:b")

    @pytest.mark.asyncio
    async def test_cannot_message_self(self) -> None:
        use_case = GetOrCreateDirectThread(
            _make_thread_repo(), _make_message_repo(), _make_publisher()
        )
        with pytest.raises(SelfConversationError):
            await use_case.execute(GetOrCreateDirectThreadInput(user_id="a", other_user_id="a"))
