from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from plantmarket.application.use_cases.errors import InvalidOfferError, OfferNotFoundError
from plantmarket.application.use_cases.order_context import (
    OrderAction,
    OrderActionOutput,
    logged_rejection,
    status_message,
)
from plantmarket.config import settings
from plantmarket.domain.entities.order import Order
from plantmarket.domain.enums.order_status import OrderStatus
from plantmarket.domain.enums.thread_context import MessageType, OfferType
from plantmarket.domain.rules.offers import format_eur, offer_amount_from_message
from plantmarket.domain.state_machine.order_state_machine import OrderStateMachine

_state_machine = OrderStateMachine()


@dataclass
class AcceptOfferInput:
    thread_id: UUID
    user_id: str
    offer_message_id: UUID


class AcceptOffer(OrderAction):
    """
    Use case: the seller accepts a buyer's price or swap offer.

    Creates the order on first acceptance and reserves the listing.
    """

    async def execute(self, input_data: AcceptOfferInput) -> OrderActionOutput:
        ctx = await self._load_context(input_data.thread_id, input_data.user_id)
        actor = ctx.actor_for(input_data.user_id)
        current_status = ctx.order.status if ctx.order else OrderStatus.NEGOTIATING

        # Reject wrong actor or wrong state before looking at the offer itself.
        with logged_rejection(input_data.thread_id, input_data.user_id):
            _state_machine.validate_transition(
                current_status, OrderStatus.PRICE_ACCEPTED, actor
            )

        offer = await self._message_repo.get_by_id(ctx.thread.id, input_data.offer_message_id)
        if offer is None:
            raise OfferNotFoundError(input_data.offer_message_id)
        if not offer.message_type.is_offer:
            raise InvalidOfferError("This message is not an offer.")
        if offer.sender_id != ctx.buyer_id:
            raise InvalidOfferError("Only offers sent by the buyer can be accepted.")

        if offer.message_type is MessageType.OFFER_PRICE:
            offer_type = OfferType.PRICE
            amount = offer_amount_from_message(offer.metadata, offer.body)
            if amount is None:
                raise InvalidOfferError("The offer amount is invalid.")
            body = f"Price accepted: {format_eur(amount)}"
        else:
            offer_type = OfferType.SWAP
            amount = Decimal(settings.swap_sentinel_price_eur)
            body = "Swap accepted"

        expected_status = ctx.order.status if ctx.order else None
        order = ctx.order or Order.start_negotiation(
            thread_id=ctx.thread.id,
            listing_id=ctx.listing.id,
            buyer_id=ctx.buyer_id,
            seller_id=ctx.seller_id,
        )

        with logged_rejection(input_data.thread_id, input_data.user_id):
            previous_status = order.accept_price(actor, amount, offer_type)
        listing_status = self._project_listing(ctx, order, previous_status)

        message = status_message(
            order,
            input_data.user_id,
            body,
            listing_status,
            offer_message_id=str(offer.id),
            offer_type=offer_type.value,
            amount_eur=str(amount),
        )

        return await self._commit(
            ctx,
            order,
            previous_status=previous_status,
            expected_status=expected_status,
            messages=[message],
            user_id=input_data.user_id,
        )
