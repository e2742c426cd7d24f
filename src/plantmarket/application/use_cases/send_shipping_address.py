from dataclasses import dataclass
from uuid import UUID

import structlog

from plantmarket.application.interfaces.event_publisher import EventPublisher
from plantmarket.application.interfaces.listing_repository import ListingRepository
from plantmarket.application.interfaces.message_repository import MessageRepository
from plantmarket.application.interfaces.order_repository import OrderRepository
from plantmarket.application.interfaces.profile_address_repository import (
    ProfileAddressRepository,
)
from plantmarket.application.interfaces.thread_repository import ThreadRepository
from plantmarket.application.schemas.order_commands import ShippingAddressInput
from plantmarket.application.use_cases.errors import OrderNotFoundError
from plantmarket.application.use_cases.order_context import (
    OrderAction,
    OrderActionOutput,
    logged_rejection,
    status_message,
    system_message,
)
from plantmarket.domain.rules.offers import format_address_for_thread

logger = structlog.get_logger(__name__)

ORDER_NOT_READY = "The order is not ready yet. The seller must accept the price first."


@dataclass
class SendShippingAddressInput:
    thread_id: UUID
    user_id: str
    address: ShippingAddressInput


class SendShippingAddress(OrderAction):
    """Use case: the buyer sends the shipping address for an accepted order."""

    def __init__(
        self,
        thread_repo: ThreadRepository,
        listing_repo: ListingRepository,
        order_repo: OrderRepository,
        message_repo: MessageRepository,
        event_publisher: EventPublisher,
        profile_repo: ProfileAddressRepository,
    ) -> None:
        super().__init__(thread_repo, listing_repo, order_repo, message_repo, event_publisher)
        self._profile_repo = profile_repo

    async def execute(self, input_data: SendShippingAddressInput) -> OrderActionOutput:
        ctx = await self._load_context(input_data.thread_id, input_data.user_id)
        order = ctx.order
        if order is None:
            raise OrderNotFoundError(input_data.thread_id, ORDER_NOT_READY)

        actor = ctx.actor_for(input_data.user_id)
        address = input_data.address.to_address()
        expected_status = order.status

        with logged_rejection(input_data.thread_id, input_data.user_id):
            previous_status = order.provide_shipping_address(actor, address)
        listing_status = self._project_listing(ctx, order, previous_status)

        messages = [
            status_message(order, input_data.user_id, "Shipping address sent", listing_status),
            system_message(
                order,
                input_data.user_id,
                format_address_for_thread(address),
                kind="shipping_address",
                address=address.to_dict(),
            ),
        ]

        output = await self._commit(
            ctx,
            order,
            previous_status=previous_status,
            expected_status=expected_status,
            messages=messages,
            user_id=input_data.user_id,
        )

        if input_data.address.save_as_default:
            await self._profile_repo.save_default(input_data.user_id, address)
            logger.info("default_shipping_address_saved", user_id=input_data.user_id)

        return output
