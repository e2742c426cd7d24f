from dataclasses import dataclass
from uuid import UUID

from plantmarket.application.use_cases.errors import OrderNotFoundError
from plantmarket.application.use_cases.order_context import (
    OrderAction,
    OrderActionOutput,
    logged_rejection,
    status_message,
)


@dataclass
class MarkOrderDeliveredInput:
    thread_id: UUID
    user_id: str


class MarkOrderDelivered(OrderAction):
    """
    Use case: the buyer confirms delivery.

    Marks the listing sold and stamps the thread so both sides become
    eligible to review each other.
    """

    async def execute(self, input_data: MarkOrderDeliveredInput) -> OrderActionOutput:
        ctx = await self._load_context(input_data.thread_id, input_data.user_id)
        order = ctx.order
        if order is None:
            raise OrderNotFoundError(input_data.thread_id)

        actor = ctx.actor_for(input_data.user_id)
        expected_status = order.status

        with logged_rejection(input_data.thread_id, input_data.user_id):
            previous_status = order.confirm_delivery(actor)
        listing_status = self._project_listing(ctx, order, previous_status)

        message = status_message(order, input_data.user_id, "Delivery confirmed", listing_status)
        output = await self._commit(
            ctx,
            order,
            previous_status=previous_status,
            expected_status=expected_status,
            messages=[message],
            user_id=input_data.user_id,
        )

        if order.delivered_at is not None:
            ctx.thread.mark_order_delivered(order.delivered_at)
            await self._thread_repo.save(ctx.thread)

        return output
