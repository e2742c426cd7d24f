from dataclasses import dataclass, field
from uuid import UUID

from plantmarket.application.schemas.order_commands import MarkShippedInput
from plantmarket.application.use_cases.errors import OrderNotFoundError
from plantmarket.application.use_cases.order_context import (
    OrderAction,
    OrderActionOutput,
    logged_rejection,
    status_message,
    system_message,
)


@dataclass
class MarkOrderShippedInput:
    thread_id: UUID
    user_id: str
    shipment: MarkShippedInput = field(default_factory=MarkShippedInput)


class MarkOrderShipped(OrderAction):
    """Use case: the seller marks the package as shipped, optionally with a tracking number."""

    async def execute(self, input_data: MarkOrderShippedInput) -> OrderActionOutput:
        ctx = await self._load_context(input_data.thread_id, input_data.user_id)
        order = ctx.order
        if order is None:
            raise OrderNotFoundError(input_data.thread_id)

        actor = ctx.actor_for(input_data.user_id)
        tracking_number = input_data.shipment.tracking_number
        expected_status = order.status

        with logged_rejection(input_data.thread_id, input_data.user_id):
            previous_status = order.mark_shipped(actor, tracking_number)
        listing_status = self._project_listing(ctx, order, previous_status)

        messages = [status_message(order, input_data.user_id, "Package shipped", listing_status)]
        if tracking_number:
            messages.append(
                system_message(
                    order,
                    input_data.user_id,
                    f"Tracking number: {tracking_number}",
                    kind="tracking_number",
                    tracking_number=tracking_number,
                )
            )

        return await self._commit(
            ctx,
            order,
            previous_status=previous_status,
            expected_status=expected_status,
            messages=messages,
            user_id=input_data.user_id,
        )
