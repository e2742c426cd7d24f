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
class CancelOrderInput:
    thread_id: UUID
    user_id: str
    reason: str | None = None


class CancelOrder(OrderAction):
    """Use case: either party cancels the order."""

    async def execute(self, input_data: CancelOrderInput) -> OrderActionOutput:
        ctx = await self._load_context(input_data.thread_id, input_data.user_id)
        order = ctx.order
        if order is None:
            raise OrderNotFoundError(input_data.thread_id)

        actor = ctx.actor_for(input_data.user_id)
        reason = (input_data.reason or "").strip() or None
        expected_status = order.status

        with logged_rejection(input_data.thread_id, input_data.user_id):
            previous_status = order.cancel(actor, reason)
        listing_status = self._project_listing(ctx, order, previous_status)

        body = f"Order cancelled: {reason}" if reason else "Order cancelled"
        message = status_message(
            order,
            input_data.user_id,
            body,
            listing_status,
            cancel_reason=reason,
        )

        return await self._commit(
            ctx,
            order,
            previous_status=previous_status,
            expected_status=expected_status,
            messages=[message],
            user_id=input_data.user_id,
        )
