from abc import ABC, abstractmethod
from uuid import UUID

from plantmarket.domain.entities.order import Order
from plantmarket.domain.enums.order_status import OrderStatus


class StaleOrderError(Exception):
    """The stored order no longer has the status the caller read."""

    def __init__(self, order_id: UUID, expected_status: OrderStatus | None) -> None:
        self.order_id = order_id
        self.expected_status = expected_status
        expected = expected_status.value if expected_status else "no order"
        super().__init__(
            f"Order {order_id} changed concurrently (expected {expected}). Reload and try again."
        )


class OrderRepository(ABC):
    """Port for persisting and querying Order aggregates. One order per listing thread."""

    @abstractmethod
    async def get_by_thread_id(self, thread_id: UUID) -> Order | None:
        ...

    @abstractmethod
    async def save(self, order: Order, *, expected_status: OrderStatus | None) -> None:
        """
        Insert or update ``order`` as a compare-and-swap on its status.

        ``expected_status`` is the status the caller loaded (None when the
        order is new). Implementations must raise StaleOrderError when the
        stored row does not match it.
        """
        ...
