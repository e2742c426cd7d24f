from abc import ABC, abstractmethod
from uuid import UUID

from plantmarket.domain.entities.chat_message import ChatMessage


class MessageRepository(ABC):
    """Port for chat messages within threads."""

    @abstractmethod
    async def get_by_id(self, thread_id: UUID, message_id: UUID) -> ChatMessage | None:
        """Return the message only if it belongs to ``thread_id``."""
        ...

    @abstractmethod
    async def add_many(self, messages: list[ChatMessage]) -> None:
        ...
