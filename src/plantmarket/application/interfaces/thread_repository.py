from abc import ABC, abstractmethod
from uuid import UUID

from plantmarket.domain.entities.thread import Thread


class ThreadKeyConflictError(Exception):
    """Raised by ThreadRepository.add when a thread with the same key already exists."""

    def __init__(self, thread_key: str) -> None:
        self.thread_key = thread_key
        super().__init__(f"A thread with key {thread_key!r} already exists.")


class ThreadRepository(ABC):
    """Port for conversations. Storage must enforce uniqueness of ``thread_key``."""

    @abstractmethod
    async def get_by_id(self, thread_id: UUID) -> Thread | None:
        ...

    @abstractmethod
    async def get_by_key(self, thread_key: str) -> Thread | None:
        ...

    @abstractmethod
    async def add(self, thread: Thread) -> None:
        """Insert a new thread; raise ThreadKeyConflictError on a duplicate key."""
        ...

    @abstractmethod
    async def save(self, thread: Thread) -> None:
        ...
