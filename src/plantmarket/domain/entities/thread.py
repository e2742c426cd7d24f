from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from plantmarket.domain.enums.thread_context import ThreadContext
from plantmarket.domain.threads.thread_keys import (
    canonical_pair,
    direct_thread_key,
    listing_thread_key,
    wanted_thread_key,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Thread:
    """
    A conversation between two users, scoped to a listing, a wanted request,
    or nothing at all (direct).

    Participants are stored in canonical order and ``thread_key`` is the
    uniqueness key storage enforces; build threads through the factories.
    """

    context: ThreadContext
    user1_id: str
    user2_id: str
    thread_key: str
    id: UUID = field(default_factory=uuid4)
    listing_id: UUID | None = None
    wanted_request_id: UUID | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    order_delivered_at: datetime | None = None

    @classmethod
    def for_listing(cls, listing_id: UUID, party_a: str, party_b: str) -> "Thread":
        user1, user2 = canonical_pair(party_a, party_b)
        return cls(
            context=ThreadContext.LISTING,
            user1_id=user1,
            user2_id=user2,
            thread_key=listing_thread_key(listing_id, user1, user2),
            listing_id=listing_id,
        )

    @classmethod
    def for_wanted(cls, wanted_request_id: UUID, party_a: str, party_b: str) -> "Thread":
        user1, user2 = canonical_pair(party_a, party_b)
        return cls(
            context=ThreadContext.WANTED,
            user1_id=user1,
            user2_id=user2,
            thread_key=wanted_thread_key(wanted_request_id, user1, user2),
            wanted_request_id=wanted_request_id,
        )

    @classmethod
    def direct(cls, party_a: str, party_b: str) -> "Thread":
        user1, user2 = canonical_pair(party_a, party_b)
        return cls(
            context=ThreadContext.DIRECT,
            user1_id=user1,
            user2_id=user2,
            thread_key=direct_thread_key(user1, user2),
        )

    def is_participant(self, user_id: str | UUID) -> bool:
        return str(user_id) in (self.user1_id, self.user2_id)

    def counterpart_of(self, user_id: str | UUID) -> str:
        """Return the other participant; raises ValueError for outsiders."""
        user = str(user_id)
        if user == self.user1_id:
            return self.user2_id
        if user == self.user2_id:
            return self.user1_id
        raise ValueError(f"User {user} is not a participant of thread {self.id}.")

    def mark_order_delivered(self, delivered_at: datetime) -> None:
        self.order_delivered_at = delivered_at
        self.updated_at = delivered_at
