from abc import ABC, abstractmethod
from uuid import UUID

from plantmarket.domain.entities.listing import Listing


class ListingRepository(ABC):
    """Port for reading listings and persisting their lifecycle status."""

    @abstractmethod
    async def get_by_id(self, listing_id: UUID) -> Listing | None:
        ...

    @abstractmethod
    async def save(self, listing: Listing) -> None:
        ...
