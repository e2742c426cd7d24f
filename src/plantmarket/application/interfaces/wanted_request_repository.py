from abc import ABC, abstractmethod
from uuid import UUID

from plantmarket.domain.entities.wanted_request import WantedRequest


class WantedRequestRepository(ABC):
    @abstractmethod
    async def get_by_id(self, wanted_request_id: UUID) -> WantedRequest | None:
        ...
