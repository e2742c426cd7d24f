from dataclasses import dataclass, field
from uuid import UUID, uuid4

from plantmarket.domain.enums.thread_context import WantedRequestStatus


@dataclass
class WantedRequest:
    """A buyer's public "looking for" post that sellers can answer with offers."""

    id: UUID = field(default_factory=uuid4)
    owner_id: str = ""
    plant_name: str = ""
    status: WantedRequestStatus = WantedRequestStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status is WantedRequestStatus.ACTIVE
