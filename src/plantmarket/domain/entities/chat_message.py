from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from plantmarket.domain.enums.thread_context import MessageType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ChatMessage:
    thread_id: UUID
    sender_id: str
    body: str
    message_type: MessageType = MessageType.TEXT
    metadata: dict[str, Any] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=_utcnow)
