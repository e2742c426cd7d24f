"""
Publisher for local runs and tests that have no broker.

Events are routed exactly as the RabbitMQ publisher would route them and then
dropped, so the debug log shows what consumers would have received.
"""
import structlog

from plantmarket.application.interfaces.event_publisher import EventPublisher
from plantmarket.domain.events.domain_events import DomainEvent
from plantmarket.infrastructure.messaging.rabbitmq_publisher import _event_to_routing_key

logger = structlog.get_logger(__name__)


class NoOpEventPublisher(EventPublisher):
    async def publish(self, event: DomainEvent) -> None:
        logger.debug(
            "marketplace_event_dropped",
            routing_key=_event_to_routing_key(event),
            event_id=str(event.event_id),
        )

    async def publish_many(self, events: list[DomainEvent]) -> None:
        if not events:
            return
        for event in events:
            await self.publish(event)
        logger.debug("marketplace_events_dropped", count=len(events))
