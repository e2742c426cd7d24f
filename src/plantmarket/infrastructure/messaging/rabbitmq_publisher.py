"""
RabbitMQ event publisher for marketplace domain events.

pika is blocking, so each publish runs in the default executor and opens its
own connection. Consumers bind to the topic exchange by routing key, e.g.
``order.status.*`` or ``listing.status.sold``.
"""
import asyncio
import json
from functools import partial
from typing import Any

import pika
import structlog

from plantmarket.application.interfaces.event_publisher import EventPublisher
from plantmarket.config import settings
from plantmarket.domain.events.domain_events import (
    DomainEvent,
    ListingStatusChangedEvent,
    OrderCreatedEvent,
    OrderStatusChangedEvent,
    ThreadOpenedEvent,
)

logger = structlog.get_logger(__name__)


def _event_to_routing_key(event: DomainEvent) -> str:
    if isinstance(event, OrderCreatedEvent):
        return "order.created"
    if isinstance(event, OrderStatusChangedEvent):
        return f"order.status.{event.to_status.value}"
    if isinstance(event, ListingStatusChangedEvent):
        return f"listing.status.{event.to_status.value}"
    if isinstance(event, ThreadOpenedEvent):
        return "thread.opened"
    return "event.unknown"


def _serialise_event(event: DomainEvent) -> str:
    payload: dict[str, Any] = {
        "event_type": _event_to_routing_key(event),
        "event_id": str(event.event_id),
        "occurred_at": event.occurred_at.isoformat(),
    }

    if isinstance(event, OrderCreatedEvent):
        payload.update(
            {
                "order_id": str(event.order_id),
                "thread_id": str(event.thread_id),
                "listing_id": str(event.listing_id),
                "buyer_id": event.buyer_id,
                "seller_id": event.seller_id,
            }
        )
    elif isinstance(event, OrderStatusChangedEvent):
        payload.update(
            {
                "order_id": str(event.order_id),
                "thread_id": str(event.thread_id),
                "listing_id": str(event.listing_id),
                "from_status": event.from_status.value,
                "to_status": event.to_status.value,
                "actor": event.actor.value,
            }
        )
    elif isinstance(event, ListingStatusChangedEvent):
        payload.update(
            {
                "listing_id": str(event.listing_id),
                "from_status": event.from_status.value,
                "to_status": event.to_status.value,
                "order_status": event.order_status.value if event.order_status else None,
            }
        )
    elif isinstance(event, ThreadOpenedEvent):
        payload.update(
            {
                "thread_id": str(event.thread_id),
                "context": event.context.value,
                "thread_key": event.thread_key,
                "opened_by": event.opened_by,
            }
        )

    return json.dumps(payload, default=str)


def _blocking_publish(rabbitmq_url: str, exchange: str, routing_key: str, body: str) -> None:
    connection = pika.BlockingConnection(pika.URLParameters(rabbitmq_url))
    try:
        channel = connection.channel()
        channel.exchange_declare(exchange=exchange, exchange_type="topic", durable=True)
        channel.basic_publish(
            exchange=exchange,
            routing_key=routing_key,
            body=body.encode(),
            properties=pika.BasicProperties(
                delivery_mode=pika.DeliveryMode.Persistent,
                content_type="application/json",
            ),
        )
    finally:
        connection.close()


class RabbitMQPublisher(EventPublisher):
    """Publishes domain events to a RabbitMQ topic exchange."""

    def __init__(
        self,
        rabbitmq_url: str = settings.rabbitmq_url,
        exchange: str = settings.events_exchange,
    ) -> None:
        self._url = rabbitmq_url
        self._exchange = exchange

    async def publish(self, event: DomainEvent) -> None:
        routing_key = _event_to_routing_key(event)
        body = _serialise_event(event)
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                None,
                partial(_blocking_publish, self._url, self._exchange, routing_key, body),
            )
            logger.debug("event_published", routing_key=routing_key, event_id=str(event.event_id))
        except Exception as exc:
            # Not re-raised: the state change is already committed.
            logger.error(
                "failed_to_publish_event",
                routing_key=routing_key,
                event_id=str(event.event_id),
                error=str(exc),
            )
