"""Unit tests for event routing and serialisation."""
import json
from unittest.mock import patch
from uuid import uuid4

import pytest

from plantmarket.domain.enums.listing_status import ListingLifecycleStatus
from plantmarket.domain.enums.order_status import OrderActor, OrderStatus
from plantmarket.domain.enums.thread_context import ThreadContext
from plantmarket.domain.events.domain_events import (
    DomainEvent,
    ListingStatusChangedEvent,
    OrderCreatedEvent,
    OrderStatusChangedEvent,
    ThreadOpenedEvent,
)
from plantmarket.infrastructure.messaging.noop_publisher import NoOpEventPublisher
from plantmarket.infrastructure.messaging.rabbitmq_publisher import (
    RabbitMQPublisher,
    _event_to_routing_key,
    _serialise_event,
)


class TestRoutingKeys:
    def test_order_created(self) -> None:
        assert _event_to_routing_key(OrderCreatedEvent()) == "order.created"

    def test_order_status_changed(self) -> None:
        event = OrderStatusChangedEvent(to_status=OrderStatus.SHIPPED)
        assert _event_to_routing_key(event) == "order.status.shipped"

    def test_listing_status_changed(self) -> None:
        event = ListingStatusChangedEvent(to_status=ListingLifecycleStatus.SOLD)
        assert _event_to_routing_key(event) == "listing.status.sold"

    def test_thread_opened(self) -> None:
        assert _event_to_routing_key(ThreadOpenedEvent()) == "thread.opened"

    def test_unknown_event(self) -> None:
        assert _event_to_routing_key(DomainEvent()) == "event.unknown"


class TestSerialisation:
    def test_order_status_payload(self) -> None:
        order_id = uuid4()
        event = OrderStatusChangedEvent(
            order_id=order_id,
            from_status=OrderStatus.ADDRESS_PROVIDED,
            to_status=OrderStatus.SHIPPED,
            actor=OrderActor.SELLER,
        )

        payload = json.loads(_serialise_event(event))

        assert payload["event_type"] == "order.status.shipped"
        assert payload["order_id"] == str(order_id)
        assert payload["from_status"] == "address_provided"
        assert payload["actor"] == "seller"
        assert payload["event_id"] == str(event.event_id)

    def test_listing_payload_without_order_status(self) -> None:
        payload = json.loads(_serialise_event(ListingStatusChangedEvent()))
        assert payload["order_status"] is None

    def test_thread_payload(self) -> None:
        event = ThreadOpenedEvent(
            context=ThreadContext.WANTED, thread_key="wanted:w:a:b", opened_by="a"
        )
        payload = json.loads(_serialise_event(event))
        assert payload["context"] == "wanted"
        assert payload["thread_key"] == "wanted:w:a:b"


class TestRabbitMQPublisher:
    @pytest.mark.asyncio
    async def test_publishes_to_configured_exchange(self) -> None:
        publisher = RabbitMQPublisher("amqp://example", exchange="test.events")
        event = OrderCreatedEvent()
        with patch(
            "plantmarket.infrastructure.messaging.rabbitmq_publisher._blocking_publish"
        ) as blocking_publish:
            await publisher.publish(event)

        url, exchange, routing_key, body = blocking_publish.call_args.args
        assert (url, exchange, routing_key) == ("amqp://example", "test.events", "order.created")
        assert json.loads(body)["event_id"] == str(event.event_id)

    @pytest.mark.asyncio
    async def test_publish_failure_is_not_raised(self) -> None:
        publisher = RabbitMQPublisher("amqp://example")
        with patch(
            "plantmarket.infrastructure.messaging.rabbitmq_publisher._blocking_publish",
            side_effect=ConnectionError("broker down"),
        ) as blocking_publish:
            await publisher.publish_many([OrderCreatedEvent(), ThreadOpenedEvent()])

        assert blocking_publish.call_count == 2


class TestNoOpEventPublisher:
    @pytest.mark.asyncio
    async def test_logs_routing_key_of_dropped_events(self) -> None:
        created = OrderCreatedEvent()
        shipped = OrderStatusChangedEvent(to_status=OrderStatus.SHIPPED)
        with patch("plantmarket.infrastructure.messaging.noop_publisher.logger") as logger:
            await NoOpEventPublisher().publish_many([created, shipped])

        dropped = [
            call.kwargs
            for call in logger.debug.call_args_list
            if call.args == ("marketplace_event_dropped",)
        ]
        assert dropped == [
            {"routing_key": "order.created", "event_id": str(created.event_id)},
            {"routing_key": "order.status.shipped", "event_id": str(shipped.event_id)},
        ]
        logger.debug.assert_called_with("marketplace_events_dropped", count=2)

    @pytest.mark.asyncio
    async def test_empty_batch_logs_nothing(self) -> None:
        with patch("plantmarket.infrastructure.messaging.noop_publisher.logger") as logger:
            await NoOpEventPublisher().publish_many([])
        logger.debug.assert_not_called()
