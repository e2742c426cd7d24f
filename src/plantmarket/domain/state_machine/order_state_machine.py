from dataclasses import dataclass

from plantmarket.domain.enums.order_status import (
    OrderActor,
    OrderStatus,
    as_order_actor,
    as_order_status,
)

REASON_NOT_PARTICIPANT = "You are not a participant in this order."
REASON_NO_RENEGOTIATION = "An order cannot be moved back into negotiation."
REASON_ADDRESS_REQUIRED = "A shipping address is required for this step."
REASON_INVALID_TRANSITION = "Invalid order status transition."


@dataclass(frozen=True)
class _ForwardRule:
    actor: OrderActor
    allowed_from: frozenset[OrderStatus]
    wrong_actor_reason: str
    wrong_state_reason: str
    requires_shipping_address: bool = False


# Forward transitions: to_status -> who may drive it and from where.
# Each target also accepts itself as a source so retried requests are no-ops.
FORWARD_RULES: dict[OrderStatus, _ForwardRule] = {
    OrderStatus.PRICE_ACCEPTED: _ForwardRule(
        actor=OrderActor.SELLER,
        allowed_from=frozenset(
            {OrderStatus.NEGOTIATING, OrderStatus.PRICE_ACCEPTED, OrderStatus.CANCELLED}
        ),
        wrong_actor_reason="Only the seller can accept the price.",
        wrong_state_reason="The price can no longer be accepted in this state.",
    ),
    OrderStatus.ADDRESS_PROVIDED: _ForwardRule(
        actor=OrderActor.BUYER,
        allowed_from=frozenset({OrderStatus.PRICE_ACCEPTED, OrderStatus.ADDRESS_PROVIDED}),
        wrong_actor_reason="Only the buyer can send the shipping address.",
        wrong_state_reason="The shipping address cannot be sent right now.",
        requires_shipping_address=True,
    ),
    OrderStatus.SHIPPED: _ForwardRule(
        actor=OrderActor.SELLER,
        allowed_from=frozenset({OrderStatus.ADDRESS_PROVIDED, OrderStatus.SHIPPED}),
        wrong_actor_reason="Only the seller can mark the package as shipped.",
        wrong_state_reason="The package can only be shipped once the address is provided.",
    ),
    OrderStatus.DELIVERED: _ForwardRule(
        actor=OrderActor.BUYER,
        allowed_from=frozenset({OrderStatus.SHIPPED, OrderStatus.DELIVERED}),
        wrong_actor_reason="Only the buyer can confirm delivery.",
        wrong_state_reason="Delivery can only be confirmed after the package is shipped.",
    ),
}

CANCELLING_ACTORS: frozenset[OrderActor] = frozenset({OrderActor.BUYER, OrderActor.SELLER})


@dataclass(frozen=True)
class OrderTransitionResult:
    allowed: bool
    reason: str | None = None


_ALLOWED = OrderTransitionResult(allowed=True)


def _rejected(reason: str) -> OrderTransitionResult:
    return OrderTransitionResult(allowed=False, reason=reason)


def can_transition_order(
    from_status: OrderStatus | str,
    to_status: OrderStatus | str,
    actor: OrderActor | str,
    has_shipping_address: bool = False,
) -> OrderTransitionResult:
    """
    Decide whether ``actor`` may move an order from ``from_status`` to ``to_status``.

    Never raises: every rejection comes back as a result with a user-facing
    reason. Rules are evaluated in order and the first match wins.
    """
    source = as_order_status(from_status)
    target = as_order_status(to_status)
    role = as_order_actor(actor)

    if role is None or role is OrderActor.OTHER:
        return _rejected(REASON_NOT_PARTICIPANT)

    if target is OrderStatus.NEGOTIATING:
        return _rejected(REASON_NO_RENEGOTIATION)

    rule = FORWARD_RULES.get(target) if target is not None else None
    if rule is not None:
        if role is not rule.actor:
            return _rejected(rule.wrong_actor_reason)
        if source not in rule.allowed_from:
            return _rejected(rule.wrong_state_reason)
        if rule.requires_shipping_address and not has_shipping_address:
            return _rejected(REASON_ADDRESS_REQUIRED)
        return _ALLOWED

    if target is OrderStatus.CANCELLED and role in CANCELLING_ACTORS:
        # No source restriction, delivered orders included.
        return _ALLOWED

    return _rejected(REASON_INVALID_TRANSITION)


class OrderTransitionRejectedError(Exception):
    """Raised by the orchestration layer when the state machine rejects a transition."""

    def __init__(
        self,
        from_status: OrderStatus | str,
        to_status: OrderStatus | str,
        actor: OrderActor | str,
        reason: str,
    ) -> None:
        self.from_status = from_status
        self.to_status = to_status
        self.actor = actor
        self.reason = reason
        super().__init__(reason)


class OrderStateMachine:
    """
    Validates order transitions for a buyer/seller pair.

    Stateless: pass the current status, the actor and the address flag explicitly.
    """

    def check(
        self,
        from_status: OrderStatus,
        to_status: OrderStatus,
        actor: OrderActor,
        has_shipping_address: bool = False,
    ) -> OrderTransitionResult:
        return can_transition_order(from_status, to_status, actor, has_shipping_address)

    def can_transition(
        self,
        from_status: OrderStatus,
        to_status: OrderStatus,
        actor: OrderActor,
        has_shipping_address: bool = False,
    ) -> bool:
        """Return True if ``actor`` may move the order from_status → to_status."""
        return self.check(from_status, to_status, actor, has_shipping_address).allowed

    def validate_transition(
        self,
        from_status: OrderStatus,
        to_status: OrderStatus,
        actor: OrderActor,
        has_shipping_address: bool = False,
    ) -> None:
        """Raise OrderTransitionRejectedError if the transition is not permitted."""
        result = self.check(from_status, to_status, actor, has_shipping_address)
        if not result.allowed:
            raise OrderTransitionRejectedError(
                from_status,
                to_status,
                actor,
                result.reason or REASON_INVALID_TRANSITION,
            )

    def get_allowed_transitions(
        self,
        from_status: OrderStatus,
        actor: OrderActor,
        has_shipping_address: bool = False,
    ) -> frozenset[OrderStatus]:
        """Return the statuses ``actor`` can move the order to right now."""
        return frozenset(
            to_status
            for to_status in OrderStatus
            if self.can_transition(from_status, to_status, actor, has_shipping_address)
        )
