"""Pure bid validation for auction listings."""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

AUCTION_ENDED = "The auction has already ended."


@dataclass(frozen=True)
class BidValidationResult:
    valid: bool
    min_bid: Decimal
    error: str | None = None


def compute_min_bid(
    start_price: Decimal, min_increment: Decimal, top_bid_amount: Decimal | None
) -> Decimal:
    """First bid must reach the start price; later bids must beat the top bid by the increment."""
    if top_bid_amount is not None:
        return top_bid_amount + min_increment
    return start_price


def validate_bid(
    *,
    start_price: Decimal,
    min_increment: Decimal,
    top_bid_amount: Decimal | None,
    amount: Decimal,
    auction_ends_at: datetime | None,
    now: datetime | None = None,
) -> BidValidationResult:
    now = now or datetime.now(timezone.utc)
    min_bid = compute_min_bid(start_price, min_increment, top_bid_amount)

    if auction_ends_at is not None and auction_ends_at <= now:
        return BidValidationResult(valid=False, min_bid=min_bid, error=AUCTION_ENDED)
    if amount < min_bid:
        return BidValidationResult(
            valid=False,
            min_bid=min_bid,
            error=f"The minimum bid is {min_bid:.2f} €.",
        )
    return BidValidationResult(valid=True, min_bid=min_bid)
