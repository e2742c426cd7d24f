"""Whether a participant may review the other side of a conversation."""
from dataclasses import dataclass

ELIGIBILITY_MESSAGE_THRESHOLD = 2


@dataclass(frozen=True)
class ReviewEligibilityResult:
    eligible: bool
    threshold_met: bool
    reason: str | None = None


def compute_review_eligibility(
    *,
    message_count_self: int,
    message_count_other: int,
    deal_confirmed: bool,
    order_delivered: bool,
    already_reviewed: bool,
) -> ReviewEligibilityResult:
    threshold_met = deal_confirmed or (
        message_count_self >= ELIGIBILITY_MESSAGE_THRESHOLD
        and message_count_other >= ELIGIBILITY_MESSAGE_THRESHOLD
    )
    eligible = threshold_met and order_delivered and not already_reviewed

    reason: str | None = None
    if already_reviewed:
        reason = "You have already reviewed this listing."
    elif not order_delivered:
        reason = "You can leave a review once the order is confirmed as delivered."
    elif not threshold_met:
        reason = (
            f"You can leave a review after at least {ELIGIBILITY_MESSAGE_THRESHOLD} "
            "messages from both sides or once both of you confirm the deal."
        )

    return ReviewEligibilityResult(eligible=eligible, threshold_met=threshold_met, reason=reason)
