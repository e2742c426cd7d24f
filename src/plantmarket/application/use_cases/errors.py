"""
Errors raised by the orchestration use cases.

Every message is user-facing and may be shown verbatim.
"""
from uuid import UUID


class ActionError(Exception):
    """Base class for use-case failures that should be surfaced to the user."""


class ThreadNotFoundError(ActionError):
    def __init__(self, thread_id: UUID) -> None:
        self.thread_id = thread_id
        super().__init__("The conversation does not exist.")


class ThreadAccessError(ActionError):
    def __init__(self, thread_id: UUID, user_id: str) -> None:
        self.thread_id = thread_id
        self.user_id = user_id
        super().__init__("You do not have access to this conversation.")


class NotAListingThreadError(ActionError):
    def __init__(self, thread_id: UUID) -> None:
        self.thread_id = thread_id
        super().__init__("Orders are only available in conversations about a listing.")


class ListingNotFoundError(ActionError):
    def __init__(self, listing_id: UUID) -> None:
        self.listing_id = listing_id
        super().__init__(f"Listing {listing_id} not found.")


class OrderNotFoundError(ActionError):
    def __init__(self, thread_id: UUID, message: str = "Order not found.") -> None:
        self.thread_id = thread_id
        super().__init__(message)


class OfferNotFoundError(ActionError):
    def __init__(self, message_id: UUID) -> None:
        self.message_id = message_id
        super().__init__("The offer was not found.")


class InvalidOfferError(ActionError):
    pass


class SelfConversationError(ActionError):
    pass


class WantedRequestNotFoundError(ActionError):
    def __init__(self, wanted_request_id: UUID) -> None:
        self.wanted_request_id = wanted_request_id
        super().__init__("The wanted request does not exist.")


class WantedRequestInactiveError(ActionError):
    def __init__(self, wanted_request_id: UUID) -> None:
        self.wanted_request_id = wanted_request_id
        super().__init__("The wanted request is no longer active.")
