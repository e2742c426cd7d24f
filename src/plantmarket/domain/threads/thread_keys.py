"""
Canonical keys for get-or-create conversation uniqueness.

A key is ``<context>[:<context id>]:<user1>:<user2>`` with user1 < user2, so
the same pair of participants always maps to the same key regardless of who
opens the conversation. Components are percent-escaped, which keeps ``:`` out
of every component; UUIDs and slugs pass through unchanged.
"""
from urllib.parse import quote
from uuid import UUID

from plantmarket.domain.enums.thread_context import ThreadContext

KEY_DELIMITER = ":"

Identity = str | UUID


def _component(value: Identity, field_name: str) -> str:
    text = str(value)
    if not text:
        raise ValueError(f"{field_name} must not be empty.")
    return quote(text, safe="")


def canonical_pair(party_a: Identity, party_b: Identity) -> tuple[str, str]:
    """Return the two participant ids in canonical (ascending) order."""
    a, b = str(party_a), str(party_b)
    return (a, b) if a < b else (b, a)


def _thread_key(
    context: ThreadContext,
    context_id: Identity | None,
    party_a: Identity,
    party_b: Identity,
) -> str:
    user1, user2 = canonical_pair(party_a, party_b)
    parts = [context.value]
    if context_id is not None:
        parts.append(_component(context_id, f"{context.value} id"))
    parts.append(_component(user1, "participant id"))
    parts.append(_component(user2, "participant id"))
    return KEY_DELIMITER.join(parts)


def listing_thread_key(listing_id: Identity, party_a: Identity, party_b: Identity) -> str:
    return _thread_key(ThreadContext.LISTING, listing_id, party_a, party_b)


def wanted_thread_key(
    wanted_request_id: Identity, party_a: Identity, party_b: Identity
) -> str:
    return _thread_key(ThreadContext.WANTED, wanted_request_id, party_a, party_b)


def direct_thread_key(party_a: Identity, party_b: Identity) -> str:
    return _thread_key(ThreadContext.DIRECT, None, party_a, party_b)
