"""Case-insensitive extraction of EZUnsub webhook headers.

Frameworks hand over request headers in different shapes. ``httpx.Headers``
already normalizes case, while a plain ``dict`` keeps whatever casing the
sender or proxy used. Both go through :func:`extract_headers`:

    ```python
    from ezunsub_sdk import extract_headers

    headers = extract_headers(request.headers)
    headers.signature, headers.timestamp
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import NamedTuple, Protocol

import httpx

from .exceptions import MissingHeaderError


SIGNATURE_HEADER = "X-Webhook-Signature"
TIMESTAMP_HEADER = "X-Webhook-Timestamp"
EVENT_HEADER = "X-Webhook-Event"
DELIVERY_ID_HEADER = "X-Webhook-Delivery-Id"


class HeaderLookup(Protocol):
    """Anything that can look up a header value by name, ignoring case."""

    def get(self, name: str) -> str | None:
        ...


class HeaderCollection:
    """Adapter for header collections that normalize case themselves."""

    def __init__(self, headers: httpx.Headers):
        self._headers = headers

    def get(self, name: str) -> str | None:
        return self._headers.get(name)


class HeaderMapping:
    """Adapter for plain mappings; scans every entry comparing names case-insensitively."""

    def __init__(self, headers: Mapping[str, str]):
        self._headers = headers

    def get(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self._headers.items():
            if key.lower() == wanted:
                return value
        return None


class WebhookHeaders(NamedTuple):
    """Webhook-related request headers."""

    signature: str
    timestamp: str
    event: str
    delivery_id: str


def header_lookup(carrier: HeaderLookup | httpx.Headers | Mapping[str, str]) -> HeaderLookup:
    """Wrap a header carrier in the matching lookup adapter."""
    if isinstance(carrier, httpx.Headers):
        return HeaderCollection(carrier)
    if isinstance(carrier, Mapping):
        return HeaderMapping(carrier)
    # Already a lookup (an adapter, or any object with a case-insensitive get)
    return carrier


def extract_headers(carrier: HeaderLookup | httpx.Headers | Mapping[str, str]) -> WebhookHeaders:
    """Extract webhook headers from a request.

    Args:
        carrier: Request headers, either ``httpx.Headers`` or any mapping.

    Returns:
        WebhookHeaders of (signature, timestamp, event, delivery_id). The
        last two are empty strings when not sent.

    Raises:
        MissingHeaderError: If the signature or timestamp header is missing.
    """
    lookup = header_lookup(carrier)

    signature = lookup.get(SIGNATURE_HEADER)
    timestamp = lookup.get(TIMESTAMP_HEADER)

    if not signature:
        raise MissingHeaderError(SIGNATURE_HEADER)
    if not timestamp:
        raise MissingHeaderError(TIMESTAMP_HEADER)

    return WebhookHeaders(
        signature=signature,
        timestamp=timestamp,
        event=lookup.get(EVENT_HEADER) or "",
        delivery_id=lookup.get(DELIVERY_ID_HEADER) or "",
    )
