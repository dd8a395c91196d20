"""Webhook verification and parsing utilities."""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .exceptions import (
    MissingFieldError,
    PayloadParseError,
    WebhookError,
    WebhookSignatureError,
)
from .headers import HeaderLookup, WebhookHeaders, extract_headers
from .types import WebhookEvent

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="
DEFAULT_MAX_AGE_SECONDS = 300

REQUIRED_FIELDS = ("event", "timestamp", "data")


@dataclass(frozen=True)
class VerifierConfig:
    """Shared secret and replay window for a :class:`WebhookVerifier`.

    ``secret`` is stored as bytes and never shown in ``repr``.
    """

    secret: bytes = field(repr=False)
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS

    def __post_init__(self) -> None:
        if isinstance(self.secret, str):
            object.__setattr__(self, "secret", self.secret.encode("utf-8"))
        if not self.secret:
            raise ValueError("Webhook secret must not be empty")
        if self.max_age_seconds < 0:
            raise ValueError("max_age_seconds must be non-negative")


@dataclass
class WebhookPayload:
    """Parsed webhook payload."""

    event: WebhookEvent
    timestamp: str
    data: dict[str, Any]
    delivery_id: str = ""

    @property
    def is_test(self) -> bool:
        """True for deliveries sent from the dashboard's "send test" button."""
        return self.event == "test"

    @property
    def contact_id(self) -> str | None:
        """Get contact ID from data (for contact events)."""
        return self.data.get("contactId")

    @property
    def link_code(self) -> str | None:
        return self.data.get("linkCode")

    @property
    def email(self) -> str | None:
        """Get email from data (only sent when the webhook's PII mode is ``full``)."""
        return self.data.get("email")

    @property
    def email_hash(self) -> str | None:
        return self.data.get("emailHash")

    @property
    def phone(self) -> str | None:
        """Get phone from data (only sent when the webhook's PII mode is ``full``)."""
        return self.data.get("phone")

    @property
    def phone_hash(self) -> str | None:
        return self.data.get("phoneHash")


@dataclass
class VerificationResult:
    """Outcome of :meth:`WebhookVerifier.verify`.

    Holds either the payload or the error, never both.
    """

    payload: WebhookPayload | None = None
    error: WebhookError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.payload is not None

    def __bool__(self) -> bool:
        return self.ok


class WebhookVerifier:
    """Verify and parse EZUnsub webhook payloads.

    Create one verifier per webhook secret at startup and share it; it holds
    no mutable state and is safe to use from many threads at once.

    Example:
        ```python
        from ezunsub_sdk import WebhookError, WebhookVerifier

        verifier = WebhookVerifier(secret="your-webhook-secret")

        # In your webhook handler (e.g., Flask/FastAPI)
        @app.post("/webhooks/ezunsub")
        def handle_webhook(request):
            # Must be the raw body, not re-serialized JSON
            body = request.get_data()

            try:
                payload = verifier.verify_request(request.headers, body)
            except WebhookError as e:
                return {"error": str(e)}, 400

            if payload.event == "contact.created":
                print(f"New contact: {payload.email_hash}")
            elif payload.event == "contact.updated":
                print(f"Contact updated: {payload.contact_id}")

            return {"status": "ok"}
        ```
    """

    def __init__(self, secret: str | bytes, max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS):
        """Initialize webhook verifier.

        Args:
            secret: Webhook secret from EZUnsub.
            max_age_seconds: Maximum clock difference for webhook timestamps,
                past or future (default: 300s / 5min).

        Raises:
            ValueError: If the secret is empty or max_age_seconds is negative.
        """
        self._config = VerifierConfig(secret=secret, max_age_seconds=max_age_seconds)

    @classmethod
    def from_config(cls, config: VerifierConfig) -> WebhookVerifier:
        return cls(config.secret, max_age_seconds=config.max_age_seconds)

    @property
    def config(self) -> VerifierConfig:
        return self._config

    @property
    def max_age_seconds(self) -> int:
        return self._config.max_age_seconds

    def __repr__(self) -> str:
        return f"WebhookVerifier(max_age_seconds={self.max_age_seconds})"

    def compute_signature(self, timestamp: int, body: str | bytes) -> str:
        """Compute the hex HMAC-SHA256 of ``"{timestamp}.{body}"``.

        ``body`` is signed exactly as given; ``str`` bodies are UTF-8 encoded.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        message = f"{timestamp}.".encode("ascii") + bytes(body)
        return hmac.new(self._config.secret, message, hashlib.sha256).hexdigest()

    def verify_signature(self, signature: str, timestamp: int, body: str | bytes) -> bool:
        """Verify webhook signature.

        Never raises: malformed input is reported as an invalid signature.

        Args:
            signature: Signature from X-Webhook-Signature header, with or
                without the ``sha256=`` prefix.
            timestamp: Timestamp from X-Webhook-Timestamp header.
            body: Raw request body.

        Returns:
            True if signature is valid, False otherwise.
        """
        if not isinstance(signature, str) or not signature:
            return False
        if not isinstance(body, (str, bytes, bytearray)):
            return False
        try:
            ts = int(timestamp)
        except (TypeError, ValueError, OverflowError):
            return False

        now = int(time.time())
        if abs(now - ts) > self._config.max_age_seconds:
            logger.debug("Rejected webhook: timestamp %s outside replay window", ts)
            return False

        expected = self.compute_signature(ts, body)

        if signature.startswith(SIGNATURE_PREFIX):
            signature = signature[len(SIGNATURE_PREFIX):]

        # Both sides compared as bytes
        try:
            supplied = signature.encode()
        except UnicodeEncodeError:
            return False
        if hmac.compare_digest(expected.encode(), supplied):
            return True
        logger.debug("Rejected webhook: signature mismatch")
        return False

    def verify_and_parse(
        self,
        signature: str,
        timestamp: str | int,
        body: str | bytes,
        delivery_id: str | None = "",
    ) -> WebhookPayload:
        """Verify signature and parse webhook payload.

        Args:
            signature: Signature from X-Webhook-Signature header.
            timestamp: Timestamp from X-Webhook-Timestamp header.
            body: Raw request body (JSON string or bytes).
            delivery_id: Delivery ID from X-Webhook-Delivery-Id header.

        Returns:
            Parsed webhook payload.

        Raises:
            WebhookSignatureError: If the signature or timestamp is invalid.
            PayloadParseError: If the body is not a JSON object.
            MissingFieldError: If ``event``, ``timestamp`` or ``data`` is missing.
        """
        try:
            ts = int(timestamp)
        except (TypeError, ValueError, OverflowError):
            logger.debug("Rejected webhook: unparseable timestamp")
            raise WebhookSignatureError() from None

        if not self.verify_signature(signature, ts, body):
            raise WebhookSignatureError()

        try:
            parsed = json.loads(body)
        except (ValueError, RecursionError) as e:
            raise PayloadParseError(f"Invalid JSON payload: {e}") from e

        if not isinstance(parsed, dict):
            raise PayloadParseError("Invalid JSON payload: expected an object")

        for name in REQUIRED_FIELDS:
            if name not in parsed or _is_empty(parsed[name]):
                raise MissingFieldError(name)

        if not isinstance(parsed["data"], dict):
            raise PayloadParseError("Invalid JSON payload: 'data' must be an object")

        for name in ("event", "timestamp"):
            if not isinstance(parsed[name], str):
                raise PayloadParseError(f"Invalid JSON payload: '{name}' must be a string")

        return WebhookPayload(
            event=parsed["event"],
            timestamp=parsed["timestamp"],
            data=parsed["data"],
            delivery_id=delivery_id or "",
        )

    def verify_request(
        self,
        headers: HeaderLookup | httpx.Headers | Mapping[str, str],
        body: str | bytes,
    ) -> WebhookPayload:
        """Verify a whole webhook request: headers, signature, and body.

        Args:
            headers: Request headers, in any casing.
            body: Raw request body.

        Returns:
            Parsed webhook payload, with ``delivery_id`` taken from the headers.

        Raises:
            WebhookError: The first failing stage's error.
        """
        extracted = extract_headers(headers)
        return self.verify_and_parse(
            signature=extracted.signature,
            timestamp=extracted.timestamp,
            body=body,
            delivery_id=extracted.delivery_id,
        )

    def verify(
        self,
        headers: HeaderLookup | httpx.Headers | Mapping[str, str],
        body: str | bytes,
    ) -> VerificationResult:
        """Like :meth:`verify_request`, but returns the error instead of raising it."""
        try:
            return VerificationResult(payload=self.verify_request(headers, body))
        except WebhookError as e:
            return VerificationResult(error=e)

    @staticmethod
    def extract_headers(
        headers: HeaderLookup | httpx.Headers | Mapping[str, str],
    ) -> WebhookHeaders:
        """Extract webhook headers from a request. See :func:`extract_headers`."""
        return extract_headers(headers)


def _is_empty(value: Any) -> bool:
    # JSON null, "", false and 0 count as not set; an empty object does not
    if isinstance(value, bool):
        return value is False
    return value is None or value == "" or (isinstance(value, (int, float)) and value == 0)
