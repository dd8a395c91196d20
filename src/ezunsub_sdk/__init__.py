"""EZUnsub Python SDK - Contact suppression and unsubscribe management."""

from .client import EZUnsubClient
from .headers import (
    DELIVERY_ID_HEADER,
    EVENT_HEADER,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    HeaderCollection,
    HeaderLookup,
    HeaderMapping,
    WebhookHeaders,
    extract_headers,
)
from .webhook import (
    VerificationResult,
    VerifierConfig,
    WebhookPayload,
    WebhookVerifier,
)
from .types import PiiMode, WebhookEvent
from .exceptions import (
    EZUnsubError,
    APIConnectionError,
    AuthenticationError,
    ForbiddenError,
    ValidationError,
    NotFoundError,
    RateLimitError,
    WebhookError,
    WebhookSignatureError,
    MissingHeaderError,
    MissingFieldError,
    PayloadParseError,
)

__version__ = "0.2.0"
__all__ = [
    "EZUnsubClient",
    "WebhookVerifier",
    "VerifierConfig",
    "VerificationResult",
    "WebhookEvent",
    "WebhookPayload",
    "WebhookHeaders",
    "HeaderLookup",
    "HeaderCollection",
    "HeaderMapping",
    "extract_headers",
    "SIGNATURE_HEADER",
    "TIMESTAMP_HEADER",
    "EVENT_HEADER",
    "DELIVERY_ID_HEADER",
    "PiiMode",
    "EZUnsubError",
    "APIConnectionError",
    "AuthenticationError",
    "ForbiddenError",
    "ValidationError",
    "NotFoundError",
    "RateLimitError",
    "WebhookError",
    "WebhookSignatureError",
    "MissingHeaderError",
    "MissingFieldError",
    "PayloadParseError",
]
