"""EZUnsub SDK exceptions."""

from __future__ import annotations


class EZUnsubError(Exception):
    """Base exception for EZUnsub SDK."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


# REST API errors


class AuthenticationError(EZUnsubError):
    """Raised when the API key is rejected (401)."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, status_code=401)


class ForbiddenError(EZUnsubError):
    """Raised when access is denied (403)."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message, status_code=403)


class NotFoundError(EZUnsubError):
    """Raised when a resource is not found (404)."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class RateLimitError(EZUnsubError):
    """Raised when rate limit is exceeded (429).

    ``retry_after`` holds the ``Retry-After`` header in seconds, if sent.
    """

    def __init__(self, message: str = "Rate limit exceeded", retry_after: int | None = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class ValidationError(EZUnsubError):
    """Raised when request validation fails (400)."""

    def __init__(self, message: str = "Invalid request"):
        super().__init__(message, status_code=400)


class APIConnectionError(EZUnsubError):
    """Raised when the request never got a response (timeout, DNS, refused)."""

    def __init__(self, message: str = "Request failed"):
        super().__init__(message)


# Webhook verification errors


class WebhookError(EZUnsubError, ValueError):
    """Base for webhook delivery rejections.

    Subclasses ``ValueError`` so ``except ValueError`` handlers keep working.
    """


class WebhookSignatureError(WebhookError):
    """Signature mismatch or timestamp outside the replay window.

    The message is fixed and never says which check failed.
    """

    def __init__(self, message: str = "Invalid webhook signature"):
        super().__init__(message)


class MissingHeaderError(WebhookError):
    """A required webhook header is absent."""

    def __init__(self, header: str):
        self.header = header
        super().__init__(f"Missing {header} header")


class MissingFieldError(WebhookError):
    """A required payload field is absent or empty."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing '{field}' field in payload")


class PayloadParseError(WebhookError):
    """The verified body is not a well-formed JSON object."""
