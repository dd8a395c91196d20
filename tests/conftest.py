"""Shared fixtures for webhook tests."""

import hashlib
import hmac

import pytest

from ezunsub_sdk import WebhookVerifier


SECRET = "test-secret-123"


def create_signature(secret: str, timestamp: int, body: str) -> str:
    """Create a valid webhook signature."""
    message = f"{timestamp}.{body}"
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).hexdigest()


@pytest.fixture
def sign():
    """Sign a body with the test secret."""

    def _sign(timestamp: int, body: str, secret: str = SECRET) -> str:
        return create_signature(secret, timestamp, body)

    return _sign


@pytest.fixture
def verifier():
    return WebhookVerifier(secret=SECRET)
