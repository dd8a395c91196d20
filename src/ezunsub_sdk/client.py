"""EZUnsub API client."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from .exceptions import (
    APIConnectionError,
    AuthenticationError,
    EZUnsubError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from .resources import (
    ContactsResource,
    ExportsResource,
    LinksResource,
    OffersResource,
    WebhooksResource,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.ezunsub.com"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "ezunsub-python/0.2.0"

API_KEY_ENV = "EZUNSUB_API_KEY"
BASE_URL_ENV = "EZUNSUB_BASE_URL"


class EZUnsubClient:
    """Client for interacting with the EZUnsub API.

    Example:
        ```python
        from ezunsub_sdk import EZUnsubClient

        with EZUnsubClient(api_key="your-api-key") as client:
            contacts = client.contacts.list(limit=100)

            webhook = client.webhooks.create(
                name="My Webhook",
                url="https://my-app.com/webhooks/ezunsub",
                events=["contact.created", "contact.updated"],
            )
        ```

    ``api_key`` and ``base_url`` fall back to the ``EZUNSUB_API_KEY`` and
    ``EZUNSUB_BASE_URL`` environment variables.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the EZUnsub client.

        Args:
            api_key: Your EZUnsub API key.
            base_url: Base URL for the EZUnsub API.
            timeout: Request timeout in seconds.
            transport: Custom httpx transport (proxies, tests).

        Raises:
            ValueError: If no API key is given or set in the environment.
        """
        api_key = api_key or os.getenv(API_KEY_ENV)
        if not api_key:
            raise ValueError(f"An API key is required (pass api_key or set {API_KEY_ENV})")

        self.api_key = api_key
        self.base_url = (base_url or os.getenv(BASE_URL_ENV) or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout

        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                "x-api-key": self.api_key,
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )

        self.contacts = ContactsResource(self)
        self.webhooks = WebhooksResource(self)
        self.links = LinksResource(self)
        self.offers = OffersResource(self)
        self.exports = ExportsResource(self)

    def __repr__(self) -> str:
        return f"EZUnsubClient(base_url={self.base_url!r})"

    def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an API request."""
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("%s %s", method, path)
        try:
            response = self._client.request(
                method=method,
                url=path,
                json=json,
                params=params or None,
            )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out after %ss", method, path, self.timeout)
            raise APIConnectionError(f"Request timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise APIConnectionError(f"Request failed: {e}") from e

        logger.debug("%s %s -> %s", method, path, response.status_code)
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Any:
        """Handle API response and raise appropriate exceptions."""
        status = response.status_code

        if status == 401:
            raise AuthenticationError()
        if status == 403:
            raise ForbiddenError(_error_message(response, "Access denied"))
        if status == 404:
            raise NotFoundError(_error_message(response, "Resource not found"))
        if status == 429:
            raise RateLimitError(retry_after=_retry_after(response))
        if status == 400:
            raise ValidationError(_error_message(response, "Invalid request"))
        if status >= 400:
            raise EZUnsubError(
                _error_message(response, f"Request failed with status {status}"),
                status_code=status,
            )

        if status == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise EZUnsubError(f"Request failed: invalid JSON response: {e}", status_code=status) from e

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> EZUnsubClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def _error_message(response: httpx.Response, default: str) -> str:
    """Pull ``error`` from a JSON error body, or fall back to ``default``."""
    if not response.content:
        return default
    try:
        data = response.json()
    except ValueError:
        return default
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return default


def _retry_after(response: httpx.Response) -> int | None:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        # HTTP-date form is not used by the API
        return None
