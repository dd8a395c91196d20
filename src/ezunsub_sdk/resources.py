"""API resources exposed on :class:`~ezunsub_sdk.client.EZUnsubClient`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .types import (
    Contact,
    ContactStats,
    Export,
    Link,
    Offer,
    PaginatedResponse,
    PiiMode,
    Webhook,
    WebhookDelivery,
    WebhookEvent,
    WebhookEventList,
    WebhookTestResult,
)

if TYPE_CHECKING:
    from .client import EZUnsubClient


class Resource:
    """Base for API resources; holds the owning client."""

    def __init__(self, client: EZUnsubClient):
        self._client = client

    def _get(self, path: str, **params: Any) -> Any:
        return self._client._request("GET", path, params=params or None)

    def _post(self, path: str, data: dict[str, Any] | None = None) -> Any:
        return self._client._request("POST", path, json=data)

    def _patch(self, path: str, data: dict[str, Any]) -> Any:
        return self._client._request("PATCH", path, json=data)

    def _delete(self, path: str) -> Any:
        return self._client._request("DELETE", path)


class ContactsResource(Resource):
    """Suppressed contacts."""

    def list(
        self,
        page: int = 1,
        limit: int = 50,
        link_code: str | None = None,
    ) -> list[Contact]:
        """List contacts.

        Args:
            page: Page number (default: 1).
            limit: Items per page (default: 50, max: 200).
            link_code: Only contacts that came through this link.
        """
        return self._get("/api/contacts", page=page, limit=limit, linkCode=link_code)

    def get(self, contact_id: str) -> Contact:
        return self._get(f"/api/contacts/{contact_id}")

    def delete(self, contact_id: str) -> dict[str, Any]:
        """Delete a contact (admin only)."""
        return self._delete(f"/api/contacts/{contact_id}")

    def stats(self) -> ContactStats:
        """Get contact totals (total, emails, phones, global)."""
        return self._get("/api/contacts/stats")


class WebhooksResource(Resource):
    """Outbound webhook subscriptions."""

    def list(self, org_id: str | None = None) -> list[Webhook]:
        """List webhooks, optionally for one organization (admin only)."""
        return self._get("/api/webhooks", orgId=org_id)

    def get(self, webhook_id: str) -> Webhook:
        return self._get(f"/api/webhooks/{webhook_id}")

    def create(
        self,
        name: str,
        url: str,
        events: list[WebhookEvent],
        pii_mode: PiiMode = "hashes",
        org_id: str | None = None,
    ) -> Webhook:
        """Create a webhook.

        Args:
            name: Webhook name.
            url: Delivery URL (must be HTTPS).
            events: Events to subscribe to, e.g. ``contact.created``.
            pii_mode: ``full``, ``hashes`` or ``none``. Default: ``hashes``.
            org_id: Organization ID (admin only).

        Returns:
            The created webhook. Its ``secret`` is only returned here and by
            :meth:`rotate_secret`; keep it for :class:`~ezunsub_sdk.WebhookVerifier`.
        """
        data: dict[str, Any] = {
            "name": name,
            "url": url,
            "events": events,
            "piiMode": pii_mode,
        }
        if org_id:
            data["orgId"] = org_id
        return self._post("/api/webhooks", data)

    def update(
        self,
        webhook_id: str,
        name: str | None = None,
        url: str | None = None,
        events: list[WebhookEvent] | None = None,
        pii_mode: PiiMode | None = None,
        is_active: bool | None = None,
    ) -> Webhook:
        """Update a webhook. Only the given fields are changed."""
        changes = {
            "name": name,
            "url": url,
            "events": events,
            "piiMode": pii_mode,
            "isActive": is_active,
        }
        return self._patch(
            f"/api/webhooks/{webhook_id}",
            {k: v for k, v in changes.items() if v is not None},
        )

    def delete(self, webhook_id: str) -> dict[str, Any]:
        return self._delete(f"/api/webhooks/{webhook_id}")

    def rotate_secret(self, webhook_id: str) -> Webhook:
        """Issue a new signing secret. The old one stops working immediately."""
        return self._post(f"/api/webhooks/{webhook_id}/rotate-secret")

    def test(self, webhook_id: str) -> WebhookTestResult:
        """Send a ``test`` event to the webhook URL."""
        return self._post(f"/api/webhooks/{webhook_id}/test")

    def deliveries(
        self,
        webhook_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> PaginatedResponse[WebhookDelivery]:
        """Get delivery history (limit max: 100)."""
        return self._get(
            f"/api/webhooks/{webhook_id}/deliveries", limit=limit, offset=offset
        )

    def events(self) -> WebhookEventList:
        """Get the available webhook events and PII modes."""
        return self._get("/api/webhooks/events/list")


class LinksResource(Resource):
    """Unsubscribe links."""

    def list(
        self,
        page: int = 1,
        limit: int = 50,
        offer_id: str | None = None,
    ) -> list[Link]:
        return self._get("/api/links", page=page, limit=limit, offerId=offer_id)

    def get(self, code: str) -> Link:
        return self._get(f"/api/links/{code}")

    def create(self, offer_id: str, name: str | None = None) -> Link:
        data: dict[str, Any] = {"offerId": offer_id}
        if name:
            data["name"] = name
        return self._post("/api/links", data)


class OffersResource(Resource):
    def list(self, page: int = 1, limit: int = 50) -> list[Offer]:
        return self._get("/api/offers", page=page, limit=limit)

    def get(self, offer_id: str) -> Offer:
        return self._get(f"/api/offers/{offer_id}")


class ExportsResource(Resource):
    """Contact export jobs."""

    def list(self, page: int = 1, limit: int = 50) -> list[Export]:
        return self._get("/api/exports", page=page, limit=limit)

    def get(self, export_id: str) -> Export:
        """Get an export; ``fileUrl`` is set once ``status`` is ``completed``."""
        return self._get(f"/api/exports/{export_id}")

    def create(
        self,
        name: str,
        filters: dict[str, Any] | None = None,
        format: str = "csv",
    ) -> Export:
        """Start an export job.

        Args:
            name: Export name.
            filters: Optional contact filters.
            format: Export format (csv).
        """
        data: dict[str, Any] = {"name": name, "format": format}
        if filters:
            data["filters"] = filters
        return self._post("/api/exports", data)
