"""Type definitions for EZUnsub API records and webhook events."""

from __future__ import annotations

from typing import Any, Generic, Literal, TypedDict, TypeVar


WebhookEvent = Literal[
    "contact.created",
    "contact.updated",
    "complaint.created",
    "complaint.updated",
    "link.created",
    "link.clicked",
    "export.completed",
    "test",
]

PiiMode = Literal["full", "hashes", "none"]

DeliveryStatus = Literal["pending", "success", "failed"]

ExportStatus = Literal["pending", "processing", "completed", "failed"]


class Contact(TypedDict, total=False):
    id: str
    email: str | None
    emailHash: str | None
    phone: str | None
    phoneHash: str | None
    ip: str | None
    country: str | None
    userAgent: str | None
    linkCode: str | None
    status: str
    attemptCount: int
    customParams: dict[str, str] | None
    createdAt: str
    updatedAt: str | None
    offerName: str
    userName: str


# "global" is a keyword, so the functional form is required.
ContactStats = TypedDict(
    "ContactStats",
    {"total": int, "emails": int, "phones": int, "global": int},
)


class Webhook(TypedDict, total=False):
    id: str
    orgId: str
    name: str
    url: str
    # Only returned on create and rotate-secret
    secret: str
    events: list[WebhookEvent]
    piiMode: PiiMode
    isActive: bool
    createdAt: str
    updatedAt: str | None


class WebhookDelivery(TypedDict, total=False):
    id: str
    webhookId: str
    event: WebhookEvent
    payload: dict[str, Any]
    status: DeliveryStatus
    attempts: int
    lastAttemptAt: str | None
    responseStatus: int | None
    responseBody: str | None
    nextRetryAt: str | None
    createdAt: str


class WebhookTestResult(TypedDict, total=False):
    success: bool
    status: int
    statusText: str
    responseBody: str
    error: str


class WebhookEventList(TypedDict):
    events: list[WebhookEvent]
    piiModes: list[PiiMode]


class Link(TypedDict, total=False):
    id: str
    code: str
    name: str | None
    offerId: str
    orgId: str
    userId: str
    createdAt: str
    updatedAt: str | None
    offerName: str
    userName: str


class Offer(TypedDict, total=False):
    id: str
    name: str
    description: str | None
    isActive: bool
    createdAt: str
    updatedAt: str | None


class Export(TypedDict, total=False):
    id: str
    name: str
    status: ExportStatus
    filters: dict[str, Any] | None
    format: str
    fileUrl: str | None
    rowCount: int | None
    createdAt: str
    completedAt: str | None


class Pagination(TypedDict):
    limit: int
    offset: int
    hasMore: bool


T = TypeVar("T")


class PaginatedResponse(TypedDict, Generic[T]):
    data: list[T]
    pagination: Pagination
