"""Tests for the REST client."""

import json

import httpx
import pytest

from ezunsub_sdk import (
    APIConnectionError,
    AuthenticationError,
    EZUnsubClient,
    EZUnsubError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)


def make_client(handler, **kwargs) -> EZUnsubClient:
    kwargs.setdefault("api_key", "test-key")
    return EZUnsubClient(transport=httpx.MockTransport(handler), **kwargs)


class Recorder:
    """Mock transport handler that records requests and returns a fixed response."""

    def __init__(self, response: httpx.Response | None = None):
        self.response = response or httpx.Response(200, json={})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class TestConfiguration:
    def test_default_headers(self):
        recorder = Recorder()
        make_client(recorder).contacts.stats()

        assert recorder.last.headers["x-api-key"] == "test-key"
        assert recorder.last.headers["content-type"] == "application/json"
        assert recorder.last.headers["user-agent"].startswith("ezunsub-python/")

    def test_default_base_url(self, monkeypatch):
        monkeypatch.delenv("EZUNSUB_BASE_URL", raising=False)
        recorder = Recorder()
        make_client(recorder).offers.get("o1")

        assert str(recorder.last.url) == "https://api.ezunsub.com/api/offers/o1"

    def test_base_url_trailing_slash(self):
        recorder = Recorder()
        client = make_client(recorder, base_url="https://unsub.example.com/")
        client.offers.get("o1")

        assert client.base_url == "https://unsub.example.com"
        assert str(recorder.last.url) == "https://unsub.example.com/api/offers/o1"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("EZUNSUB_API_KEY", "env-key")
        monkeypatch.setenv("EZUNSUB_BASE_URL", "https://env.example.com")
        recorder = Recorder()

        client = EZUnsubClient(transport=httpx.MockTransport(recorder))
        client.contacts.stats()

        assert recorder.last.headers["x-api-key"] == "env-key"
        assert recorder.last.url.host == "env.example.com"

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("EZUNSUB_API_KEY", raising=False)

        with pytest.raises(ValueError, match="EZUNSUB_API_KEY"):
            EZUnsubClient()

    def test_repr_hides_api_key(self):
        assert "test-key" not in repr(make_client(Recorder()))

    def test_context_manager_closes(self):
        with make_client(Recorder()) as client:
            pass

        assert client._client.is_closed


class TestResponseHandling:
    def test_json_body(self):
        client = make_client(Recorder(httpx.Response(200, json=[{"id": "c1"}])))

        assert client.contacts.list() == [{"id": "c1"}]

    def test_no_content(self):
        client = make_client(Recorder(httpx.Response(204)))

        assert client.webhooks.delete("w1") == {}

    def test_empty_body(self):
        client = make_client(Recorder(httpx.Response(200, content=b"")))

        assert client.contacts.delete("c1") == {}

    @pytest.mark.parametrize(
        "status, error_type, message",
        [
            (401, AuthenticationError, "Authentication required"),
            (403, ForbiddenError, "Access denied"),
            (404, NotFoundError, "Resource not found"),
            (400, ValidationError, "Invalid request"),
            (500, EZUnsubError, "Request failed with status 500"),
        ],
    )
    def test_status_defaults(self, status, error_type, message):
        client = make_client(Recorder(httpx.Response(status)))

        with pytest.raises(error_type) as exc_info:
            client.contacts.get("c1")

        assert exc_info.value.message == message
        assert exc_info.value.status_code == status

    def test_error_message_from_body(self):
        client = make_client(
            Recorder(httpx.Response(400, json={"error": "url must be HTTPS"}))
        )

        with pytest.raises(ValidationError, match="url must be HTTPS"):
            client.webhooks.create("hook", "http://insecure", ["contact.created"])

    def test_unparseable_error_body(self):
        client = make_client(Recorder(httpx.Response(502, text="<html>Bad Gateway</html>")))

        with pytest.raises(EZUnsubError) as exc_info:
            client.exports.list()

        assert exc_info.value.status_code == 502
        assert exc_info.value.message == "Request failed with status 502"

    def test_rate_limit_retry_after(self):
        client = make_client(Recorder(httpx.Response(429, headers={"Retry-After": "12"})))

        with pytest.raises(RateLimitError) as exc_info:
            client.links.list()

        assert exc_info.value.retry_after == 12

    @pytest.mark.parametrize("headers", [{}, {"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"}])
    def test_rate_limit_without_seconds(self, headers):
        client = make_client(Recorder(httpx.Response(429, headers=headers)))

        with pytest.raises(RateLimitError) as exc_info:
            client.links.list()

        assert exc_info.value.retry_after is None

    def test_timeout_wrapped(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(APIConnectionError, match="timed out after 5.0s") as exc_info:
            make_client(handler, timeout=5.0).contacts.stats()

        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)
        assert exc_info.value.status_code is None

    def test_network_error_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(APIConnectionError, match="connection refused"):
            make_client(handler).contacts.stats()


class TestResources:
    def test_contacts_list_params(self):
        recorder = Recorder(httpx.Response(200, json=[]))
        make_client(recorder).contacts.list(page=2, limit=100, link_code="abc")

        assert recorder.last.method == "GET"
        assert recorder.last.url.path == "/api/contacts"
        assert dict(recorder.last.url.params) == {"page": "2", "limit": "100", "linkCode": "abc"}

    def test_none_params_dropped(self):
        recorder = Recorder(httpx.Response(200, json=[]))
        make_client(recorder).links.list()

        assert dict(recorder.last.url.params) == {"page": "1", "limit": "50"}

    def test_webhooks_list_without_org(self):
        recorder = Recorder(httpx.Response(200, json=[]))
        make_client(recorder).webhooks.list()

        assert recorder.last.url.query == b""

    def test_webhooks_create(self):
        recorder = Recorder(httpx.Response(201, json={"id": "w1", "secret": "whsec_1"}))
        webhook = make_client(recorder).webhooks.create(
            name="My Webhook",
            url="https://my-app.com/webhooks/ezunsub",
            events=["contact.created"],
        )

        assert webhook["secret"] == "whsec_1"
        assert recorder.last.method == "POST"
        assert json.loads(recorder.last.content) == {
            "name": "My Webhook",
            "url": "https://my-app.com/webhooks/ezunsub",
            "events": ["contact.created"],
            "piiMode": "hashes",
        }

    def test_webhooks_update_sends_only_changes(self):
        recorder = Recorder()
        make_client(recorder).webhooks.update("w1", is_active=False, pii_mode="none")

        assert recorder.last.method == "PATCH"
        assert recorder.last.url.path == "/api/webhooks/w1"
        assert json.loads(recorder.last.content) == {"piiMode": "none", "isActive": False}

    @pytest.mark.parametrize(
        "call, method, path",
        [
            (lambda c: c.webhooks.rotate_secret("w1"), "POST", "/api/webhooks/w1/rotate-secret"),
            (lambda c: c.webhooks.test("w1"), "POST", "/api/webhooks/w1/test"),
            (lambda c: c.webhooks.events(), "GET", "/api/webhooks/events/list"),
            (lambda c: c.contacts.stats(), "GET", "/api/contacts/stats"),
            (lambda c: c.contacts.delete("c1"), "DELETE", "/api/contacts/c1"),
            (lambda c: c.links.get("abc"), "GET", "/api/links/abc"),
            (lambda c: c.exports.get("e1"), "GET", "/api/exports/e1"),
        ],
    )
    def test_routes(self, call, method, path):
        recorder = Recorder()
        call(make_client(recorder))

        assert recorder.last.method == method
        assert recorder.last.url.path == path

    def test_webhook_deliveries(self):
        recorder = Recorder()
        make_client(recorder).webhooks.deliveries("w1", limit=10, offset=20)

        assert recorder.last.url.path == "/api/webhooks/w1/deliveries"
        assert dict(recorder.last.url.params) == {"limit": "10", "offset": "20"}

    def test_links_create(self):
        recorder = Recorder()
        make_client(recorder).links.create("o1", name="Spring promo")

        assert json.loads(recorder.last.content) == {"offerId": "o1", "name": "Spring promo"}

    def test_exports_create(self):
        recorder = Recorder()
        make_client(recorder).exports.create("March", filters={"linkCode": "abc"})

        assert json.loads(recorder.last.content) == {
            "name": "March",
            "format": "csv",
            "filters": {"linkCode": "abc"},
        }


class TestUnexpectedResponses:
    def test_malformed_success_body(self):
        client = make_client(Recorder(httpx.Response(200, text="<html>oops")))

        with pytest.raises(EZUnsubError, match="invalid JSON response") as exc_info:
            client.offers.get("o1")

        assert exc_info.value.status_code == 200
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.parametrize("error_type", [httpx.TooManyRedirects, httpx.DecodingError])
    def test_other_request_errors_wrapped(self, error_type):
        def handler(request):
            raise error_type("upstream misbehaved", request=request)

        with pytest.raises(APIConnectionError, match="upstream misbehaved") as exc_info:
            make_client(handler).contacts.stats()

        assert isinstance(exc_info.value.__cause__, error_type)
