import json
from types import SimpleNamespace

import pytest
import requests
from django.core.exceptions import ImproperlyConfigured

from integrations import ai, clickup, resend, stripe_catalog, web
from integrations.exceptions import AIError, IntegrationError
from integrations.http import request_json


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None, url="https://example.com/"):
        self.payload = payload
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload) if payload is not None else ""
        self.content = self.text.encode()
        self.url = url

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        return json.loads(self.text)


@pytest.fixture
def http(monkeypatch):
    """Queue of fake responses served to ``requests.request`` in order."""
    calls = []
    responses = []

    def fake_request(method, url, **kwargs):
        calls.append(SimpleNamespace(method=method, url=url, kwargs=kwargs))
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr("integrations.http.requests.request", fake_request)
    return SimpleNamespace(calls=calls, responses=responses)


def _fake_anthropic(monkeypatch, text):
    created = []

    class FakeMessages:
        def create(self, **kwargs):
            created.append(kwargs)
            return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])

    class FakeClient:
        def __init__(self, api_key, timeout):
            self.messages = FakeMessages()

    monkeypatch.setattr("integrations.ai.anthropic.Anthropic", FakeClient)
    return created


class TestRequestJson:
    def test_decodes_body(self, http):
        http.responses.append(FakeResponse({"ok": True}))

        assert request_json("GET", "https://api.example.com/x", service="Example", timeout=3) == {"ok": True}
        assert http.calls[0].kwargs["timeout"] == 3

    def test_empty_body(self, http):
        http.responses.append(FakeResponse(status_code=204))

        assert request_json("DELETE", "https://api.example.com/x", service="Example") == {}

    def test_error_status_carries_body(self, http):
        http.responses.append(FakeResponse(status_code=422, text='{"message":"bad"}'))

        with pytest.raises(IntegrationError) as exc_info:
            request_json("POST", "https://api.example.com/x", service="Example")

        assert exc_info.value.status_code == 422
        assert str(exc_info.value) == 'Example API error 422: {"message":"bad"}'

    def test_network_failure(self, http):
        http.responses.append(requests.ConnectionError("refused"))

        with pytest.raises(IntegrationError, match="Example request failed: refused"):
            request_json("GET", "https://api.example.com/x", service="Example")

    def test_invalid_json(self, http):
        http.responses.append(FakeResponse(text="<html>"))

        with pytest.raises(IntegrationError, match="invalid JSON"):
            request_json("GET", "https://api.example.com/x", service="Example")


class TestResend:
    def test_send_payload(self, http, settings):
        settings.RESEND_API_KEY = "re_test"
        http.responses.append(FakeResponse({"id": "re_123"}))

        message_id = resend.send(to="dana@brightsmiles.example.com", subject="Hi", html="<p>Hi</p>", text="Hi")

        assert message_id == "re_123"
        call = http.calls[0]
        assert call.url == "https://api.resend.com/emails"
        assert call.kwargs["headers"]["Authorization"] == "Bearer re_test"
        assert call.kwargs["json"] == {
            "from": settings.RESEND_FROM_EMAIL,
            "to": ["dana@brightsmiles.example.com"],
            "subject": "Hi",
            "html": "<p>Hi</p>",
            "text": "Hi",
        }

    def test_requires_key(self):
        with pytest.raises(ImproperlyConfigured, match="RESEND_API_KEY"):
            resend.send(to="a@b.com", subject="Hi", html="<p>Hi</p>")


class TestStripeCatalog:
    def test_follows_pagination(self, http, settings):
        settings.STRIPE_SECRET_KEY = "sk_test"
        http.responses.extend([
            FakeResponse({
                "data": [{"id": "prod_1", "name": "Logo", "default_price": {"id": "price_1"}}],
                "has_more": True,
            }),
            FakeResponse({"data": [{"id": "prod_2", "name": "SEO", "default_price": "price_2"}], "has_more": False}),
        ])

        products = stripe_catalog.list_active_products()

        assert products == [
            {"id": "prod_1", "name": "Logo", "default_price": "price_1"},
            {"id": "prod_2", "name": "SEO", "default_price": "price_2"},
        ]
        assert http.calls[0].kwargs["auth"] == ("sk_test", "")
        assert http.calls[1].kwargs["params"]["starting_after"] == "prod_1"


class TestClickUp:
    def test_members_walk_first_folder_and_list(self, http, settings):
        settings.CLICKUP_API_TOKEN = "pk_test"
        settings.CLICKUP_CLIENTS_SPACE_ID = "900"
        http.responses.extend([
            FakeResponse({"folders": [{"id": "f1", "name": "Clients"}]}),
            FakeResponse({"lists": [{"id": "l1", "name": "Onboarding"}]}),
            FakeResponse({"members": [{"id": 7, "username": "sam", "email": "sam@agency.example.com"}]}),
        ])

        members = clickup.get_members()

        assert members == [{"id": 7, "username": "sam", "email": "sam@agency.example.com", "profilePicture": None}]
        assert http.calls[0].url == "https://api.clickup.com/api/v2/space/900/folder?archived=false"
        assert http.calls[2].url == "https://api.clickup.com/api/v2/list/l1/member"
        assert http.calls[0].kwargs["headers"]["Authorization"] == "pk_test"

    def test_members_without_folders(self, http, settings):
        settings.CLICKUP_API_TOKEN = "pk_test"
        http.responses.append(FakeResponse({"folders": []}))

        assert clickup.get_members() == []

    def test_create_task(self, http, settings):
        settings.CLICKUP_API_TOKEN = "pk_test"
        http.responses.append(FakeResponse({"id": "abc", "url": "https://app.clickup.com/t/abc"}))

        task = clickup.create_task("l1", {"name": "Website rebuild"})

        assert task == {"id": "abc", "url": "https://app.clickup.com/t/abc"}
        assert http.calls[0].method == "POST"
        assert http.calls[0].kwargs["json"] == {"name": "Website rebuild"}


class TestWebFetch:
    def test_reports_https_and_timing(self, monkeypatch):
        monkeypatch.setattr(
            "integrations.web.requests.get",
            lambda url, **kwargs: FakeResponse(text="<html></html>", url="https://brightsmiles.example.com/"),
        )

        page = web.fetch_page("brightsmiles.example.com")

        assert page.is_https is True
        assert page.html == "<html></html>"
        assert page.response_time_ms >= 0

    def test_error_status_is_unreachable(self, monkeypatch):
        monkeypatch.setattr(
            "integrations.web.requests.get", lambda url, **kwargs: FakeResponse(status_code=503, text=""),
        )

        with pytest.raises(IntegrationError, match="HTTP 503"):
            web.fetch_page("https://brightsmiles.example.com")

    def test_normalize_url(self):
        assert web.normalize_url(" example.com ") == "https://example.com"
        assert web.normalize_url("http://example.com") == "http://example.com"


class TestAnthropicCompletion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ('{"a": 1}', '{"a": 1}'),
            ('```json\n{"a": 1}\n```', '{"a": 1}'),
            ('```\n[1, 2]\n```', "[1, 2]"),
        ],
    )
    def test_strip_code_fences(self, raw, expected):
        assert ai.strip_code_fences(raw) == expected

    def test_parses_fenced_answer(self, monkeypatch, settings):
        settings.ANTHROPIC_API_KEY = "sk-ant-test"
        created = _fake_anthropic(monkeypatch, '```json\n{"sections": []}\n```')

        result = ai.complete_json(system="sys", prompt="notes", max_tokens=100, purpose="Test")

        assert result == {"sections": []}
        assert created[0]["messages"] == [{"role": "user", "content": "notes"}]
        assert created[0]["model"] == settings.ANTHROPIC_MODEL

    def test_rejects_non_json(self, monkeypatch, settings):
        settings.ANTHROPIC_API_KEY = "sk-ant-test"
        _fake_anthropic(monkeypatch, "Sure! Here are your sections.")

        with pytest.raises(AIError, match="Failed to parse Test response"):
            ai.complete_json(system="sys", prompt="notes", max_tokens=100, purpose="Test")

    def test_rejects_empty_answer(self, monkeypatch, settings):
        settings.ANTHROPIC_API_KEY = "sk-ant-test"
        _fake_anthropic(monkeypatch, "  ")

        with pytest.raises(AIError, match="No text response from Test"):
            ai.complete_json(system="sys", prompt="notes", max_tokens=100, purpose="Test")

    def test_requires_key(self):
        with pytest.raises(ImproperlyConfigured, match="ANTHROPIC_API_KEY"):
            ai.complete_json(system="sys", prompt="notes", max_tokens=100)
