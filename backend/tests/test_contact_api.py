import logging

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from app.core.contact_config import ContactConfig
from app.core.mail_transport import FakeTransport, SmtpTransport
from app.core.settings import Settings
from app.main import create_app
from app.routers.contact import ContactHandler

ORIGIN = "https://www.systoons.com"


class ExplodingTransport(FakeTransport):
    def send(self, message):
        raise RuntimeError("smtp relay exploded: secret-host:25")


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return TestClient(create_app(Settings(), transport=transport))


def _assert_cors(resp, origin=ORIGIN):
    assert resp.headers["access-control-allow-origin"] == origin
    assert resp.headers["access-control-allow-methods"] == "POST, OPTIONS"
    assert resp.headers["access-control-allow-headers"] == "Content-Type"


def test_valid_submission_is_forwarded(client, transport):
    resp = client.post(
        "/api/contact",
        json={"name": "Jo", "email": "jo@example.com"},
        headers={"Origin": ORIGIN},
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    _assert_cors(resp)

    assert len(transport.sent) == 1
    sent = transport.sent[0]
    assert sent.subject == "New inquiry from Jo"
    assert sent.reply_to == "jo@example.com"
    assert "Company: Not provided" in sent.text


def test_blank_name_is_rejected(client, transport):
    resp = client.post("/api/contact", json={"name": "", "email": "jo@example.com"}, headers={"Origin": ORIGIN})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Name and email are required"}
    _assert_cors(resp)
    assert transport.sent == []


def test_invalid_email_is_rejected(client, transport):
    resp = client.post("/api/contact", json={"name": "Jo", "email": "not-an-email"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid email address"}
    assert transport.sent == []


def test_non_object_json_is_missing_fields(client):
    resp = client.post("/api/contact", json=["Jo", "jo@example.com"])
    assert resp.status_code == 400
    assert resp.json() == {"error": "Name and email are required"}


def test_malformed_json_is_generic_failure(client, transport):
    resp = client.post(
        "/api/contact",
        content=b"{not json",
        headers={"Content-Type": "application/json", "Origin": ORIGIN},
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to send message. Please try again."}
    _assert_cors(resp)
    assert transport.sent == []


def test_transport_failure_hides_detail():
    client = TestClient(create_app(Settings(), transport=ExplodingTransport()))
    resp = client.post("/api/contact", json={"name": "Jo", "email": "jo@example.com"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to send message. Please try again."}
    assert "secret-host" not in resp.text


def test_preflight(client):
    resp = client.options("/api/contact", headers={"Origin": ORIGIN})
    assert resp.status_code == 204
    assert resp.content == b""
    _assert_cors(resp)


def test_preflight_from_preview_deployment(client):
    origin = "https://feature-x.systoons.pages.dev"
    resp = client.options("/api/contact", headers={"Origin": origin})
    assert resp.status_code == 204
    _assert_cors(resp, origin)


def test_unknown_origin_gets_default(client):
    resp = client.post(
        "/api/contact",
        json={"name": "Jo", "email": "jo@example.com"},
        headers={"Origin": "https://evil.example"},
    )
    assert resp.status_code == 200
    _assert_cors(resp, "https://systoons.com")


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "TRACE"])
def test_other_methods_not_allowed(client, method):
    resp = client.request(method, "/api/contact", headers={"Origin": ORIGIN})
    assert resp.status_code == 405
    assert resp.json() == {"error": "Method not allowed"}
    assert resp.headers["allow"] == "POST, OPTIONS"
    _assert_cors(resp)


def test_html_part_is_escaped_end_to_end(client, transport):
    resp = client.post(
        "/api/contact",
        json={"name": '<script>&"</script>', "email": "jo@example.com", "message": "a\nb"},
    )
    assert resp.status_code == 200
    html = transport.sent[0].html
    assert html.count("&lt;script&gt;&amp;&quot;&lt;/script&gt;") == 1
    assert "<script>" not in html


def _request(method, body=b"", origin=ORIGIN):
    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    scope = {
        "type": "http",
        "method": method,
        "path": "/api/contact",
        "headers": [(b"origin", origin.encode()), (b"content-type", b"application/json")],
    }
    return Request(scope, receive)


@pytest.mark.asyncio
async def test_handler_submit_without_server():
    transport = FakeTransport()
    handler = ContactHandler(ContactConfig.from_settings(Settings()), transport)

    resp = await handler.submit(_request("POST", b'{"name": "Jo", "email": "jo@example.com", "company": "Acme"}'))

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == ORIGIN
    assert transport.sent[0].text.count("Company: Acme") == 1


@pytest.mark.asyncio
async def test_handler_preflight_without_server():
    handler = ContactHandler(ContactConfig.from_settings(Settings()), FakeTransport())
    resp = await handler.preflight(_request("OPTIONS", origin="https://evil.example"))
    assert resp.status_code == 204
    assert resp.headers["access-control-allow-origin"] == "https://systoons.com"


@pytest.mark.parametrize("sep", ["\x0b", "\x0c", "\x1c", "\x85", "\u2028"])
def test_name_with_line_separator_is_delivered(client, transport, sep):
    resp = client.post("/api/contact", json={"name": f"Jo{sep}Smith", "email": "jo@example.com"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert b"Subject: New inquiry from Jo Smith\r\n" in transport.raw[0]


def test_fake_transport_logs_warning_at_startup(caplog):
    with caplog.at_level(logging.WARNING, logger="uvicorn.error"):
        create_app(Settings(), transport=FakeTransport())
    assert "no email is delivered" in caplog.text


def test_real_transport_has_no_fake_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="uvicorn.error"):
        create_app(Settings(), transport=SmtpTransport("smtp.example.com"))
    assert "no email is delivered" not in caplog.text
