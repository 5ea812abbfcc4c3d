"""
Tests for request logging
"""

import logging

from starlette.datastructures import Headers

from trmnl_byos.middleware.logging import redact_headers


def test_redact_headers():
    headers = Headers(
        {"ID": "aa:bb", "Authorization": "Bearer secret", "Cookie": "s=1"}
    )

    redacted = redact_headers(headers)

    assert redacted["id"] == "aa:bb"
    assert redacted["authorization"] == "[REDACTED]"
    assert redacted["cookie"] == "[REDACTED]"


def test_requests_are_logged(client, caplog):
    """Test that every request produces an access log line."""
    caplog.set_level(logging.INFO, logger="trmnl_byos.access")

    client.get("/screens/nobody.jpg")

    records = [r for r in caplog.records if r.name == "trmnl_byos.access"]
    assert len(records) == 1
    assert records[0].levelno == logging.WARNING
    assert "/screens/nobody.jpg 404" in records[0].getMessage()


def test_debug_logging_redacts_request_and_response_headers(client, caplog):
    """Test that DEBUG output includes origin and headers but no credentials."""
    caplog.set_level(logging.DEBUG, logger="trmnl_byos.access")

    client.get("/health", headers={"Authorization": "Bearer secret"})

    messages = [
        r.getMessage()
        for r in caplog.records
        if r.name == "trmnl_byos.access" and r.levelno == logging.DEBUG
    ]
    assert len(messages) == 2
    assert "http://testserver/health" in messages[0]
    assert "[REDACTED]" in messages[0]
    assert "response headers" in messages[1]
    assert "content-type" in messages[1]
    assert all("secret" not in m for m in messages)
