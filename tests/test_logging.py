import json
import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from storefront.middlewares import LoggingMiddleware, RequestIdMiddleware
from storefront.obs.logging import JsonFormatter
from tests._orders import order_payload


def _make_app():
    test_app = FastAPI()
    test_app.add_middleware(LoggingMiddleware)
    test_app.add_middleware(RequestIdMiddleware)

    @test_app.post("/echo")
    async def echo(data: dict):
        return {"ok": True}

    @test_app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return test_app


def test_request_id_propagation(caplog):
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="storefront.api"):
        resp = client.post("/echo", json={}, headers={"X-Request-ID": "abc"})
    assert resp.headers["X-Request-ID"] == "abc"
    assert json.loads(caplog.messages[0])["req_id"] == "abc"


def test_untrusted_request_id_replaced():
    client = TestClient(_make_app())
    resp = client.post("/echo", json={}, headers={"X-Request-ID": "<script>"})
    rid = resp.headers["X-Request-ID"]
    assert rid != "<script>"
    assert len(rid) == 32


def test_order_body_redacted(caplog):
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="storefront.api"):
        client.post("/echo", json=order_payload())
    inbound = json.loads(caplog.messages[0])
    address = inbound["body"]["address"]
    assert address["phone"] == "***"
    assert address["email"] == "***"
    assert address["city"] == "Gurgaon"
    assert inbound["body"]["transactionId"] == "***"


def test_unhandled_error_envelope(caplog):
    client = TestClient(_make_app(), raise_server_exceptions=False)
    with caplog.at_level(logging.INFO, logger="storefront.api"):
        resp = client.get("/boom")
    assert resp.status_code == 500
    body = resp.json()
    assert body["ok"] is False
    assert body["error_id"]
    assert body["request_id"] == resp.headers["X-Request-ID"]


def test_formatter_redacts_pii():
    record = logging.LogRecord(
        "storefront.export", logging.WARNING, __file__, 1,
        "invoice for asha@example.com +91 9876543210 failed", None, None,
    )
    record.order_ref = "c0ffee12"
    data = json.loads(JsonFormatter().format(record))
    assert data["msg"] == "invoice for *** *** failed"
    assert data["order_ref"] == "c0ffee12"
    assert data["level"] == "WARNING"
