import asyncio
import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pg_api.api.ping.ping import PingEndpoint
from pg_api.core.base_endpoint import BaseAPIEndpoint, BaseHTTPEndpoint
from pg_api.core.errors import HandlerError


class BrokenPlainEndpoint(BaseHTTPEndpoint):
    async def get(self, request):
        raise HandlerError(KeyError("missing"), "something broke", 503)


class ReturningAPIEndpoint(BaseAPIEndpoint):
    async def get(self, request):
        from starlette.responses import Response

        return Response('{"ok": true}', headers=self.api_headers)


def make_scope(app, path="/ping"):
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [],
        "client": ("10.0.0.1", 4321),
        "server": ("testserver", 80),
        "app": app,
    }


async def receive():
    return {"type": "http.request", "body": b"", "more_body": False}


async def broken_send(message):
    raise ConnectionResetError("peer went away")


def test_handler_error_hides_cause():
    err = HandlerError(RuntimeError("secret"), "db ping error")
    assert err.code == 500
    assert err.to_dict() == {"error": "db ping error", "code": 500}
    assert "secret" in repr(err)


def test_plain_adapter_renders_error_as_text(caplog):
    caplog.set_level(logging.INFO, logger="pg_api")
    app = FastAPI()
    app.add_route("/broken", BrokenPlainEndpoint, methods=["GET"])

    resp = TestClient(app).get("/broken")
    assert resp.status_code == 503
    assert resp.text == "something broke"
    assert resp.headers["content-type"].startswith("text/plain")
    assert "api" not in resp.headers
    assert caplog.records[-1].levelno == logging.ERROR
    assert "testclient:50000 GET /broken" in caplog.records[-1].getMessage()


def test_api_adapter_sends_returned_response():
    app = FastAPI()
    app.add_route("/ok", ReturningAPIEndpoint, methods=["GET"])

    resp = TestClient(app).get("/ok")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    assert resp.headers["api"] == "golang-pg-api/1.0"


def test_write_string_wraps_transport_failure(app):
    endpoint = PingEndpoint(make_scope(app), receive, broken_send)
    with pytest.raises(HandlerError) as exc_info:
        asyncio.run(endpoint.write_string(200, '{"status": "success"}'))

    assert exc_info.value.code == 500
    assert exc_info.value.message == "internal server error"
    assert isinstance(exc_info.value.cause, ConnectionResetError)


def test_write_failure_after_start_sends_nothing_more(app, caplog):
    caplog.set_level(logging.INFO, logger="pg_api")
    endpoint = PingEndpoint(make_scope(app), receive, broken_send)

    asyncio.run(endpoint.dispatch())

    assert endpoint.response_started is True
    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
    assert any("10.0.0.1:4321 GET /ping" in m and "peer went away" in m for m in messages)
    assert any("response already started" in m for m in messages)


def test_write_string_sends_status_and_payload(app):
    sent = []

    async def send(message):
        sent.append(message)

    endpoint = PingEndpoint(make_scope(app), receive, send)
    assert asyncio.run(endpoint.write_string(201, "payload")) is None

    assert sent[0]["type"] == "http.response.start"
    assert sent[0]["status"] == 201
    headers = dict(sent[0]["headers"])
    assert headers[b"api"] == b"golang-pg-api/1.0"
    assert headers[b"content-type"] == b"application/json; charset=utf8"
    assert sent[1]["body"] == b"payload"


def test_error_response_falls_back_when_encoding_fails(app, caplog):
    endpoint = PingEndpoint(make_scope(app), receive, broken_send)

    response = endpoint.error_response(HandlerError(None, float("nan")))

    assert response.status_code == 500
    assert response.body == b""
    assert response.headers["api"] == "golang-pg-api/1.0"
    assert "Encode JSON for error response was failed." in caplog.messages
