import logging

from fastapi.testclient import TestClient


def test_unhandled_error_becomes_json_500(app, caplog):
    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    caplog.set_level(logging.INFO, logger="taskgate.api")
    client = TestClient(app, raise_server_exceptions=False)
    r = client.get("/boom")

    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error"}
    assert "kaboom" not in r.text
    assert any("GET /boom 500" in rec.getMessage() for rec in caplog.records)


def test_requests_are_logged(client, caplog):
    caplog.set_level(logging.INFO, logger="taskgate.api")
    client.get("/health")
    assert any("GET /health 200" in rec.getMessage() for rec in caplog.records)
