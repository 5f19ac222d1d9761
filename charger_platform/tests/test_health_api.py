from charger_engine.ingestion.errors import StoreReadError


def test_health_returns_ok_and_station_count(client):
    resp = client.get("/health/")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["uptime_s"] >= 0
    assert data["version"] == "0.1.0"
    assert data["stations"] == 0


def test_health_degraded_when_store_unreadable(app, client):
    def _fail():
        raise StoreReadError("Station count failed: database is locked")

    app.state.station_service.store.count = _fail

    data = client.get("/health/").json()
    assert data["status"] == "degraded"
    assert data["stations"] is None


def test_request_id_header_on_every_response(client):
    ok = client.get("/health/")
    assert ok.headers.get("x-request-id")

    missing = client.get("/chargers/")
    assert missing.status_code == 400
    assert missing.headers.get("x-request-id")
    assert missing.headers["x-request-id"] != ok.headers["x-request-id"]


def test_unknown_route_uses_error_body(client):
    resp = client.get("/stations/Belgrade")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


def test_unhandled_error_keeps_cors_and_request_id(app, settings, client):
    def _boom():
        raise RuntimeError("station table vanished")

    app.add_api_route("/boom", _boom)

    resp = client.get("/boom", headers={"Origin": settings.allowed_origin})
    assert resp.status_code == 500
    assert resp.json() == {"error": "station table vanished"}
    assert resp.headers["access-control-allow-origin"] == settings.allowed_origin
    assert resp.headers.get("x-request-id")
