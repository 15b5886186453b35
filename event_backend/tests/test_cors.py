import pytest

from conftest import ALLOWED_ORIGIN, event_payload

DEPLOYED_ORIGIN = "https://event-calendar-frontend.onrender.com"
FOREIGN_ORIGIN = "https://evil.example.com"


def preflight(client, path="/events", origin=ALLOWED_ORIGIN, method="POST", headers=None):
    request_headers = {"Origin": origin, "Access-Control-Request-Method": method}
    if headers:
        request_headers["Access-Control-Request-Headers"] = headers
    return client.options(path, headers=request_headers)


class TestPreflight:
    def test_preflight_from_local_frontend(self, client):
        res = preflight(client)
        assert res.status_code in (200, 204)
        assert res.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
        assert res.headers["access-control-allow-credentials"] == "true"
        assert "POST" in res.headers["access-control-allow-methods"]

    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"])
    def test_preflight_allows_every_api_method(self, client, method):
        res = preflight(client, path="/events/1", method=method)
        assert res.status_code == 200
        allowed = {m.strip() for m in res.headers["access-control-allow-methods"].split(",")}
        assert method in allowed

    def test_preflight_for_completion_subpath(self, client):
        res = preflight(client, path="/events/1/complete", method="PATCH", origin=DEPLOYED_ORIGIN)
        assert res.status_code == 200
        assert res.headers["access-control-allow-origin"] == DEPLOYED_ORIGIN

    def test_preflight_allows_any_request_header(self, client):
        res = preflight(client, headers="content-type, x-custom-header")
        assert res.status_code == 200
        allowed = res.headers["access-control-allow-headers"].lower()
        assert "content-type" in allowed
        assert "x-custom-header" in allowed

    def test_preflight_from_foreign_origin_has_no_allow_origin(self, client):
        res = preflight(client, origin=FOREIGN_ORIGIN)
        assert "access-control-allow-origin" not in res.headers


class TestSimpleRequests:
    def test_allowed_origin_is_echoed_never_wildcard(self, client):
        res = client.get("/events", headers={"Origin": DEPLOYED_ORIGIN})
        assert res.status_code == 200
        assert res.headers["access-control-allow-origin"] == DEPLOYED_ORIGIN
        assert res.headers["access-control-allow-credentials"] == "true"

    def test_foreign_origin_still_served_without_cors_headers(self, client):
        res = client.post("/events", json=event_payload(), headers={"Origin": FOREIGN_ORIGIN})
        assert res.status_code == 201
        assert "access-control-allow-origin" not in res.headers

    def test_error_responses_carry_cors_headers(self, client):
        res = client.get("/events/99", headers={"Origin": ALLOWED_ORIGIN})
        assert res.status_code == 404
        assert res.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
