"""
Tests for the offline cache API.
"""

import json

import pytest
from fastapi.testclient import TestClient

from offline_cache.api.app import create_app
from offline_cache.entities import CachedResponse
from offline_cache.handlers.proxy_handler import ROUTE_HEADER, to_http_response

from .conftest import DYNAMIC_CACHE, STATIC_CACHE, VERSION

HTML_ACCEPT = {"Accept": "text/html,application/xhtml+xml"}


@pytest.fixture
def client(worker, site):
    """Create a test client; startup installs and activates the worker."""
    site.add("/about", "<html>about</html>")
    with TestClient(create_app(worker)) as test_client:
        yield test_client


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["state"] == "activated"


def test_state(client):
    """Test worker state endpoint."""
    response = client.get("/sw/state")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == VERSION
    assert data["caches"] == [STATIC_CACHE, DYNAMIC_CACHE]
    assert data["update_available"] is False


def test_home_served_from_static_cache(client, site):
    """Test that '/' is answered from the pre-cached copy."""
    calls_before = site.calls_to("/")

    response = client.get("/", headers=HTML_ACCEPT)

    assert response.status_code == 200
    assert response.text == "<html>home</html>"
    assert response.headers[ROUTE_HEADER] == "static-assets"
    assert site.calls_to("/") == calls_before


def test_offline_navigation_gets_offline_page(client, site):
    """Test the Hebrew offline page for an uncached page while offline."""
    site.offline = True

    response = client.get("/services/raid-recovery", headers=HTML_ACCEPT)

    assert response.status_code == 503
    assert "אין חיבור לאינטרנט" in response.text
    assert response.headers["content-type"].startswith("text/html")
    assert response.headers[ROUTE_HEADER] == "pages"


def test_cached_page_served_while_offline(client, site):
    """Test network-first falling back to the copy cached while online."""
    assert client.get("/about", headers=HTML_ACCEPT).status_code == 200
    site.offline = True

    response = client.get("/about", headers=HTML_ACCEPT)

    assert response.status_code == 200
    assert response.text == "<html>about</html>"


def test_contact_submission_queued_and_synced(client, site):
    """Test queueing an offline submission and replaying it via /sw/sync."""
    site.offline = True
    response = client.post("/api/contact", json={"name": "Avi", "phone": "050-0000000"})
    assert response.status_code == 202
    assert response.text == "Queued"

    site.offline = False
    response = client.post("/sw/sync", json={"tag": "contact-form-sync"})

    assert response.status_code == 200
    data = response.json()
    assert data["handled"] is True
    assert len(data["replayed"]) == 1
    assert data["remaining"] == 0


def test_sync_unknown_tag(client):
    """Test that a sync with an unknown tag is reported as unhandled."""
    response = client.post("/sw/sync", json={"tag": "other"})
    assert response.status_code == 200
    assert response.json()["handled"] is False


def test_non_get_passthrough_unreachable(client, site):
    """Test the 502 for a non-queueable request while offline."""
    site.offline = True
    response = client.post("/api/create-checkout", json={"plan": "basic"})
    assert response.status_code == 502


def test_caches(client):
    """Test partition statistics endpoint."""
    client.get("/about", headers=HTML_ACCEPT)

    response = client.get("/sw/caches")

    assert response.status_code == 200
    caches = response.json()["caches"]
    assert caches[STATIC_CACHE] == 4
    assert caches[DYNAMIC_CACHE] == 1


def test_push_and_click(client):
    """Test push delivery and the open action."""
    payload = {"title": "דוקטור פיקס", "body": "הקבצים שלך מוכנים", "data": {"id": 7}}
    response = client.post("/sw/push", content=json.dumps(payload).encode("utf-8"))
    assert response.status_code == 201
    notification = response.json()
    assert notification["title"] == "דוקטור פיקס"
    assert [a["action"] for a in notification["actions"]] == ["open", "close"]

    response = client.post(
        f"/sw/notifications/{notification['id']}/click", json={"action": "open"}
    )
    assert response.status_code == 200
    assert response.json() == {"closed": True, "opened_url": "/"}

    assert client.get("/sw/notifications").json() == []
    urls = [c["url"] for c in client.get("/sw/clients").json()]
    assert urls == ["/"]


def test_push_without_payload(client):
    """Test that an empty push returns 204."""
    response = client.post("/sw/push", content=b"")
    assert response.status_code == 204


def test_push_malformed(client):
    """Test that a malformed push returns 400."""
    response = client.post("/sw/push", content=b"{broken")
    assert response.status_code == 400


def test_click_unknown_notification(client):
    """Test 404 for an unknown notification."""
    response = client.post("/sw/notifications/nope/click", json={"action": "open"})
    assert response.status_code == 404


def test_register_client(client):
    """Test that pages registered after activation are controlled."""
    response = client.post("/sw/clients", json={"url": "/pricing"})
    assert response.status_code == 201
    assert response.json()["controller"] == VERSION


def test_activate_again_keeps_current_caches(client):
    """Test that re-activating is harmless."""
    response = client.post("/sw/activate")
    assert response.status_code == 200
    assert response.json()["deleted_caches"] == []


def test_proxied_response_keeps_every_cookie():
    """Test that each Set-Cookie value is sent as its own header."""
    cached = CachedResponse(
        status=200,
        headers={"content-type": "text/html", "vary": "Accept, Accept-Encoding"},
        body=b"<html></html>",
        cookies=("session=abc; Path=/", "theme=dark"),
    )

    response = to_http_response(cached, "network")

    assert response.headers.getlist("set-cookie") == ["session=abc; Path=/", "theme=dark"]
    assert response.headers["vary"] == "Accept, Accept-Encoding"
    assert response.headers[ROUTE_HEADER] == "network"


def test_failed_reinstall_leaves_worker_active(client, site):
    """Test that /sw/install while offline fails without demoting the worker."""
    site.offline = True

    assert client.post("/sw/install").status_code == 502

    assert client.get("/sw/state").json()["state"] == "activated"
    response = client.get("/", headers=HTML_ACCEPT)
    assert response.status_code == 200
    assert response.headers[ROUTE_HEADER] == "static-assets"
