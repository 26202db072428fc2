"""
Tests for the routing table.
"""

import pytest

from offline_cache.entities import CachedRequest
from offline_cache.services import Partition, Route, RouteTable, Strategy

from .conftest import ORIGIN


@pytest.fixture
def table() -> RouteTable:
    return RouteTable.default()


@pytest.mark.parametrize(
    ("url", "route_name"),
    [
        (f"{ORIGIN}/", "static-assets"),
        (f"{ORIGIN}/index.html", "static-assets"),
        (f"{ORIGIN}/manifest.json", "static-assets"),
        (f"{ORIGIN}/favicon.ico", "static-assets"),
        (f"{ORIGIN}/assets/index-Bdk0mkGY.js", "cacheable-resources"),
        (f"{ORIGIN}/assets/globals.css", "cacheable-resources"),
        (f"{ORIGIN}/images/hero.webp", "cacheable-resources"),
        (f"{ORIGIN}/api/logo.png", "cacheable-resources"),
        ("https://fonts.googleapis.com/css2?family=Heebo", "cacheable-resources"),
        ("https://fonts.gstatic.com/s/heebo/v21/heebo.woff2", "cacheable-resources"),
        ("https://images.unsplash.com/photo-123?w=800", "cacheable-resources"),
        (f"{ORIGIN}/api/contact", "api"),
        (f"{ORIGIN}/api/create-checkout?plan=basic", "api"),
        (f"{ORIGIN}/services/hard-drive-recovery", "pages"),
        (f"{ORIGIN}/about", "pages"),
    ],
)
def test_default_table_selects_first_matching_route(table, url, route_name):
    """Test that each URL lands on the expected route."""
    route = table.select(CachedRequest.get(url))
    assert route is not None
    assert route.name == route_name


def test_strategies_and_partitions(table):
    """Test the strategy and partition behind each default route."""
    by_name = {route.name: route for route in table.routes}

    assert by_name["static-assets"].strategy is Strategy.CACHE_FIRST
    assert by_name["static-assets"].partition is Partition.STATIC
    assert by_name["cacheable-resources"].strategy is Strategy.STALE_WHILE_REVALIDATE
    assert by_name["api"].strategy is Strategy.NETWORK_FIRST
    assert by_name["pages"].strategy is Strategy.NETWORK_FIRST
    assert {by_name[n].partition for n in ("cacheable-resources", "api", "pages")} == {
        Partition.DYNAMIC
    }


@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "HEAD"])
def test_non_get_requests_are_not_intercepted(table, method):
    """Test that only GET requests go through the table."""
    request = CachedRequest(method=method, url=f"{ORIGIN}/")
    assert table.select(request) is None


def test_non_http_schemes_are_not_intercepted(table):
    """Test that extension and data URLs are ignored."""
    assert table.select(CachedRequest.get("chrome-extension://abcdef/script.js")) is None
    assert table.select(CachedRequest.get("data:text/plain,hello")) is None


def test_custom_table_order_decides(table):
    """Test that the first matching route wins, whatever follows it."""
    custom = RouteTable(
        [
            Route("everything", lambda _r: True, Strategy.CACHE_FIRST, Partition.STATIC),
            *table.routes,
        ]
    )
    route = custom.select(CachedRequest.get(f"{ORIGIN}/api/contact"))
    assert route.name == "everything"


def test_empty_table_selects_nothing():
    """Test that a request matching no route is left alone."""
    assert RouteTable([]).select(CachedRequest.get(f"{ORIGIN}/")) is None
