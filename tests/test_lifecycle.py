"""
Tests for install / activate and the worker's fetch interception.
"""

import pytest

from offline_cache.entities import CachedRequest
from offline_cache.exceptions import InstallError
from offline_cache.services import WorkerState

from .conftest import DYNAMIC_CACHE, ORIGIN, STATIC_CACHE, VERSION


@pytest.mark.asyncio
async def test_install_precaches_static_assets(worker, storage):
    """Test that install stores every static asset and skips waiting."""
    count = await worker.install()

    assert count == 4
    assert worker.lifecycle.state is WorkerState.INSTALLED
    static = storage.open(STATIC_CACHE)
    assert [r.path for r in static.keys()] == ["/", "/index.html", "/manifest.json", "/favicon.ico"]


@pytest.mark.asyncio
async def test_install_is_all_or_nothing(worker, storage, site):
    """Test that one missing asset fails the install and stores nothing."""
    del site.pages[f"{ORIGIN}/manifest.json"]

    with pytest.raises(InstallError) as exc_info:
        await worker.install()

    assert exc_info.value.failed == [f"{ORIGIN}/manifest.json"]
    assert worker.lifecycle.state is WorkerState.REDUNDANT
    assert not storage.has(STATIC_CACHE)


@pytest.mark.asyncio
async def test_activate_deletes_other_versions(worker, storage):
    """Test that only the current static and dynamic partitions survive."""
    for name in ("static-v0.9.0", "dynamic-v0.9.0", "doctorfix-v0.9.0", DYNAMIC_CACHE):
        storage.open(name)

    await worker.install()
    report = worker.activate()

    assert sorted(report.deleted_caches) == ["doctorfix-v0.9.0", "dynamic-v0.9.0", "static-v0.9.0"]
    assert sorted(storage.keys()) == sorted([STATIC_CACHE, DYNAMIC_CACHE])
    assert storage.open(STATIC_CACHE).count() == 4
    assert worker.lifecycle.state is WorkerState.ACTIVATED


def test_activate_requires_install(worker):
    """Test that a worker cannot skip installation."""
    with pytest.raises(RuntimeError):
        worker.activate()


@pytest.mark.asyncio
async def test_activation_claims_clients(worker):
    """Test update detection and the takeover of open tabs."""
    old_tab = worker.clients.register("/", controller="doctorfix-v0.9.0")
    new_tab = worker.clients.register("/about")

    await worker.install()
    assert worker.lifecycle.update_available

    report = worker.activate()

    assert report.claimed_clients == 2
    assert old_tab.controller == VERSION
    assert new_tab.controller == VERSION
    assert not worker.lifecycle.update_available


@pytest.mark.asyncio
async def test_start_reports_failure_when_offline(worker, site):
    """Test that start() logs and returns False instead of raising."""
    site.offline = True

    assert await worker.start() is False
    assert not worker.lifecycle.is_active


@pytest.mark.asyncio
async def test_failed_reinstall_keeps_active_worker_serving(worker, site):
    """Test that a failed refresh of an active worker leaves it activated."""
    assert await worker.start()
    site.offline = True

    with pytest.raises(InstallError):
        await worker.install()

    assert worker.lifecycle.state is WorkerState.ACTIVATED
    outcome = await worker.handle_fetch(CachedRequest.get(f"{ORIGIN}/"))
    assert outcome is not None
    assert outcome.route.name == "static-assets"
    assert outcome.response.body == b"<html>home</html>"


@pytest.mark.asyncio
async def test_reinstall_refreshes_static_assets_while_active(worker, site, storage):
    """Test that a successful refresh updates the assets without deactivating."""
    assert await worker.start()
    site.add("/", "<html>home v2</html>")

    assert await worker.install() == 4

    assert worker.lifecycle.state is WorkerState.ACTIVATED
    outcome = await worker.handle_fetch(CachedRequest.get(f"{ORIGIN}/"))
    assert outcome.response.body == b"<html>home v2</html>"
    assert storage.open(STATIC_CACHE).count() == 4


@pytest.mark.asyncio
async def test_fetches_ignored_until_activated(worker):
    """Test that an installed but inactive worker does not intercept."""
    await worker.install()

    assert await worker.handle_fetch(CachedRequest.get(f"{ORIGIN}/")) is None


@pytest.mark.asyncio
async def test_handle_fetch_routes_requests(worker, site):
    """Test interception end to end after start()."""
    site.add("/assets/app.js", "js", content_type="application/javascript")
    assert await worker.start()
    calls_before = len(site.calls)

    home = await worker.handle_fetch(CachedRequest.get(f"{ORIGIN}/"))
    assert home.route.name == "static-assets"
    assert home.response.body == b"<html>home</html>"
    assert len(site.calls) == calls_before

    script = await worker.handle_fetch(CachedRequest.get(f"{ORIGIN}/assets/app.js"))
    assert script.route.name == "cacheable-resources"
    assert script.response.body == b"js"

    assert await worker.handle_fetch(CachedRequest(method="POST", url=f"{ORIGIN}/api/contact")) is None

    await worker.close()


@pytest.mark.asyncio
async def test_get_stats(worker):
    """Test partition statistics."""
    await worker.start()

    stats = worker.get_stats()

    assert stats["version"] == VERSION
    assert stats["state"] == "activated"
    assert stats["caches"] == {STATIC_CACHE: 4}
