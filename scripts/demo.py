#!/usr/bin/env python3
"""
Demo script for the offline cache.

Walks through the worker's life against a simulated site: install and
activate, cache-first and stale-while-revalidate hits, an offline
navigation, a contact form queued while offline and replayed on reconnect,
and a push notification.
"""

import asyncio
import json

import httpx

from offline_cache.entities import CachedRequest
from offline_cache.repositories import HttpxFetcher, MemoryCacheStorage
from offline_cache.services import OfflineCacheService

ORIGIN = "https://doctorfix.co.il"

PAGES = {
    "/": "<html>דוקטור פיקס - שחזור מידע</html>",
    "/index.html": "<html>דוקטור פיקס - שחזור מידע</html>",
    "/manifest.json": '{"name": "Doctor Fix"}',
    "/favicon.ico": "ico",
    "/assets/index.js": "console.log('app')",
    "/services/hard-drive-recovery": "<html>שחזור כוננים</html>",
}


class SimulatedSite:
    """Serves PAGES and can be switched offline."""

    def __init__(self) -> None:
        self.offline = False
        self.requests = 0

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests += 1
        if self.offline:
            raise httpx.ConnectError("Network is unreachable", request=request)
        if request.method == "POST":
            return httpx.Response(200, json={"success": True})
        body = PAGES.get(request.url.path)
        if body is None:
            return httpx.Response(404, text="Not Found")
        return httpx.Response(200, text=body)


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


async def show_fetch(worker: OfflineCacheService, site: SimulatedSite, path: str) -> None:
    before = site.requests
    request = CachedRequest.get(f"{ORIGIN}{path}", {"Accept": "text/html"})
    outcome = await worker.handle_fetch(request)
    if outcome is None:
        print(f"  {path:<35} not intercepted")
        return
    network_calls = site.requests - before
    print(
        f"  {path:<35} {outcome.route.name:<20} {outcome.response.status}"
        f"  network calls: {network_calls}"
    )


async def main() -> None:
    site = SimulatedSite()
    worker = OfflineCacheService(
        storage=MemoryCacheStorage(),
        fetcher=HttpxFetcher(origin_url=ORIGIN, transport=httpx.MockTransport(site.handle)),
        origin_url=ORIGIN,
    )

    print_section("Install and activate")
    active = await worker.start()
    print(f"  active: {active}  state: {worker.lifecycle.state.value}")
    print(f"  caches: {worker.get_stats()['caches']}")

    print_section("Online requests")
    for path in ("/", "/assets/index.js", "/assets/index.js", "/services/hard-drive-recovery"):
        await show_fetch(worker, site, path)
    await worker.tracker.drain()

    print_section("Offline requests")
    site.offline = True
    for path in ("/", "/services/hard-drive-recovery", "/pricing"):
        await show_fetch(worker, site, path)

    print_section("Contact form while offline")
    submission = CachedRequest(
        method="POST",
        url=f"{ORIGIN}/api/contact",
        headers={"Content-Type": "application/json"},
        body=json.dumps({"name": "אבי", "phone": "050-0000000"}).encode("utf-8"),
    )
    response = await worker.forward(submission)
    print(f"  submission answered {response.status} {response.text()}")
    print(f"  outbox: {len(worker.sync.pending())} pending")

    site.offline = False
    await show_fetch(worker, site, "/pricing")
    await worker.tracker.drain()
    print(f"  outbox after reconnect: {len(worker.sync.pending())} pending")

    print_section("Push notification")
    notification = worker.handle_push(
        json.dumps({"title": "דוקטור פיקס", "body": "הקבצים שלך מוכנים"}).encode("utf-8")
    )
    print(f"  shown: {notification.title} / {notification.body}")
    command = worker.handle_notification_click(notification.id, "open")
    print(f"  click opened: {command.url}")

    await worker.close()


if __name__ == "__main__":
    asyncio.run(main())
