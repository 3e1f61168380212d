# =============================================================================
# tests/test_api_client.py - Client Helper Tests
# =============================================================================
# MarketplaceAPIClient and MessageCountPoller against httpx.MockTransport.
# Coroutines are driven with asyncio.run so no async pytest plugin is needed.
#
# Run with: pytest tests/test_api_client.py -v
# =============================================================================

import asyncio
import json

import httpx
import pytest

from lib.api_client import APIClientError, MarketplaceAPIClient, MessageCountPoller

BASE_URL = "http://marketplace.test"

LISTING_IDS = [
    "550e8400-e29b-41d4-a716-446655440001",
    "550e8400-e29b-41d4-a716-446655440002",
    "550e8400-e29b-41d4-a716-446655440003",
]


def _listing(listing_id, **overrides):
    row = {
        "id": listing_id,
        "title": "Bike",
        "description": "Red",
        "price": 100.0,
        "category": "vehicles",
        "seller_email": "a@x.com",
        "image_url": None,
        "location": "Cebu",
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    }
    row.update(overrides)
    return row


def _message(listing_id, text="hi"):
    return {
        "id": "m-" + text,
        "listing_id": listing_id,
        "buyer_email": "b@x.com",
        "seller_email": "a@x.com",
        "message": text,
        "created_at": "2024-01-01T00:00:00+00:00",
    }


def _client(handler):
    return MarketplaceAPIClient(BASE_URL, transport=httpx.MockTransport(handler))


class TestMarketplaceAPIClient:
    """Request shapes and response decoding."""

    def test_get_listings_sends_only_set_filters(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"listings": [_listing(LISTING_IDS[0])], "count": 1})

        async def run():
            async with _client(handler) as api:
                return await api.get_listings(category="vehicles", max_price=200)

        listings = asyncio.run(run())

        assert seen["path"] == "/api/v1/listings"
        assert seen["params"] == {"category": "vehicles", "max_price": "200"}
        assert listings[0].id == LISTING_IDS[0]
        assert listings[0].price == 100.0

    def test_get_listing_not_found_is_none(self):
        def handler(request):
            return httpx.Response(404, json={"detail": "Listing not found", "code": "LISTING_NOT_FOUND"})

        async def run():
            async with _client(handler) as api:
                return await api.get_listing(LISTING_IDS[0])

        assert asyncio.run(run()) is None

    def test_error_carries_detail_and_code(self):
        def handler(request):
            return httpx.Response(400, json={"detail": "Invalid category", "code": "VALIDATION_ERROR"})

        async def run():
            async with _client(handler) as api:
                await api.create_listing({"category": "spaceships"})

        with pytest.raises(APIClientError) as exc_info:
            asyncio.run(run())

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid category"
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_send_message(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"success": True, "message": _message(LISTING_IDS[0])})

        async def run():
            async with _client(handler) as api:
                return await api.send_message(LISTING_IDS[0], "b@x.com", "a@x.com", "hi")

        message = asyncio.run(run())

        assert seen["method"] == "POST"
        assert seen["body"]["seller_email"] == "a@x.com"
        assert message.message == "hi"

    def test_delete_listing_passes_seller_email(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"success": True, "message": "Listing deleted successfully"})

        async def run():
            async with _client(handler) as api:
                return await api.delete_listing(LISTING_IDS[0], seller_email="a@x.com")

        assert asyncio.run(run()) is True
        assert seen["path"] == f"/api/v1/listings/{LISTING_IDS[0]}"
        assert seen["params"] == {"seller_email": "a@x.com"}

    def test_upload_image_returns_url(self):
        def handler(request):
            assert request.headers["content-type"].startswith("multipart/form-data")
            return httpx.Response(201, json={
                "success": True,
                "url": "/uploads/1_abc.png",
                "file_name": "1_abc.png",
                "size": 3,
                "type": "image/png",
            })

        async def run():
            async with _client(handler) as api:
                return await api.upload_image("a.png", b"png", "image/png")

        assert asyncio.run(run()) == "/uploads/1_abc.png"

    def test_seed_and_clear(self):
        actions = []

        def handler(request):
            actions.append(json.loads(request.content)["action"])
            return httpx.Response(200, json={"success": True, "message": "ok"})

        async def run():
            async with _client(handler) as api:
                await api.seed_database()
                await api.clear_database()

        asyncio.run(run())

        assert actions == ["seed", "clear"]


class TestMessageCountPoller:
    """Background message count."""

    def _handler(self, failing_listing=None, counts=None):
        counts = counts or {LISTING_IDS[0]: 2, LISTING_IDS[1]: 0, LISTING_IDS[2]: 1}

        def handler(request):
            if request.url.path == "/api/v1/listings":
                return httpx.Response(200, json={
                    "listings": [_listing(listing_id) for listing_id in counts],
                    "count": len(counts),
                })
            listing_id = request.url.params["listing_id"]
            if listing_id == failing_listing:
                return httpx.Response(500, json={"detail": "An unexpected error occurred"})
            messages = [_message(listing_id, str(i)) for i in range(counts[listing_id])]
            return httpx.Response(200, json={"success": True, "messages": messages})

        return handler

    def test_refresh_totals_messages(self):
        async def run():
            async with _client(self._handler()) as api:
                poller = MessageCountPoller(api, batch_size=2)
                return await poller.refresh(), poller.loading

        count, loading = asyncio.run(run())

        assert count == 3
        assert loading is False

    def test_failed_listing_counts_zero(self):
        async def run():
            async with _client(self._handler(failing_listing=LISTING_IDS[0])) as api:
                return await MessageCountPoller(api).refresh()

        assert asyncio.run(run()) == 1

    def test_listing_fetch_failure_resets_count(self):
        def handler(request):
            return httpx.Response(500, json={"detail": "An unexpected error occurred"})

        async def run():
            async with _client(handler) as api:
                poller = MessageCountPoller(api)
                poller.count = 7
                return await poller.refresh()

        assert asyncio.run(run()) == 0

    def test_runs_only_inside_context(self):
        async def run():
            async with _client(self._handler()) as api:
                poller = MessageCountPoller(api, interval=3600)
                async with poller:
                    assert poller.running
                    count = await asyncio.wait_for(poller.wait_refreshed(), timeout=5)
                    poller.increment()
                    incremented = poller.count
                return count, incremented, poller.running

        count, incremented, running = asyncio.run(run())

        assert count == 3
        assert incremented == 4
        assert running is False

    def test_stop_without_start(self):
        async def run():
            async with _client(self._handler()) as api:
                poller = MessageCountPoller(api)
                await poller.stop()
                return poller.running

        assert asyncio.run(run()) is False

    def test_non_json_response_keeps_polling(self):
        requests = []

        def handler(request):
            requests.append(request.url.path)
            return httpx.Response(200, text="<html>oops</html>")

        async def run():
            async with _client(handler) as api:
                poller = MessageCountPoller(api, interval=0.01)
                poller.count = 5
                async with poller:
                    first = await asyncio.wait_for(poller.wait_refreshed(), timeout=5)
                    second = await asyncio.wait_for(poller.wait_refreshed(), timeout=5)
                    alive = poller.running
                return first, second, alive

        first, second, alive = asyncio.run(run())

        assert first == 0
        assert second == 0
        assert alive is True
        assert len(requests) >= 2

    def test_invalid_listing_row_resets_count(self):
        def handler(request):
            return httpx.Response(200, json={"listings": [{"id": LISTING_IDS[0]}], "count": 1})

        async def run():
            async with _client(handler) as api:
                poller = MessageCountPoller(api)
                poller.count = 7
                return await poller.refresh()

        assert asyncio.run(run()) == 0

    def test_undecodable_messages_count_zero(self):
        counts = {LISTING_IDS[0]: 2, LISTING_IDS[1]: 1}
        base = self._handler(counts=counts)

        def handler(request):
            if request.url.params.get("listing_id") == LISTING_IDS[0]:
                return httpx.Response(200, text="not json")
            return base(request)

        async def run():
            async with _client(handler) as api:
                return await MessageCountPoller(api).refresh()

        assert asyncio.run(run()) == 1
