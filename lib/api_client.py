# =============================================================================
# lib/api_client.py - Marketplace API Client
# =============================================================================
# Async HTTP client for the Marketplace API, one method per endpoint, plus
# MessageCountPoller: a background task that keeps a running total of
# messages across listings while a UI session is open.
#
# Usage:
#   async with MarketplaceAPIClient("http://localhost:8000") as api:
#       listings = await api.get_listings(category="vehicles")
#
#       async with MessageCountPoller(api, interval=60) as poller:
#           ...
#           print(poller.count)
# =============================================================================

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from core.models.listing import Listing
from core.models.message import Message

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class APIClientError(Exception):
    """Non-2xx response from the Marketplace API."""

    def __init__(self, status_code: int, detail: str, code: str | None = None):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.code = code

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.detail}"


class MarketplaceAPIClient:
    """
    Async client for the Marketplace API.

    Pass `transport` to route requests somewhere other than the network
    (e.g. httpx.MockTransport or httpx.ASGITransport).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + API_PREFIX,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "MarketplaceAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        response = await self._client.request(method, url, **kwargs)
        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        detail = body.get("detail") if isinstance(body, dict) else None
        code = body.get("code") if isinstance(body, dict) else None
        raise APIClientError(response.status_code, detail or response.reason_phrase, code)

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    async def get_listings(
        self,
        category: str | None = None,
        search: str | None = None,
        location: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[Listing]:
        """Search listings. Unset filters are not sent."""
        params = {
            key: value
            for key, value in {
                "category": category,
                "search": search,
                "location": location,
                "min_price": min_price,
                "max_price": max_price,
                "limit": limit,
                "offset": offset,
            }.items()
            if value is not None
        }
        data = await self._request("GET", "/listings", params=params)
        return [Listing(**row) for row in data.get("listings", [])]

    async def get_listings_by_category(self, category: str) -> list[Listing]:
        return await self.get_listings(category=category)

    async def get_listing(self, listing_id: str) -> Listing | None:
        """Fetch one listing; None when it doesn't exist."""
        try:
            data = await self._request("GET", f"/listings/{listing_id}")
        except APIClientError as e:
            if e.status_code == 404:
                return None
            raise
        return Listing(**data["listing"])

    async def create_listing(self, listing: dict[str, Any]) -> Listing:
        data = await self._request("POST", "/listings", json=listing)
        return Listing(**data["listing"])

    async def update_listing(self, listing_id: str, changes: dict[str, Any]) -> Listing:
        data = await self._request("PUT", f"/listings/{listing_id}", json=changes)
        return Listing(**data["listing"])

    async def delete_listing(self, listing_id: str, seller_email: str | None = None) -> bool:
        params = {"seller_email": seller_email} if seller_email else None
        data = await self._request("DELETE", f"/listings/{listing_id}", params=params)
        return bool(data.get("success"))

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    async def get_messages(
        self,
        listing_id: str,
        buyer_email: str | None = None,
        seller_email: str | None = None,
    ) -> list[Message]:
        params = {"listing_id": listing_id}
        if buyer_email:
            params["buyer_email"] = buyer_email
        if seller_email:
            params["seller_email"] = seller_email
        data = await self._request("GET", "/messages", params=params)
        return [Message(**row) for row in data.get("messages", [])]

    async def send_message(
        self,
        listing_id: str,
        buyer_email: str,
        seller_email: str,
        message: str,
    ) -> Message:
        data = await self._request(
            "POST",
            "/messages",
            json={
                "listing_id": listing_id,
                "buyer_email": buyer_email,
                "seller_email": seller_email,
                "message": message,
            },
        )
        return Message(**data["message"])

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    async def upload_image(self, file_name: str, content: bytes, content_type: str) -> str:
        """Upload an image and return its public URL."""
        data = await self._request(
            "POST",
            "/upload",
            files={"file": (file_name, content, content_type)},
        )
        return data["url"]

    async def delete_image(self, file_name: str) -> bool:
        data = await self._request("DELETE", "/upload", params={"file_name": file_name})
        return bool(data.get("success"))

    # -------------------------------------------------------------------------
    # Seed
    # -------------------------------------------------------------------------

    async def seed_database(self) -> dict[str, Any]:
        return await self._request("POST", "/seed", json={"action": "seed"})

    async def clear_database(self) -> dict[str, Any]:
        return await self._request("POST", "/seed", json={"action": "clear"})


class MessageCountPoller:
    """
    Periodically totals messages across listings.

    The task lives only inside `async with` (or between start() and stop());
    leaving the block cancels it, so no timer outlives the UI session.

    Args:
        api: Client used for the requests
        interval: Seconds between refreshes
        listing_limit: Listings counted per refresh
        batch_size: Listings whose messages are fetched concurrently
    """

    def __init__(
        self,
        api: MarketplaceAPIClient,
        interval: float = 60.0,
        listing_limit: int = 100,
        batch_size: int = 5,
    ):
        self._api = api
        self.interval = interval
        self.listing_limit = listing_limit
        self.batch_size = batch_size
        self.count = 0
        self.loading = False
        self._task: asyncio.Task | None = None
        self._refreshed = asyncio.Event()

    async def __aenter__(self) -> "MessageCountPoller":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start polling; a no-op if already running."""
        if not self.running:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the polling task and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    def increment(self) -> None:
        """Count a message sent locally without waiting for the next refresh."""
        self.count += 1

    async def wait_refreshed(self) -> int:
        """Wait for the next completed refresh and return the count."""
        self._refreshed.clear()
        await self._refreshed.wait()
        return self.count

    async def _count_for(self, listing_id: str) -> int:
        try:
            return len(await self._api.get_messages(listing_id))
        except Exception as e:
            logger.warning(f"Counting messages for listing {listing_id} failed: {e}")
            return 0

    async def refresh(self) -> int:
        """Recount messages now."""
        self.loading = True
        try:
            listings = await self._api.get_listings(limit=self.listing_limit)
            total = 0
            for start in range(0, len(listings), self.batch_size):
                batch = listings[start:start + self.batch_size]
                counts = await asyncio.gather(*(self._count_for(listing.id) for listing in batch))
                total += sum(counts)
            self.count = total
        except Exception as e:
            # Any failure zeroes the count; the next tick tries again
            logger.warning(f"Refreshing message count failed: {e}")
            self.count = 0
        finally:
            self.loading = False
            self._refreshed.set()
        return self.count

    async def _run(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self.interval)
