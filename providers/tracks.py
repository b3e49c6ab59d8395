import logging
from typing import List, Optional

import httpx

from config import settings

logger = logging.getLogger(__name__)

ITEM_KEYS = ("items", "results", "data")


def extract_items(payload) -> List[dict]:
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    if isinstance(payload, dict):
        for key in ITEM_KEYS:
            items = payload.get(key)
            if isinstance(items, list):
                return [item for item in items if isinstance(item, dict)]
    return []


class TrackSearchProvider:
    """
    Async client for the track-search proxy. Every failure mode (transport,
    non-2xx, bad JSON) comes back as an empty list.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.PROXY_BASE_URL).rstrip("/")
        self._timeout = httpx.Timeout(timeout or settings.REQUEST_TIMEOUT_SEC)
        self._transport = transport

    async def fetch_genre(self, genre_id, seed: int, limit: int = settings.PAGE_SIZE) -> List[dict]:
        params = {"genreId": str(genre_id), "limit": int(limit), "seed": int(seed)}
        return await self._get_items(params)

    async def search(self, term: str, limit: int = settings.SEARCH_LIMIT) -> List[dict]:
        term = str(term or "").strip()
        if not term:
            return []
        return await self._get_items({"term": term, "limit": int(limit)})

    async def _get_items(self, params: dict) -> List[dict]:
        url = f"{self.base_url}{settings.TRACK_SEARCH_PATH}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.warning("Track search request failed (%s): %s", params, e)
            return []

        if not response.is_success:
            logger.warning("Track search returned HTTP %s (%s)", response.status_code, params)
            return []
        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("Track search returned malformed JSON: %s", e)
            return []
        return extract_items(payload)
