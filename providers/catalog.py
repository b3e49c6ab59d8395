import logging
import time
from typing import Dict, List, Optional

import requests

from config import settings

logger = logging.getLogger(__name__)


class GenreCatalog:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        ttl_sec: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.PROXY_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.REQUEST_TIMEOUT_SEC
        self.ttl_sec = settings.GENRE_CACHE_TTL_SEC if ttl_sec is None else ttl_sec
        self.session = session or requests.Session()
        self._cached: List[dict] = []
        self._cached_at = 0.0

    def get_genres(self) -> List[dict]:
        """Genre list from the proxy, or the built-in list when it is unavailable."""
        if self._cached and time.time() - self._cached_at < self.ttl_sec:
            return list(self._cached)

        genres = self._fetch()
        if not genres:
            logger.info("Genre catalog unavailable, using %d fallback genres", len(settings.FALLBACK_GENRES))
            return [dict(g) for g in settings.FALLBACK_GENRES]

        self._cached = genres
        self._cached_at = time.time()
        return list(genres)

    def _fetch(self) -> List[dict]:
        url = f"{self.base_url}{settings.GENRE_CATALOG_PATH}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Error fetching genres: %s", e)
            return []

        items = data.get("items") if isinstance(data, dict) else data
        genres = []
        for item in items or []:
            if not isinstance(item, dict):
                continue
            genre_id = str(item.get("id", "") or "").strip()
            name = str(item.get("name", "") or "").strip()
            if not genre_id or not name:
                continue
            label = str(item.get("label", "") or "").strip() or name
            genres.append({"id": genre_id, "name": name, "label": label})
        return genres

    def genre_names(self) -> Dict[str, str]:
        return {g["id"]: g["name"] for g in self.get_genres()}

    def filter_genres(self, query: str = "", limit: int = settings.MAX_GENRE_RESULTS) -> List[dict]:
        # Prefix matches rank ahead of substring matches
        genres = self.get_genres()
        q = str(query or "").strip().lower()
        if not q:
            return genres[:limit]
        starts, includes = [], []
        for genre in genres:
            label = str(genre.get("label") or genre.get("name") or "").lower()
            if not label:
                continue
            if label.startswith(q):
                starts.append(genre)
            elif q in label:
                includes.append(genre)
        return (starts + includes)[:limit]
