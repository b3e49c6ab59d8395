import asyncio
import logging
from typing import Optional, Sequence

from config import settings
from feed.dedupe import content_key, dedupe
from feed.diversify import bias_and_diversify
from feed.filters import apply_filters, drop_disliked
from feed.interleave import SEED_MASK, fetch_for_genres
from feed.models import FeedRequest, FeedResult, PreferenceState, Track
from feed.normalize import normalize_many
from feed.preferences import resolve_preferences
from feed.relevance import rank_search_results

logger = logging.getLogger(__name__)


def _require_target(request: FeedRequest) -> int:
    target = int(request.target_size)
    if target <= 0:
        raise ValueError(f"target_size must be positive, got {target}")
    return target


def _fetch_limit(target: int) -> int:
    return max(target, settings.PAGE_SIZE) * settings.FETCH_LIMIT_MULTIPLIER


def _nothing_found(seed, source, demo_fallback) -> FeedResult:
    if settings.DEMO_FALLBACK_ENABLED if demo_fallback is None else demo_fallback:
        logger.info("No candidates for seed %s, serving demo tracks", seed)
        return FeedResult.from_tracks(normalize_many(settings.DEMO_TRACKS), seed=seed, source="demo")
    logger.info("No candidates for seed %s after fallback chain", seed)
    return FeedResult(tracks=[], empty=True, seed=seed, source=source)


def _compose(candidates, preference, request, target, now) -> list:
    filtered = apply_filters(
        candidates,
        preference,
        request.genre_ids,
        genre_names=request.genre_names,
        target=target,
        cooldown_window=request.cooldown_window,
        now=now,
    )
    if not filtered:
        return []
    return bias_and_diversify(
        filtered, preference.liked_artists, preference.disliked_artists, target=target
    )


async def build_discovery_feed(
    request: FeedRequest,
    preference: PreferenceState,
    provider,
    now: Optional[float] = None,
    demo_fallback: Optional[bool] = None,
) -> FeedResult:
    target = _require_target(request)
    candidates = await fetch_for_genres(
        request.genre_ids, request.seed, provider, limit=_fetch_limit(target)
    )
    if not candidates:
        return _nothing_found(request.seed, "discovery", demo_fallback)

    resolved = resolve_preferences(preference, candidates)
    tracks = _compose(candidates, resolved, request, target, now)
    if not tracks:
        return _nothing_found(request.seed, "discovery", demo_fallback)
    logger.debug("Discovery feed: %d of %d candidates", len(tracks), len(candidates))
    return FeedResult.from_tracks(tracks, seed=request.seed, source="discovery")


async def build_search_results(
    query: str,
    preference: PreferenceState,
    provider,
    limit: int = settings.SEARCH_LIMIT,
) -> FeedResult:
    if int(limit) <= 0:
        raise ValueError(f"limit must be positive, got {limit}")
    term = str(query or "").strip()
    if not term:
        return FeedResult(tracks=[], empty=True, source="search")

    try:
        raw = await asyncio.wait_for(
            provider.search(term, limit=limit * settings.FETCH_LIMIT_MULTIPLIER),
            settings.BUCKET_TIMEOUT_SEC,
        )
    except asyncio.TimeoutError:
        logger.warning("Search for %r timed out", term)
        raw = []

    tracks = dedupe(normalize_many(raw))
    tracks = drop_disliked(tracks, preference.disliked_track_ids)
    ranked = rank_search_results(tracks, term, target=limit)
    return FeedResult.from_tracks(ranked, source="search")


async def extend_feed(
    existing: Sequence[Track],
    request: FeedRequest,
    preference: PreferenceState,
    provider,
    now: Optional[float] = None,
) -> FeedResult:
    """Append a fresh page to ``existing``. Existing tracks are never reordered or dropped."""
    target = _require_target(request)
    existing = list(existing or [])
    page = len(existing) // target + 1
    page_seed = (int(request.seed) ^ (page * settings.SEED_INDEX_MIX)) & SEED_MASK

    candidates = await fetch_for_genres(
        request.genre_ids, page_seed, provider, limit=_fetch_limit(target)
    )
    seen_ids = {t.id for t in existing}
    seen_keys = {content_key(t) for t in existing}
    fresh = [t for t in candidates if t.id not in seen_ids and content_key(t) not in seen_keys]

    resolved = resolve_preferences(preference, existing + fresh)
    appended = _compose(fresh, resolved, request, target, now) if fresh else []
    logger.debug("Extended feed by %d tracks (page %d)", len(appended), page)
    return FeedResult.from_tracks(existing + appended, seed=page_seed, source="extend")
