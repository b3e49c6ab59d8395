import asyncio
import logging
import zlib
from typing import List, Optional, Sequence

from config import settings
from feed.dedupe import dedupe
from feed.models import Track
from feed.normalize import normalize_many
from feed.shuffle import seeded_shuffle

logger = logging.getLogger(__name__)

SEED_MASK = 0xFFFFFFFF


def genre_key(genre_id) -> int:
    text = str(genre_id).strip()
    if text.isdigit():
        return int(text) & SEED_MASK
    return zlib.crc32(text.encode("utf-8"))


def bucket_seed(seed: int, genre_id, index: int) -> int:
    return (int(seed) ^ genre_key(genre_id) ^ (index * settings.SEED_INDEX_MIX)) & SEED_MASK


def interleave(buckets: Sequence[Sequence[Track]]) -> List[Track]:
    merged = []
    depth = max((len(b) for b in buckets), default=0)
    for i in range(depth):
        for bucket in buckets:
            if i < len(bucket):
                merged.append(bucket[i])
    return merged


async def _fetch_bucket(provider, genre_id, seed: int, limit: int, timeout: float) -> List[Track]:
    raw = await asyncio.wait_for(provider.fetch_genre(genre_id, seed=seed, limit=limit), timeout)
    return dedupe(normalize_many(raw))


async def _gather_buckets(provider, genre_ids, seed, limit, timeout) -> List[List[Track]]:
    tasks = [
        _fetch_bucket(provider, gid, bucket_seed(seed, gid, idx), limit, timeout)
        for idx, gid in enumerate(genre_ids)
    ]
    responses = await asyncio.gather(*tasks, return_exceptions=True)
    buckets = []
    for gid, response in zip(genre_ids, responses):
        if isinstance(response, BaseException):
            logger.warning("Genre bucket %s failed: %r", gid, response)
            buckets.append([])
        else:
            buckets.append(response)
    return buckets


async def fetch_for_genres(
    genre_ids: Sequence,
    seed: int,
    provider,
    limit: Optional[int] = None,
    timeout: Optional[float] = None,
    default_genre=settings.DEFAULT_GENRE_ID,
) -> List[Track]:
    """
    Fetch one bucket per genre concurrently and merge them round-robin so no
    genre dominates by returning more rows. Falls back to the default genre
    when every bucket comes back empty.
    """
    limit = limit or settings.PAGE_SIZE * settings.FETCH_LIMIT_MULTIPLIER
    timeout = timeout or settings.BUCKET_TIMEOUT_SEC
    genre_ids = list(genre_ids or [])

    buckets = await _gather_buckets(provider, genre_ids, seed, limit, timeout) if genre_ids else []
    buckets = [b for b in buckets if b]
    if not buckets:
        logger.info("No genre buckets returned tracks, falling back to genre %s", default_genre)
        buckets = await _gather_buckets(provider, [default_genre], seed, limit, timeout)
        buckets = [b for b in buckets if b]

    merged = interleave(buckets)
    shuffled = seeded_shuffle(merged, (int(seed) ^ settings.SEED_SHUFFLE_MIX) & SEED_MASK)
    return dedupe(shuffled)
