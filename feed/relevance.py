from typing import List, Sequence

from config import settings
from feed.diversify import diversify
from feed.models import Track

# Whole-query field weights
EXACT_ARTIST = 60
ARTIST_STARTS_WITH = 50
ARTIST_CONTAINS = 40
TITLE_ARTIST_CONTAINS = 18
ALBUM_CONTAINS = 14

# Per-token weights
TOKEN_ARTIST_CONTAINS = 8
TOKEN_ALBUM_CONTAINS = 6
TOKEN_TITLE_CONTAINS = 5
TOKEN_ARTIST_STARTS_WITH = 4
TOKEN_TITLE_STARTS_WITH = 3

HAS_PREVIEW = 1
HAS_STORE_LINK = 1


def score_relevance(track: Track, query: str) -> float:
    q = str(query or "").strip().lower()
    if not q:
        return 0.0
    title = track.title.strip().lower()
    artist = track.artist.strip().lower()
    album = track.album.strip().lower()

    score = 0.0
    if artist == q:
        score += EXACT_ARTIST
    if q in artist:
        score += ARTIST_CONTAINS
    if artist.startswith(q):
        score += ARTIST_STARTS_WITH
    if q in f"{title} {artist}":
        score += TITLE_ARTIST_CONTAINS
    if q in album:
        score += ALBUM_CONTAINS

    for token in q.split():
        if token in artist:
            score += TOKEN_ARTIST_CONTAINS
        if token in album:
            score += TOKEN_ALBUM_CONTAINS
        if token in title:
            score += TOKEN_TITLE_CONTAINS
        if artist.startswith(token):
            score += TOKEN_ARTIST_STARTS_WITH
        if title.startswith(token):
            score += TOKEN_TITLE_STARTS_WITH

    if track.preview_uri:
        score += HAS_PREVIEW
    if track.store_uri:
        score += HAS_STORE_LINK
    return score


def rank_search_results(
    tracks: Sequence[Track],
    query: str,
    target: int = settings.SEARCH_LIMIT,
    max_per_artist: int = settings.MAX_PER_ARTIST,
) -> List[Track]:
    """Sort by relevance (stable) and cap repeats per artist. No cooldown for search."""
    scored = [(score_relevance(t, query), t) for t in tracks]
    scored = sorted(scored, key=lambda pair: pair[0], reverse=True)
    return diversify(
        [t for _, t in scored],
        max_per_artist=max_per_artist,
        cooldown_span=0,
        target=target,
    )
