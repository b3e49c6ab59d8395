from feed.models import Track, PreferenceState, FeedRequest, FeedResult
from feed.prng import SeededRandom
from feed.shuffle import seeded_shuffle
from feed.normalize import normalize, normalize_many
from feed.dedupe import dedupe
from feed.diversify import diversify, bias_and_diversify
from feed.filters import apply_filters
from feed.interleave import fetch_for_genres, interleave
from feed.preferences import resolve_preferences
from feed.relevance import score_relevance, rank_search_results
from feed.engine import build_discovery_feed, build_search_results, extend_feed

__all__ = [
    "Track", "PreferenceState", "FeedRequest", "FeedResult",
    "SeededRandom", "seeded_shuffle",
    "normalize", "normalize_many", "dedupe",
    "diversify", "bias_and_diversify",
    "apply_filters",
    "fetch_for_genres", "interleave",
    "resolve_preferences",
    "score_relevance", "rank_search_results",
    "build_discovery_feed", "build_search_results", "extend_feed",
]
