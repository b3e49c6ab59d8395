import argparse
import asyncio
import json
import logging
import random
from datetime import timedelta

from config import settings
from feed import FeedRequest, PreferenceState, build_discovery_feed, build_search_results
from providers import GenreCatalog, TrackSearchProvider

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def _load_preferences(path):
    if not path:
        return PreferenceState()
    with open(path, "r", encoding="utf-8") as f:
        return PreferenceState.model_validate(json.load(f))


def _print_tracks(result):
    if result.empty:
        print("\nNo tracks found. Try another genre or query.")
        return
    print(f"\n{len(result.tracks)} tracks ({result.source}, seed={result.seed}):")
    print("-" * 50)
    for i, track in enumerate(result.tracks):
        print(f"{i + 1}. {track.title} - {track.artist}")
        if track.album:
            print(f"    Album: {track.album}")
        print(f"    Preview: {track.preview_uri or '-'}")
    print("-" * 50)


async def _run(args):
    provider = TrackSearchProvider()
    preference = _load_preferences(args.preferences)
    if args.query:
        logger.info(f"Searching for {args.query!r}...")
        return await build_search_results(args.query, preference, provider, limit=args.size)

    genre_names = {}
    if args.genres:
        genre_names = GenreCatalog().genre_names()
    request = FeedRequest(
        seed=args.seed if args.seed is not None else random.randrange(10**9),
        genre_ids=args.genres or [],
        target_size=args.size,
        cooldown_window=timedelta(days=args.cooldown_days),
        genre_names=genre_names,
    )
    logger.info(f"Building discovery feed (genres={request.genre_ids or 'default'}, seed={request.seed})...")
    return await build_discovery_feed(request, preference, provider)


def main():
    parser = argparse.ArgumentParser(description="Build a discovery feed or search results")
    parser.add_argument("--genres", type=str, nargs="*", help="Genre ids to interleave")
    parser.add_argument("--query", type=str, help="Free-text search instead of a feed")
    parser.add_argument("--seed", type=int, help="Seed for a reproducible feed")
    parser.add_argument("--size", type=int, default=settings.PAGE_SIZE, help="Number of tracks")
    parser.add_argument("--cooldown-days", type=float, default=settings.COOLDOWN_DAYS)
    parser.add_argument("--preferences", type=str, help="JSON file with a preference snapshot")
    args = parser.parse_args()
    try:
        result = asyncio.run(_run(args))
    except ValueError as e:
        logger.error(f"Invalid request: {e}")
        return
    _print_tracks(result)


if __name__ == "__main__":
    main()
