"""
Shared fixtures: raw record factories and an in-memory track provider so no
test touches the network.
"""

import asyncio

import pytest

from feed.models import Track


class FakeProvider:
    """Stands in for TrackSearchProvider. Buckets are keyed by genre id."""

    def __init__(self, buckets=None, search_results=None, failing=(), slow=()):
        self.buckets = {str(k): v for k, v in (buckets or {}).items()}
        self.search_results = search_results or []
        self.failing = {str(g) for g in failing}
        self.slow = {str(g) for g in slow}
        self.genre_calls = []
        self.search_calls = []

    async def fetch_genre(self, genre_id, seed, limit=20):
        genre_id = str(genre_id)
        self.genre_calls.append((genre_id, seed, limit))
        if genre_id in self.failing:
            raise RuntimeError(f"bucket {genre_id} unavailable")
        if genre_id in self.slow:
            await asyncio.sleep(5)
        return [dict(r) for r in self.buckets.get(genre_id, [])]

    async def search(self, term, limit=30):
        self.search_calls.append((term, limit))
        return [dict(r) for r in self.search_results]


def raw(artist, title=None, **extra):
    title = title or f"{artist} song"
    record = {"id": f"{artist}-{title}".lower().replace(" ", "-"), "title": title, "artist": artist}
    record.update(extra)
    return record


def track(artist, title=None, **extra):
    record = raw(artist, title, **extra)
    return Track(**record)


@pytest.fixture
def fake_provider():
    return FakeProvider


@pytest.fixture
def make_raw():
    return raw


@pytest.fixture
def make_track():
    return track
