import logging
import random
from datetime import timedelta
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from config import settings
from feed import (
    FeedRequest,
    FeedResult,
    PreferenceState,
    Track,
    build_discovery_feed,
    build_search_results,
    extend_feed,
)
from ingest.writer import event_rows, write_event_batch
from providers import GenreCatalog, TrackSearchProvider

logger = logging.getLogger(__name__)

app = FastAPI(
    title="TUNEFLIP",
    description="Discovery feed composition engine",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

track_provider = TrackSearchProvider()
genre_catalog = GenreCatalog()


def get_track_provider() -> TrackSearchProvider:
    return track_provider


def get_genre_catalog() -> GenreCatalog:
    return genre_catalog


class PreferencePayload(BaseModel):
    liked_artists: List[str] = []
    disliked_artists: List[str] = []
    disliked_track_ids: List[str] = []
    liked_timestamps: Dict[str, float] = {}
    played_timestamps: Dict[str, float] = {}

    def to_state(self) -> PreferenceState:
        return PreferenceState(
            liked_artists=self.liked_artists,
            disliked_artists=self.disliked_artists,
            disliked_track_ids=frozenset(self.disliked_track_ids),
            liked_timestamps=self.liked_timestamps,
            played_timestamps=self.played_timestamps,
        )


class FeedPayload(BaseModel):
    seed: Optional[int] = None
    genre_ids: List[str] = []
    target_size: int = settings.PAGE_SIZE
    cooldown_days: float = Field(settings.COOLDOWN_DAYS, ge=0, le=settings.MAX_COOLDOWN_DAYS)
    preferences: PreferencePayload = Field(default_factory=PreferencePayload)


class ExtendPayload(FeedPayload):
    existing: List[Track] = []


class SearchPayload(BaseModel):
    query: str
    limit: int = settings.SEARCH_LIMIT
    preferences: PreferencePayload = Field(default_factory=PreferencePayload)


async def _feed_request(payload: FeedPayload, catalog: GenreCatalog) -> FeedRequest:
    genre_names = {}
    if payload.genre_ids:
        genre_names = await run_in_threadpool(catalog.genre_names)
    return FeedRequest(
        seed=payload.seed if payload.seed is not None else random.randrange(10**9),
        genre_ids=payload.genre_ids,
        target_size=payload.target_size,
        cooldown_window=timedelta(days=payload.cooldown_days),
        genre_names=genre_names,
    )


def _bad_request(exc: ValueError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=400)


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "proxy_base_url": settings.PROXY_BASE_URL,
        "demo_fallback_enabled": bool(settings.DEMO_FALLBACK_ENABLED),
    }


@app.get("/api/genres")
def list_genres(
    q: str = Query("", description="Filter genres by label"),
    catalog: GenreCatalog = Depends(get_genre_catalog),
):
    return {"items": catalog.filter_genres(q)}


@app.post("/api/feed", response_model=FeedResult)
async def discovery_feed(
    payload: FeedPayload,
    provider: TrackSearchProvider = Depends(get_track_provider),
    catalog: GenreCatalog = Depends(get_genre_catalog),
):
    try:
        request = await _feed_request(payload, catalog)
        return await build_discovery_feed(request, payload.preferences.to_state(), provider)
    except ValueError as exc:
        return _bad_request(exc)


@app.post("/api/feed/extend", response_model=FeedResult)
async def extend_discovery_feed(
    payload: ExtendPayload,
    provider: TrackSearchProvider = Depends(get_track_provider),
    catalog: GenreCatalog = Depends(get_genre_catalog),
):
    try:
        request = await _feed_request(payload, catalog)
        return await extend_feed(
            payload.existing, request, payload.preferences.to_state(), provider
        )
    except ValueError as exc:
        return _bad_request(exc)


@app.get("/api/search", response_model=FeedResult)
async def search_get(
    q: str = Query(..., description="Free-text search"),
    limit: int = Query(settings.SEARCH_LIMIT, ge=1, le=200),
    provider: TrackSearchProvider = Depends(get_track_provider),
):
    return await build_search_results(q, PreferenceState(), provider, limit=limit)


@app.post("/api/search", response_model=FeedResult)
async def search_post(
    payload: SearchPayload,
    provider: TrackSearchProvider = Depends(get_track_provider),
):
    try:
        return await build_search_results(
            payload.query, payload.preferences.to_state(), provider, limit=payload.limit
        )
    except ValueError as exc:
        return _bad_request(exc)


@app.post("/api/log")
async def log_events(request: Request):
    try:
        body = await request.json()
    except ValueError:
        body = None
    body = body if isinstance(body, dict) else {}

    session_id = body.get("session_id")
    events = body.get("events", [])
    if not session_id or not isinstance(events, list):
        return JSONResponse({"error": "bad payload"}, status_code=400)

    rows = event_rows(session_id, events, user_id=body.get("user_id"))
    if not rows:
        return JSONResponse({"error": "no valid events"}, status_code=400)

    try:
        await run_in_threadpool(write_event_batch, rows)
    except Exception as exc:
        logger.error("log insert error: %s", exc)
        return JSONResponse({"error": "insert_failed"}, status_code=500)
    return Response(status_code=204)
