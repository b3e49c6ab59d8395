from datetime import timedelta
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import settings


def artist_key(value: Optional[str]) -> str:
    return str(value or "").strip().lower()


class Track(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    artist: str
    album: str = ""
    artwork_uri: str = ""
    preview_uri: Optional[str] = None
    store_uri: Optional[str] = None
    genre_label: Optional[str] = None

    @property
    def artist_key(self) -> str:
        return artist_key(self.artist)


class PreferenceState(BaseModel):
    """Read-only snapshot of what the listener liked, disliked and played.

    Timestamps are epoch seconds keyed by track id.
    """

    model_config = ConfigDict(frozen=True)

    liked_artists: FrozenSet[str] = frozenset()
    disliked_artists: FrozenSet[str] = frozenset()
    disliked_track_ids: FrozenSet[str] = frozenset()
    liked_timestamps: Dict[str, float] = Field(default_factory=dict)
    played_timestamps: Dict[str, float] = Field(default_factory=dict)

    @field_validator("liked_artists", "disliked_artists", mode="before")
    @classmethod
    def _normalize_artists(cls, value):
        return frozenset(artist_key(a) for a in (value or []) if artist_key(a))

    @property
    def liked_track_ids(self) -> FrozenSet[str]:
        return frozenset(self.liked_timestamps)


class FeedRequest(BaseModel):
    seed: int
    genre_ids: List[str] = Field(default_factory=list)
    target_size: int = settings.PAGE_SIZE
    cooldown_window: timedelta = timedelta(days=settings.COOLDOWN_DAYS)
    genre_names: Dict[str, str] = Field(default_factory=dict)

    @field_validator("genre_ids", mode="before")
    @classmethod
    def _stringify_genres(cls, value):
        return [str(g).strip() for g in (value or []) if str(g).strip()]


class FeedResult(BaseModel):
    tracks: List[Track] = Field(default_factory=list)
    empty: bool = False
    seed: Optional[int] = None
    source: str = "discovery"

    @classmethod
    def from_tracks(cls, tracks, seed=None, source="discovery"):
        tracks = list(tracks)
        return cls(tracks=tracks, empty=not tracks, seed=seed, source=source)
