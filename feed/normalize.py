import logging
import re
from typing import Iterable, List, Optional

from config import settings
from feed.models import Track

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown title"
UNKNOWN_ARTIST = "Unknown artist"
ID_SEPARATOR = "|"

# Provider adapter configuration: per canonical field, the source keys to try
# in order. Dotted keys reach into nested objects (Deezer nests artist/album).
FIELD_ALIASES = {
    "id": ("id", "trackId", "track_id"),
    "title": ("title", "trackName", "name"),
    "artist": ("artist", "artist.name", "artistName", "artist_name"),
    "album": ("album", "album.title", "collectionName", "albumName"),
    "artwork_uri": (
        "artwork_uri",
        "artworkUri",
        "albumArtUrl",
        "artworkUrl100",
        "artworkUrl60",
        "cover",
        "album.cover_xl",
        "album.cover_big",
    ),
    "preview_uri": ("preview_uri", "previewUri", "previewUrl", "preview"),
    "store_uri": ("store_uri", "storeUri", "storeUrl", "trackViewUrl", "link"),
    "genre_label": ("genre_label", "genreLabel", "primaryGenreName", "genre"),
}

_SIZED_FILE_RE = re.compile(r"(?<!\d)(\d{2,4})x\1(bb)?(\.(?:jpe?g|png|webp))", re.IGNORECASE)
_SIZED_ANY_RE = re.compile(r"(?<!\d)(\d{2,4})x\1(?!\d)")


def _lookup(raw: dict, key: str):
    value = raw
    for part in key.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def first_non_empty(raw: dict, aliases: Iterable[str]) -> str:
    for key in aliases:
        value = _lookup(raw, key)
        if isinstance(value, dict):
            continue
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def upscale_artwork(uri: str, size: int = settings.ARTWORK_SIZE) -> str:
    """Rewrite the square ``WxW`` token of an artwork URI to ``size``."""
    if not uri:
        return uri
    target = f"{size}x{size}"
    upscaled, hits = _SIZED_FILE_RE.subn(
        lambda m: f"{target}{m.group(2) or ''}{m.group(3)}", uri, count=1
    )
    if hits:
        return upscaled
    return _SIZED_ANY_RE.sub(target, uri, count=1)


def composite_id(artist: str, title: str, album: str) -> str:
    return ID_SEPARATOR.join(
        str(part or "").strip().lower() for part in (artist, title, album)
    )


def normalize(raw: dict) -> Optional[Track]:
    """Map one provider record onto a Track, or None if it has no title and no artist."""
    if not isinstance(raw, dict):
        return None
    fields = {name: first_non_empty(raw, aliases) for name, aliases in FIELD_ALIASES.items()}
    if not fields["title"] and not fields["artist"]:
        return None

    title = fields["title"] or UNKNOWN_TITLE
    artist = fields["artist"] or UNKNOWN_ARTIST
    album = fields["album"]
    return Track(
        id=fields["id"] or composite_id(artist, title, album),
        title=title,
        artist=artist,
        album=album,
        artwork_uri=upscale_artwork(fields["artwork_uri"]),
        preview_uri=fields["preview_uri"] or None,
        store_uri=fields["store_uri"] or None,
        genre_label=fields["genre_label"] or None,
    )


def normalize_many(records: Iterable[dict]) -> List[Track]:
    tracks = []
    dropped = 0
    for raw in records or []:
        track = normalize(raw)
        if track is None:
            dropped += 1
            continue
        tracks.append(track)
    if dropped:
        logger.debug("Dropped %d malformed records", dropped)
    return tracks
