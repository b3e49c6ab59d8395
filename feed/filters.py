import logging
import re
import time
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from config import settings
from feed.models import PreferenceState, Track

logger = logging.getLogger(__name__)

# Karaoke versions, tribute acts and instrumental re-records flood genre charts.
KARAOKE_RE = re.compile("|".join(settings.KARAOKE_PATTERNS.values()), re.IGNORECASE)


def normalize_text(text: Optional[str]) -> str:
    if text is None:
        return ""
    return text.lower().strip()


def is_karaoke(track: Track) -> bool:
    combined = f"{track.title} {track.album} {track.artist}"
    return bool(KARAOKE_RE.search(combined))


def drop_karaoke(tracks: Sequence[Track]) -> List[Track]:
    return [t for t in tracks if not is_karaoke(t)]


def drop_disliked(
    tracks: Sequence[Track],
    disliked_track_ids: Iterable[str],
    floor: int = settings.MIN_AFTER_DISLIKE_FILTER,
) -> List[Track]:
    disliked = set(disliked_track_ids or [])
    if not disliked:
        return list(tracks)
    kept = [t for t in tracks if t.id not in disliked]
    if len(kept) < floor:
        logger.debug("Skipping disliked filter: %d left, floor %d", len(kept), floor)
        return list(tracks)
    return kept


def drop_cooling_down(
    tracks: Sequence[Track],
    preference: PreferenceState,
    cooldown_window: timedelta,
    now: Optional[float] = None,
    min_retention: float = settings.MIN_COOLDOWN_RETENTION,
) -> List[Track]:
    now = time.time() if now is None else float(now)
    cutoff = now - cooldown_window.total_seconds()

    def _cooling(track):
        liked_at = preference.liked_timestamps.get(track.id)
        played_at = preference.played_timestamps.get(track.id)
        return any(ts is not None and ts > cutoff for ts in (liked_at, played_at))

    kept = [t for t in tracks if not _cooling(t)]
    if len(kept) < min_retention * len(tracks):
        logger.debug(
            "Skipping cooldown filter: %d of %d retained", len(kept), len(tracks)
        )
        return list(tracks)
    return kept


def narrow_to_genres(
    tracks: Sequence[Track],
    genre_ids: Sequence[str],
    genre_names: Dict[str, str],
    target: int,
) -> List[Track]:
    names = [
        normalize_text(genre_names.get(str(gid)))
        for gid in genre_ids
        if normalize_text(genre_names.get(str(gid)))
    ]
    if not names:
        return list(tracks)
    kept = [
        t for t in tracks if any(name in normalize_text(t.genre_label) for name in names)
    ]
    floor = min(settings.MAX_GENRE_FLOOR, target / 2)
    if len(kept) < floor:
        logger.debug("Skipping genre narrowing: %d left, floor %s", len(kept), floor)
        return list(tracks)
    return kept


def apply_filters(
    tracks: Sequence[Track],
    preference: PreferenceState,
    selected_genre_ids: Sequence[str] = (),
    *,
    genre_names: Optional[Dict[str, str]] = None,
    target: int = settings.PAGE_SIZE,
    cooldown_window: timedelta = timedelta(days=settings.COOLDOWN_DAYS),
    now: Optional[float] = None,
) -> List[Track]:
    """
    Narrow candidates in four stages. Apart from karaoke removal, a stage is
    skipped when its output would fall under that stage's floor.
    """
    narrowed = drop_karaoke(tracks)
    narrowed = drop_disliked(narrowed, preference.disliked_track_ids)
    narrowed = drop_cooling_down(narrowed, preference, cooldown_window, now=now)
    if selected_genre_ids:
        narrowed = narrow_to_genres(narrowed, selected_genre_ids, genre_names or {}, target)
    return narrowed
