from collections import Counter, deque
from typing import Iterable, List, Optional, Sequence

from config import settings
from feed.models import Track, artist_key


def _require_target(target: int) -> None:
    if int(target) <= 0:
        raise ValueError(f"target must be positive, got {target}")


def diversify(
    tracks: Sequence[Track],
    max_per_artist: int = settings.MAX_PER_ARTIST,
    cooldown_span: int = settings.ARTIST_COOLDOWN,
    target: int = settings.PAGE_SIZE,
) -> List[Track]:
    """
    Cap repeats per artist and keep the same artist out of the last
    ``cooldown_span`` accepted slots.

    When that leaves the page short, a second pass over the original order
    fills the rest with the cap alone, so the tail may break cooldown spacing.
    """
    _require_target(target)
    tracks = list(tracks)
    counts = Counter()
    recent = deque(maxlen=max(0, int(cooldown_span)))
    accepted = []
    taken = set()

    for idx, track in enumerate(tracks):
        key = artist_key(track.artist)
        if counts[key] >= max_per_artist or key in recent:
            continue
        accepted.append(track)
        taken.add(idx)
        counts[key] += 1
        recent.append(key)
        if len(accepted) >= target:
            return accepted

    for idx, track in enumerate(tracks):
        if idx in taken:
            continue
        key = artist_key(track.artist)
        if counts[key] >= max_per_artist:
            continue
        accepted.append(track)
        counts[key] += 1
        if len(accepted) >= target:
            break
    return accepted


def preference_score(
    track: Track,
    liked_artists: Iterable[str],
    disliked_artists: Iterable[str],
) -> int:
    key = artist_key(track.artist)
    score = 0
    if key in liked_artists:
        score += settings.LIKED_ARTIST_BOOST
    if key in disliked_artists:
        score += settings.DISLIKED_ARTIST_PENALTY
    return score


def bias_and_diversify(
    tracks: Sequence[Track],
    liked_artists: Optional[Iterable[str]] = None,
    disliked_artists: Optional[Iterable[str]] = None,
    target: int = settings.PAGE_SIZE,
) -> List[Track]:
    _require_target(target)
    liked = {artist_key(a) for a in liked_artists or []}
    disliked = {artist_key(a) for a in disliked_artists or []}
    ranked = [(preference_score(t, liked, disliked), t) for t in tracks]
    # sorted() is stable, ties keep input order
    ranked = sorted(ranked, key=lambda pair: pair[0], reverse=True)
    return diversify([t for _, t in ranked], target=target)
