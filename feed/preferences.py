from typing import Iterable

from feed.models import PreferenceState, Track


def resolve_preferences(preference: PreferenceState, candidates: Iterable[Track]) -> PreferenceState:
    """
    Fold the artists of liked/disliked tracks found in ``candidates`` into the
    artist sets. Returns a new snapshot; ``preference`` is left untouched.
    """
    liked_ids = preference.liked_track_ids
    disliked_ids = preference.disliked_track_ids
    liked = set(preference.liked_artists)
    disliked = set(preference.disliked_artists)
    for track in candidates:
        if not track.artist_key:
            continue
        if track.id in liked_ids:
            liked.add(track.artist_key)
        if track.id in disliked_ids:
            disliked.add(track.artist_key)
    return preference.model_copy(
        update={"liked_artists": frozenset(liked), "disliked_artists": frozenset(disliked)}
    )
