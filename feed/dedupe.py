from typing import Iterable, List

from feed.models import Track


def content_key(track: Track) -> str:
    return "|".join(
        str(part or "").strip().lower() for part in (track.title, track.artist, track.album)
    )


def dedupe(tracks: Iterable[Track]) -> List[Track]:
    deduped = []
    seen_ids = set()
    for track in tracks or []:
        if track.id in seen_ids:
            continue
        seen_ids.add(track.id)
        deduped.append(track)
    return deduped
