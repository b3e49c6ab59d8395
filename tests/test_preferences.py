from feed.models import PreferenceState, Track
from feed.preferences import resolve_preferences


def test_artists_of_liked_and_disliked_tracks_are_added() -> None:
    preference = PreferenceState(
        liked_artists={"Kept"},
        liked_timestamps={"l1": 1.0},
        disliked_track_ids={"d1"},
    )
    candidates = [
        Track(id="l1", title="a", artist=" Loved Band "),
        Track(id="d1", title="b", artist="Hated Band"),
        Track(id="x", title="c", artist="Neutral"),
    ]
    resolved = resolve_preferences(preference, candidates)
    assert resolved.liked_artists == {"kept", "loved band"}
    assert resolved.disliked_artists == {"hated band"}


def test_input_snapshot_is_untouched() -> None:
    preference = PreferenceState(liked_timestamps={"l1": 1.0})
    resolve_preferences(preference, [Track(id="l1", title="a", artist="Loved")])
    assert preference.liked_artists == frozenset()


def test_ids_outside_the_batch_change_nothing() -> None:
    preference = PreferenceState(disliked_track_ids={"gone"})
    resolved = resolve_preferences(preference, [Track(id="x", title="a", artist="Y")])
    assert resolved.disliked_artists == frozenset()
    assert resolved.disliked_track_ids == {"gone"}
