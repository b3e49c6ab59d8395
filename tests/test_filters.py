"""Tests for the filter pipeline and its floors."""

from datetime import timedelta

from feed.filters import (
    apply_filters,
    drop_cooling_down,
    drop_disliked,
    drop_karaoke,
    is_karaoke,
    narrow_to_genres,
)
from feed.models import PreferenceState, Track

NOW = 1_700_000_000.0
DAY = 86400.0
WINDOW = timedelta(days=14)


def _tracks(n, genre=None):
    return [Track(id=f"t{i}", title=f"song {i}", artist=f"artist {i}", genre_label=genre) for i in range(n)]


class TestKaraoke:
    def test_flags_cover_versions(self) -> None:
        assert is_karaoke(Track(id="1", title="Hello (Karaoke Version)", artist="Sing King"))
        assert is_karaoke(Track(id="2", title="Hello", artist="X", album="A Tribute to Adele"))
        assert is_karaoke(Track(id="3", title="Hello (In the Style of Adele)", artist="Y"))
        assert is_karaoke(Track(id="4", title="Hello", artist="Z", album="Instrumental Hits"))

    def test_keeps_originals(self) -> None:
        assert not is_karaoke(Track(id="1", title="Hello", artist="Adele", album="25"))

    def test_drop_karaoke_has_no_floor(self) -> None:
        tracks = [Track(id=str(i), title="Karaoke mix", artist="K") for i in range(5)]
        assert drop_karaoke(tracks) == []


class TestDisliked:
    def test_removes_disliked_ids(self) -> None:
        tracks = _tracks(8)
        kept = drop_disliked(tracks, {"t0", "t1"})
        assert [t.id for t in kept] == [f"t{i}" for i in range(2, 8)]

    def test_floor_keeps_everything(self) -> None:
        tracks = _tracks(6)
        kept = drop_disliked(tracks, {"t0", "t1", "t2", "t3"})
        assert kept == tracks

    def test_no_dislikes_is_noop(self) -> None:
        tracks = _tracks(3)
        assert drop_disliked(tracks, set()) == tracks


class TestCooldown:
    def _preference(self, liked_ids=(), played_ids=(), age_days=1):
        ts = NOW - age_days * DAY
        return PreferenceState(
            liked_timestamps={i: ts for i in liked_ids},
            played_timestamps={i: ts for i in played_ids},
        )

    def test_recent_plays_removed_when_enough_remain(self) -> None:
        tracks = _tracks(10)
        preference = self._preference(liked_ids=["t0"], played_ids=["t1", "t2"])
        kept = drop_cooling_down(tracks, preference, WINDOW, now=NOW)
        assert len(kept) == 7
        assert {"t0", "t1", "t2"}.isdisjoint(t.id for t in kept)

    def test_skipped_below_retention(self) -> None:
        tracks = _tracks(10)
        preference = self._preference(played_ids=[f"t{i}" for i in range(5)])
        kept = drop_cooling_down(tracks, preference, WINDOW, now=NOW)
        assert kept == tracks

    def test_old_interactions_are_ignored(self) -> None:
        tracks = _tracks(4)
        preference = self._preference(played_ids=["t0", "t1"], age_days=30)
        assert drop_cooling_down(tracks, preference, WINDOW, now=NOW) == tracks


class TestGenreNarrowing:
    def test_narrows_by_label(self) -> None:
        tracks = _tracks(12, genre="Alternative Rock") + _tracks(3, genre="Jazz")
        kept = narrow_to_genres(tracks, ["21"], {"21": "Rock"}, target=20)
        assert len(kept) == 12
        assert all("rock" in t.genre_label.lower() for t in kept)

    def test_odd_target_floor_is_not_rounded_down(self) -> None:
        tracks = _tracks(2, genre="Rock") + _tracks(8, genre="Pop")
        kept = narrow_to_genres(tracks, ["21"], {"21": "Rock"}, target=5)
        assert kept == tracks

    def test_odd_target_narrows_at_floor(self) -> None:
        tracks = _tracks(3, genre="Rock") + _tracks(8, genre="Pop")
        kept = narrow_to_genres(tracks, ["21"], {"21": "Rock"}, target=5)
        assert len(kept) == 3

    def test_floor_skips_narrowing(self) -> None:
        tracks = _tracks(3, genre="Rock") + _tracks(10, genre="Pop")
        kept = narrow_to_genres(tracks, ["21"], {"21": "Rock"}, target=20)
        assert kept == tracks

    def test_unknown_genre_name_is_noop(self) -> None:
        tracks = _tracks(5, genre="Rock")
        assert narrow_to_genres(tracks, ["999"], {"21": "Rock"}, target=20) == tracks


class TestApplyFilters:
    def test_without_genres_no_narrowing(self) -> None:
        tracks = _tracks(5, genre="Pop")
        kept = apply_filters(tracks, PreferenceState(), genre_names={"21": "Rock"}, now=NOW)
        assert kept == tracks

    def test_everything_disliked_keeps_floor(self) -> None:
        tracks = _tracks(6)
        preference = PreferenceState(disliked_track_ids={t.id for t in tracks})
        kept = apply_filters(tracks, preference, now=NOW)
        assert len(kept) >= 5
        assert kept == tracks

    def test_stages_compose(self) -> None:
        tracks = _tracks(12, genre="Rock") + [
            Track(id="k", title="Song (Karaoke)", artist="K", genre_label="Rock")
        ]
        preference = PreferenceState(
            disliked_track_ids={"t0"},
            played_timestamps={"t1": NOW - DAY},
        )
        kept = apply_filters(
            tracks,
            preference,
            ["21"],
            genre_names={"21": "Rock"},
            target=20,
            cooldown_window=WINDOW,
            now=NOW,
        )
        ids = {t.id for t in kept}
        assert "k" not in ids
        assert "t0" not in ids
        assert "t1" not in ids
        assert len(kept) == 10
