"""Tests for search relevance scoring and ranking."""

from collections import Counter

from feed.models import Track
from feed.relevance import rank_search_results, score_relevance


def _t(id, title, artist, album="", **extra):
    return Track(id=id, title=title, artist=artist, album=album, **extra)


class TestScoreRelevance:
    def test_exact_artist_match(self) -> None:
        track = _t("1", "Hotline Bling", "Drake", "Views")
        assert score_relevance(track, "drake") == 180

    def test_exact_artist_beats_containing_artist(self) -> None:
        exact = _t("1", "Hotline Bling", "Drake")
        containing = _t("2", "Hotline Bling", "Drizzy Drake")
        assert score_relevance(exact, "drake") > score_relevance(containing, "drake")

    def test_query_is_case_and_space_insensitive(self) -> None:
        track = _t("1", "Hotline Bling", "Drake", "Views")
        assert score_relevance(track, "  DRAKE ") == score_relevance(track, "drake")

    def test_preview_and_store_bonus(self) -> None:
        bare = _t("1", "Song", "Band")
        linked = _t("2", "Song", "Band", preview_uri="https://p", store_uri="https://s")
        assert score_relevance(linked, "song") - score_relevance(bare, "song") == 2

    def test_album_match(self) -> None:
        track = _t("1", "Track 1", "Someone", "Nevermind")
        assert score_relevance(track, "nevermind") == 14 + 6

    def test_empty_query_scores_zero(self) -> None:
        assert score_relevance(_t("1", "a", "b", preview_uri="x"), "  ") == 0


class TestRankSearchResults:
    def test_artist_matches_rank_first(self) -> None:
        tracks = [
            _t("1", "Drake Freestyle", "Some Rapper"),
            _t("2", "God's Plan", "Drake"),
            _t("3", "Unrelated", "Other"),
            _t("4", "One Dance", "Drake"),
        ]
        ranked = rank_search_results(tracks, "drake")
        assert [t.id for t in ranked[:2]] == ["2", "4"]
        assert ranked[2].id == "1"

    def test_ties_keep_order(self) -> None:
        tracks = [_t(str(i), "x", f"artist {i}") for i in range(5)]
        assert [t.id for t in rank_search_results(tracks, "zzz")] == ["0", "1", "2", "3", "4"]

    def test_artist_cap_without_cooldown(self) -> None:
        tracks = [_t(str(i), f"song {i}", "Drake") for i in range(6)] + [_t("x", "x", "Other")]
        ranked = rank_search_results(tracks, "drake", max_per_artist=2)
        counts = Counter(t.artist for t in ranked)
        assert counts["Drake"] == 2
        # no cooldown, so both Drake slots come first
        assert [t.artist for t in ranked] == ["Drake", "Drake", "Other"]

    def test_respects_target(self) -> None:
        tracks = [_t(str(i), "s", f"a{i}") for i in range(10)]
        assert len(rank_search_results(tracks, "s", target=4)) == 4
