"""Tests for similarity scoring."""

import pytest

from cratematch.core.config import SimilarityConfig
from cratematch.matching.similarity import (
    EmbeddedArtistMatch,
    calculate_artist_similarity,
    calculate_similarity,
    calculate_title_similarity,
    check_artist_in_title,
    edit_distance,
)


class TestEditDistance:
    """Tests for the Levenshtein distance."""

    def test_classic_example(self) -> None:
        assert edit_distance("kitten", "sitting") == 3

    def test_empty(self) -> None:
        assert edit_distance("", "abc") == 3
        assert edit_distance("abc", "abc") == 0


class TestCalculateSimilarity:
    """Tests for calculate_similarity."""

    def test_exact_after_normalization(self) -> None:
        assert calculate_similarity("Midnight Groove", "midnight groove!") == 1.0

    def test_empty_side_scores_zero(self) -> None:
        assert calculate_similarity("", "abc") == 0.0
        assert calculate_similarity(None, "abc") == 0.0

    def test_both_empty_are_equal(self) -> None:
        assert calculate_similarity("", None) == 1.0

    def test_containment_bonus(self) -> None:
        expected = 0.85 + 0.15 * (10 / 16)
        assert calculate_similarity("red button", "red button audio") == pytest.approx(expected)

    def test_word_and_edit_blend(self) -> None:
        # words: 1 shared of 3; edit distance 3 over 7 characters
        expected = 0.6 * (1 / 3) + 0.4 * (1 - 3 / 7)
        assert calculate_similarity("abc def", "abc xyz") == pytest.approx(expected)

    def test_symmetric(self) -> None:
        pairs = [("abc def", "abc xyz"), ("red button", "red button audio"), ("a", "b")]
        for a, b in pairs:
            assert calculate_similarity(a, b) == pytest.approx(calculate_similarity(b, a))

    def test_unrelated_strings_score_low(self) -> None:
        assert calculate_similarity("Midnight Groove", "Quantum Leap") < 0.3

    def test_custom_weights(self) -> None:
        config = SimilarityConfig(word_weight=1.0, edit_weight=0.0)
        assert calculate_similarity("abc def", "abc xyz", config) == pytest.approx(1 / 3)

    def test_weights_must_sum_to_one(self) -> None:
        with pytest.raises(ValueError):
            SimilarityConfig(word_weight=0.5, edit_weight=0.2)


class TestCalculateTitleSimilarity:
    """Tests for remix-aware title similarity."""

    def test_remix_suffix_not_penalized(self) -> None:
        assert calculate_title_similarity("Red Button (Remix)", "Red Button") == 1.0
        assert calculate_title_similarity("Strobe (VIP)", "Strobe") == 1.0

    def test_takes_best_of_base_and_full(self) -> None:
        base = 0.85 + 0.15 * (10 / 19)  # "red button extended" vs "red button"
        assert calculate_title_similarity(
            "Red Button (Extended Mix)", "Red Button"
        ) == pytest.approx(base)

    def test_different_titles(self) -> None:
        assert calculate_title_similarity("Blue Monday", "Red Button") < 0.5


class TestCalculateArtistSimilarity:
    """Tests for collaboration-aware artist similarity."""

    def test_same_artist(self) -> None:
        assert calculate_artist_similarity("Drake", "DRAKE") == 1.0

    def test_collaboration_forms_match(self) -> None:
        assert calculate_artist_similarity("Artist A x Artist B", "Artist A & Artist B") == 1.0
        assert calculate_artist_similarity("The Chemical Brothers", "Chemical Brothers") == 1.0

    def test_featuring_close(self) -> None:
        assert calculate_artist_similarity("Artist A ft. Artist B", "Artist A & Artist B") > 0.75

    def test_unrelated_artists(self) -> None:
        assert calculate_artist_similarity("Drake", "Adele") < 0.4

    def test_missing_artist(self) -> None:
        assert calculate_artist_similarity(None, "Drake") == 0.0


class TestCheckArtistInTitle:
    """Tests for the 'Artist - Title' heuristic."""

    def test_dash_split(self) -> None:
        result = check_artist_in_title("Drake - Red Button (Audio)", "Red Button", "Drake")
        assert isinstance(result, EmbeddedArtistMatch)
        assert result.artist_score == 1.0
        assert result.title_score == 1.0
        assert result.combined == 1.0

    def test_dash_split_partial_title(self) -> None:
        result = check_artist_in_title("Drake - Red Button Live", "Red Button", "Drake")
        title_score = 0.85 + 0.15 * (10 / 15)
        assert result.title_score == pytest.approx(title_score)
        assert result.combined == pytest.approx((1.0 + title_score) / 2)

    def test_tries_every_dash_variant(self) -> None:
        result = check_artist_in_title("Drake – Red Button - Live", "Red Button", "Drake")
        title_score = 0.85 + 0.15 * (10 / 15)
        assert result.artist_score == 1.0
        assert result.title_score == pytest.approx(title_score)

    def test_dash_split_wrong_artist(self) -> None:
        assert check_artist_in_title("Adele - Hello", "Red Button", "Drake") is None

    def test_first_words_fallback(self) -> None:
        result = check_artist_in_title("Drake Red Button Bootleg", "Red Button", "Drake")
        assert result == EmbeddedArtistMatch(0.7, 0.7, 0.7)

    def test_no_artist_in_title(self) -> None:
        assert check_artist_in_title("Red Button", "Red Button", "Drake") is None

    @pytest.mark.parametrize(
        "args",
        [
            (None, "Red Button", "Drake"),
            ("Drake - Red Button", "", "Drake"),
            ("Drake - Red Button", "Red Button", None),
            ("Drake - Red Button", "Red Button", "!!!"),
        ],
    )
    def test_missing_input(self, args) -> None:
        assert check_artist_in_title(*args) is None
