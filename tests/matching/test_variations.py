"""Tests for the variation finder."""

import pytest

from cratematch.core.models import LibraryTrack, RecognizedTrack, VariationType
from cratematch.matching.prefilter import prepare_library
from cratematch.matching.variations import find_variations, has_variation_keyword


class TestHasVariationKeyword:
    """Tests for whole-word keyword detection."""

    @pytest.mark.parametrize(
        "title",
        ["red button extended mix", "strobe vip", "song sped up", "track acapella"],
    )
    def test_detects_keywords(self, title) -> None:
        assert has_variation_keyword(title)

    @pytest.mark.parametrize("title", ["red button", "mixed emotions", "dubai nights", "introspection"])
    def test_ignores_partial_words(self, title) -> None:
        assert not has_variation_keyword(title)


class TestFindVariations:
    """Tests for find_variations."""

    def test_excludes_best_match_and_dedups(self) -> None:
        recognized = RecognizedTrack(title="Red Button", artist="Drake")
        extended = LibraryTrack(id="Y", title="Red Button (Extended Mix)", artist="Drake")
        library = [
            LibraryTrack(id="X", title="Red Button", artist="Drake"),
            extended,
            extended,
            LibraryTrack(id="Z", title="Quantum Leap", artist="Astro"),
        ]

        results = find_variations(recognized, library, "X")

        assert [v.track.id for v in results] == ["Y"]
        assert results[0].type is VariationType.VARIATION
        assert results[0].similarity == pytest.approx(0.85 + 0.15 * (10 / 19))

    def test_related_without_keyword(self, recognized, sample_library) -> None:
        results = find_variations(recognized, sample_library)

        by_id = {v.track.id: v for v in results}
        assert by_id["1"].type is VariationType.RELATED
        assert by_id["2"].type is VariationType.VARIATION
        assert results[0].track.id == "1"

    def test_keyword_variation_by_other_artist(self, recognized, sample_library) -> None:
        results = find_variations(recognized, sample_library, "1")

        assert "5" in {v.track.id for v in results}

    def test_same_title_other_artist_without_keyword_excluded(self, recognized) -> None:
        library = [LibraryTrack(id="1", title="Red Button", artist="Adele")]

        assert find_variations(recognized, library) == []

    def test_sorted_and_capped(self, recognized) -> None:
        library = [
            LibraryTrack(id=str(i), title=f"Red Button (Remix {i})", artist="Drake") for i in range(8)
        ]
        library.append(LibraryTrack(id="long", title="Red Button Anthem (Club Mix)", artist="Drake"))

        results = find_variations(recognized, library)

        assert len(results) == 5
        similarities = [v.similarity for v in results]
        assert similarities == sorted(similarities, reverse=True)
        assert "long" not in {v.track.id for v in results}

    def test_exclude_id_compared_as_string(self, recognized) -> None:
        library = [LibraryTrack(id=1, title="Red Button (Edit)", artist="Drake")]

        assert find_variations(recognized, library, "1") == []

    def test_prepared_library_keeps_keyword_detection(self, recognized, sample_library) -> None:
        results = find_variations(recognized, prepare_library(sample_library), "1")

        by_id = {v.track.id: v for v in results}
        assert by_id["2"].type is VariationType.VARIATION

    def test_unrelated_tracks_not_returned(self, recognized, sample_library) -> None:
        ids = {v.track.id for v in find_variations(recognized, sample_library)}

        assert ids.isdisjoint({"3", "4", "6"})

    def test_cancelled(self, recognized, sample_library) -> None:
        assert find_variations(recognized, sample_library)
        assert find_variations(recognized, sample_library, cancelled=lambda: True) == []

    def test_empty_inputs(self, recognized) -> None:
        assert find_variations(recognized, [], None) == []
        assert find_variations(None, [LibraryTrack(id="1", title="Red Button")]) == []

    def test_no_significant_words(self) -> None:
        library = [LibraryTrack(id="1", title="Up (Remix)", artist="Drake")]

        assert find_variations(RecognizedTrack(title="Up", artist="Drake"), library) == []
