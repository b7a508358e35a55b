"""Find other versions (remixes, edits, extended mixes) of a recognized song."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Sequence

from cratematch.core.config import MatchingConfig
from cratematch.core.constants import VARIATION_KEYWORDS
from cratematch.core.models import (
    LibraryTrack,
    RecognizedTrack,
    TrackId,
    VariationResult,
    VariationType,
)
from cratematch.matching.normalizer import (
    normalize_artist,
    normalize_string,
    normalize_title,
    significant_words,
)
from cratematch.matching.prefilter import cached_title
from cratematch.matching.similarity import calculate_artist_similarity, calculate_similarity

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = MatchingConfig()
_VARIATION_KEYWORD_RE = re.compile(r"\b(?:" + "|".join(VARIATION_KEYWORDS) + r")\b")


def has_variation_keyword(normalized_title: str) -> bool:
    """True if a full normalized title names a remix, edit, version, ..."""
    return _VARIATION_KEYWORD_RE.search(normalized_title) is not None


def find_variations(
    recognized: RecognizedTrack | None,
    library: Sequence[LibraryTrack] | None,
    exclude_id: TrackId | None = None,
    config: MatchingConfig | None = None,
    *,
    cancelled: Callable[[], bool] | None = None,
) -> list[VariationResult]:
    """Find library entries that are another version of the recognized song.

    Args:
        recognized: Track returned by the recognition service
        library: Flat list of library tracks
        exclude_id: Id of the best match, never reported as its own variation
        config: Matching configuration (defaults if None)
        cancelled: Optional callable returning True to abort; polled
            between candidates. A cancelled search returns an empty list.

    Returns:
        At most ``max_results`` variations, most similar first, one per id
    """
    if recognized is None or not recognized.title or not library:
        return []

    config = config or _DEFAULT_CONFIG
    limits = config.variations

    search_base = normalize_title(recognized.title)
    search_full = normalize_string(recognized.title)
    search_artist = normalize_artist(recognized.artist)
    base_words = significant_words(search_base, limits.min_word_length)
    if not base_words:
        return []

    excluded = str(exclude_id) if exclude_id is not None else None

    # Stage 1: keep tracks sharing a significant word with the base title
    candidates: list[LibraryTrack] = []
    for track in library:
        if excluded is not None and str(track.id) == excluded:
            continue
        title = cached_title(track)
        if any(word in title for word in base_words):
            candidates.append(track)
            if len(candidates) >= limits.max_candidates:
                break

    logger.debug(f"[Variations] {len(candidates)} candidates for '{search_base}'")

    artist_word = search_artist.split(" ")[0]
    required_words = math.ceil(len(base_words) * limits.word_match_ratio)

    # Stage 2: full scoring on candidates only
    variations: dict[str, VariationResult] = {}
    for track in candidates:
        if cancelled and cancelled():
            logger.debug("[Variations] Search cancelled")
            return []

        track_key = str(track.id)
        if track_key in variations:
            continue

        full_title = normalize_string(track.title)
        title_similarity = max(
            calculate_similarity(search_base, normalize_title(track.title), config.similarity),
            calculate_similarity(search_full, full_title, config.similarity),
        )

        matching_words = sum(1 for word in base_words if word in full_title)
        has_matching_words = matching_words >= required_words

        artist_similarity = calculate_artist_similarity(
            track.artist, recognized.artist, config.similarity
        )
        artist_in_title = len(artist_word) > limits.min_word_length and artist_word in full_title
        artist_matches = artist_similarity > limits.artist_threshold or artist_in_title

        keyword = has_variation_keyword(full_title)

        include = (
            (title_similarity > limits.title_threshold and artist_matches)
            or (title_similarity > limits.keyword_title_threshold and keyword)
            or (
                has_matching_words
                and title_similarity > limits.weak_title_threshold
                and artist_similarity > limits.strong_artist_threshold
            )
        )
        if include:
            variations[track_key] = VariationResult(
                track=track,
                type=VariationType.VARIATION if keyword else VariationType.RELATED,
                similarity=title_similarity,
            )

    ranked = sorted(variations.values(), key=lambda v: v.similarity, reverse=True)
    return ranked[: limits.max_results]
