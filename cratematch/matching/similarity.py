"""Similarity scores (0-1) between titles and artist names.

``calculate_similarity`` is the primitive: exact match, substring
containment bonus, otherwise a blend of word overlap and edit distance.
Title and artist variants build on it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from cratematch.core.config import SimilarityConfig
from cratematch.matching.normalizer import (
    artist_title_splits,
    normalize_artist,
    normalize_string,
    normalize_title,
)

_DEFAULT_CONFIG = SimilarityConfig()
_ARTIST_SPLIT_RE = re.compile(r"[,&]")


@dataclass(frozen=True)
class EmbeddedArtistMatch:
    """Scores for a library title that embeds the artist ('Artist - Title')."""

    artist_score: float
    title_score: float
    combined: float


def edit_distance(a: str, b: str) -> int:
    """Unit-cost Levenshtein distance (insertion, deletion, substitution)."""
    return Levenshtein.distance(a, b)


def calculate_similarity(
    str1: str | None, str2: str | None, config: SimilarityConfig | None = None
) -> float:
    """Similarity between two strings after ``normalize_string``."""
    config = config or _DEFAULT_CONFIG
    s1 = normalize_string(str1)
    s2 = normalize_string(str2)

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    longer, shorter = (s1, s2) if len(s1) > len(s2) else (s2, s1)
    if shorter in longer:
        return config.containment_base + (1 - config.containment_base) * (
            len(shorter) / len(longer)
        )

    words1 = set(s1.split(" "))
    words2 = set(s2.split(" "))
    union = words1 | words2
    word_similarity = len(words1 & words2) / len(union)

    edit_similarity = 1 - edit_distance(s1, s2) / len(longer)

    return word_similarity * config.word_weight + edit_similarity * config.edit_weight


def calculate_title_similarity(
    title1: str | None, title2: str | None, config: SimilarityConfig | None = None
) -> float:
    """Best of base-title and full-title similarity.

    A base-title match is not penalized because only one side carries a
    remix suffix.
    """
    base_similarity = calculate_similarity(normalize_title(title1), normalize_title(title2), config)
    full_similarity = calculate_similarity(title1, title2, config)
    return max(base_similarity, full_similarity)


def _artist_tokens(normalized_artist: str) -> list[str]:
    return [part.strip() for part in _ARTIST_SPLIT_RE.split(normalized_artist) if part.strip()]


def calculate_artist_similarity(
    artist1: str | None, artist2: str | None, config: SimilarityConfig | None = None
) -> float:
    """Artist similarity that tolerates collaborator order and omissions.

    Compares every performer token of one side with every token of the
    other and returns the best pair above ``artist_token_threshold``;
    otherwise compares the whole normalized strings.
    """
    config = config or _DEFAULT_CONFIG
    normalized1 = normalize_artist(artist1)
    normalized2 = normalize_artist(artist2)

    best = 0.0
    for token1 in _artist_tokens(normalized1):
        for token2 in _artist_tokens(normalized2):
            best = max(best, calculate_similarity(token1, token2, config))

    if best > config.artist_token_threshold:
        return best

    return calculate_similarity(normalized1, normalized2, config)


def check_artist_in_title(
    library_title: str | None,
    recognized_title: str | None,
    recognized_artist: str | None,
    config: SimilarityConfig | None = None,
) -> EmbeddedArtistMatch | None:
    """Detect poorly tagged files whose title field reads 'Artist - Title'.

    e.g. "Drake - Red Button (Audio)" matches "Red Button" by "Drake".
    Every dash variant present is tried in turn. When no split passes,
    falls back to checking that the first word of both the artist and the
    title occur in the library title.
    """
    if not library_title or not recognized_title or not recognized_artist:
        return None

    config = config or _DEFAULT_CONFIG
    normalized_library_title = normalize_string(library_title)
    normalized_title = normalize_string(recognized_title)
    normalized_artist = normalize_artist(recognized_artist)

    for artist_part, title_part in artist_title_splits(library_title):
        potential_artist = normalize_artist(artist_part)
        potential_title = normalize_title(title_part)

        artist_score = calculate_similarity(potential_artist, normalized_artist, config)
        title_score = calculate_similarity(potential_title, normalized_title, config)

        if (
            artist_score > config.embedded_artist_threshold
            and title_score > config.embedded_title_threshold
        ):
            return EmbeddedArtistMatch(
                artist_score=artist_score,
                title_score=title_score,
                combined=(artist_score + title_score) / 2,
            )

    artist_word = normalized_artist.split(" ")[0]
    title_word = normalized_title.split(" ")[0]
    if not artist_word or not title_word:
        return None

    if artist_word in normalized_library_title and title_word in normalized_library_title:
        score = config.embedded_fallback_score
        return EmbeddedArtistMatch(artist_score=score, title_score=score, combined=score)

    return None
