"""Cheap candidate screening ahead of full similarity scoring.

Edit distance is quadratic in string length, so a large library is first
reduced with substring and word checks only. Every surviving track gets a
priority bucket; the best buckets are kept up to ``max_candidates``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from enum import IntEnum

from cratematch.core.config import PrefilterConfig
from cratematch.core.models import LibraryTrack
from cratematch.matching.normalizer import normalize_artist, normalize_title, significant_words

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = PrefilterConfig()


class Priority(IntEnum):
    """Prefilter buckets, best first."""

    EXACT = 1
    CONTAINMENT = 2
    WORD_MAJORITY = 3
    ARTIST_WORD = 4


@dataclass(frozen=True)
class Candidate:
    """A library track that survived the prefilter."""

    track: LibraryTrack
    priority: Priority


def cached_title(track: LibraryTrack) -> str:
    """Base title of a track, from the read-through cache when present."""
    if track.normalized_title is not None:
        return track.normalized_title
    return normalize_title(track.title)


def cached_artist(track: LibraryTrack) -> str:
    """Normalized artist of a track, from the read-through cache when present."""
    if track.normalized_artist is not None:
        return track.normalized_artist
    return normalize_artist(track.artist)


def prepare_library(tracks: Iterable[LibraryTrack]) -> list[LibraryTrack]:
    """Return copies of ``tracks`` with normalized title/artist precomputed.

    Worth doing once per library snapshot when it is searched repeatedly.
    """
    return [
        replace(
            track,
            normalized_title=normalize_title(track.title),
            normalized_artist=normalize_artist(track.artist),
        )
        for track in tracks
    ]


def _priority(
    normalized_title: str,
    normalized_artist: str,
    search_title: str,
    title_words: list[str],
    artist_word: str,
    config: PrefilterConfig,
) -> Priority | None:
    if normalized_title == search_title:
        return Priority.EXACT

    if (
        normalized_title
        and search_title
        and (normalized_title in search_title or search_title in normalized_title)
    ):
        return Priority.CONTAINMENT

    matching_words = [word for word in title_words if word in normalized_title]
    if title_words and len(matching_words) >= math.ceil(
        len(title_words) * config.word_majority_ratio
    ):
        return Priority.WORD_MAJORITY

    if (
        len(artist_word) > config.min_word_length
        and artist_word in normalized_artist
        and matching_words
    ):
        return Priority.ARTIST_WORD

    return None


def filter_candidates(
    library: Sequence[LibraryTrack],
    search_title: str,
    search_artist: str,
    config: PrefilterConfig | None = None,
) -> list[Candidate]:
    """Screen the library against a normalized title and artist.

    Args:
        library: Library tracks (cached normalized fields are used if set)
        search_title: Base title of the recognized track (``normalize_title``)
        search_artist: Normalized recognized artist (``normalize_artist``)
        config: Prefilter limits

    Returns:
        Candidates sorted by priority (stable within a bucket), capped
    """
    config = config or _DEFAULT_CONFIG
    title_words = significant_words(search_title, config.min_word_length)
    artist_word = search_artist.split(" ")[0]

    candidates: list[Candidate] = []
    for track in library:
        priority = _priority(
            cached_title(track),
            cached_artist(track),
            search_title,
            title_words,
            artist_word,
            config,
        )
        if priority is not None:
            candidates.append(Candidate(track, priority))

    candidates.sort(key=lambda c: c.priority)
    logger.debug(
        f"[Prefilter] {len(candidates)} of {len(library)} tracks survived, "
        f"keeping {min(len(candidates), config.max_candidates)}"
    )
    return candidates[: config.max_candidates]
