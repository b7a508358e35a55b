"""Score library candidates against a recognized track and rank them."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from cratematch.core.config import ClassifierConfig, MatchingConfig
from cratematch.core.models import Confidence, LibraryTrack, MatchResult, RecognizedTrack
from cratematch.matching.normalizer import normalize_artist, normalize_title
from cratematch.matching.prefilter import filter_candidates
from cratematch.matching.similarity import (
    calculate_artist_similarity,
    calculate_title_similarity,
    check_artist_in_title,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = MatchingConfig()


def classify_confidence(
    title_score: float, artist_score: float, config: ClassifierConfig | None = None
) -> Confidence | None:
    """Confidence tier for a pair of scores, or None when too weak to report."""
    config = config or _DEFAULT_CONFIG.classifier
    if title_score > config.high_title and artist_score > config.high_artist:
        return Confidence.HIGH
    if title_score > config.medium_title and artist_score > config.medium_artist:
        return Confidence.MEDIUM
    if title_score > config.low_title and artist_score > config.low_artist:
        return Confidence.LOW
    return None


def score_track(
    recognized: RecognizedTrack,
    track: LibraryTrack,
    config: MatchingConfig | None = None,
) -> MatchResult | None:
    """Fully score one library track; None when it does not reach ``low``."""
    config = config or _DEFAULT_CONFIG
    title_score = calculate_title_similarity(track.title, recognized.title, config.similarity)
    artist_score = calculate_artist_similarity(track.artist, recognized.artist, config.similarity)

    embedded = check_artist_in_title(
        track.title, recognized.title, recognized.artist, config.similarity
    )
    if embedded is not None and embedded.combined > max(title_score, artist_score):
        title_score = embedded.title_score
        artist_score = embedded.artist_score

    confidence = classify_confidence(title_score, artist_score, config.classifier)
    if confidence is None:
        return None

    score = (
        title_score * config.classifier.title_weight
        + artist_score * config.classifier.artist_weight
    )
    return MatchResult(
        track=track,
        confidence=confidence,
        score=score,
        title_score=title_score,
        artist_score=artist_score,
    )


def find_matches(
    recognized: RecognizedTrack | None,
    library: Sequence[LibraryTrack] | None,
    config: MatchingConfig | None = None,
    *,
    use_prefilter: bool = True,
    cancelled: Callable[[], bool] | None = None,
    progress_callback: Callable[[int, int, str], object] | None = None,
) -> list[MatchResult]:
    """Find library tracks matching a recognized track.

    Two stages: the prefilter reduces the library to a bounded candidate
    set with cheap checks, then full scoring runs on the candidates only.
    When the prefilter finds nothing, the whole library is scanned.

    Args:
        recognized: Track returned by the recognition service
        library: Flat list of library tracks
        config: Matching configuration (defaults if None)
        use_prefilter: False scores every track (brute-force baseline)
        cancelled: Optional callable returning True to abort; polled
            between chunks. A cancelled search returns an empty list.
        progress_callback: Optional callback(current, total, message)

    Returns:
        Matches sorted by score, highest first
    """
    if recognized is None or not library:
        return []

    config = config or _DEFAULT_CONFIG
    search_title = normalize_title(recognized.title)
    if not search_title:
        return []

    tracks: Sequence[LibraryTrack] = library
    if use_prefilter:
        candidates = filter_candidates(
            library, search_title, normalize_artist(recognized.artist), config.prefilter
        )
        if candidates:
            tracks = [candidate.track for candidate in candidates]
        else:
            logger.debug("[Classifier] No prefilter candidates, scanning full library")

    results: list[MatchResult] = []
    chunk_size = config.classifier.chunk_size
    total = len(tracks)
    finished = False

    for start in range(0, total, chunk_size):
        if cancelled and cancelled():
            logger.debug("[Classifier] Search cancelled")
            return []

        for track in tracks[start : start + chunk_size]:
            result = score_track(recognized, track, config)
            if result is None:
                continue
            results.append(result)
            # Nothing left can beat a very strong high-confidence match
            if (
                result.confidence is Confidence.HIGH
                and result.score > config.classifier.early_exit_score
            ):
                finished = True
                break

        if progress_callback:
            progress_callback(min(start + chunk_size, total), total, "Scoring candidates")
        if finished:
            break

    results.sort(key=lambda r: r.score, reverse=True)
    logger.debug(f"[Classifier] {len(results)} matches from {total} scored tracks")
    return results


def get_best_match(matches: Sequence[MatchResult] | None) -> MatchResult | None:
    """First high-confidence match, else first medium one.

    A low-confidence result is never returned as the best match.
    """
    if not matches:
        return None
    for tier in (Confidence.HIGH, Confidence.MEDIUM):
        for match in matches:
            if match.confidence is tier:
                return match
    return None


def has_confident_match(matches: Sequence[MatchResult] | None) -> bool:
    """True if any match is high or medium confidence."""
    return get_best_match(matches) is not None
