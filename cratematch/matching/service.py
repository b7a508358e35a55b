"""TrackMatchingService - one entry point for the identify flow.

Binds the matching functions to a single ``MatchingConfig`` and runs the
whole flow for a recognized track: library matches, best match,
variations of the song, and the crates holding the best match.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from cratematch.core.config import MatchingConfig
from cratematch.core.models import (
    CrateMembership,
    CrateNode,
    LibraryTrack,
    MatchResult,
    RecognizedTrack,
    TrackId,
    VariationResult,
)
from cratematch.core.protocols import CrateLoader
from cratematch.matching import classifier, crate_locator, variations
from cratematch.matching.normalizer import base_title

logger = logging.getLogger(__name__)


@dataclass
class IdentificationResult:
    """Everything the caller needs to present one identification."""

    recognized: RecognizedTrack | None
    matches: list[MatchResult] = field(default_factory=list)
    best_match: MatchResult | None = None
    variations: list[VariationResult] = field(default_factory=list)
    crates: list[CrateMembership] = field(default_factory=list)

    @property
    def has_confident_match(self) -> bool:
        """True when a high or medium confidence match was found."""
        return self.best_match is not None


class TrackMatchingService:
    """Find recognized tracks in a library snapshot."""

    def __init__(self, config: MatchingConfig | None = None) -> None:
        """Initialize the service.

        Args:
            config: Matching configuration (defaults if None)
        """
        self.config = config or MatchingConfig()

    def find_matches(
        self,
        recognized: RecognizedTrack | None,
        library: Sequence[LibraryTrack] | None,
        *,
        use_prefilter: bool = True,
        cancelled: Callable[[], bool] | None = None,
        progress_callback: Callable[[int, int, str], object] | None = None,
    ) -> list[MatchResult]:
        """Ranked library matches for a recognized track."""
        return classifier.find_matches(
            recognized,
            library,
            self.config,
            use_prefilter=use_prefilter,
            cancelled=cancelled,
            progress_callback=progress_callback,
        )

    @staticmethod
    def get_best_match(matches: Sequence[MatchResult] | None) -> MatchResult | None:
        """First high, else first medium confidence match."""
        return classifier.get_best_match(matches)

    @staticmethod
    def has_confident_match(matches: Sequence[MatchResult] | None) -> bool:
        """True if any match is high or medium confidence."""
        return classifier.has_confident_match(matches)

    @staticmethod
    def get_base_title(title: str | None) -> str:
        """Title without remix/edit suffixes."""
        return base_title(title)

    def find_variations(
        self,
        recognized: RecognizedTrack | None,
        library: Sequence[LibraryTrack] | None,
        exclude_id: TrackId | None = None,
        *,
        cancelled: Callable[[], bool] | None = None,
    ) -> list[VariationResult]:
        """Other versions of the recognized song, excluding ``exclude_id``."""
        return variations.find_variations(
            recognized, library, exclude_id, self.config, cancelled=cancelled
        )

    async def find_track_crates(
        self,
        track_id: TrackId,
        crate_tree: Sequence[CrateNode] | None,
        loader: CrateLoader | None = None,
        *,
        cancelled: Callable[[], bool] | None = None,
    ) -> list[CrateMembership]:
        """Crates containing a track, loading membership on demand."""
        return await crate_locator.find_track_crates(
            track_id, crate_tree, loader, self.config.crates, cancelled=cancelled
        )

    def find_track_in_crates(
        self, track_id: TrackId, crate_tree: Sequence[CrateNode] | None
    ) -> list[CrateMembership]:
        """Crates containing a track, using already-loaded membership only."""
        return crate_locator.find_track_in_crates(track_id, crate_tree, self.config.crates)

    async def identify(
        self,
        recognized: RecognizedTrack | None,
        library: Sequence[LibraryTrack] | None,
        crate_tree: Sequence[CrateNode] | None = None,
        loader: CrateLoader | None = None,
        *,
        cancelled: Callable[[], bool] | None = None,
    ) -> IdentificationResult:
        """Run the full identify flow for one recognized track.

        Scoring runs in a worker thread so the caller's event loop is not
        blocked by a large library. ``recognized`` is None when recognition
        failed; the result is then empty.

        Args:
            recognized: Track returned by the recognition service, or None
            library: Flat list of library tracks
            crate_tree: Top-level crates to search for the best match
            loader: Crate store fetching membership on demand
            cancelled: Optional callable returning True to abandon the flow.
                An abandoned flow returns an empty result.

        Returns:
            IdentificationResult (empty fields for anything not found)
        """
        result = IdentificationResult(recognized=recognized)
        if recognized is None:
            return result

        def abandoned() -> bool:
            if cancelled and cancelled():
                logger.debug("[TrackMatchingService] Identify cancelled")
                return True
            return False

        result.matches = await asyncio.to_thread(
            classifier.find_matches, recognized, library, self.config, cancelled=cancelled
        )
        if abandoned():
            return IdentificationResult(recognized=recognized)

        result.best_match = classifier.get_best_match(result.matches)
        exclude_id = result.best_match.track.id if result.best_match else None

        result.variations = await asyncio.to_thread(
            variations.find_variations,
            recognized,
            library,
            exclude_id,
            self.config,
            cancelled=cancelled,
        )
        if abandoned():
            return IdentificationResult(recognized=recognized)

        if result.best_match is not None and crate_tree:
            result.crates = await self.find_track_crates(
                result.best_match.track.id, crate_tree, loader, cancelled=cancelled
            )
            if abandoned():
                return IdentificationResult(recognized=recognized)

        logger.info(
            f"[TrackMatchingService] '{recognized.title}' by '{recognized.artist}': "
            f"{len(result.matches)} matches, {len(result.variations)} variations, "
            f"{len(result.crates)} crates"
        )
        return result
