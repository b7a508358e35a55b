"""Cratematch - find recognized tracks in a DJ library.

Takes the title/artist pair returned by an audio recognition service and
locates it in a loosely tagged personal library:

- normalization of titles and artist names (remix suffixes, "feat." forms)
- fuzzy title/artist scoring with a cheap prefilter for large libraries
- confidence tiers and best-match selection
- variations (remixes, edits, extended mixes) of the same song
- the crates, at any depth, that contain the matched track
"""

__version__ = "0.1.0"

from .core.models import (
    Confidence,
    CrateMembership,
    CrateNode,
    LibraryTrack,
    MatchResult,
    RecognizedTrack,
    VariationResult,
    VariationType,
)
from .matching.service import IdentificationResult, TrackMatchingService

__all__ = [
    "Confidence",
    "CrateMembership",
    "CrateNode",
    "IdentificationResult",
    "LibraryTrack",
    "MatchResult",
    "RecognizedTrack",
    "TrackMatchingService",
    "VariationResult",
    "VariationType",
]
