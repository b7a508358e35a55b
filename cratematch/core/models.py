"""Data model shared by the matching engine and its collaborators."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

TrackId = Union[str, int]


def _text(value: Any) -> str:
    """Coerce a possibly missing metadata field to a string."""
    if value is None:
        return ""
    return str(value)


def _number(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class Confidence(Enum):
    """Confidence tiers for a library match."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class VariationType(Enum):
    """How a variation relates to the recognized song."""

    VARIATION = "variation"  # Carries a remix/edit/version keyword
    RELATED = "related"


@dataclass(frozen=True)
class RecognizedTrack:
    """Best guess returned by the recognition service for one sample."""

    title: str
    artist: str
    album: str | None = None
    duration_seconds: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RecognizedTrack:
        """Build from a recognition payload.

        Accepts ``duration`` as an alias of ``duration_seconds``.
        """
        duration = data.get("duration_seconds", data.get("duration"))
        return cls(
            title=_text(data.get("title")),
            artist=_text(data.get("artist")),
            album=data.get("album") or None,
            duration_seconds=_number(duration),
        )


@dataclass(frozen=True)
class LibraryTrack:
    """One entry of the user's library.

    ``normalized_title`` and ``normalized_artist`` are an optional
    read-through cache (see ``prefilter.prepare_library``). They hold the
    base title and normalized artist and never take part in equality.
    """

    id: TrackId
    title: str = ""
    artist: str = ""
    album: str | None = None
    genre: str | None = None
    bpm: float | None = None
    key: str | None = None
    duration_seconds: float | None = None
    normalized_title: str | None = field(default=None, compare=False, repr=False)
    normalized_artist: str | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LibraryTrack:
        """Build from a library record; missing title/artist become ''."""
        if data.get("id") is None:
            raise ValueError("Library track requires an 'id'")
        duration = data.get("duration_seconds", data.get("duration"))
        return cls(
            id=data["id"],
            title=_text(data.get("title")),
            artist=_text(data.get("artist")),
            album=data.get("album") or None,
            genre=data.get("genre") or None,
            bpm=_number(data.get("bpm")),
            key=data.get("key") or None,
            duration_seconds=_number(duration),
        )


@dataclass
class MatchResult:
    """A library track classified against a recognized track."""

    track: LibraryTrack
    confidence: Confidence
    score: float  # title_score * title_weight + artist_score * artist_weight
    title_score: float
    artist_score: float


@dataclass
class VariationResult:
    """Another version (remix, edit, ...) of the recognized song."""

    track: LibraryTrack
    type: VariationType
    similarity: float


@dataclass
class CrateNode:
    """A crate and its sub-crates.

    ``track_ids`` is None until membership has been loaded.
    """

    id: str
    name: str
    children: list[CrateNode] = field(default_factory=list)
    track_ids: frozenset[str] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CrateNode:
        """Build a crate tree from nested dicts.

        Children are read from ``children`` or ``subcrates``. Membership is
        taken from ``track_ids`` or ``tracks`` (ids or track dicts) when
        present, otherwise left unloaded.
        """
        children = data.get("children") or data.get("subcrates") or []
        raw_members = data.get("track_ids", data.get("tracks"))
        track_ids = None
        if raw_members is not None:
            track_ids = frozenset(
                str(m["id"]) if isinstance(m, Mapping) else str(m) for m in raw_members
            )
        return cls(
            id=str(data["id"]),
            name=_text(data.get("name")) or str(data["id"]),
            children=[cls.from_dict(child) for child in children],
            track_ids=track_ids,
        )


@dataclass(frozen=True)
class CrateMembership:
    """A crate that contains a target track, with its breadcrumb path."""

    id: str
    name: str
    full_path: str
    depth: int = 0
