"""Library snapshot files.

A snapshot is a JSON export of the library collaborator:

    {
      "tracks": [{"id": "1", "title": "...", "artist": "..."}, ...],
      "crates": [{"id": "c1", "name": "House", "tracks": ["1"],
                  "children": [...]}, ...]
    }

Crate membership is not attached to the tree; it is served on demand by
``InMemoryCrateStore`` the same way a remote crate backend would.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cratematch.core.exceptions import CrateLoadError, LibraryFileError
from cratematch.core.models import CrateNode, LibraryTrack

logger = logging.getLogger(__name__)


class InMemoryCrateStore:
    """Crate store backed by a crate id -> track ids mapping."""

    def __init__(self, memberships: Mapping[str, Iterable[str]] | None = None) -> None:
        self._memberships = {
            str(crate_id): [str(t) for t in track_ids]
            for crate_id, track_ids in (memberships or {}).items()
        }
        self.load_count = 0

    async def load_tracks(self, crate_id: str) -> list[str]:
        """Track ids of a crate.

        Raises:
            CrateLoadError: If the crate is unknown
        """
        self.load_count += 1
        try:
            return list(self._memberships[str(crate_id)])
        except KeyError:
            raise CrateLoadError(crate_id, "unknown crate") from None


@dataclass
class LibrarySnapshot:
    """Tracks and crate tree of one library export."""

    tracks: list[LibraryTrack] = field(default_factory=list)
    crate_tree: list[CrateNode] = field(default_factory=list)
    store: InMemoryCrateStore = field(default_factory=InMemoryCrateStore)


def _crate_node(data: Mapping[str, Any], memberships: dict[str, list[str]]) -> CrateNode:
    """Build a crate node without membership, collecting it into ``memberships``."""
    if data.get("id") is None:
        raise LibraryFileError(f"Crate without id: {data.get('name')!r}")
    crate_id = str(data["id"])
    members = data.get("track_ids", data.get("tracks")) or []
    memberships[crate_id] = [
        str(m["id"]) if isinstance(m, Mapping) else str(m) for m in members
    ]
    children = data.get("children") or data.get("subcrates") or []
    return CrateNode(
        id=crate_id,
        name=str(data.get("name") or crate_id),
        children=[_crate_node(child, memberships) for child in children],
    )


def parse_library(data: Mapping[str, Any]) -> LibrarySnapshot:
    """Build a snapshot from decoded JSON."""
    if not isinstance(data, Mapping):
        raise LibraryFileError("Library file must contain a JSON object")

    raw_tracks = data.get("tracks") or []
    raw_crates = data.get("crates") or []
    if not isinstance(raw_tracks, list) or not isinstance(raw_crates, list):
        raise LibraryFileError("'tracks' and 'crates' must be lists")

    tracks = []
    for raw in raw_tracks:
        try:
            tracks.append(LibraryTrack.from_dict(raw))
        except (AttributeError, TypeError, ValueError) as e:
            raise LibraryFileError(f"Invalid track entry {raw!r}: {e}") from e

    memberships: dict[str, list[str]] = {}
    crate_tree = [_crate_node(raw, memberships) for raw in raw_crates]

    return LibrarySnapshot(
        tracks=tracks,
        crate_tree=crate_tree,
        store=InMemoryCrateStore(memberships),
    )


def load_library_file(path: Path) -> LibrarySnapshot:
    """Load a library snapshot from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        LibraryFileError: If the file is not a valid snapshot
    """
    if not path.exists():
        raise FileNotFoundError(f"Library file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise LibraryFileError(f"Invalid JSON in {path}: {e}") from e

    snapshot = parse_library(data)
    logger.debug(
        f"[LibraryFile] Loaded {len(snapshot.tracks)} tracks and "
        f"{len(snapshot.crate_tree)} top-level crates from {path}"
    )
    return snapshot
