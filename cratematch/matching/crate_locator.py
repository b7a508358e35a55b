"""Locate every crate, at any depth, that contains a track.

Crate membership may not be loaded up front; the locator asks the crate
store for it on demand. Nodes are never modified. A crate whose load fails
is logged and skipped, and its sub-crates are still searched.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from cratematch.core.config import CrateConfig
from cratematch.core.models import CrateMembership, CrateNode, TrackId
from cratematch.core.protocols import CrateLoader, CrateStoreProtocol

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = CrateConfig()


@dataclass(frozen=True)
class _Visit:
    node: CrateNode
    path: str
    depth: int


def _walk(crate_tree: Sequence[CrateNode], separator: str) -> Iterator[_Visit]:
    """Depth-first, left-to-right preorder over the tree with breadcrumbs."""
    stack = [_Visit(node, node.name, 0) for node in reversed(crate_tree)]
    while stack:
        visit = stack.pop()
        yield visit
        for child in reversed(visit.node.children):
            stack.append(
                _Visit(child, f"{visit.path}{separator}{child.name}", visit.depth + 1)
            )


def _track_key(item: Any) -> str:
    """Id of a loaded crate entry: a track object, a track dict or a bare id."""
    if isinstance(item, dict):
        return str(item.get("id"))
    track_id = getattr(item, "id", item)
    return str(track_id)


def _membership(visit: _Visit) -> CrateMembership:
    return CrateMembership(
        id=visit.node.id,
        name=visit.node.name,
        full_path=visit.path,
        depth=visit.depth,
    )


def find_track_in_crates(
    track_id: TrackId,
    crate_tree: Sequence[CrateNode] | None,
    config: CrateConfig | None = None,
) -> list[CrateMembership]:
    """Search crates whose membership is already loaded.

    Crates with unloaded membership are treated as not containing the track.
    """
    if not crate_tree:
        return []
    config = config or _DEFAULT_CONFIG
    target = str(track_id)
    return [
        _membership(visit)
        for visit in _walk(crate_tree, config.path_separator)
        if visit.node.track_ids is not None and target in visit.node.track_ids
    ]


async def _call_loader(loader: CrateLoader, crate_id: str) -> Iterable[Any]:
    if isinstance(loader, CrateStoreProtocol):
        return await loader.load_tracks(crate_id)
    return await loader(crate_id)


async def _load_track_ids(
    node: CrateNode,
    loader: CrateLoader | None,
    config: CrateConfig,
    semaphore: asyncio.Semaphore,
) -> frozenset[str] | None:
    """Membership of a node, or None when it is unknown."""
    if node.track_ids is not None:
        return node.track_ids
    if loader is None:
        return None

    async with semaphore:
        try:
            if config.load_timeout_seconds is not None:
                tracks = await asyncio.wait_for(
                    _call_loader(loader, node.id), timeout=config.load_timeout_seconds
                )
            else:
                tracks = await _call_loader(loader, node.id)
            return frozenset(_track_key(item) for item in tracks or ())
        except asyncio.TimeoutError:
            logger.warning(
                f"[CrateLocator] Loading crate '{node.name}' ({node.id}) timed out "
                f"after {config.load_timeout_seconds}s, skipping"
            )
        except Exception as e:
            logger.warning(f"[CrateLocator] Failed to load crate '{node.name}' ({node.id}): {e}")
    return None


async def find_track_crates(
    track_id: TrackId,
    crate_tree: Sequence[CrateNode] | None,
    loader: CrateLoader | None = None,
    config: CrateConfig | None = None,
    *,
    cancelled: Callable[[], bool] | None = None,
) -> list[CrateMembership]:
    """Report every crate containing ``track_id`` with its breadcrumb path.

    Args:
        track_id: Library track id (compared as a string)
        crate_tree: Top-level crates; sub-crates are reached via ``children``
        loader: Crate store (or coroutine function) fetching a crate's tracks
        config: Separator, concurrency and timeout settings
        cancelled: Optional callable returning True to abandon the search;
            polled between loads. An abandoned search returns an empty list.

    Returns:
        Memberships in depth-first, left-to-right order
    """
    if not crate_tree:
        return []

    config = config or _DEFAULT_CONFIG
    target = str(track_id)
    visits = list(_walk(crate_tree, config.path_separator))
    semaphore = asyncio.Semaphore(config.max_concurrent_loads)

    if config.max_concurrent_loads == 1:
        memberships: list[frozenset[str] | None] = []
        for visit in visits:
            if cancelled and cancelled():
                logger.debug("[CrateLocator] Search cancelled")
                return []
            memberships.append(await _load_track_ids(visit.node, loader, config, semaphore))
    else:

        async def load(visit: _Visit) -> frozenset[str] | None:
            if cancelled and cancelled():
                return None
            return await _load_track_ids(visit.node, loader, config, semaphore)

        memberships = list(await asyncio.gather(*(load(visit) for visit in visits)))
        if cancelled and cancelled():
            logger.debug("[CrateLocator] Search cancelled")
            return []

    found = [
        _membership(visit)
        for visit, track_ids in zip(visits, memberships)
        if track_ids is not None and target in track_ids
    ]
    logger.debug(f"[CrateLocator] Track {target} found in {len(found)} of {len(visits)} crates")
    return found
