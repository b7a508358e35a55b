"""Protocol definitions for external collaborators.

The library/crate backend is not part of this package; the crate locator
only needs something that can fetch a crate's tracks on demand.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Protocol, Union, runtime_checkable


@runtime_checkable
class CrateStoreProtocol(Protocol):
    """Asynchronous accessor for crate membership."""

    async def load_tracks(self, crate_id: str) -> Iterable[Any]: ...


CrateTracksCallable = Callable[[str], Awaitable[Iterable[Any]]]
"""Plain coroutine function form of ``CrateStoreProtocol.load_tracks``."""

CrateLoader = Union[CrateStoreProtocol, CrateTracksCallable]
