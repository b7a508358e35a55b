"""Pytest configuration and fixtures."""

import pytest

from cratematch.core.models import CrateNode, LibraryTrack, RecognizedTrack
from cratematch.utils.library_file import InMemoryCrateStore


@pytest.fixture
def recognized():
    """Provide a recognized track."""
    return RecognizedTrack(title="Red Button", artist="Drake")


@pytest.fixture
def sample_library():
    """Provide a small, inconsistently tagged library."""
    return [
        LibraryTrack(id="1", title="Red Button", artist="Drake", bpm=122.0, key="8A"),
        LibraryTrack(id="2", title="Red Button (Extended Mix)", artist="Drake"),
        LibraryTrack(id="3", title="Midnight Groove", artist="Deep House Collective"),
        LibraryTrack(id="4", title="Quantum Leap", artist="Astro"),
        LibraryTrack(id="5", title="Red Button (Adele Remix)", artist="Adele"),
        LibraryTrack(id="6", title="Blue Monday", artist="New Order"),
    ]


@pytest.fixture
def crate_tree():
    """Provide a two-level crate tree with unloaded membership.

    House
      House › Deep
      House › Tech
    Hip Hop
    """
    return [
        CrateNode(
            id="house",
            name="House",
            children=[
                CrateNode(id="deep", name="Deep"),
                CrateNode(id="tech", name="Tech"),
            ],
        ),
        CrateNode(id="hiphop", name="Hip Hop"),
    ]


@pytest.fixture
def crate_store():
    """Provide a crate store matching ``crate_tree``."""
    return InMemoryCrateStore(
        {
            "house": ["3"],
            "deep": ["3", "6"],
            "tech": ["4"],
            "hiphop": ["1", "2"],
        }
    )
