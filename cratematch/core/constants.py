"""Shared constants for track matching."""

TITLE_VERSION_KEYWORDS = (
    "remix",
    "edit",
    "mix",
    "version",
    "bootleg",
    "rework",
    "flip",
    "vip",
)
"""Keywords that end the base title when they open a suffix clause."""

VARIATION_KEYWORDS = (
    "remix",
    "edit",
    "vip",
    "flip",
    "bootleg",
    "rework",
    "extended",
    "intro",
    "outro",
    "mashup",
    "blend",
    "version",
    "mix",
    "dub",
    "instrumental",
    "acapella",
    "sped",
    "slowed",
    "pitched",
)
"""Keywords marking a library entry as another version of a song."""

ARTIST_TITLE_SEPARATORS = (" - ", " – ", " — ", " _ ")
"""Dash variants used by files tagged as 'Artist - Title'."""

CRATE_PATH_SEPARATOR = " › "
"""Breadcrumb separator between a parent crate and its child."""
