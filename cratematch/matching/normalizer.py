"""Comparable forms of titles and artist names.

All functions are pure and accept missing input (``None`` or ``''``),
returning an empty string.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from cratematch.core.constants import ARTIST_TITLE_SEPARATORS, TITLE_VERSION_KEYWORDS

_SEPARATORS_RE = re.compile(r"[/&,]")
_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")

_FEAT_RE = re.compile(r"\bfeat\b")
_FEATURING_RE = re.compile(r"\bfeaturing\b")
_AND_RE = re.compile(r"\band\b")
_LEADING_THE_RE = re.compile(r"^the\s")
_COLLAB_AMP_RE = re.compile(r"\s&\s")
_COLLAB_VS_RE = re.compile(r"\svs\.?\s")
_COLLAB_X_RE = re.compile(r"\sx\s")

# Base title ends where a version keyword opens a suffix clause,
# e.g. "red button extended mix" -> "red button extended".
_VERSION_SUFFIX_RE = re.compile(
    r"^(.+?)(?:\s*[(\[])?\s*\b(?:" + "|".join(TITLE_VERSION_KEYWORDS) + r")\b"
)
_VERSION_KEYWORD_RE = re.compile(r"\b(?:" + "|".join(TITLE_VERSION_KEYWORDS) + r")\b")
_TRAILING_ANNOTATION_RE = re.compile(r"\s*(?:\([^()]*\)|\[[^\[\]]*\])\s*$")


def normalize_string(text: str | None) -> str:
    """Lowercase, turn separators into spaces, drop punctuation, collapse spaces.

    Idempotent: ``normalize_string(normalize_string(s)) == normalize_string(s)``.
    """
    if not text:
        return ""
    text = text.lower()
    text = _SEPARATORS_RE.sub(" ", text)
    text = _PUNCTUATION_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_artist(artist: str | None) -> str:
    """Normalize an artist name and fold collaboration markers.

    "feat"/"featuring" become "ft", a leading "the " is dropped, and the
    "&", "vs" and "x" collaboration tokens collapse to a single space.
    """
    if not artist:
        return ""
    text = normalize_string(artist)
    text = _FEAT_RE.sub("ft", text)
    text = _FEATURING_RE.sub("ft", text)
    text = _AND_RE.sub("&", text)
    text = _LEADING_THE_RE.sub("", text)
    text = _COLLAB_AMP_RE.sub(" ", text)
    text = _COLLAB_VS_RE.sub(" ", text)
    return _COLLAB_X_RE.sub(" ", text)


def _strip_annotations(title: str) -> str:
    """Drop trailing (...) / [...] groups such as "(Official Audio)" or "[Live]".

    Stops at a group naming a version ("(Extended Mix)"), which is left for
    keyword truncation, and never strips a title down to nothing.
    """
    while True:
        match = _TRAILING_ANNOTATION_RE.search(title)
        if not match or match.start() == 0:
            return title
        if _VERSION_KEYWORD_RE.search(normalize_string(match.group())):
            return title
        title = title[: match.start()]


def normalize_title(title: str | None) -> str:
    """Return the base title: normalized, cut before remix/edit/version suffixes.

    Trailing annotations are removed from the raw title first, while the
    brackets are still there to find them.
    """
    if not title:
        return ""
    text = normalize_string(_strip_annotations(title))

    match = _VERSION_SUFFIX_RE.match(text)
    if match:
        text = match.group(1).strip()
    return text


def base_title(title: str | None) -> str:
    """Title without remix/edit suffixes, for cross-version comparison."""
    return normalize_title(title)


def significant_words(text: str, min_length: int = 2) -> list[str]:
    """Words of an already-normalized string longer than ``min_length``."""
    return [word for word in text.split(" ") if len(word) > min_length]


def artist_title_splits(raw_title: str | None) -> Iterator[tuple[str, str]]:
    """Yield (artist part, title part) for every dash variant in a raw title.

    Variants are tried in ``ARTIST_TITLE_SEPARATORS`` order, each split at
    its first occurrence.
    """
    if not raw_title:
        return
    for separator in ARTIST_TITLE_SEPARATORS:
        if separator in raw_title:
            artist, _, rest = raw_title.partition(separator)
            yield artist, rest


def split_artist_title(raw_title: str | None) -> tuple[str, str] | None:
    """Split a raw 'Artist - Title' field on the first dash variant found.

    Returns (artist part, title part) or None when no separator is present.
    """
    return next(artist_title_splits(raw_title), None)
