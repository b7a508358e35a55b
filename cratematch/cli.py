"""Command-line interface for Cratematch.

Commands:
    match       - Rank library tracks against a title/artist
    variations  - List remixes/edits of a song found in the library
    crates      - Show the crates containing a track
    identify    - Full flow: matches, best match, variations and crates
    normalize   - Show the normalized forms of a string
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from .core.config import MatchingConfig, load_config
from .core.exceptions import LibraryFileError
from .core.models import MatchResult, RecognizedTrack, VariationResult
from .matching.normalizer import normalize_artist, normalize_string, normalize_title
from .matching.prefilter import prepare_library
from .matching.service import TrackMatchingService
from .utils.library_file import LibrarySnapshot, load_library_file
from .utils.logger import setup_logging


def _format_match(match: MatchResult) -> str:
    track = match.track
    return (
        f"[{match.confidence.value:<6}] {match.score:.2f} "
        f"(title {match.title_score:.2f}, artist {match.artist_score:.2f})  "
        f"{track.artist} - {track.title}  [id {track.id}]"
    )


def _format_variation(variation: VariationResult) -> str:
    track = variation.track
    return (
        f"[{variation.type.value:<9}] {variation.similarity:.2f}  "
        f"{track.artist} - {track.title}  [id {track.id}]"
    )


def _load(args: argparse.Namespace) -> LibrarySnapshot:
    snapshot = load_library_file(Path(args.library))
    snapshot.tracks = prepare_library(snapshot.tracks)
    return snapshot


def _recognized(args: argparse.Namespace) -> RecognizedTrack:
    return RecognizedTrack(title=args.title, artist=args.artist or "")


def cmd_match(args: argparse.Namespace, service: TrackMatchingService) -> int:
    """Rank library tracks against a title/artist."""
    snapshot = _load(args)
    matches = service.find_matches(_recognized(args), snapshot.tracks)

    if not matches:
        print("No matches found.")
        return 1

    for match in matches[: args.top_n]:
        print(_format_match(match))

    best = service.get_best_match(matches)
    print()
    if best:
        print(f"Best match: {best.track.artist} - {best.track.title} [id {best.track.id}]")
    else:
        print("No confident match (low confidence results only).")
    return 0


def cmd_variations(args: argparse.Namespace, service: TrackMatchingService) -> int:
    """List variations of a song."""
    snapshot = _load(args)
    found = service.find_variations(_recognized(args), snapshot.tracks, args.exclude)

    if not found:
        print("No variations found.")
        return 1

    for variation in found:
        print(_format_variation(variation))
    return 0


def cmd_crates(args: argparse.Namespace, service: TrackMatchingService) -> int:
    """Show the crates containing a track."""
    snapshot = _load(args)
    memberships = asyncio.run(
        service.find_track_crates(args.track_id, snapshot.crate_tree, snapshot.store)
    )

    if not memberships:
        print(f"Track {args.track_id} is not in any crate.")
        return 1

    for membership in memberships:
        print(membership.full_path)
    return 0


def cmd_identify(args: argparse.Namespace, service: TrackMatchingService) -> int:
    """Run the full identify flow."""
    snapshot = _load(args)
    result = asyncio.run(
        service.identify(_recognized(args), snapshot.tracks, snapshot.crate_tree, snapshot.store)
    )

    print(f"Recognized: {args.artist} - {args.title}")
    print("=" * 40)

    if result.best_match is None:
        print("No confident match in library.")
    else:
        print(f"Best match: {_format_match(result.best_match)}")

    if result.crates:
        print()
        print("In crates:")
        for membership in result.crates:
            print(f"  {membership.full_path}")

    if result.variations:
        print()
        print("Variations:")
        for variation in result.variations:
            print(f"  {_format_variation(variation)}")

    return 0 if result.best_match else 1


def cmd_normalize(args: argparse.Namespace, service: TrackMatchingService) -> int:
    """Show normalized forms."""
    print(f"string: {normalize_string(args.text)!r}")
    print(f"title:  {normalize_title(args.text)!r}")
    print(f"artist: {normalize_artist(args.text)!r}")
    return 0


def _add_query_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("library", help="Library snapshot (JSON)")
    parser.add_argument("--title", "-t", required=True, help="Recognized title")
    parser.add_argument("--artist", "-a", default="", help="Recognized artist")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cratematch",
        description="Find recognized tracks, their variations and crates in a DJ library",
    )
    parser.add_argument("--config", "-c", type=Path, help="Path to config.yaml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    match_parser = subparsers.add_parser("match", help="Rank library tracks")
    _add_query_arguments(match_parser)
    match_parser.add_argument(
        "--top-n", "-n",
        type=int,
        default=10,
        help="Show top N matches (default: 10)",
    )
    match_parser.set_defaults(func=cmd_match)

    variations_parser = subparsers.add_parser("variations", help="List variations of a song")
    _add_query_arguments(variations_parser)
    variations_parser.add_argument("--exclude", "-x", help="Track id to exclude")
    variations_parser.set_defaults(func=cmd_variations)

    crates_parser = subparsers.add_parser("crates", help="Show crates containing a track")
    crates_parser.add_argument("library", help="Library snapshot (JSON)")
    crates_parser.add_argument("track_id", help="Library track id")
    crates_parser.set_defaults(func=cmd_crates)

    identify_parser = subparsers.add_parser("identify", help="Full identify flow")
    _add_query_arguments(identify_parser)
    identify_parser.set_defaults(func=cmd_identify)

    normalize_parser = subparsers.add_parser("normalize", help="Show normalized forms")
    normalize_parser.add_argument("text", help="Text to normalize")
    normalize_parser.set_defaults(func=cmd_normalize)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config: MatchingConfig = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.logging, level="DEBUG" if args.verbose else None)
    service = TrackMatchingService(config)

    try:
        return args.func(args, service)
    except (FileNotFoundError, LibraryFileError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
