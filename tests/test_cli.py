"""Tests for the command-line interface."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from cratematch.cli import build_parser, main

LIBRARY = {
    "tracks": [
        {"id": "1", "title": "Red Button", "artist": "Drake"},
        {"id": "2", "title": "Red Button (Extended Mix)", "artist": "Drake"},
        {"id": "3", "title": "Blue Monday", "artist": "New Order"},
    ],
    "crates": [
        {
            "id": "rap",
            "name": "Rap",
            "tracks": [],
            "children": [{"id": "toronto", "name": "Toronto", "tracks": ["1"]}],
        }
    ],
}


@pytest.fixture
def library_path(tmp_path: Path, monkeypatch) -> Path:
    """Write a library snapshot and isolate config lookup."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    path = tmp_path / "library.json"
    path.write_text(json.dumps(LIBRARY))
    return path


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("cratematch.cli.setup_logging") as mock_setup:
        yield mock_setup


class TestParser:
    def test_requires_command(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_match_defaults(self) -> None:
        args = build_parser().parse_args(["match", "lib.json", "-t", "Red Button"])

        assert args.top_n == 10
        assert args.artist == ""


class TestCommands:
    """Test each subcommand end to end."""

    def test_match(self, library_path: Path, capsys) -> None:
        code = main(["match", str(library_path), "-t", "Red Button", "-a", "Drake"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Best match: Drake - Red Button [id 1]" in out

    def test_match_nothing_found(self, library_path: Path, capsys) -> None:
        code = main(["match", str(library_path), "-t", "Zzyzx Road", "-a", "Nobody"])

        assert code == 1
        assert "No matches found." in capsys.readouterr().out

    def test_variations(self, library_path: Path, capsys) -> None:
        code = main(["variations", str(library_path), "-t", "Red Button", "-a", "Drake", "-x", "1"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Red Button (Extended Mix)" in out
        assert "[id 1]" not in out

    def test_crates(self, library_path: Path, capsys) -> None:
        code = main(["crates", str(library_path), "1"])

        assert code == 0
        assert capsys.readouterr().out.strip() == "Rap › Toronto"

    def test_crates_not_found(self, library_path: Path, capsys) -> None:
        code = main(["crates", str(library_path), "3"])

        assert code == 1
        assert "not in any crate" in capsys.readouterr().out

    def test_identify(self, library_path: Path, capsys) -> None:
        code = main(["identify", str(library_path), "-t", "Red Button", "-a", "Drake"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Rap › Toronto" in out
        assert "Variations:" in out

    def test_normalize(self, capsys) -> None:
        code = main(["normalize", "The Weeknd feat. Daft Punk"])

        out = capsys.readouterr().out
        assert code == 0
        assert "artist: 'weeknd ft daft punk'" in out

    def test_verbose_sets_debug(self, library_path: Path, no_logging_setup) -> None:
        main(["-v", "crates", str(library_path), "1"])

        assert no_logging_setup.call_args.kwargs["level"] == "DEBUG"


class TestErrors:
    def test_missing_library(self, tmp_path: Path, monkeypatch, capsys) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))

        code = main(["crates", str(tmp_path / "missing.json"), "1"])

        assert code == 2
        assert "not found" in capsys.readouterr().err

    def test_missing_config(self, library_path: Path, capsys) -> None:
        code = main(["-c", "nope.yaml", "crates", str(library_path), "1"])

        assert code == 2
        assert "Config file not found" in capsys.readouterr().err

    def test_invalid_library(self, tmp_path: Path, monkeypatch, capsys) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        path = tmp_path / "library.json"
        path.write_text("[]")

        assert main(["crates", str(path), "1"]) == 2
