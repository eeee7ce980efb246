"""Tests for path and text helpers."""

import os
import tempfile
from pathlib import Path

import pytest

from agentrules.exceptions import GenerationError
from agentrules.paths import (
    expand_home,
    normalize_prefixes,
    rel_starts_with,
    title_case,
    title_from_segments,
    to_posix,
    walk_markdown_files,
)


class TestTextHelpers:
    """Test slug and separator helpers."""

    def test_to_posix_converts_and_collapses_separators(self) -> None:
        """Test backslashes become slashes and runs collapse."""
        assert to_posix("a\\\\b/c") == "a/b/c"
        assert to_posix("a//b///c") == "a/b/c"

    def test_title_case(self) -> None:
        """Test slug names become title case words."""
        assert title_case("laravel_blade-components") == "Laravel Blade Components"
        assert title_case("use-USER") == "Use User"
        assert title_case("__x__") == "X"
        assert title_case("") == ""

    def test_title_from_segments_skips_empty(self) -> None:
        """Test segment labels are joined with a slash and spaces."""
        assert title_from_segments(["queries", "", "more"]) == "Queries / More"
        assert title_from_segments([]) == ""


class TestPathHelpers:
    """Test prefix normalization and matching."""

    def test_expand_home(self) -> None:
        """Test ~ and ~/ expand to the home directory."""
        home = str(Path.home())
        assert expand_home("~") == home
        assert expand_home("~/test").startswith(home)
        assert expand_home("~/test").endswith("/test")
        assert expand_home("~other/x") == "~other/x"
        assert expand_home("") == ""

    def test_normalize_prefixes(self) -> None:
        """Test leading ./ and / are stripped and empties dropped."""
        assert normalize_prefixes(["./react", "/git", "", "  "]) == ["react", "git"]
        assert normalize_prefixes([" a\\b//c "]) == ["a/b/c"]
        assert normalize_prefixes(None) == []

    @pytest.mark.parametrize(
        ("relative", "prefix", "expected"),
        [
            ("react/hooks/use-effect.md", "react", True),
            ("react", "react", True),
            ("react/hooks/use-effect.md", "react/hooks", True),
            ("git/safety.md", "react", False),
            ("reactive/x.md", "react", False),
            ("overview.md", "overview.md", True),
        ],
    )
    def test_rel_starts_with(self, relative: str, prefix: str, expected: bool) -> None:
        """Test prefixes match on whole path segments only."""
        assert rel_starts_with(relative, prefix) is expected


class TestWalkMarkdownFiles:
    """Test recursive Markdown discovery."""

    def test_finds_markdown_case_insensitively(self) -> None:
        """Test .md and .MD files are found with posix relative paths."""
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            (root / "a" / "b").mkdir(parents=True)
            (root / "a" / "b" / "rule.md").write_text("x")
            (root / "UPPER.MD").write_text("x")
            (root / "notes.txt").write_text("x")

            found = sorted(rel for _, rel in walk_markdown_files(root))
            assert found == ["UPPER.MD", "a/b/rule.md"]

    def test_missing_root_raises(self) -> None:
        """Test a root that cannot be listed raises GenerationError."""
        with tempfile.TemporaryDirectory() as temp_dir:
            missing = Path(temp_dir) / "missing"
            with pytest.raises(GenerationError) as exc_info:
                walk_markdown_files(missing)
            assert exc_info.value.details["path"] == str(missing)

    def test_unlistable_subdirectory_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a subdirectory that cannot be listed aborts the walk."""
        real_scandir = os.scandir

        def failing_scandir(path: object = "."):
            if not isinstance(path, int) and Path(os.fspath(path)).name == "a":
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_scandir(path)

        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            (root / "a").mkdir()
            (root / "a" / "rule.md").write_text("x")
            (root / "top.md").write_text("x")

            monkeypatch.setattr(os, "scandir", failing_scandir)
            with pytest.raises(GenerationError, match="Failed to list rules directory") as exc_info:
                walk_markdown_files(root)
            assert exc_info.value.details["path"] == str(root / "a")
            assert isinstance(exc_info.value.__cause__, PermissionError)
