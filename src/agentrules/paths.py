"""Path and text helpers shared by the tree builder and renderer."""

from __future__ import annotations

import os
import re
from pathlib import Path

from .exceptions import GenerationError

_SEPARATOR_RUN = re.compile(r"[-_]+")
_LEADING_DOT_SLASH = re.compile(r"^\./+")
_LEADING_SLASH = re.compile(r"^/+")


def to_posix(path: str) -> str:
    """Convert backslashes to forward slashes and collapse repeated separators."""
    out = path.replace("\\", "/")
    while "//" in out:
        out = out.replace("//", "/")
    return out


def title_case(value: str) -> str:
    """Turn a slug such as ``laravel_blade-components`` into ``Laravel Blade Components``."""
    cleaned = _SEPARATOR_RUN.sub(" ", value).strip()
    return " ".join(word[:1].upper() + word[1:].lower() for word in cleaned.split())


def title_from_segments(segments: list[str]) -> str:
    """Title-case each non-empty path segment and join them with `` / ``."""
    return " / ".join(title_case(segment) for segment in segments if segment)


def expand_home(path: str) -> str:
    """Expand a leading ``~`` to the user's home directory.

    Only ``~`` on its own or ``~/...`` is expanded; ``~user`` forms are left alone.
    """
    if not path:
        return path
    if path == "~" or path.startswith("~/"):
        return str(Path.home()) + path[1:]
    return path


def normalize_prefixes(prefixes: list[str] | None) -> list[str]:
    """Normalize include/exclude prefixes to posix paths relative to a source root.

    Whitespace is trimmed, separators are canonicalized, and a leading ``./``
    or ``/`` is stripped. Prefixes that end up empty are dropped.
    """
    if not prefixes:
        return []

    normalized = []
    for prefix in prefixes:
        value = to_posix(prefix.strip())
        value = _LEADING_DOT_SLASH.sub("", value)
        value = _LEADING_SLASH.sub("", value)
        if value:
            normalized.append(value)
    return normalized


def rel_starts_with(relative_path: str, prefix: str) -> bool:
    """Check whether ``prefix`` matches ``relative_path`` on whole path segments."""
    return relative_path == prefix or relative_path.startswith(prefix + "/")


def is_directory(path: str | Path) -> bool:
    return os.path.isdir(path)


def walk_markdown_files(root: Path) -> list[tuple[Path, str]]:
    """Recursively list Markdown files under ``root``.

    Args:
        root: Absolute directory to scan

    Returns:
        ``(absolute_path, relative_posix_path)`` pairs in directory-walk order

    Raises:
        GenerationError: If a directory under ``root`` cannot be listed
    """
    def _raise_walk_error(error: OSError) -> None:
        msg = f"Failed to list rules directory {error.filename}: {error}"
        raise GenerationError(msg, details={"path": str(error.filename)}) from error

    results: list[tuple[Path, str]] = []
    for current, dirs, files in os.walk(root, onerror=_raise_walk_error):
        dirs.sort()
        for name in sorted(files):
            if not name.lower().endswith(".md"):
                continue
            absolute = Path(current) / name
            if not absolute.is_file():
                continue
            relative = to_posix(os.path.relpath(absolute, root))
            results.append((absolute, relative))
    return results
