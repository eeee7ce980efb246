"""Parse the optional YAML front-matter block at the top of a rule file."""

from __future__ import annotations

import re
from pathlib import Path

import yaml

from .exceptions import FrontMatterError, GenerationError
from .models import FrontMatter

_FRONT_MATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def _is_number(value: object) -> bool:
    # bool is an int subclass; ``order: true`` is not an order.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_front_matter(text: str) -> tuple[FrontMatter, str]:
    """Split raw file text into front matter and body.

    Args:
        text: Full file contents

    Returns:
        Parsed front matter and the remaining body text (untrimmed)

    Raises:
        FrontMatterError: If the metadata block is not valid YAML
    """
    text = text.removeprefix("\ufeff")
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return FrontMatter(), text

    try:
        raw = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        msg = f"Invalid front matter: {e}"
        raise FrontMatterError(msg) from e

    if not isinstance(raw, dict):
        raw = {}

    order = raw.get("order")
    front_matter = FrontMatter(
        enabled=raw.get("enabled") is not False,
        order=order if _is_number(order) else None,
    )
    return front_matter, text[match.end():]


def read_rule_file(path: Path) -> tuple[FrontMatter, str]:
    """Read a rule file and parse its front matter."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read rule file {path}: {e}"
        raise GenerationError(msg, details={"path": str(path)}) from e

    try:
        return parse_front_matter(text)
    except FrontMatterError as e:
        raise FrontMatterError(str(e), details={"path": str(path)}) from e
