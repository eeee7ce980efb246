"""Render a merged rule tree into a single Markdown document."""

from __future__ import annotations

from .models import (
    DEFAULT_MAX_HEADING_DEPTH,
    MAX_HEADING_DEPTH,
    MIN_HEADING_DEPTH,
    RuleFile,
    RulesTree,
    SectionNode,
)
from .paths import title_from_segments
from .tree import sort_tree

GENERATED_BANNER = "<!-- Generated by agentrules – do not edit directly. -->"


def clamp_heading_depth(max_heading_depth: int | None) -> int:
    """Apply the default heading depth and clamp it to H2..H6."""
    if max_heading_depth is None:
        max_heading_depth = DEFAULT_MAX_HEADING_DEPTH
    return min(MAX_HEADING_DEPTH, max(MIN_HEADING_DEPTH, int(max_heading_depth)))


def _has_text(value: str | None) -> bool:
    return bool(value and value.strip())


def _append_rule(lines: list[str], rule: RuleFile, label: str = "") -> None:
    title = f"{label} — {rule.title}" if label else rule.title
    lines.extend([f"=== {title} ===", ""])
    if rule.content:
        lines.append(rule.content)
    lines.append("")


def render_tree(
    tree: RulesTree,
    title: str,
    max_heading_depth: int | None = None,
) -> str:
    """Render ``tree`` as Markdown.

    Folders become headings one level below their depth (``## Top``,
    ``### Nested`` and so on). Folders that would need a heading deeper than
    ``max_heading_depth`` get none; instead their rule titles are prefixed
    with the title-cased path segments from the cap onwards, and their index
    text is introduced by that label in parentheses.

    Args:
        tree: Merged rule tree keyed by relative folder path
        title: Document title, emitted as the H1
        max_heading_depth: Deepest heading level to emit (default 4, clamped to 2..6)

    Returns:
        The rendered document, ending in exactly one newline
    """
    depth_cap = clamp_heading_depth(max_heading_depth)
    root = tree.get("") or SectionNode(name="", path="", depth=0)
    sort_tree(root)

    lines = [GENERATED_BANNER, "", f"# {title}", ""]

    if _has_text(root.index_content):
        lines.extend([root.index_content, ""])

    for rule in root.rules:
        _append_rule(lines, rule)

    # Index into path segments of the first folder rendered without a heading.
    cap_segment_index = depth_cap - 1

    def render_node(node: SectionNode) -> None:
        heading_level = node.depth + 1
        beyond_cap = heading_level > depth_cap
        label = ""
        if beyond_cap:
            label = title_from_segments(node.path.split("/")[cap_segment_index:])

        if not beyond_cap:
            lines.extend([f"{'#' * heading_level} {node.name}", ""])
            if _has_text(node.index_content):
                lines.extend([node.index_content, ""])
        elif _has_text(node.index_content):
            if label:
                lines.append(f"({label})")
            lines.extend([node.index_content, ""])

        for rule in node.rules:
            _append_rule(lines, rule, label)

        for child in node.children.values():
            render_node(child)

    for child in root.children.values():
        render_node(child)

    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines) + "\n"
