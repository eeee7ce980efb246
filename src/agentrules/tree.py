"""Build, merge, and sort the rule tree from one or more rule sources.

The tree is a flat mapping from a folder's posix path (relative to the
source roots) to its ``SectionNode``. Parents hold their children by
segment name; children never point back at their parent, so ancestors are
found by trimming the path and looking it up again.
"""

from __future__ import annotations

import os
from functools import cmp_to_key
from pathlib import Path

from .frontmatter import read_rule_file
from .models import (
    INCLUDE_ALL,
    NormalizedRulesSource,
    RuleFile,
    RulesSource,
    RulesTree,
    SectionNode,
)
from .paths import (
    expand_home,
    is_directory,
    normalize_prefixes,
    title_case,
    to_posix,
    walk_markdown_files,
)

INDEX_FILE_NAME = "_index.md"


def normalize_rules_source(source: RulesSource) -> NormalizedRulesSource:
    """Resolve a declared source into an absolute path and canonical prefixes."""
    expanded = expand_home(source.path)
    path_abs = Path(expanded) if os.path.isabs(expanded) else Path(os.path.abspath(expanded))

    includes_raw = [value.strip() for value in source.includes]
    includes_all = len(includes_raw) == 1 and includes_raw[0] == INCLUDE_ALL
    includes = [] if includes_all else normalize_prefixes(includes_raw)
    excludes = normalize_prefixes([value.strip() for value in source.excludes])

    return NormalizedRulesSource(
        path_abs=path_abs,
        includes_all=includes_all,
        includes=includes,
        excludes=excludes,
    )


def ensure_node(tree: RulesTree, folder_relative: str) -> SectionNode:
    """Return the node for ``folder_relative``, creating it and any missing ancestors."""
    posix_relative = to_posix(folder_relative) if folder_relative else ""
    existing = tree.get(posix_relative)
    if existing is not None:
        return existing

    segments = posix_relative.split("/") if posix_relative else []
    node = SectionNode(
        name=title_case(segments[-1]) if segments else "",
        path=posix_relative,
        depth=len(segments),
    )
    tree[posix_relative] = node

    if segments:
        parent = ensure_node(tree, "/".join(segments[:-1]))
        parent.children[segments[-1]] = node
    return node


def append_directory_to_tree(tree: RulesTree, source: NormalizedRulesSource) -> None:
    """Merge every selected Markdown file of ``source`` into ``tree``.

    A file at a relative path already supplied by an earlier source replaces
    that earlier entry, and a disabled file removes it.
    """
    for file_abs, relative in walk_markdown_files(source.path_abs):
        if not source.matches(relative):
            continue

        segments = relative.split("/")
        file_name = segments.pop()
        node = ensure_node(tree, "/".join(segments))

        front_matter, body = read_rule_file(file_abs)
        body = body.strip()
        # Strip only the extension; the name itself keeps its case.
        base_name = file_name[:-3]

        if file_name.lower() == INDEX_FILE_NAME:
            if front_matter.enabled:
                node.index_content = body
                node.section_order = front_matter.order
            else:
                node.index_content = None
                node.section_order = None
            continue

        node.rules = [rule for rule in node.rules if rule.file_name != base_name]
        if not front_matter.enabled:
            continue

        node.rules.append(
            RuleFile(
                title=title_case(base_name),
                file_name=base_name,
                order=front_matter.order if front_matter.order is not None else 0,
                content=body,
            ),
        )


def build_tree(*sources: RulesSource) -> RulesTree:
    """Build a fresh tree from the given sources, applied in order.

    Sources whose directory is missing are skipped silently here; use
    ``generator.build_block_tree`` to get a warning for them.
    """
    tree: RulesTree = {}
    for source in sources:
        normalized = normalize_rules_source(source)
        if not is_directory(normalized.path_abs):
            continue
        append_directory_to_tree(tree, normalized)
    ensure_node(tree, "")
    return tree


def _compare_children(a: tuple[str, SectionNode], b: tuple[str, SectionNode]) -> int:
    a_name, a_node = a
    b_name, b_node = b
    a_order = a_node.section_order
    b_order = b_node.section_order

    if a_order is not None and b_order is not None:
        if a_order != b_order:
            return -1 if a_order < b_order else 1
    elif a_order is not None:
        return -1
    elif b_order is not None:
        return 1
    return (a_name > b_name) - (a_name < b_name)


def sort_tree(node: SectionNode) -> None:
    """Recursively order rules by (order, file name) and children by section order, then name."""
    node.rules.sort(key=lambda rule: (rule.order, rule.file_name))
    node.children = dict(sorted(node.children.items(), key=cmp_to_key(_compare_children)))
    for child in node.children.values():
        sort_tree(child)


def count_tree(tree: RulesTree) -> tuple[int, int]:
    """Count sections (excluding the root) and rule files in ``tree``."""
    sections = sum(1 for path in tree if path)
    rules = sum(len(node.rules) for node in tree.values())
    return sections, rules
