"""Generation orchestrator: turn configured blocks into written documents."""

from __future__ import annotations

import os
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .exceptions import GenerationError
from .models import GenerationBlock, RulesTree
from .paths import is_directory, to_posix
from .renderer import render_tree
from .tree import append_directory_to_tree, ensure_node, normalize_rules_source


def _default_console() -> Console:
    return Console(stderr=True)


def build_block_tree(block: GenerationBlock, console: Console | None = None) -> RulesTree:
    """Merge every source of ``block`` into one tree, in declared order.

    Missing source directories (or source paths that are not directories)
    and an empty source list are reported as warnings on ``console``;
    neither stops generation.
    """
    console = console or _default_console()

    if not block.rules_dir:
        console.print(
            "[yellow]Warning:[/yellow] rulesDir is empty; "
            "no rules will be included for this block",
        )

    tree: RulesTree = {}
    for source in block.rules_dir:
        normalized = normalize_rules_source(source)
        if not is_directory(normalized.path_abs):
            console.print(
                "[yellow]Warning:[/yellow] rulesDir not found or not a directory: "
                f"{escape(str(normalized.path_abs))}",
            )
            continue
        append_directory_to_tree(tree, normalized)

    ensure_node(tree, "")
    return tree


def render_block(block: GenerationBlock, console: Console | None = None) -> str:
    """Build and render the document for ``block`` without writing it."""
    tree = build_block_tree(block, console)
    return render_tree(tree, block.title, block.max_heading_depth)


def resolve_out_dir(block: GenerationBlock, output_root: str | Path) -> Path:
    """Resolve the block's ``outDir`` against the output root."""
    root = Path(os.path.abspath(output_root))
    return Path(os.path.normpath(root / block.out_dir))


def generate_for_block(
    block: GenerationBlock,
    output_root: str | Path,
    console: Console | None = None,
    err_console: Console | None = None,
) -> list[Path]:
    """Render ``block`` once and write the result to each of its files.

    Args:
        block: Validated generation block
        output_root: Directory that relative ``outDir`` values resolve against
        console: Console for the per-file confirmations, defaults to stdout
        err_console: Console for warnings, defaults to stderr

    Returns:
        Paths written, in declared order

    Raises:
        GenerationError: If an output directory or file cannot be written
    """
    console = console or Console()
    markdown = render_block(block, err_console)

    out_dir = resolve_out_dir(block, output_root)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Failed to create output directory {out_dir}: {e}"
        raise GenerationError(msg, details={"path": str(out_dir)}) from e

    written: list[Path] = []
    for file_name in block.files:
        out_path = out_dir / file_name
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(markdown, encoding="utf-8")
        except OSError as e:
            msg = f"Failed to write {out_path}: {e}"
            raise GenerationError(msg, details={"path": str(out_path)}) from e

        written.append(out_path)
        console.print(f"[green]✓[/green] wrote {escape(to_posix(os.path.relpath(out_path)))}")

    return written


def generate_all(
    blocks: list[GenerationBlock],
    output_root: str | Path,
    console: Console | None = None,
    err_console: Console | None = None,
) -> list[Path]:
    """Generate every block in order; the first failure aborts the rest."""
    written: list[Path] = []
    for block in blocks:
        written.extend(generate_for_block(block, output_root, console, err_console))
    return written
