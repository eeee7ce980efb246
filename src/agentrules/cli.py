"""agentrules command-line interface."""

from __future__ import annotations

import re
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import DEFAULT_CONFIG_NAME, ConfigLoader
from .exceptions import AgentRulesError
from .generator import build_block_tree, generate_all, resolve_out_dir
from .models import GenerationBlock
from .paths import expand_home
from .renderer import render_tree
from .tree import count_tree

app = typer.Typer(
    name="agent-rules",
    help="Merge folders of Markdown rule snippets into generated agent instruction files",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def _get_version_string() -> str:
    """Get version string from package metadata or pyproject.toml."""
    try:
        return get_version("agentrules")
    except PackageNotFoundError:
        pass

    # Development checkouts that were never installed
    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        content = pyproject_path.read_text()
        match = re.search(r'version\s*=\s*["\']([^"\']+)["\']', content)
        if match:
            return f"{match.group(1)} (development)"

    return "unknown"


def version_callback(value: bool) -> None:
    """Callback for --version flag."""
    if value:
        console.print(f"agentrules version {_get_version_string()}")
        raise typer.Exit


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Merge folders of Markdown rule snippets into generated agent instruction files."""


def _dry_run(blocks: list[GenerationBlock], output_root: Path) -> None:
    table = Table(title="agentrules dry run")
    table.add_column("Title", style="cyan")
    table.add_column("Files", style="green")
    table.add_column("Sections", justify="right")
    table.add_column("Rules", justify="right")
    table.add_column("Bytes", justify="right")

    for block in blocks:
        tree = build_block_tree(block, err_console)
        sections, rules = count_tree(tree)
        markdown = render_tree(tree, block.title, block.max_heading_depth)
        out_dir = resolve_out_dir(block, output_root)
        targets = "\n".join(escape(str(out_dir / name)) for name in block.files) or "-"
        table.add_row(
            escape(block.title),
            targets,
            str(sections),
            str(rules),
            str(len(markdown.encode("utf-8"))),
        )

    console.print(table)


def generate(
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Config file path (defaults to ./{DEFAULT_CONFIG_NAME})",
    ),
    output_root: str | None = typer.Option(
        None,
        "--output-root",
        "-o",
        help="Directory that outDir values resolve against (defaults to cwd, ~ allowed)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be generated without writing files",
    ),
) -> None:
    """Generate rule documents for every block in the config file."""
    config_path = config or Path.cwd() / DEFAULT_CONFIG_NAME
    root = Path(expand_home(output_root)) if output_root else Path.cwd()

    try:
        blocks = ConfigLoader(config_path).load()

        if dry_run:
            _dry_run(blocks, root)
            return

        generate_all(blocks, root, console, err_console)
    except AgentRulesError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


app.command("generate")(generate)
app.command("rules:generate", hidden=True)(generate)


STARTER_CONFIG = """\
// agentrules configuration
// Each block renders one document and writes it to every file in "files".
// Sources in "rulesDir" are applied in order; later sources override earlier ones.
[
  {
    "title": "Project Rules",
    "outDir": ".",
    "files": ["AGENTS.md"],
    "rulesDir": [
      { "path": "rules", "includes": "*" }
    ]
    // "maxHeadingDepth": 4
  }
]
"""

STARTER_INDEX = """\
---
order: 0
---
Shared guidance for AI coding agents working in this repository.
"""

STARTER_RULE = """\
---
order: 1
---
Keep changes small and focused. Run the test suite before proposing a change.
"""


@app.command()
def init(
    path: Path = typer.Option(
        Path.cwd(),
        "--path",
        "-p",
        help="Directory to create the starter config and rules in",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Create a starter config file and a sample rules directory."""
    config_path = path / DEFAULT_CONFIG_NAME

    if config_path.exists() and not force:
        err_console.print(
            f"[yellow]Warning:[/yellow] Config exists at {escape(str(config_path))} (use --force to overwrite)",
        )
        raise typer.Exit(1)

    try:
        rules_dir = path / "rules" / "general"
        rules_dir.mkdir(parents=True, exist_ok=True)
        config_path.write_text(STARTER_CONFIG, encoding="utf-8")

        index_path = path / "rules" / "_index.md"
        if not index_path.exists():
            index_path.write_text(STARTER_INDEX, encoding="utf-8")
        rule_path = rules_dir / "small-changes.md"
        if not rule_path.exists():
            rule_path.write_text(STARTER_RULE, encoding="utf-8")
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Failed to initialize: {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print(f"[green]✓[/green] Initialized agentrules in {escape(str(path))}")
    console.print("Created files:")
    console.print(f"  • {DEFAULT_CONFIG_NAME}")
    console.print("  • rules/_index.md")
    console.print("  • rules/general/small-changes.md")
    console.print("\nNext step: run 'agent-rules generate'")


@app.command()
def version() -> None:
    """Show agentrules version information."""
    console.print(f"agentrules version {_get_version_string()}")


def main() -> None:
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
