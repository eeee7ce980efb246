"""agentrules: merge folders of Markdown rule snippets into agent instruction files."""

__version__ = "0.1.0"
__author__ = "agentrules Contributors"
__description__ = "Merge folders of Markdown rule snippets into agent instruction files"

from .config import ConfigLoader
from .generator import generate_all, generate_for_block
from .models import GenerationBlock, RulesSource
from .renderer import render_tree
from .tree import build_tree

__all__ = [
    "ConfigLoader",
    "GenerationBlock",
    "RulesSource",
    "build_tree",
    "generate_all",
    "generate_for_block",
    "render_tree",
]
