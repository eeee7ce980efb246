"""Configuration loader with comment stripping and schema validation."""

from __future__ import annotations

import json
from importlib.resources import files
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import ValidationError

from .exceptions import ConfigError, ConfigValidationError
from .models import GenerationBlock

DEFAULT_CONFIG_NAME = "agents.config.json"


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments from JSON text.

    Comment markers inside string literals are kept. Removed comments are
    replaced by whitespace so that parser error positions stay meaningful.
    """
    out: list[str] = []
    i = 0
    length = len(text)
    in_string = False

    while i < length:
        char = text[i]

        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            end = length if end == -1 else end
            out.append(" " * (end - i))
            i = end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            end = length if end == -1 else end + 2
            out.append("".join(c if c in "\r\n" else " " for c in text[i:end]))
            i = end
        else:
            out.append(char)
            i += 1

    return "".join(out)


def _format_location(path: list[Any]) -> str:
    if not path:
        return "config"
    location = f"block[{path[0]}]"
    for part in path[1:]:
        location += f"[{part}]" if isinstance(part, int) else f".{part}"
    return location


class ConfigLoader:
    """Loads and validates generation blocks from a JSON configuration file."""

    def __init__(self, config_path: Path) -> None:
        """Initialize loader with the configuration file path.

        Args:
            config_path: Path to agents.config.json (comments allowed)
        """
        self.path = Path(config_path)
        self._schema: dict[str, Any] | None = None

    def _load_schema(self) -> dict[str, Any]:
        """Load and cache the bundled JSON schema."""
        if self._schema is None:
            resource = files("agentrules") / "schemas" / "config.schema.json"
            try:
                self._schema = json.loads(resource.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as e:
                msg = f"Failed to load config schema: {e}"
                raise ConfigError(msg) from e
        return self._schema

    def read_raw(self) -> Any:
        """Read the file and parse it as JSON with comments.

        Raises:
            ConfigError: If the file cannot be read or is not valid JSON
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            msg = f"Cannot read config file at {self.path}: {e}"
            raise ConfigError(msg) from e

        try:
            return json.loads(strip_json_comments(text))
        except json.JSONDecodeError as e:
            msg = f"Invalid JSON in {self.path}: {e}"
            raise ConfigError(msg) from e

    def validate(self, data: Any) -> list[GenerationBlock]:
        """Validate parsed JSON and build generation blocks.

        Raises:
            ConfigValidationError: If the data does not describe generation blocks
        """
        if not isinstance(data, list):
            msg = "Config must be a top-level array of generation blocks"
            raise ConfigValidationError(msg)

        try:
            jsonschema.validate(data, self._load_schema())
        except jsonschema.ValidationError as e:
            location = _format_location(list(e.absolute_path))
            msg = f"{location}: {e.message}"
            raise ConfigValidationError(
                msg,
                details={"path": list(e.absolute_path)},
            ) from e

        blocks: list[GenerationBlock] = []
        for index, raw_block in enumerate(data):
            try:
                blocks.append(GenerationBlock.model_validate(raw_block))
            except ValidationError as e:
                msg = f"block[{index}] is invalid: {e}"
                raise ConfigValidationError(msg, details={"block": index}) from e
        return blocks

    def load(self) -> list[GenerationBlock]:
        """Read, parse, and validate the configuration file.

        Returns:
            Generation blocks in declared order

        Raises:
            ConfigError: If the file cannot be read or parsed
            ConfigValidationError: If validation fails
        """
        return self.validate(self.read_raw())
