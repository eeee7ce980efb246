"""Custom exceptions for agentrules."""

from typing import Any


class AgentRulesError(Exception):
    """Base exception for all agentrules errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}


class ConfigError(AgentRulesError):
    """Raised when the configuration file cannot be read or parsed."""


class ConfigValidationError(AgentRulesError):
    """Raised when the configuration has an invalid shape."""


class FrontMatterError(AgentRulesError):
    """Raised when a rule file carries a malformed front-matter block."""


class GenerationError(AgentRulesError):
    """Raised when a rendered document cannot be written."""
