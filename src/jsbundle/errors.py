"""Error handling framework for jsbundle."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ExitCode(IntEnum):
    """jsbundle CLI exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1  # Bad config, template or layout (user fixable)
    PARSE_ERROR = 2  # Source file is not valid JavaScript
    CONVENTION_ERROR = 3  # Import/export shape does not follow the convention
    CYCLE_ERROR = 4  # Circular dependency between modules
    FATAL_ERROR = 5  # Unexpected crash


class BundleError(Exception):
    """Base exception for jsbundle errors."""

    exit_code: ExitCode = ExitCode.FATAL_ERROR

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for JSON output."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "exit_code": self.exit_code,
            **self.context,
        }


class ConfigError(BundleError):
    """Configuration-related errors."""

    exit_code = ExitCode.CONFIG_ERROR


class TemplateError(ConfigError):
    """Template cannot be read or has no injection marker."""


class ParseError(BundleError):
    """File parsing errors."""

    exit_code = ExitCode.PARSE_ERROR

    def __init__(self, message: str, file_path: str, line: int | None = None, **context: Any):
        super().__init__(message, file_path=file_path, line=line, **context)
        self.file_path = file_path
        self.line = line


class ConventionViolation(BundleError):
    """A module's import block or export statement has the wrong shape."""

    exit_code = ExitCode.CONVENTION_ERROR

    def __init__(
        self,
        message: str,
        file_path: str,
        line: int | None = None,
        construct: str | None = None,
        **context: Any,
    ):
        super().__init__(message, file_path=file_path, line=line, construct=construct, **context)
        self.file_path = file_path
        self.line = line
        self.construct = construct


class UnsortedImports(ConventionViolation):
    """Import declarations are not sorted by bound name."""


class NamingMismatch(ConventionViolation):
    """Bound name does not match the name derived from the require path."""


class CyclicDependency(BundleError):
    """Modules depend on each other in a cycle."""

    exit_code = ExitCode.CYCLE_ERROR

    def __init__(self, message: str, cycle: list[str], **context: Any):
        super().__init__(message, cycle=cycle, **context)
        self.cycle = cycle
