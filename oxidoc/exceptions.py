"""Exception hierarchy for oxidoc.

This module defines the exception hierarchy used throughout oxidoc.
All exceptions inherit from OxidocError, providing a consistent error handling interface.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Diagnostic:
    """A single problem reported by the parser."""

    path: Path
    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}: {self.message}"


class OxidocError(Exception):
    """Base exception for all oxidoc errors."""


class ConfigError(OxidocError):
    """Raised when a package manifest is missing, malformed, or lacks a required field."""


class EntryPointError(OxidocError):
    """Raised when no conventional entry source file exists in a package root."""


class ParseError(OxidocError):
    """Raised when a source file fails to parse or parses with diagnosed errors."""

    def __init__(self, message: str, diagnostics: Sequence[Diagnostic] = ()) -> None:
        super().__init__(message)
        self.diagnostics = tuple(diagnostics)


class UnsupportedModifierError(OxidocError):
    """Raised when a declaration modifier has no mapping in the closed enumerations."""


class CacheIOError(OxidocError):
    """Raised when a documentation cache cannot be read or written."""


class RegistryError(OxidocError):
    """Raised when the Cargo registry source directory cannot be listed."""


class HomeDirUnavailableError(OxidocError):
    """Raised when the user's home directory cannot be determined."""


class GenerateAllError(OxidocError):
    """Raised when every package in a generate-all run failed."""

    def __init__(self, message: str, failures: Sequence[object] = ()) -> None:
        super().__init__(message)
        self.failures = tuple(failures)
