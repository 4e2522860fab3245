"""oxidoc - command line lookup of Rust function documentation.

oxidoc parses a Rust package's sources, records every free function's
signature and qualifiers in a per-package cache, and answers name queries
against all cached packages.

Quick Start:
    >>> from pathlib import Path
    >>> from oxidoc import DocStore, Driver, Generator
    >>>
    >>> store = DocStore(Path("~/.oxidoc").expanduser())
    >>> Generator(store).generate(Path("path/to/crate"))
    >>> for match in Driver(store).resolve(["from_str"]):
    ...     print(match.render())

Environment Variables:
    - OXIDOC_CACHE_ROOT: cache location (default ~/.oxidoc)
    - OXIDOC_CARGO_HOME: Cargo home scanned by ``oxidoc -g all``
    - OXIDOC_LOG_LEVEL: log level for the oxidoc loggers
"""

__version__ = "0.1.0"

from .driver import Driver, QueryMatch
from .exceptions import (
    CacheIOError,
    ConfigError,
    Diagnostic,
    EntryPointError,
    GenerateAllError,
    HomeDirUnavailableError,
    OxidocError,
    ParseError,
    RegistryError,
    UnsupportedModifierError,
)
from .extractor import DeclarationKind, extract_functions
from .generator import GenerationReport, Generator, PackageFailure
from .logging import LoggingConfig, get_logger, setup_logging
from .manifest import read_manifest
from .models import (
    Abi,
    Constness,
    FunctionDoc,
    MatchPolicy,
    PackageIdentity,
    Unsafety,
    Visibility,
)
from .store import DocStore

__all__ = [
    "Abi",
    "CacheIOError",
    "ConfigError",
    "Constness",
    "DeclarationKind",
    "Diagnostic",
    "DocStore",
    "Driver",
    "EntryPointError",
    "FunctionDoc",
    "GenerateAllError",
    "GenerationReport",
    "Generator",
    "HomeDirUnavailableError",
    "LoggingConfig",
    "MatchPolicy",
    "OxidocError",
    "PackageFailure",
    "PackageIdentity",
    "ParseError",
    "QueryMatch",
    "RegistryError",
    "Unsafety",
    "UnsupportedModifierError",
    "Visibility",
    "extract_functions",
    "get_logger",
    "read_manifest",
    "setup_logging",
]
