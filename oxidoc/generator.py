"""Documentation generation for one package or many.

``generate`` runs manifest -> entry file -> parse -> extract -> store for a
single package root and writes nothing unless every step succeeds.
``generate_all`` fans out over package roots one at a time, logging and
collecting per-package failures; it fails only when every package failed.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from oxidoc.exceptions import EntryPointError, GenerateAllError, OxidocError, RegistryError
from oxidoc.extractor import extract_functions
from oxidoc.logging import get_logger
from oxidoc.manifest import MANIFEST_NAME, read_manifest
from oxidoc.models import PackageIdentity
from oxidoc.store import DocStore
from oxidoc.syntax.rust import RustParser
from oxidoc.syntax.tree import SyntaxParser

logger = get_logger(__name__)

# Probed in order: library target first, then binary target.
ENTRY_POINTS: tuple[str, ...] = ("src/lib.rs", "src/main.rs")


@dataclass(frozen=True)
class PackageFailure:
    """One package that could not be documented during a fan-out run."""

    package_root: Path
    error: OxidocError

    def __str__(self) -> str:
        return f"{self.package_root}: {self.error}"


@dataclass(frozen=True)
class GenerationReport:
    """Outcome of generate_all when at least one package succeeded (or none were given)."""

    generated: tuple[PackageIdentity, ...]
    failures: tuple[PackageFailure, ...]

    @property
    def attempted(self) -> int:
        return len(self.generated) + len(self.failures)


def find_entry_point(package_root: Path) -> Path:
    """Return the first conventional entry file that exists under ``package_root``."""
    for relative in ENTRY_POINTS:
        candidate = package_root / relative
        if candidate.is_file():
            return candidate
    raise EntryPointError(f"No entry point in {package_root}: expected one of {', '.join(ENTRY_POINTS)}")


def discover_package_roots(cargo_home: Path) -> list[Path]:
    """List unpacked registry packages: ``{cargo_home}/registry/src/{index}/{package}/``.

    An index directory that cannot be read is logged and skipped.

    Raises:
        RegistryError: the registry source directory exists but cannot be listed.
    """
    registry_src = cargo_home / "registry" / "src"
    if not registry_src.is_dir():
        logger.warning("No Cargo registry sources at %s", registry_src)
        return []
    try:
        index_dirs = sorted(p for p in registry_src.iterdir() if p.is_dir())
    except OSError as e:
        raise RegistryError(f"Failed to list Cargo registry sources {registry_src}") from e

    roots: list[Path] = []
    for index_dir in index_dirs:
        try:
            found = [p for p in sorted(index_dir.iterdir()) if (p / MANIFEST_NAME).is_file()]
        except OSError as e:
            logger.warning("Skipping registry index %s: %s", index_dir, e)
            continue
        roots.extend(found)
    logger.debug("Discovered %d packages under %s", len(roots), registry_src)
    return roots


class Generator:
    """Builds documentation caches from package source trees."""

    def __init__(self, store: DocStore, parser: SyntaxParser | None = None) -> None:
        self._store = store
        self._parser = parser or RustParser()

    def generate(self, package_root: Path) -> PackageIdentity:
        """Document one package and replace its cache.

        Raises:
            ConfigError: the manifest is missing or malformed.
            EntryPointError: neither src/lib.rs nor src/main.rs exists.
            ParseError: the sources do not parse cleanly.
            UnsupportedModifierError: a declaration modifier has no mapping.
            CacheIOError: the cache could not be written.
        """
        identity = read_manifest(package_root)
        entry = find_entry_point(package_root)
        logger.info("Generating documentation for %s from %s", identity, entry)
        tree = self._parser.parse(entry)
        docs = extract_functions(tree, identity.name)
        self._store.put(identity, docs)
        return identity

    def generate_all(self, package_roots: Iterable[Path]) -> GenerationReport:
        """Document every package root, continuing past individual failures.

        Raises:
            GenerateAllError: every attempted package failed.
        """
        generated: list[PackageIdentity] = []
        failures: list[PackageFailure] = []
        for package_root in package_roots:
            try:
                generated.append(self.generate(package_root))
            except OxidocError as e:
                logger.error("Failed to generate documentation for %s: %s", package_root, e)
                failures.append(PackageFailure(package_root, e))

        if failures and not generated:
            raise GenerateAllError(
                f"Documentation generation failed for all {len(failures)} packages",
                failures,
            ) from failures[-1].error

        if failures:
            logger.warning("Generated documentation for %d packages; %d failed", len(generated), len(failures))
        elif generated:
            logger.info("Generated documentation for %d packages", len(generated))
        else:
            logger.warning("No packages to generate documentation for")
        return GenerationReport(generated=tuple(generated), failures=tuple(failures))
