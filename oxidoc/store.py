"""Filesystem-backed documentation cache, one file per package.

Layout:
    {cache_root}/{key}/{key}.json   <- ordered FunctionDoc array

``key`` is ``{name}-{version}`` with both parts percent-encoded. The version
part also encodes ``-``, so the last raw ``-`` in a key always separates name
from version and the key maps back to exactly one PackageIdentity.

Writes go to a temporary file in the package directory and are moved into
place with ``os.replace``; readers never see a half-written cache.
"""

import contextlib
import os
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path
from urllib.parse import quote, unquote

from pydantic import TypeAdapter, ValidationError

from oxidoc.exceptions import CacheIOError
from oxidoc.logging import get_logger
from oxidoc.models import FunctionDoc, PackageIdentity

logger = get_logger(__name__)

CACHE_SUFFIX = ".json"

_DOCS_ADAPTER: TypeAdapter[list[FunctionDoc]] = TypeAdapter(list[FunctionDoc])


def cache_key(identity: PackageIdentity) -> str:
    """Directory and file stem for a package: ``{name}-{version}``, escaped."""
    name = quote(identity.name, safe="")
    # quote() never escapes "-"; the version must not contain a raw one.
    version = quote(identity.version, safe="").replace("-", "%2D")
    return f"{name}-{version}"


def decode_cache_key(key: str) -> PackageIdentity | None:
    """Inverse of cache_key. Returns None for names cache_key could not have produced."""
    name_part, sep, version_part = key.rpartition("-")
    if not sep or not name_part or not version_part:
        return None
    identity = PackageIdentity(name=unquote(name_part), version=unquote(version_part))
    if cache_key(identity) != key:
        return None
    return identity


class DocStore:
    """Reads and writes per-package documentation caches under one root."""

    def __init__(self, cache_root: Path) -> None:
        self._cache_root = cache_root

    @property
    def cache_root(self) -> Path:
        return self._cache_root

    def path_for(self, identity: PackageIdentity) -> Path:
        key = cache_key(identity)
        return self._cache_root / key / f"{key}{CACHE_SUFFIX}"

    def put(self, identity: PackageIdentity, docs: Sequence[FunctionDoc]) -> Path:
        """Replace the cache for ``identity`` with ``docs``. Returns the cache file path."""
        path = self.path_for(identity)
        payload = _DOCS_ADAPTER.dump_json(list(docs), indent=2, by_alias=True) + b"\n"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            _atomic_write(path, payload)
        except OSError as e:
            raise CacheIOError(f"Failed to write documentation cache {path}") from e
        logger.info("Wrote %d functions for %s to %s", len(docs), identity, path)
        return path

    def get_all(self) -> dict[PackageIdentity, list[FunctionDoc]]:
        """Load every readable package cache under the root.

        Unrecognized directories and unreadable or corrupt cache files are
        logged and left out. A missing root means nothing has been generated.

        Raises:
            CacheIOError: the root exists but cannot be listed.
        """
        if not self._cache_root.exists():
            logger.debug("Cache root %s does not exist yet", self._cache_root)
            return {}
        try:
            entries = sorted(self._cache_root.iterdir())
        except OSError as e:
            raise CacheIOError(f"Failed to list documentation cache root {self._cache_root}") from e

        installed: dict[PackageIdentity, list[FunctionDoc]] = {}
        for entry in entries:
            if not entry.is_dir():
                continue
            identity = decode_cache_key(entry.name)
            if identity is None:
                logger.warning("Skipping %s: not a documentation cache directory", entry)
                continue
            docs = self._read(entry / f"{entry.name}{CACHE_SUFFIX}")
            if docs is not None:
                installed[identity] = docs
        return installed

    def remove(self, identity: PackageIdentity) -> bool:
        """Delete the cache directory for ``identity``. Returns False if there was none."""
        package_dir = self.path_for(identity).parent
        if not package_dir.exists():
            return False
        try:
            shutil.rmtree(package_dir)
        except OSError as e:
            raise CacheIOError(f"Failed to remove documentation cache {package_dir}") from e
        logger.info("Removed documentation cache for %s", identity)
        return True

    @staticmethod
    def _read(path: Path) -> list[FunctionDoc] | None:
        """Read and validate one cache file, returning None on any error."""
        try:
            return _DOCS_ADAPTER.validate_json(path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning("Failed to read documentation cache %s: %s", path, e)
            return None


def _atomic_write(path: Path, data: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise
