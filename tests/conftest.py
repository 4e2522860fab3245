"""Common test fixtures for oxidoc."""

from collections.abc import Callable
from pathlib import Path

import pytest

from oxidoc.store import DocStore

CrateFactory = Callable[..., Path]


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def store(cache_root: Path) -> DocStore:
    return DocStore(cache_root)


@pytest.fixture
def make_crate(tmp_path: Path) -> CrateFactory:
    """Write a package root with a Cargo.toml and the given source files."""

    def _make(
        name: str = "demo",
        version: str = "0.1.0",
        files: dict[str, str] | None = None,
        root: Path | None = None,
    ) -> Path:
        package_root = root or tmp_path / "crates" / f"{name}-{version}"
        package_root.mkdir(parents=True, exist_ok=True)
        (package_root / "Cargo.toml").write_text(f'[package]\nname = "{name}"\nversion = "{version}"\nedition = "2021"\n')
        for relative, content in (files or {}).items():
            path = package_root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return package_root

    return _make
