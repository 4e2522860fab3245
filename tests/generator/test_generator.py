"""Tests for single-package and fan-out documentation generation."""

from pathlib import Path
from unittest.mock import patch

import pytest

from oxidoc.exceptions import ConfigError, EntryPointError, GenerateAllError, ParseError, RegistryError
from oxidoc.extractor import extract_functions
from oxidoc.generator import (
    ENTRY_POINTS,
    GenerationReport,
    Generator,
    discover_package_roots,
    find_entry_point,
)
from oxidoc.models import PackageIdentity
from oxidoc.store import DocStore
from oxidoc.syntax import RustParser

LIB_SOURCE = """\
pub fn parse(input: &str) -> Option<u32> {
    fn digit(c: char) -> bool { c.is_ascii_digit() }
    None
}

pub mod fmt {
    pub unsafe fn raw() {}
}
"""

BROKEN_SOURCE = "pub fn broken( {\n"


class TestGenerate:
    def test_cache_matches_direct_extraction(self, make_crate, store: DocStore):
        root = make_crate("demo-lib", "1.2.3", {"src/lib.rs": LIB_SOURCE})

        identity = Generator(store).generate(root)

        expected = extract_functions(RustParser().parse(root / "src" / "lib.rs"), "demo-lib")
        assert identity == PackageIdentity(name="demo-lib", version="1.2.3")
        assert store.get_all() == {identity: expected}
        assert [doc.qualified_name for doc in expected] == [
            "demo_lib::parse",
            "demo_lib::parse::digit",
            "demo_lib::fmt::raw",
        ]

    def test_regeneration_replaces_cache(self, make_crate, store: DocStore):
        root = make_crate("demo", "0.1.0", {"src/lib.rs": LIB_SOURCE})
        generator = Generator(store)
        generator.generate(root)

        (root / "src" / "lib.rs").write_text("pub fn only() {}\n")
        identity = generator.generate(root)

        assert [doc.name for doc in store.get_all()[identity]] == ["only"]

    def test_prefers_lib_over_main(self, make_crate, store: DocStore):
        root = make_crate(
            "both",
            "1.0.0",
            {"src/lib.rs": "pub fn from_lib() {}\n", "src/main.rs": "fn from_main() {}\n"},
        )
        identity = Generator(store).generate(root)
        assert [doc.name for doc in store.get_all()[identity]] == ["from_lib"]

    def test_falls_back_to_main(self, make_crate, store: DocStore):
        root = make_crate("tool", "1.0.0", {"src/main.rs": "fn main() {}\n"})
        identity = Generator(store).generate(root)
        assert [doc.name for doc in store.get_all()[identity]] == ["main"]

    def test_missing_entry_point_writes_nothing(self, make_crate, store: DocStore):
        root = make_crate("empty", "1.0.0")
        with pytest.raises(EntryPointError):
            Generator(store).generate(root)
        assert store.get_all() == {}

    def test_missing_manifest(self, tmp_path: Path, store: DocStore):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "lib.rs").write_text("pub fn f() {}\n")
        with pytest.raises(ConfigError):
            Generator(store).generate(tmp_path)

    def test_parse_failure_writes_nothing(self, make_crate, store: DocStore):
        root = make_crate("broken", "1.0.0", {"src/lib.rs": BROKEN_SOURCE})
        with pytest.raises(ParseError):
            Generator(store).generate(root)
        assert not store.path_for(PackageIdentity(name="broken", version="1.0.0")).exists()

    def test_parse_failure_keeps_previous_cache(self, make_crate, store: DocStore):
        root = make_crate("demo", "0.1.0", {"src/lib.rs": "pub fn kept() {}\n"})
        generator = Generator(store)
        identity = generator.generate(root)

        (root / "src" / "lib.rs").write_text(BROKEN_SOURCE)
        with pytest.raises(ParseError):
            generator.generate(root)

        assert [doc.name for doc in store.get_all()[identity]] == ["kept"]

    def test_uses_injected_parser(self, make_crate, store: DocStore):
        root = make_crate("demo", "0.1.0", {"src/lib.rs": "pub fn f() {}\n"})

        class RecordingParser:
            def __init__(self) -> None:
                self.paths: list[Path] = []
                self._inner = RustParser()

            def parse(self, path: Path):
                self.paths.append(path)
                return self._inner.parse(path)

        parser = RecordingParser()
        Generator(store, parser=parser).generate(root)
        assert parser.paths == [root / "src" / "lib.rs"]


class TestGenerateAll:
    def test_one_failure_does_not_stop_others(self, make_crate, store: DocStore):
        good = make_crate("good", "1.0.0", {"src/lib.rs": "pub fn ok() {}\n"})
        bad = make_crate("bad", "2.0.0", {"src/lib.rs": BROKEN_SOURCE})

        with patch("oxidoc.generator.logger") as mock_logger:
            report = Generator(store).generate_all([good, bad])

        assert isinstance(report, GenerationReport)
        assert report.generated == (PackageIdentity(name="good", version="1.0.0"),)
        assert [failure.package_root for failure in report.failures] == [bad]
        assert isinstance(report.failures[0].error, ParseError)
        assert report.attempted == 2

        assert set(store.get_all()) == {PackageIdentity(name="good", version="1.0.0")}
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[0][1] == bad

    def test_failure_order_does_not_matter(self, make_crate, store: DocStore):
        bad = make_crate("bad", "2.0.0")
        good = make_crate("good", "1.0.0", {"src/lib.rs": "pub fn ok() {}\n"})
        report = Generator(store).generate_all([bad, good])
        assert len(report.generated) == 1
        assert isinstance(report.failures[0].error, EntryPointError)

    def test_undecodable_manifest_is_skipped(self, make_crate, store: DocStore):
        bad = make_crate("bad", "1.0.0", {"src/lib.rs": "pub fn f() {}\n"})
        (bad / "Cargo.toml").write_bytes(b'[package]\nname = "\xff"\nversion = "1.0.0"\n')
        good = make_crate("good", "1.0.0", {"src/lib.rs": "pub fn ok() {}\n"})

        report = Generator(store).generate_all([bad, good])

        assert report.generated == (PackageIdentity(name="good", version="1.0.0"),)
        assert isinstance(report.failures[0].error, ConfigError)
        assert set(store.get_all()) == {PackageIdentity(name="good", version="1.0.0")}

    def test_all_failures_raise(self, make_crate, store: DocStore):
        first = make_crate("first", "1.0.0", {"src/lib.rs": BROKEN_SOURCE})
        second = make_crate("second", "1.0.0")

        with pytest.raises(GenerateAllError) as exc_info:
            Generator(store).generate_all([first, second])

        error = exc_info.value
        assert [failure.package_root for failure in error.failures] == [first, second]
        assert isinstance(error.__cause__, EntryPointError)
        assert store.get_all() == {}

    def test_no_roots_is_empty_success(self, store: DocStore):
        report = Generator(store).generate_all([])
        assert report.generated == ()
        assert report.failures == ()


class TestDiscovery:
    def test_find_entry_point_order(self, tmp_path: Path):
        assert ENTRY_POINTS == ("src/lib.rs", "src/main.rs")
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "main.rs").write_text("")
        assert find_entry_point(tmp_path) == tmp_path / "src" / "main.rs"
        (tmp_path / "src" / "lib.rs").write_text("")
        assert find_entry_point(tmp_path) == tmp_path / "src" / "lib.rs"

    def test_discover_registry_packages(self, tmp_path: Path, make_crate):
        index = tmp_path / "cargo" / "registry" / "src" / "index.crates.io-6f17d22bba15001f"
        beta = make_crate("beta", "0.2.0", root=index / "beta-0.2.0")
        alpha = make_crate("alpha", "1.0.0", root=index / "alpha-1.0.0")
        (index / "not-a-package").mkdir()

        assert discover_package_roots(tmp_path / "cargo") == [alpha, beta]

    def test_discover_without_registry(self, tmp_path: Path):
        assert discover_package_roots(tmp_path / "nowhere") == []

    def test_unreadable_index_is_skipped(self, tmp_path: Path, make_crate, monkeypatch: pytest.MonkeyPatch):
        registry_src = tmp_path / "cargo" / "registry" / "src"
        locked = registry_src / "locked-index"
        locked.mkdir(parents=True)
        package = make_crate("alpha", "1.0.0", root=registry_src / "open-index" / "alpha-1.0.0")

        real_iterdir = Path.iterdir

        def iterdir(self: Path):
            if self == locked:
                raise PermissionError(13, "Permission denied", str(self))
            return real_iterdir(self)

        monkeypatch.setattr(Path, "iterdir", iterdir)
        with patch("oxidoc.generator.logger") as mock_logger:
            roots = discover_package_roots(tmp_path / "cargo")

        assert roots == [package]
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[0][1] == locked

    def test_unreadable_registry_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        registry_src = tmp_path / "cargo" / "registry" / "src"
        registry_src.mkdir(parents=True)

        def iterdir(self: Path):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "iterdir", iterdir)
        with pytest.raises(RegistryError) as exc_info:
            discover_package_roots(tmp_path / "cargo")
        assert isinstance(exc_info.value.__cause__, PermissionError)
