"""Package identity from a Cargo manifest."""

import tomllib
from pathlib import Path

from oxidoc.exceptions import ConfigError
from oxidoc.models import PackageIdentity

MANIFEST_NAME = "Cargo.toml"


def read_manifest(package_root: Path) -> PackageIdentity:
    """Read ``package.name`` and ``package.version`` from ``<package_root>/Cargo.toml``.

    Everything else in the manifest is ignored. Workspace-inherited fields
    (``version.workspace = true``) are not strings and are rejected.
    """
    manifest_path = package_root / MANIFEST_NAME
    try:
        with open(manifest_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"No {MANIFEST_NAME} found in {package_root}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {manifest_path}") from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"{manifest_path} is not valid UTF-8 TOML") from e

    package = data.get("package")
    if not isinstance(package, dict):
        raise ConfigError(f"{manifest_path} has no [package] table")

    return PackageIdentity(
        name=_required_string(package, "name", manifest_path),
        version=_required_string(package, "version", manifest_path),
    )


def _required_string(table: dict[str, object], key: str, manifest_path: Path) -> str:
    value = table.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{manifest_path}: package.{key} must be a non-empty string")
    return value
