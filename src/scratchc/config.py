"""TOML config loading for scratch.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "scratch.toml"


@dataclass
class PackageConfig:
    name: str = "untitled"
    version: str = "0.0.0"
    authors: list[str] = field(default_factory=list)
    license: str = ""


@dataclass
class BuildConfig:
    src_dir: str = "src"


@dataclass
class ScratchConfig:
    package: PackageConfig = field(default_factory=PackageConfig)
    build: BuildConfig = field(default_factory=BuildConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find scratch.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> ScratchConfig:
    """Parse a scratch.toml file into a ScratchConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = ScratchConfig()

    if "package" in data:
        pkg = data["package"]
        config.package = PackageConfig(
            name=pkg.get("name", "untitled"),
            version=pkg.get("version", "0.0.0"),
            authors=pkg.get("authors", []),
            license=pkg.get("license", ""),
        )

    if "build" in data:
        config.build = BuildConfig(src_dir=data["build"].get("src_dir", "src"))

    return config
