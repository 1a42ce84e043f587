"""TOML config loading for vexpr.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_FILENAME = "vexpr.toml"


@dataclass
class DisplayConfig:
    placeholder: str = "□"
    precision: int | None = 12


@dataclass
class DiagnosticsConfig:
    color: bool = True


@dataclass
class VexprConfig:
    display: DisplayConfig = field(default_factory=DisplayConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find vexpr.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_FILENAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> VexprConfig:
    """Parse a vexpr.toml file into a VexprConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = VexprConfig()

    if "display" in data:
        disp = data["display"]
        config.display = DisplayConfig(
            placeholder=disp.get("placeholder", "□"),
            precision=disp.get("precision", 12),
        )

    if "diagnostics" in data:
        diag = data["diagnostics"]
        config.diagnostics = DiagnosticsConfig(
            color=diag.get("color", True),
        )

    return config


def discover_config(start_path: Path | None = None) -> VexprConfig:
    """Load the nearest vexpr.toml, or defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return VexprConfig()
