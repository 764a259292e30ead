"""Engine configuration from pyproject.toml.

Reads the [tool.forcegraph] section (and its physics, layout, style, loop
and interaction sub-tables) to override the layout engine's constants.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Literal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhysicsConfig:
    """Force constants for one simulation tick."""

    repulsion: float = 2000.0
    attraction: float = 0.05
    rest_length: float = 100.0
    damping: float = 0.9
    center_force: float = 0.01
    margin: float = 30.0


@dataclass(frozen=True)
class LayoutConfig:
    """Default placement for nodes without a saved position."""

    circle_ratio: float = 0.3
    jitter: float = 25.0


@dataclass(frozen=True)
class NodeStyleConfig:
    """Node sizing and labelling."""

    base_radius: float = 8.0
    radius_scale: float = 4.0
    label_max: int = 15


@dataclass(frozen=True)
class LoopConfig:
    """Render loop timing.

    Attributes:
        settle_frames: Frames run at full rate before throttling
        frame_interval: Delay standing in for "next animation frame" (seconds)
        throttle_interval: Delay between frames once settled (seconds)
        settle_mode: "frames" counts frames, "energy" waits for kinetic
            energy to drop below energy_threshold
        energy_threshold: Kinetic energy below which the layout counts as settled
        min_settle_frames: Frames always run at full rate in energy mode
    """

    settle_frames: int = 100
    frame_interval: float = 1 / 60
    throttle_interval: float = 0.1
    settle_mode: Literal["frames", "energy"] = "frames"
    energy_threshold: float = 0.5
    min_settle_frames: int = 10

    def __post_init__(self) -> None:
        if self.settle_mode not in ("frames", "energy"):
            raise ValueError(f'settle_mode must be "frames" or "energy", got {self.settle_mode!r}')


@dataclass(frozen=True)
class InteractionConfig:
    """Pointer and zoom tuning."""

    click_threshold: float = 5.0
    wheel_in: float = 1.1
    wheel_out: float = 0.9
    button_zoom: float = 1.2


@dataclass(frozen=True)
class ForceGraphConfig:
    """All engine settings, grouped by concern."""

    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    style: NodeStyleConfig = field(default_factory=NodeStyleConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    db: str | None = None


_SECTIONS: dict[str, type] = {
    "physics": PhysicsConfig,
    "layout": LayoutConfig,
    "style": NodeStyleConfig,
    "loop": LoopConfig,
    "interaction": InteractionConfig,
}


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _section(cls: type, values: dict[str, Any]) -> Any:
    known = {f.name for f in fields(cls)}
    unknown = set(values) - known
    if unknown:
        logger.warning("Ignoring unknown [tool.forcegraph] keys: %s", ", ".join(sorted(unknown)))
    return cls(**{k: v for k, v in values.items() if k in known})


def config_from_dict(section: dict[str, Any]) -> ForceGraphConfig:
    """Build a config from a parsed [tool.forcegraph] table."""
    config = ForceGraphConfig(db=section.get("db"))
    overrides = {
        name: _section(cls, section[name])
        for name, cls in _SECTIONS.items()
        if isinstance(section.get(name), dict)
    }
    return replace(config, **overrides)


def load_config(start: Path | None = None) -> ForceGraphConfig:
    """Load [tool.forcegraph] from the nearest pyproject.toml.

    Returns default config if no pyproject.toml or no [tool.forcegraph] section.
    """
    path = find_pyproject(start)
    if path is None:
        return ForceGraphConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return ForceGraphConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("forcegraph", {})
    if not section:
        return ForceGraphConfig()

    return config_from_dict(section)
