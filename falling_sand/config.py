"""Configuration dataclasses and YAML loader for the falling sand simulation."""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from pathlib import Path
import yaml

from .model.driver import SIM_DT
from .model.particle import Particle


@dataclass
class GridConfig:
    width: int = 100
    height: int = 100


@dataclass
class FillSpec:
    fill_type: str  # "rectangle" or "points"
    material: Particle
    data: Dict[str, Any]


@dataclass
class LayoutConfig:
    fills: List[FillSpec] = field(default_factory=list)


@dataclass
class SimulationConfig:
    grid: GridConfig
    max_steps: int
    dt: float = SIM_DT
    spawn_enabled: bool = True
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    gif_every: int = 5
    quiet: bool = False
    seed: Optional[int] = None
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def _as_int(value: Any, name: str) -> int:
    """Return an integer config value or raise ValueError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return value


def _parse_fills(fills_raw: List[Dict]) -> List[FillSpec]:
    """Parse initial particle placements from raw YAML data."""
    fills = []
    for f in fills_raw:
        fill_type = f.get('type', 'rectangle')
        material = Particle.from_name(f.get('material', 'sand'))
        if fill_type == 'rectangle':
            data = {
                key: _as_int(f[key], f"Fill {key}")
                for key in ('x', 'y', 'width', 'height')
            }
        elif fill_type == 'points':
            coords = []
            for c in f['coords']:
                if len(c) != 2:
                    raise ValueError(f"Point must have two coordinates, got {c!r}")
                coords.append((_as_int(c[0], "Point x"), _as_int(c[1], "Point y")))
            data = {'coords': coords}
        else:
            raise ValueError(f"Unknown fill type: {fill_type}")
        fills.append(FillSpec(fill_type=fill_type, material=material, data=data))
    return fills


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    grid = GridConfig(
        width=raw['grid']['width'],
        height=raw['grid']['height']
    )
    if grid.width < 1 or grid.height < 1:
        raise ValueError(f"Grid dimensions must be positive, got "
                         f"{grid.width}x{grid.height}")

    sim_raw = raw['simulation']
    spawn_raw = raw.get('spawn', {})
    layout_raw = raw.get('layout', {})

    # Parse export config (optional)
    export_raw = raw.get('export', {})
    gif_every = _as_int(export_raw.get('gif_every', 5), "export.gif_every")
    if gif_every < 1:
        raise ValueError(f"export.gif_every must be at least 1, got {gif_every}")

    return SimulationConfig(
        grid=grid,
        max_steps=sim_raw['max_steps'],
        dt=sim_raw.get('dt', SIM_DT),
        spawn_enabled=spawn_raw.get('enabled', True),
        layout=LayoutConfig(fills=_parse_fills(layout_raw.get('fills', []))),
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False),
        gif_every=gif_every,
        seed=sim_raw.get('seed')
    )


def apply_layout(grid, layout: LayoutConfig) -> None:
    """Place the configured initial particles on a grid."""
    for fill in layout.fills:
        if fill.fill_type == "rectangle":
            grid.fill_rectangle(
                fill.data['x'], fill.data['y'],
                fill.data['width'], fill.data['height'],
                fill.material
            )
        elif fill.fill_type == "points":
            for x, y in fill.data['coords']:
                if grid.in_bounds(x, y):
                    grid.set(x, y, fill.material)
