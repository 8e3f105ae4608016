import pytest

from falling_sand.config import load_config, apply_layout, SimulationConfig
from falling_sand.model.driver import SIM_DT
from falling_sand.model.grid import Grid
from falling_sand.model.particle import Particle


def write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


def test_minimal_config_uses_defaults(tmp_path):
    config = load_config(write(tmp_path, """
grid: {width: 20, height: 10}
simulation: {max_steps: 50}
"""))
    assert isinstance(config, SimulationConfig)
    assert (config.grid.width, config.grid.height) == (20, 10)
    assert config.max_steps == 50
    assert config.dt == SIM_DT
    assert config.spawn_enabled
    assert config.layout.fills == []
    assert config.csv_enabled and config.snapshot_enabled
    assert not config.gif_enabled
    assert config.seed is None


def test_full_config(tmp_path):
    config = load_config(write(tmp_path, """
grid: {width: 8, height: 6}
simulation: {max_steps: 5, dt: 0.5, seed: 3}
spawn: {enabled: false}
layout:
  fills:
    - {type: rectangle, material: water, x: 0, y: 0, width: 8, height: 2}
    - {type: points, material: sand, coords: [[1, 5], [2, 5], [20, 20]]}
export: {csv: false, gif: true, gif_every: 2}
"""))
    assert config.dt == 0.5
    assert config.seed == 3
    assert not config.spawn_enabled
    assert not config.csv_enabled
    assert config.gif_enabled and config.gif_every == 2

    rect, points = config.layout.fills
    assert rect.material == Particle.WATER
    assert points.data['coords'] == [(1, 5), (2, 5), (20, 20)]

    grid = Grid(config.grid.width, config.grid.height)
    apply_layout(grid, config.layout)
    assert grid.count(Particle.WATER) == 16
    # Out-of-grid points are skipped
    assert grid.count(Particle.SAND) == 2


def test_unknown_fill_type(tmp_path):
    with pytest.raises(ValueError):
        load_config(write(tmp_path, """
grid: {width: 4, height: 4}
simulation: {max_steps: 1}
layout: {fills: [{type: circle, material: sand}]}
"""))


def test_unknown_material(tmp_path):
    with pytest.raises(ValueError):
        load_config(write(tmp_path, """
grid: {width: 4, height: 4}
simulation: {max_steps: 1}
layout: {fills: [{type: points, material: lava, coords: [[0, 0]]}]}
"""))


def test_missing_section(tmp_path):
    with pytest.raises(KeyError):
        load_config(write(tmp_path, "grid: {width: 4, height: 4}\n"))


def test_bad_dimensions(tmp_path):
    with pytest.raises(ValueError):
        load_config(write(tmp_path, """
grid: {width: 0, height: 4}
simulation: {max_steps: 1}
"""))


@pytest.mark.parametrize("gif_every", [0, -3, 2.5])
def test_gif_every_must_be_positive_integer(tmp_path, gif_every):
    with pytest.raises(ValueError):
        load_config(write(tmp_path, f"""
grid: {{width: 4, height: 4}}
simulation: {{max_steps: 1}}
export: {{gif: true, gif_every: {gif_every}}}
"""))


@pytest.mark.parametrize("coords", ["[[1.5, 2]]", "[[1, 2, 3]]", "[[1, '2']]"])
def test_point_coordinates_must_be_integer_pairs(tmp_path, coords):
    with pytest.raises(ValueError):
        load_config(write(tmp_path, f"""
grid: {{width: 4, height: 4}}
simulation: {{max_steps: 1}}
layout: {{fills: [{{type: points, material: sand, coords: {coords}}}]}}
"""))


def test_rectangle_fields_must_be_integers(tmp_path):
    with pytest.raises(ValueError):
        load_config(write(tmp_path, """
grid: {width: 4, height: 4}
simulation: {max_steps: 1}
layout: {fills: [{type: rectangle, material: water, x: 0, y: 0, width: 1.5, height: 2}]}
"""))
