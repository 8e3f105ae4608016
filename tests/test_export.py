import csv

import numpy as np
from PIL import Image

from falling_sand.export import CSVWriter, Reporter, Visualizer
from falling_sand.model.engine import TickEngine
from falling_sand.model.grid import Grid
from falling_sand.model.particle import Particle
from falling_sand.model.state import TickReport


def make_report(applied=1, contested=0, spawn_col=2):
    return TickReport(proposed=applied + contested, applied=applied,
                      contested=contested, spawn_col=spawn_col,
                      counts={"empty": 7, "sand": 2, "water": 1})


def test_csv_writer_rows(tmp_path):
    path = tmp_path / "out" / "log.csv"
    with CSVWriter(path) as writer:
        writer.append(1, make_report())
        writer.append(2, make_report(spawn_col=None))

    with open(path, newline='') as f:
        rows = list(csv.DictReader(f))
    assert [r['step'] for r in rows] == ['1', '2']
    assert rows[0]['sand'] == '2'
    assert rows[0]['spawn_col'] == '2'
    assert rows[1]['spawn_col'] == ''
    assert list(rows[0].keys()) == CSVWriter.FIELDNAMES


def test_reporter_summary(tmp_path):
    reporter = Reporter("configs/default.yaml", 42)
    reporter.update(make_report(applied=3, contested=2))
    reporter.update(make_report(applied=0, spawn_col=None))

    assert reporter.steps == 2
    assert reporter.peak_contested == 2
    assert reporter.blocked_moves == 2
    assert reporter.settled_steps == 1
    assert reporter.spawned == 1

    text = reporter.generate_summary(tmp_path, True, False, False)
    assert "Random Seed: 42" in text
    assert "Final Sand:            2" in text
    assert "Fill Level:            30.0%" in text
    assert "Snapshot:   (disabled)" in text
    assert str(tmp_path / 'simulation_log.csv') in text


def test_visualizer_palette():
    grid = Grid(3, 2)
    grid.set(0, 0, Particle.SAND)
    grid.set(2, 1, Particle.WATER)
    rgb = Visualizer(3, 2).to_rgb(grid)
    assert rgb.shape == (2, 3, 3)
    assert np.allclose(rgb[0, 0], Visualizer.COLORS[Particle.SAND])
    assert np.allclose(rgb[1, 2], Visualizer.COLORS[Particle.WATER])
    assert np.allclose(rgb[0, 1], Visualizer.BACKGROUND)


def test_snapshot_and_gif(tmp_path):
    grid = Grid(6, 6)
    engine = TickEngine()
    rng = np.random.default_rng(1)
    visualizer = Visualizer(6, 6)
    for step in range(1, 4):
        engine.step(grid, rng)
        visualizer.buffer_frame(grid, step)

    visualizer.save_snapshot(grid, 3, tmp_path / "final.png")
    visualizer.generate_gif(tmp_path / "anim.gif", fps=5)

    assert (tmp_path / "final.png").stat().st_size > 0
    with Image.open(tmp_path / "anim.gif") as gif:
        assert gif.n_frames == 3

    visualizer.clear_frames()
    visualizer.generate_gif(tmp_path / "none.gif")
    assert not (tmp_path / "none.gif").exists()
