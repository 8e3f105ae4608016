#!/usr/bin/env python3
"""
Falling Sand Cellular Automaton

A headless runner for the falling sand simulation: grains spawn at the top,
fall, slide off slopes and sink through water.

Usage:
    falling-sand --config configs/default.yaml [options]

Examples:
    falling-sand --config configs/default.yaml
    falling-sand --config configs/sand_into_water.yaml --gif --out-dir results/
    falling-sand --config configs/default.yaml --no-csv --no-snapshot --quiet
    falling-sand --config configs/default.yaml --seed 42
"""

import argparse
import sys
from pathlib import Path

import numpy as np

from falling_sand.config import load_config, apply_layout
from falling_sand.model.grid import Grid
from falling_sand.model.engine import TickEngine
from falling_sand.model.driver import FixedTimestepDriver
from falling_sand.export.csv_writer import CSVWriter
from falling_sand.export.visualizer import Visualizer
from falling_sand.export.reporter import Reporter


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Falling Sand Cellular Automaton',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    falling-sand --config configs/default.yaml
    falling-sand --config configs/sand_into_water.yaml --gif --out-dir results/
    falling-sand --config configs/default.yaml --no-csv --no-snapshot --quiet
    falling-sand --config configs/default.yaml --seed 42
        """
    )

    # Required arguments
    parser.add_argument('--config', type=Path, required=True,
                        help='Path to YAML configuration file')

    # Optional overrides
    parser.add_argument('--steps', type=int, default=None,
                        help='Override max simulation steps')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')
    parser.add_argument('--no-spawn', dest='spawn', action='store_false',
                        default=None,
                        help='Disable spawning of new sand grains')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.steps is not None:
        config.max_steps = args.steps
    if args.spawn is not None:
        config.spawn_enabled = args.spawn
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    config.out_dir = args.out_dir

    if not config.quiet:
        print("Initializing simulation...")
        print(f"  Grid: {config.grid.width}x{config.grid.height}")
        print(f"  Max steps: {config.max_steps}")
        print(f"  Spawn: {'on' if config.spawn_enabled else 'off'}")

    grid = Grid(config.grid.width, config.grid.height)
    apply_layout(grid, config.layout)
    driver = FixedTimestepDriver(
        grid,
        TickEngine(spawn_enabled=config.spawn_enabled),
        np.random.default_rng(config.seed),
        dt=config.dt
    )

    if not config.quiet:
        print(f"  Initial particles: {grid.count_non_empty()}")

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'simulation_log.csv')
        csv_writer.open()

    visualizer = Visualizer(config.grid.width, config.grid.height)
    reporter = Reporter(str(args.config), config.seed)

    # Main simulation loop
    if not config.quiet:
        print("\nRunning simulation...")

    try:
        while driver.current_step < config.max_steps:
            report = driver.tick()
            step = driver.current_step

            if csv_writer:
                csv_writer.append(step, report)

            # Buffer GIF frame (every N steps to reduce memory)
            if config.gif_enabled:
                if step % config.gif_every == 0 or step == config.max_steps:
                    visualizer.buffer_frame(grid, step)

            reporter.update(report)

            if not config.quiet and step % 100 == 0:
                print(f"  Step {step}: {report.counts['sand']} sand, "
                      f"{report.applied} moved, {report.contested} contested")

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nSimulation interrupted by user.")

    # Cleanup and final exports
    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'simulation_log.csv'}")

    if config.snapshot_enabled and driver.current_step > 0:
        snapshot_path = config.out_dir / 'final_state.png'
        visualizer.save_snapshot(grid, driver.current_step, snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'simulation.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, fps=10)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    # Print summary report
    if not config.quiet and driver.current_step > 0:
        summary = reporter.generate_summary(
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(summary)

    return 0


if __name__ == '__main__':
    sys.exit(main())
