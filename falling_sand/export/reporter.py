"""Summary report generation for the falling sand simulation."""

from typing import Dict, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.state import TickReport


class Reporter:
    """Generates summary statistics and formatted text report."""

    def __init__(self, config_path: str, seed: Optional[int]):
        self.config_path = config_path
        self.seed = seed
        self.steps = 0
        self.total_proposed = 0
        self.total_applied = 0
        self.total_contested = 0
        self.peak_contested = 0
        self.spawned = 0
        self.settled_steps = 0
        self.final_counts: Dict[str, int] = {}

    def update(self, report: "TickReport") -> None:
        """Accumulate metrics per tick."""
        self.steps += 1
        self.total_proposed += report.proposed
        self.total_applied += report.applied
        self.total_contested += report.contested
        if report.contested > self.peak_contested:
            self.peak_contested = report.contested
        if report.spawn_col is not None:
            self.spawned += 1

        # A tick where nothing moved means the pile is at rest
        if report.applied == 0:
            self.settled_steps += 1

        self.final_counts = dict(report.counts)

    @property
    def blocked_moves(self) -> int:
        """Proposals that lost a conflict and stayed in place."""
        return self.total_proposed - self.total_applied

    def generate_summary(self, output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        sand = self.final_counts.get('sand', 0)
        water = self.final_counts.get('water', 0)
        empty = self.final_counts.get('empty', 0)
        total_cells = sand + water + empty
        fill_pct = ((sand + water) / total_cells * 100) if total_cells > 0 else 0

        lines = [
            "",
            "=" * 80,
            "                    FALLING SAND SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            "",
            "SIMULATION METRICS",
            "-" * 40,
            f"Total Steps:           {self.steps}",
            f"Grains Spawned:        {self.spawned}",
            f"Final Sand:            {sand}",
            f"Final Water:           {water}",
            f"Fill Level:            {fill_pct:.1f}%",
            f"Moves Proposed:        {self.total_proposed}",
            f"Moves Applied:         {self.total_applied}",
            f"Moves Blocked:         {self.blocked_moves}",
            f"Contested Cells:       {self.total_contested} "
            f"(peak {self.peak_contested} in one step)",
            f"Settled Steps:         {self.settled_steps}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'simulation_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'simulation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
