"""Visualization and export for the falling sand simulation."""

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.patches import Patch
from pathlib import Path
from typing import List, TYPE_CHECKING
from PIL import Image
import io

from ..model.particle import Particle

if TYPE_CHECKING:
    from ..model.grid import Grid


class Visualizer:
    """
    Generates visual outputs using matplotlib.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation
    """

    # Color scheme (RGB, 0-1)
    BACKGROUND = (0.1, 0.1, 0.1)
    UNKNOWN = (1.0, 0.0, 1.0)  # Magenta for unmapped materials
    COLORS = {
        Particle.SAND: (1.0, 0.883, 0.617),
        Particle.WATER: (0.176, 0.535, 0.938),
    }

    def __init__(self, grid_width: int, grid_height: int):
        self.width = grid_width
        self.height = grid_height
        self.frames: List[Image.Image] = []

        # Lookup table from cell value to color; uint8 covers every value
        self._palette = np.tile(np.array(self.UNKNOWN), (256, 1))
        self._palette[Particle.EMPTY] = self.BACKGROUND
        for particle, color in self.COLORS.items():
            self._palette[particle] = color

    def to_rgb(self, grid: "Grid") -> np.ndarray:
        """Map grid cells to an RGB array indexed [row, col]."""
        return self._palette[grid.cells]

    def _create_figure(self, grid: "Grid", step: int) -> plt.Figure:
        """Create matplotlib figure for grid visualization."""
        aspect = self.width / self.height
        fig_height = 6
        fig_width = max(6, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        ax.imshow(self.to_rgb(grid), origin='lower', aspect='equal',
                  interpolation='nearest',
                  extent=[-0.5, self.width - 0.5, -0.5, self.height - 0.5])

        ax.set_title(f'Step {step} | Sand: {grid.count(Particle.SAND)} | '
                     f'Water: {grid.count(Particle.WATER)}')
        ax.set_xlabel('Column')
        ax.set_ylabel('Row')

        ax.set_xlim(-0.5, self.width - 0.5)
        ax.set_ylim(-0.5, self.height - 0.5)

        legend_elements = [
            Patch(facecolor=self.COLORS[Particle.SAND], label='Sand'),
            Patch(facecolor=self.COLORS[Particle.WATER], label='Water'),
        ]
        ax.legend(handles=legend_elements, loc='upper right', fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, grid: "Grid", step: int) -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(grid, step)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, grid: "Grid", step: int, output_path: Path) -> None:
        """Save single PNG image of current grid."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(grid, step)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )

    def clear_frames(self) -> None:
        """Clear buffered frames."""
        self.frames.clear()
