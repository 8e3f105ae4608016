"""Per-tick records for the falling sand simulation."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

Cell = Tuple[int, int]


@dataclass(frozen=True)
class Move:
    """Proposed relocation of one particle within a single tick."""
    source: Cell
    destination: Cell

    def sort_key(self) -> Cell:
        """Order by destination column, then destination row."""
        return self.destination


@dataclass(frozen=True)
class TickReport:
    """Summary of what one tick did to the grid."""
    proposed: int                # moves generated by the scan
    applied: int                 # winning moves swapped into place
    contested: int               # destinations wanted by more than one move
    spawn_col: Optional[int]     # None when spawning is disabled
    counts: Dict[str, int]       # particle name -> cell count after the tick

    def to_csv_row(self, step: int) -> Dict:
        """Convert to CSV-compatible format."""
        return {
            "step": step,
            "sand": self.counts.get("sand", 0),
            "water": self.counts.get("water", 0),
            "empty": self.counts.get("empty", 0),
            "proposed": self.proposed,
            "applied": self.applied,
            "contested": self.contested,
            "spawn_col": "" if self.spawn_col is None else self.spawn_col,
        }
