"""Particle materials for the falling sand simulation."""

from enum import IntEnum


class Particle(IntEnum):
    """Possible contents of a grid cell."""
    EMPTY = 0
    SAND = 1
    WATER = 2

    @classmethod
    def from_name(cls, name: str) -> "Particle":
        """Look up a material by its case-insensitive name."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown material: {name}") from None


# Materials a falling grain may sink into (they swap places with it)
DISPLACEABLE = frozenset({Particle.EMPTY, Particle.WATER})
