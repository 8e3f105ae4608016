"""Model package for the falling sand simulation."""

from .particle import Particle
from .state import Move, TickReport
from .grid import Grid, OutOfBounds
from .engine import TickEngine, count_particles
from .driver import FixedTimestepDriver, InputState, SIM_DT, pressed

__all__ = [
    'Particle',
    'Move',
    'TickReport',
    'Grid',
    'OutOfBounds',
    'TickEngine',
    'count_particles',
    'FixedTimestepDriver',
    'InputState',
    'SIM_DT',
    'pressed',
]
