"""Core infrastructure: types, geometry, errors."""

from fluidsim.core.dtypes import DTYPE, DTYPE_BYTES
from fluidsim.core.errors import ConfigurationError, SimulationHaltedError
from fluidsim.core.geometry import (
    BORDER,
    NEIGHBOR_DI,
    NEIGHBOR_DJ,
    NUM_NEIGHBORS,
    GridGeometry,
)

__all__ = [
    "BORDER",
    "DTYPE",
    "DTYPE_BYTES",
    "ConfigurationError",
    "GridGeometry",
    "NEIGHBOR_DI",
    "NEIGHBOR_DJ",
    "NUM_NEIGHBORS",
    "SimulationHaltedError",
]
