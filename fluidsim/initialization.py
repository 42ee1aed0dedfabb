"""Initialization routines for simulation fields.
"""

import numpy as np

from fluidsim.fields.state import FluidFields
from fluidsim.params.schema import SeedParams


def disk_mask(n: int, center: tuple[float, float], radius: float) -> np.ndarray:
    """Boolean (n+2, n+2) mask of cells strictly inside a disk.

    Cell (i, j) sits at grid coordinate (i, j); index order is [x, y].
    """
    coords = np.arange(n + 2, dtype=np.float64)
    dx = coords.reshape(-1, 1) - center[0]
    dy = coords.reshape(1, -1) - center[1]
    mask = dx * dx + dy * dy < radius * radius
    # Ghost ring is never seeded
    mask[0, :] = mask[-1, :] = mask[:, 0] = mask[:, -1] = False
    return mask


def initialize_seed(fields: FluidFields, seed: SeedParams | None = None) -> None:
    """Seed a disk of density and uniform velocity at the grid centre.

    The same arrays are written to all three buffers of density and
    velocity, so every buffer agrees before the first tick.

    Args:
        fields: FluidFields wrapper with allocated fields
        seed: Disk radius, density and velocity (defaults if None)
    """
    seed = seed or SeedParams()
    n = fields.n
    mask = disk_mask(n, fields.geometry.center, seed.radius)

    density = np.zeros(fields.density.host_shape, dtype=np.float32)
    density[mask] = seed.density

    velocity = np.zeros(fields.velocity.host_shape, dtype=np.float32)
    velocity[mask] = (seed.velocity_x, seed.velocity_y)

    fields.density.load(density)
    fields.velocity.load(velocity)


def initialize_quiescent(fields: FluidFields) -> None:
    """Zero every buffer of every fluid field."""
    for name in fields.container.field_names:
        fields.container[name].fill(0.0)
