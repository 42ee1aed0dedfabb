"""Grid geometry and neighbor indexing for fluidsim.

This module centralizes all spatial indexing logic:
- GridGeometry: Immutable dataclass holding resolution and ghost border
- Neighbor vectors: 4-connectivity offsets for the Jacobi stencils
- interior_slice: host-side view of the simulated cells

Storage layout (N = resolution, one ghost cell on every side):

    index:   0   1 .. N   N+1
             G   interior  G

Fields are indexed [x, y]. Interior cells are 1..N inclusive on both axes;
the ghost ring absorbs the +-1 stencil offsets and the clamped bilinear
samples of the advection trace, so no kernel reads outside the allocation.

4-Connectivity Layout:
    Direction 0: +x
    Direction 1: -x
    Direction 2: +y
    Direction 3: -y
"""

from dataclasses import dataclass

import taichi as ti

from fluidsim.core.dtypes import DTYPE_BYTES

# Ghost cells on each side of the interior
BORDER: int = 1

# Number of neighbors in the 5-point stencil
NUM_NEIGHBORS: int = 4

# x offset per direction
NEIGHBOR_DI = ti.Vector([1, -1, 0, 0])

# y offset per direction
NEIGHBOR_DJ = ti.Vector([0, 0, 1, -1])


@dataclass(frozen=True)
class GridGeometry:
    """Immutable grid geometry specification.

    Attributes:
        n: Interior resolution per axis (N)

    Properties:
        size: Allocated cells per axis (N + 2)
        shape: Allocated shape (N + 2, N + 2)
        h: Cell spacing of the unit domain (1 / N)
        n_cells: Allocated cell count including the ghost ring
        n_interior: Simulated cell count (N * N)
        center: Grid coordinate of the domain center
    """

    n: int

    def __post_init__(self):
        """Validate grid resolution."""
        if not isinstance(self.n, int) or isinstance(self.n, bool):
            raise ValueError(f"n must be an integer, got {self.n!r}")
        if self.n < 1:
            raise ValueError(f"n must be >= 1, got {self.n}")

    @property
    def size(self) -> int:
        """Allocated cells per axis."""
        return self.n + 2 * BORDER

    @property
    def shape(self) -> tuple[int, int]:
        """Allocated grid shape."""
        return (self.size, self.size)

    @property
    def h(self) -> float:
        """Cell spacing of the unit domain."""
        return 1.0 / self.n

    @property
    def n_cells(self) -> int:
        """Total allocated cells, ghost ring included."""
        return self.size * self.size

    @property
    def n_interior(self) -> int:
        """Number of simulated cells."""
        return self.n * self.n

    @property
    def center(self) -> tuple[float, float]:
        """Grid coordinate of the domain center."""
        c = self.size / 2.0
        return (c, c)

    def interior_slice(self) -> tuple[slice, slice]:
        """Numpy index selecting the interior of an allocated array."""
        return (slice(BORDER, self.n + BORDER), slice(BORDER, self.n + BORDER))

    def field_bytes(self, components: int = 1) -> int:
        """Bytes for one buffer of a field with the given component count."""
        return self.n_cells * components * DTYPE_BYTES
