"""Fluid field specifications and factory.

The solver keeps five buffered quantities:
- density: Advected dye concentration [-]
- velocity: Fluid velocity (x, y) [domain lengths / time]
- divergence: Right-hand side of the pressure solve
- pressure_pre: Pressure guess for the projection before self-advection
- pressure_post: Pressure guess for the projection after self-advection

Each has current, scratch and snapshot buffers, so the full working set is
15 grids of (N + 2)^2 cells.
"""

from typing import Any

from fluidsim.core.dtypes import DTYPE
from fluidsim.core.geometry import GridGeometry
from fluidsim.fields.base import BufferedField, FieldContainer, FieldSpec


def create_fluid_specs(dtype: Any = DTYPE) -> list[FieldSpec]:
    """Create specifications for the fluid solver fields.

    Args:
        dtype: Floating-point type (default: DTYPE from dtypes.py)

    Returns:
        List of FieldSpec for density, velocity, divergence and pressures
    """
    return [
        FieldSpec(
            name="density",
            dtype=dtype,
            components=1,
            description="Dye density [-]",
        ),
        FieldSpec(
            name="velocity",
            dtype=dtype,
            components=2,
            description="Velocity (x, y) [domain lengths / time]",
        ),
        FieldSpec(
            name="divergence",
            dtype=dtype,
            components=1,
            description="Scaled velocity divergence, pressure right-hand side",
        ),
        FieldSpec(
            name="pressure_pre",
            dtype=dtype,
            components=1,
            description="Pressure for the projection before advection",
        ),
        FieldSpec(
            name="pressure_post",
            dtype=dtype,
            components=1,
            description="Pressure for the projection after advection",
        ),
    ]


class FluidFields:
    """Convenience wrapper for accessing the fluid fields.

    Example:
        fields = FluidFields(container)
        splat(fields.density, fields.velocity, ...)
        fields.density.rotate_read_write()
    """

    def __init__(self, container: FieldContainer):
        """Initialize with field container.

        Args:
            container: Allocated FieldContainer with the fluid fields
        """
        self._container = container

    @property
    def container(self) -> FieldContainer:
        return self._container

    @property
    def geometry(self) -> GridGeometry:
        return self._container.geometry

    @property
    def n(self) -> int:
        return self._container.geometry.n

    @property
    def density(self) -> BufferedField:
        """Dye density."""
        return self._container["density"]

    @property
    def velocity(self) -> BufferedField:
        """Velocity field (2 components)."""
        return self._container["velocity"]

    @property
    def divergence(self) -> BufferedField:
        """Divergence / pressure right-hand side."""
        return self._container["divergence"]

    @property
    def pressure_pre(self) -> BufferedField:
        """Pressure used by the first projection of a tick."""
        return self._container["pressure_pre"]

    @property
    def pressure_post(self) -> BufferedField:
        """Pressure used by the second projection of a tick."""
        return self._container["pressure_post"]


def create_fluid_container(geometry: GridGeometry) -> FieldContainer:
    """Create an allocated container with all fluid fields.

    Args:
        geometry: Grid dimensions

    Returns:
        Allocated FieldContainer
    """
    container = FieldContainer(geometry)
    container.register_many(create_fluid_specs())
    container.allocate()
    return container
