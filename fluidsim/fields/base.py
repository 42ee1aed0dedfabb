"""Base field container and specification classes.

This module provides the foundation for triple-buffered field management:
- FieldSpec: Describes a field's name, dtype and component count
- BufferedField: Three same-shaped Taichi fields with rotation primitives
- FieldContainer: Manages allocation and lookup of buffered fields

Buffers of a BufferedField:
    current   authoritative state, read by kernels and the presentation layer
    scratch   written by exactly one kernel dispatch at a time
    snapshot  frozen right-hand side across a multi-iteration relaxation

Usage:
    container = FieldContainer(GridGeometry(64))
    container.register(FieldSpec("density", DTYPE))
    container.allocate()
    density = container["density"]
    some_kernel(density.current, density.scratch)
    density.rotate_read_write()  # scratch becomes current
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
import taichi as ti

from fluidsim.core.dtypes import DTYPE
from fluidsim.core.geometry import GridGeometry

MAX_COMPONENTS: int = 4

BUFFER_NAMES = ("current", "scratch", "snapshot")


@dataclass(frozen=True)
class FieldSpec:
    """Immutable specification for a buffered Taichi field.

    Attributes:
        name: Field identifier (snake_case)
        dtype: Taichi data type
        components: 1 for scalar quantities, 2 for velocity-like vectors
        description: Human-readable description

    The allocated shape is always the padded (N + 2, N + 2) grid of the
    geometry the field is created for.
    """

    name: str
    dtype: Any = DTYPE
    components: int = 1
    description: str = ""

    def __post_init__(self):
        """Validate field specification."""
        if not self.name:
            raise ValueError("Field name cannot be empty")
        if not self.name.islower() or not self.name.replace("_", "").isalnum():
            raise ValueError(
                f"Field name must be snake_case, got: {self.name}"
            )
        if not 1 <= self.components <= MAX_COMPONENTS:
            raise ValueError(
                f"components must be in 1..{MAX_COMPONENTS}, got {self.components}"
            )

    @property
    def is_vector(self) -> bool:
        return self.components > 1


def _allocate(spec: FieldSpec, geometry: GridGeometry) -> Any:
    if spec.is_vector:
        return ti.Vector.field(spec.components, dtype=spec.dtype, shape=geometry.shape)
    return ti.field(dtype=spec.dtype, shape=geometry.shape)


class BufferedField:
    """Current/scratch/snapshot buffers for one simulated quantity.

    Rotations are O(1) reference swaps; no data moves. Kernels receive the
    buffers they need for one dispatch and never keep them.

    Example:
        velocity = create_field(FieldSpec("velocity", components=2), geometry)
        advect_kernel(velocity.current, velocity.current, velocity.scratch, ...)
        velocity.rotate_read_write()
    """

    def __init__(self, spec: FieldSpec, geometry: GridGeometry):
        """Allocate three zero-filled buffers.

        Args:
            spec: Field specification
            geometry: Grid the buffers are sized for
        """
        self._spec = spec
        self._geometry = geometry
        self._current = _allocate(spec, geometry)
        self._scratch = _allocate(spec, geometry)
        self._snapshot = _allocate(spec, geometry)

    @property
    def spec(self) -> FieldSpec:
        return self._spec

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def components(self) -> int:
        return self._spec.components

    @property
    def geometry(self) -> GridGeometry:
        return self._geometry

    @property
    def current(self) -> Any:
        """Authoritative buffer."""
        return self._current

    @property
    def scratch(self) -> Any:
        """Write target of the next dispatch."""
        return self._scratch

    @property
    def snapshot(self) -> Any:
        """Frozen right-hand side of a relaxation."""
        return self._snapshot

    def rotate_read_write(self) -> None:
        """Swap current and scratch.

        Promotes a freshly written scratch buffer to current. Applying it
        twice restores the original assignment.
        """
        self._current, self._scratch = self._scratch, self._current

    def commit_snapshot(self) -> None:
        """Swap scratch and snapshot.

        Retargets the fixed right-hand side of the next relaxation phase to
        whatever scratch holds, without copying.
        """
        self._scratch, self._snapshot = self._snapshot, self._scratch

    def buffer(self, which: str) -> Any:
        """Get a buffer by name ("current", "scratch" or "snapshot")."""
        if which not in BUFFER_NAMES:
            raise KeyError(f"Unknown buffer '{which}', expected one of {BUFFER_NAMES}")
        return getattr(self, f"_{which}")

    @property
    def host_shape(self) -> tuple[int, ...]:
        """Shape of the host array for one buffer."""
        if self._spec.is_vector:
            return self._geometry.shape + (self._spec.components,)
        return self._geometry.shape

    def load(self, data: np.ndarray) -> None:
        """Write the same host array into all three buffers.

        Args:
            data: Array of shape host_shape (padded grid, ghost ring included)

        Raises:
            ValueError: If the shape doesn't match
        """
        data = np.asarray(data)
        if data.shape != self.host_shape:
            raise ValueError(
                f"Initial data shape {data.shape} doesn't match "
                f"field '{self.name}' shape {self.host_shape}"
            )
        data = data.astype(np.float32)
        for which in BUFFER_NAMES:
            self.buffer(which).from_numpy(data)

    def fill(self, value: float) -> None:
        """Set every cell of all three buffers to a constant."""
        for which in BUFFER_NAMES:
            self.buffer(which).fill(value)

    def to_numpy(self, which: str = "current") -> np.ndarray:
        """Copy one buffer to the host."""
        return self.buffer(which).to_numpy()

    def interior(self) -> np.ndarray:
        """Copy the interior of the current buffer to the host."""
        return self.to_numpy()[self._geometry.interior_slice()]

    @property
    def memory_bytes(self) -> int:
        """Device memory for all three buffers."""
        return 3 * self._geometry.field_bytes(self._spec.components)

    def __repr__(self) -> str:
        return (
            f"BufferedField(name={self.name!r}, components={self.components}, "
            f"n={self._geometry.n})"
        )


def create_field(
    spec: FieldSpec,
    geometry: GridGeometry,
    initial_data: np.ndarray | None = None,
) -> BufferedField:
    """Allocate a buffered field, optionally seeded.

    Args:
        spec: Field specification
        geometry: Grid dimensions
        initial_data: Optional host array written to all three buffers;
            buffers start zero-filled when omitted

    Returns:
        Allocated BufferedField
    """
    field = BufferedField(spec, geometry)
    if initial_data is not None:
        field.load(initial_data)
    return field


class FieldContainer:
    """Manages buffered field lifecycle with declarative specifications.

    A FieldContainer holds a collection of BufferedFields associated with a
    single grid geometry. Fields are registered via FieldSpec, then allocated
    together once at startup and kept for the lifetime of the run.

    Example:
        container = FieldContainer(GridGeometry(128))
        container.register(FieldSpec("density"))
        container.register(FieldSpec("velocity", components=2))
        container.allocate()

        container.rotate_read_write("density")
    """

    def __init__(self, geometry: GridGeometry):
        """Initialize container with grid geometry.

        Args:
            geometry: Grid dimensions
        """
        self._geometry = geometry
        self._specs: dict[str, FieldSpec] = {}
        self._fields: dict[str, BufferedField] = {}
        self._allocated = False

    @property
    def geometry(self) -> GridGeometry:
        """Get the grid geometry."""
        return self._geometry

    @property
    def allocated(self) -> bool:
        """Check if fields have been allocated."""
        return self._allocated

    @property
    def field_names(self) -> list[str]:
        """Get list of registered field names."""
        return list(self._specs.keys())

    def register(self, spec: FieldSpec) -> None:
        """Register a field specification.

        Args:
            spec: Field specification to register

        Raises:
            RuntimeError: If fields already allocated
            ValueError: If name already registered
        """
        if self._allocated:
            raise RuntimeError("Cannot register fields after allocation")
        if spec.name in self._specs:
            raise ValueError(f"Field '{spec.name}' already registered")
        self._specs[spec.name] = spec

    def register_many(self, specs: list[FieldSpec]) -> None:
        """Register multiple field specifications."""
        for spec in specs:
            self.register(spec)

    def allocate(self) -> None:
        """Allocate all registered fields, three buffers each.

        Raises:
            RuntimeError: If already allocated or no fields registered
        """
        if self._allocated:
            raise RuntimeError("Fields already allocated")
        if not self._specs:
            raise RuntimeError("No fields registered")

        for name, spec in self._specs.items():
            self._fields[name] = create_field(spec, self._geometry)

        self._allocated = True

    def get(self, name: str) -> BufferedField:
        """Get a buffered field by name.

        Raises:
            RuntimeError: If fields not allocated
            KeyError: If field not found
        """
        if not self._allocated:
            raise RuntimeError("Fields not yet allocated")
        if name not in self._fields:
            raise KeyError(f"Field '{name}' not found")
        return self._fields[name]

    def __getitem__(self, name: str) -> BufferedField:
        """Get a field by name using bracket notation."""
        return self.get(name)

    def get_spec(self, name: str) -> FieldSpec:
        """Get the specification for a field."""
        if name not in self._specs:
            raise KeyError(f"Field '{name}' not registered")
        return self._specs[name]

    def rotate_read_write(self, name: str) -> None:
        """Swap current and scratch of a field."""
        self.get(name).rotate_read_write()

    def commit_snapshot(self, name: str) -> None:
        """Swap scratch and snapshot of a field."""
        self.get(name).commit_snapshot()

    @property
    def memory_bytes(self) -> int:
        """Device memory of all allocated buffers in bytes."""
        if not self._allocated:
            return 0
        return sum(f.memory_bytes for f in self._fields.values())

    @property
    def memory_mb(self) -> float:
        """Device memory of all allocated buffers in megabytes."""
        return self.memory_bytes / (1024 * 1024)

    def __contains__(self, name: str) -> bool:
        """Check if a field is registered."""
        return name in self._specs

    def __len__(self) -> int:
        """Number of registered fields."""
        return len(self._specs)
