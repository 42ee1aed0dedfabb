"""Field management for fluidsim.

This module provides triple-buffered containers for Taichi fields so that
every stencil kernel reads one buffer and writes a different one.

Main classes:
- FieldSpec: Declarative field specification
- BufferedField: current / scratch / snapshot buffers with rotations
- FieldContainer: Manages allocation of buffered fields

Convenience wrappers:
- FluidFields: Access to density, velocity, divergence and pressures

Factory functions:
- create_field: Allocate one buffered field, optionally seeded
- create_fluid_container: Full solver field set
"""

from fluidsim.fields.base import (
    BUFFER_NAMES,
    BufferedField,
    FieldContainer,
    FieldSpec,
    create_field,
)
from fluidsim.fields.state import (
    FluidFields,
    create_fluid_container,
    create_fluid_specs,
)

__all__ = [
    "BUFFER_NAMES",
    "BufferedField",
    "FieldContainer",
    "FieldSpec",
    "FluidFields",
    "create_field",
    "create_fluid_container",
    "create_fluid_specs",
]
