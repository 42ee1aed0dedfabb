"""
Taichi kernels for the stable-fluids solver.

Each stage reads the current buffer of the fields it was handed and writes
their scratch buffer; no kernel writes a buffer it reads in the same
dispatch.

Submodules:
- splat: Force injection
- diffuse: Implicit diffusion by Jacobi relaxation
- advect: Semi-Lagrangian / MacCormack transport
- project: Pressure projection
- utils: Copy kernel and sampling helpers
"""

from fluidsim.kernels.advect import (
    SUPPORTED_COMPONENTS,
    AdvectionScheme,
    advect,
    trace_extent,
)
from fluidsim.kernels.diffuse import diffuse, diffusion_factor
from fluidsim.kernels.project import project
from fluidsim.kernels.splat import splat
from fluidsim.kernels.utils import copy_field, pass_through

__all__ = [
    "AdvectionScheme",
    "SUPPORTED_COMPONENTS",
    "advect",
    "copy_field",
    "diffuse",
    "diffusion_factor",
    "pass_through",
    "project",
    "splat",
    "trace_extent",
]
