"""Utility kernels and sampling helpers for fluidsim."""

import taichi as ti

from fluidsim.core.dtypes import DTYPE
from fluidsim.core.geometry import NEIGHBOR_DI, NEIGHBOR_DJ, NUM_NEIGHBORS


@ti.kernel
def copy_field(src: ti.template(), dst: ti.template()):
    """Copy src to dst."""
    for I in ti.grouped(src):
        dst[I] = src[I]


def pass_through(field) -> None:
    """Copy current into scratch so the following rotation changes nothing.

    Args:
        field: BufferedField
    """
    copy_field(field.current, field.scratch)


@ti.func
def clamp_to_domain(p, n: int):
    """Clamp a grid coordinate to [0.5, n + 0.5] on both axes."""
    return ti.math.clamp(p, 0.5, n + 0.5)


@ti.func
def sample_bilinear(f: ti.template(), p):
    """Bilinearly sample a scalar or vector field at grid coordinate p.

    Integer coordinates are cell centers. Callers clamp p to
    [0.5, n + 0.5], which keeps all four taps inside the ghost ring.
    """
    i0 = ti.cast(ti.floor(p[0]), ti.i32)
    j0 = ti.cast(ti.floor(p[1]), ti.i32)
    tx = p[0] - i0
    ty = p[1] - j0
    return (
        (1.0 - tx) * (1.0 - ty) * f[i0, j0]
        + tx * (1.0 - ty) * f[i0 + 1, j0]
        + (1.0 - tx) * ty * f[i0, j0 + 1]
        + tx * ty * f[i0 + 1, j0 + 1]
    )


@ti.func
def cell_position(i: int, j: int):
    """Grid coordinate of cell (i, j) as a float vector."""
    return ti.Vector([ti.cast(i, DTYPE), ti.cast(j, DTYPE)])


@ti.func
def neighbor_sum(f: ti.template(), i: int, j: int):
    """Sum of the four edge neighbors of (i, j)."""
    total = f[i, j] * 0.0
    for k in ti.static(range(NUM_NEIGHBORS)):
        total += f[i + NEIGHBOR_DI[k], j + NEIGHBOR_DJ[k]]
    return total
