"""
Pressure projection: remove the divergent part of the velocity field.

Helmholtz decomposition in three phases on the shared grid (h = 1/N):

1. Init   div = -0.5 · h · (u[i+1] - u[i-1] + v[j+1] - v[j-1])
          p   = decay · p_prev          (decay 0 resets the guess)
2. Solve  p   = (div + p_E + p_W + p_N + p_S) / 4      (Jacobi, fixed rounds)
3. Apply  vel = vel - 0.5 · (p[i+1] - p[i-1], p[j+1] - p[j-1]) / h

Every phase reads current buffers and writes scratch; each field it wrote
is rotated immediately after the dispatch. The divergence stays fixed during
the solve, so no snapshot retarget is needed.

Ghost cells are never written: pressure and velocity outside the interior
keep their creation values (no solid-wall Neumann condition).
"""

import taichi as ti

from fluidsim.core.dtypes import DTYPE
from fluidsim.core.errors import ConfigurationError
from fluidsim.kernels.utils import neighbor_sum


@ti.kernel
def project_init(
    velocity: ti.template(),
    divergence_out: ti.template(),
    pressure: ti.template(),
    pressure_out: ti.template(),
    decay: DTYPE,
):
    """Compute divergence and seed the pressure guess."""
    n = velocity.shape[0] - 2
    h = 1.0 / n

    for i, j in ti.ndrange((1, n + 1), (1, n + 1)):
        gx = velocity[i + 1, j][0] - velocity[i - 1, j][0]
        gy = velocity[i, j + 1][1] - velocity[i, j - 1][1]
        divergence_out[i, j] = -0.5 * h * (gx + gy)
        pressure_out[i, j] = decay * pressure[i, j]


@ti.kernel
def project_solve(
    divergence: ti.template(),
    pressure: ti.template(),
    pressure_out: ti.template(),
):
    """One Jacobi round of the pressure Poisson equation."""
    n = pressure.shape[0] - 2

    for i, j in ti.ndrange((1, n + 1), (1, n + 1)):
        pressure_out[i, j] = (divergence[i, j] + neighbor_sum(pressure, i, j)) * 0.25


@ti.kernel
def project_apply(
    velocity: ti.template(),
    velocity_out: ti.template(),
    pressure: ti.template(),
):
    """Subtract the pressure gradient from velocity."""
    n = velocity.shape[0] - 2
    inv_h = ti.cast(n, DTYPE)

    for i, j in ti.ndrange((1, n + 1), (1, n + 1)):
        gx = pressure[i + 1, j] - pressure[i - 1, j]
        gy = pressure[i, j + 1] - pressure[i, j - 1]
        velocity_out[i, j] = velocity[i, j] - 0.5 * inv_h * ti.Vector([gx, gy])


def _check_layout(velocity, divergence, pressure) -> None:
    if velocity.components != 2:
        raise ConfigurationError(
            f"Projection velocity must have 2 components, got {velocity.components}"
        )
    for field in (divergence, pressure):
        if field.components != 1:
            raise ConfigurationError(
                f"Projection field '{field.name}' must be scalar, "
                f"got {field.components} components"
            )


def project(
    velocity,
    divergence,
    pressure,
    iterations: int,
    decay: float = 0.0,
) -> None:
    """
    Make velocity (approximately) divergence-free.

    Args:
        velocity: BufferedField with 2 components
        divergence: BufferedField with 1 component (right-hand side)
        pressure: BufferedField with 1 component (solution / warm start)
        iterations: Jacobi rounds for the pressure solve
        decay: Factor applied to the previous pressure guess, in [0, 1)

    Raises:
        ConfigurationError: If a field has the wrong component count
    """
    _check_layout(velocity, divergence, pressure)
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")
    if not 0.0 <= decay < 1.0:
        raise ValueError(f"decay must be in [0, 1), got {decay}")

    project_init(
        velocity.current, divergence.scratch, pressure.current, pressure.scratch, decay
    )
    divergence.rotate_read_write()
    pressure.rotate_read_write()

    for _ in range(iterations):
        project_solve(divergence.current, pressure.current, pressure.scratch)
        pressure.rotate_read_write()

    project_apply(velocity.current, velocity.scratch, pressure.current)
    velocity.rotate_read_write()
