"""
Viscous diffusion by Jacobi relaxation of the implicit Euler step.

(I - a·∇²) x = x0,   a = dt · coefficient · N²

Each round, for every interior cell:

    x_new = (x0 + a · (x_E + x_W + x_N + x_S)) / (1 + 4a)

Round 0 uses the pre-diffusion field both as the guess and as x0. After it,
the pre-diffusion field sits in scratch and is committed to the snapshot
buffer, where it stays fixed for the remaining rounds. No boundary pass is
applied: ghost cells keep their creation values.

Fixed iteration count; accuracy is traded against cost, there is no
convergence test.
"""

import taichi as ti

from fluidsim.core.dtypes import DTYPE
from fluidsim.kernels.utils import neighbor_sum


@ti.kernel
def diffuse_step(
    x: ti.template(),
    x0: ti.template(),
    x_new: ti.template(),
    a: DTYPE,
):
    """
    One Jacobi round of implicit diffusion.

    Reads x (previous estimate) and x0 (fixed right-hand side), writes
    x_new. Generic over scalar and vector fields.
    """
    n = x.shape[0] - 2
    inv = 1.0 / (1.0 + 4.0 * a)

    for i, j in ti.ndrange((1, n + 1), (1, n + 1)):
        x_new[i, j] = (x0[i, j] + a * neighbor_sum(x, i, j)) * inv


def diffusion_factor(coefficient: float, dt: float, n: int) -> float:
    """Implicit diffusion weight a = dt * coefficient * N^2."""
    return dt * coefficient * n * n


def diffuse(field, coefficient: float, dt: float, iterations: int) -> None:
    """
    Diffuse a buffered field in place (result ends up in current).

    Buffer use per round: read current (and snapshot after round 0), write
    scratch, rotate current/scratch.

    Args:
        field: BufferedField (any component count)
        coefficient: Diffusion coefficient (>= 0)
        dt: Timestep
        iterations: Number of Jacobi rounds (0 = no-op)
    """
    if coefficient < 0:
        raise ValueError(f"coefficient must be non-negative, got {coefficient}")
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")
    if iterations == 0:
        return

    a = diffusion_factor(coefficient, dt, field.geometry.n)

    diffuse_step(field.current, field.current, field.scratch, a)
    field.rotate_read_write()
    # scratch now holds the pre-diffusion field: freeze it as x0
    field.commit_snapshot()

    for _ in range(iterations - 1):
        diffuse_step(field.current, field.snapshot, field.scratch, a)
        field.rotate_read_write()
