"""
Force injection (splat): add density and momentum around a pointer.

For interior cells within `radius` of `position`:

    f = 1 - |cell - position| / radius
    density  += amount  * f
    velocity += impulse * f

Reads current, writes scratch for both fields. The caller rotates.
"""

import taichi as ti

from fluidsim.core.dtypes import DTYPE
from fluidsim.core.errors import ConfigurationError


@ti.kernel
def splat_step(
    density: ti.template(),
    density_out: ti.template(),
    velocity: ti.template(),
    velocity_out: ti.template(),
    px: DTYPE,
    py: DTYPE,
    vx: DTYPE,
    vy: DTYPE,
    radius: DTYPE,
    amount: DTYPE,
) -> DTYPE:
    """
    Linear-falloff splat over the interior.

    Cells at distance >= radius copy through unchanged; radius == 0 copies
    every cell. Returns the total density added.
    """
    injected = ti.cast(0.0, DTYPE)
    n = density.shape[0] - 2

    for i, j in ti.ndrange((1, n + 1), (1, n + 1)):
        d = density[i, j]
        v = velocity[i, j]

        if radius > 0:
            dx = ti.cast(i, DTYPE) - px
            dy = ti.cast(j, DTYPE) - py
            dist = ti.sqrt(dx * dx + dy * dy)
            if dist < radius:
                f = 1.0 - dist / radius
                d += amount * f
                v += ti.Vector([vx, vy]) * f
                ti.atomic_add(injected, amount * f)

        density_out[i, j] = d
        velocity_out[i, j] = v

    return injected


def splat(
    density,
    velocity,
    position: tuple[float, float],
    impulse: tuple[float, float],
    radius: float,
    amount: float,
) -> float:
    """
    Inject density and velocity around a grid position.

    Writes density.scratch and velocity.scratch from their current buffers.
    The orchestrator rotates both fields afterwards.

    Args:
        density: BufferedField with 1 component
        velocity: BufferedField with 2 components
        position: Grid coordinate (x, y) in [0, N]
        impulse: Velocity added at full strength
        radius: Falloff radius in cells (0 = no-op)
        amount: Density added at full strength

    Returns:
        Total density injected
    """
    if density.components != 1:
        raise ConfigurationError(
            f"splat density must be scalar, got {density.components} components"
        )
    if velocity.components != 2:
        raise ConfigurationError(
            f"splat velocity must have 2 components, got {velocity.components}"
        )
    if radius < 0:
        raise ValueError(f"radius must be non-negative, got {radius}")

    injected = splat_step(
        density.current,
        density.scratch,
        velocity.current,
        velocity.scratch,
        position[0],
        position[1],
        impulse[0],
        impulse[1],
        radius,
        amount,
    )
    return float(injected)
