"""Conservation checks and field statistics.

Reductions run as Taichi kernels over the interior of a buffer; the ghost
ring is never included.
"""

from dataclasses import dataclass

import numpy as np
import taichi as ti

from fluidsim.core.dtypes import DTYPE


@dataclass
class DensityBudget:
    """Tracks injected density for approximate conservation checks.

    Advection and diffusion are not exactly conservative (clamped traces,
    open ghost ring), so the check is a relative tolerance, not an identity.
    """

    initial_density: float = 0.0  # interior total at start
    cumulative_injected: float = 0.0  # total added by splats

    def expected_density(self) -> float:
        """Total density if transport were exactly conservative."""
        return self.initial_density + self.cumulative_injected

    def check(self, actual: float, rtol: float = 0.05, atol: float = 1e-6) -> float:
        """Check approximate conservation and return relative error.

        Args:
            actual: Current interior total
            rtol: Relative tolerance
            atol: Absolute tolerance

        Returns:
            Relative error

        Raises:
            AssertionError: If the total drifted beyond tolerance
        """
        expected = self.expected_density()
        error = abs(actual - expected)
        tol = atol + rtol * abs(expected)

        if error > tol:
            raise AssertionError(
                f"Density not conserved!\n"
                f"  Expected: {expected:.6e}\n"
                f"  Actual:   {actual:.6e}\n"
                f"  Error:    {error:.6e} (tolerance: {tol:.6e})\n"
                f"  Injected: {self.cumulative_injected:.6e}"
            )

        return error / max(abs(expected), 1e-10)


@ti.kernel
def compute_total(field: ti.template()) -> DTYPE:
    """Sum a scalar field over the interior."""
    total = ti.cast(0.0, DTYPE)
    n = field.shape[0] - 2
    for i, j in ti.ndrange((1, n + 1), (1, n + 1)):
        total += field[i, j]
    return total


def compute_sum_squares(field) -> float:
    """Sum of squared values (all components) over the interior."""
    arr = field.to_numpy().astype(np.float64)
    return float(np.sum(arr[1:-1, 1:-1] ** 2))


@ti.kernel
def compute_mean_abs_divergence(velocity: ti.template()) -> DTYPE:
    """Mean |div u| over the interior, central differences, unit domain."""
    total = ti.cast(0.0, DTYPE)
    n = velocity.shape[0] - 2
    for i, j in ti.ndrange((1, n + 1), (1, n + 1)):
        gx = velocity[i + 1, j][0] - velocity[i - 1, j][0]
        gy = velocity[i, j + 1][1] - velocity[i, j - 1][1]
        total += ti.abs(0.5 * n * (gx + gy))
    return total / (n * n)


def field_min(field) -> float:
    """Smallest interior value of a Taichi field (all components)."""
    arr = field.to_numpy()
    return float(np.min(arr[1:-1, 1:-1]))


def all_finite(field) -> bool:
    """True if no cell of the field (ghost ring included) is NaN or inf."""
    return bool(np.all(np.isfinite(field.to_numpy())))


def check_non_negative(field, name: str = "field", atol: float = 1e-6) -> None:
    """Raise AssertionError if any interior value is below -atol."""
    lowest = field_min(field)
    if lowest < -atol:
        raise AssertionError(f"{name} has negative values (min {lowest:.6e})")
