"""Frame orchestrator for the stable-fluids solver.

One tick runs a fixed stage sequence on the buffered fields:

    splat (pointer down) or pass-through (pointer up)
    -> project velocity (pressure_pre)
    -> advect velocity along itself
    -> project velocity (pressure_post)
    -> diffuse density
    -> advect density

Every stage reads `current` and writes `scratch`. Splat, pass-through and
advection leave the rotation to this module; diffusion and projection rotate
internally after each of their own dispatches.
"""

import time
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from fluidsim.core.errors import SimulationHaltedError
from fluidsim.core.geometry import GridGeometry
from fluidsim.diagnostics import (
    DensityBudget,
    compute_mean_abs_divergence,
    compute_total,
)
from fluidsim.fields import FluidFields, create_fluid_container
from fluidsim.initialization import initialize_quiescent, initialize_seed
from fluidsim.kernels import advect, diffuse, pass_through, project, splat
from fluidsim.params import SimulationConfig


@dataclass
class InputState:
    """Pointer state in grid coordinates [0, N]^2."""

    position: tuple[float, float] = (0.0, 0.0)
    previous_position: tuple[float, float] = (0.0, 0.0)
    is_down: bool = False

    def press(self, x: float, y: float) -> None:
        # A fresh press carries no motion
        self.position = (x, y)
        self.previous_position = (x, y)
        self.is_down = True

    def move(self, x: float, y: float) -> None:
        self.position = (x, y)

    def release(self) -> None:
        self.is_down = False

    def impulse(self, scale: float) -> tuple[float, float]:
        """Velocity impulse: scale times the pointer delta since last tick."""
        return (
            scale * (self.position[0] - self.previous_position[0]),
            scale * (self.position[1] - self.previous_position[1]),
        )

    def advance(self) -> None:
        """End of tick: the current position becomes the previous one."""
        self.previous_position = self.position


@dataclass
class SimulationState:
    """Fields plus tick bookkeeping."""

    fields: FluidFields
    budget: DensityBudget = field(default_factory=DensityBudget)
    tick: int = 0
    time: float = 0.0
    halted: bool = False

    def total_density(self) -> float:
        """Interior sum of density.current."""
        return float(compute_total(self.fields.density.current))

    def mean_abs_divergence(self) -> float:
        """Mean |div u| of velocity.current over the interior."""
        return float(compute_mean_abs_divergence(self.fields.velocity.current))


class Simulation:
    """Owns the fields and advances them one tick at a time."""

    def __init__(self, config: SimulationConfig | None = None):
        self.config = config or SimulationConfig()
        self.state: SimulationState | None = None

    def initialize(self, seeded: bool = True) -> SimulationState:
        """Allocate fields and seed the initial blob.

        Allocation failures propagate. Returns the SimulationState for
        inspection/testing.
        """
        c = self.config
        container = create_fluid_container(GridGeometry(c.n))
        fields = FluidFields(container)

        if seeded:
            initialize_seed(fields, c.seed)
        else:
            initialize_quiescent(fields)

        self.state = SimulationState(fields=fields)
        self.state.budget.initial_density = self.state.total_density()
        return self.state

    def tick(self, input_state: InputState | None = None) -> SimulationState:
        """Advance one frame.

        Any exception from a stage halts the simulation and is re-raised;
        tick count and time only advance after all stages complete.

        Raises:
            RuntimeError: If not initialized
            SimulationHaltedError: If an earlier tick failed
        """
        if self.state is None:
            raise RuntimeError("Simulation not initialized")
        if self.state.halted:
            raise SimulationHaltedError(
                f"Simulation halted after a failure at tick {self.state.tick}"
            )

        try:
            self._run_stages(input_state)
        except Exception:
            self.state.halted = True
            raise

        if input_state is not None:
            input_state.advance()
        self.state.tick += 1
        self.state.time += self.config.dt
        return self.state

    def _run_stages(self, input_state: InputState | None) -> None:
        c = self.config
        f = self.state.fields
        density, velocity = f.density, f.velocity

        if input_state is not None and input_state.is_down:
            injected = splat(
                density,
                velocity,
                input_state.position,
                input_state.impulse(c.splat.velocity_scale),
                c.splat_radius,
                c.splat.amount,
            )
            self.state.budget.cumulative_injected += injected
        else:
            pass_through(density)
            pass_through(velocity)
        density.rotate_read_write()
        velocity.rotate_read_write()

        project(velocity, f.divergence, f.pressure_pre, c.pressure.iterations, c.pressure.decay)

        # Self-advection: velocity.current is both the quantity and the carrier
        advect(velocity, velocity.current, c.dt, c.advection.scheme)
        velocity.rotate_read_write()

        project(velocity, f.divergence, f.pressure_post, c.pressure.iterations, c.pressure.decay)

        diffuse(density, c.diffusion.coefficient, c.dt, c.diffusion.iterations)

        advect(density, velocity.current, c.dt, c.advection.scheme)
        density.rotate_read_write()

    def run(
        self,
        ticks: int,
        input_state: InputState | None = None,
        verbose: bool = False,
        callback: Callable[[SimulationState], None] | None = None,
    ) -> SimulationState:
        """Run a fixed number of ticks.

        Args:
            ticks: Number of ticks
            input_state: Pointer state shared by all ticks
            verbose: Print progress
            callback: Called with the state after every tick

        Returns:
            Final SimulationState
        """
        if self.state is None:
            self.initialize()

        report_every = max(1, ticks // 10)
        start = time.perf_counter()

        for _ in range(ticks):
            self.tick(input_state)
            if callback is not None:
                callback(self.state)

            if verbose and self.state.tick % report_every == 0:
                print(
                    f"Tick {self.state.tick}: "
                    f"density = {self.state.total_density():.4e}, "
                    f"mean |div| = {self.state.mean_abs_divergence():.3e}"
                )

        if verbose:
            elapsed = time.perf_counter() - start
            print(f"Simulation complete: {ticks} ticks in {elapsed:.2f}s")

        return self.state

    def density(self) -> np.ndarray:
        """Interior of density.current, shape (N, N), index order [x, y]."""
        if self.state is None:
            raise RuntimeError("Simulation not initialized")
        return self.state.fields.density.interior()

    def check_density_budget(self, rtol: float = 0.05) -> float:
        """Check approximate density conservation and return relative error."""
        if self.state is None:
            raise RuntimeError("Simulation not initialized")
        return self.state.budget.check(self.state.total_density(), rtol=rtol)
