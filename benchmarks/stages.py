import time

import taichi as ti

from benchmarks.harness import Benchmark
from fluidsim.core.geometry import GridGeometry
from fluidsim.fields import FluidFields, create_fluid_container
from fluidsim.initialization import initialize_seed
from fluidsim.kernels import advect, diffuse, project, splat
from fluidsim.params import SimulationConfig


class StageBenchmark(Benchmark):
    """Per-stage cost of one tick, with the default iteration counts."""

    n = 1024
    repeats = 20

    def run(self) -> dict[str, float]:
        self.print_header(f"STAGE BREAKDOWN ({self.n}x{self.n})")

        c = SimulationConfig().with_updates(grid={"n": self.n})
        fields = FluidFields(create_fluid_container(GridGeometry(self.n)))
        initialize_seed(fields, c.seed)
        center = fields.geometry.center

        stages = {
            "splat": lambda: splat(
                fields.density, fields.velocity, center, (1.0, 0.0), c.splat_radius, 1.0
            ),
            "project": lambda: project(
                fields.velocity, fields.divergence, fields.pressure_pre,
                c.pressure.iterations, c.pressure.decay,
            ),
            "advect_velocity": lambda: advect(
                fields.velocity, fields.velocity.current, c.dt, c.advection.scheme
            ),
            "diffuse_density": lambda: diffuse(
                fields.density, c.diffusion.coefficient, c.dt, c.diffusion.iterations
            ),
            "advect_density": lambda: advect(
                fields.density, fields.velocity.current, c.dt, c.advection.scheme
            ),
        }

        timings = {}
        for name, stage in stages.items():
            stage()  # JIT warmup
            ti.sync()
            start = time.perf_counter()
            for _ in range(self.repeats):
                stage()
            ti.sync()
            timings[name] = (time.perf_counter() - start) / self.repeats * 1e3

        print(f"{'Stage':<20} {'ms / call':>12}")
        print("-" * 80)
        for name, ms in timings.items():
            print(f"{name:<20} {ms:>12.3f}")
        # project runs twice per tick
        print(f"{'tick (approx.)':<20} {sum(timings.values()) + timings['project']:>12.3f}")
        self.print_footer()

        self.teardown()
        return timings
