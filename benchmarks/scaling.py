import gc
import time
from dataclasses import dataclass

import taichi as ti

from benchmarks.harness import Benchmark
from fluidsim.params import SimulationConfig
from fluidsim.simulation import Simulation


@dataclass
class ScalingMetrics:
    grid_size: int
    n_cells: int
    ticks: int
    wall_time_s: float

    @property
    def ticks_per_second(self) -> float:
        return self.ticks / self.wall_time_s

    @property
    def megacells_per_second(self) -> float:
        return self.n_cells * self.ticks / self.wall_time_s / 1e6


class ScalingBenchmark(Benchmark):
    """Full-tick throughput across grid sizes."""

    sizes = (256, 512, 1024, 2048)
    ticks = 50

    def run(self) -> list[ScalingMetrics]:
        results = []

        self.print_header(f"SCALING BENCHMARK ({self.backend})")

        for n in self.sizes:
            metrics = self._run_single(n, self.ticks)
            results.append(metrics)

        self._print_report(results)
        self.teardown()
        return results

    def _run_single(self, n: int, ticks: int) -> ScalingMetrics:
        print(f"\nBenchmarking {n}x{n} ({n**2/1e6:.2f} M cells)...")

        gc.collect()
        ti.sync()

        sim = Simulation(SimulationConfig().with_updates(grid={"n": n}))
        sim.initialize()

        # Warmup
        print("  Warming up JIT...", end=" ", flush=True)
        sim.run(3)

        if self.profile:
            ti.profiler.clear_kernel_profiler_info()

        ti.sync()
        print("Done.")

        print(f"  Running {ticks} ticks...", end=" ", flush=True)
        start_time = time.perf_counter()

        sim.run(ticks)

        ti.sync()
        end_time = time.perf_counter()
        print("Done.")

        return ScalingMetrics(
            grid_size=n,
            n_cells=n * n,
            ticks=ticks,
            wall_time_s=end_time - start_time,
        )

    def _print_report(self, results: list[ScalingMetrics]):
        self.print_header("RESULTS SUMMARY")
        print(f"{'Grid':<10} {'Cells':<12} {'Time (s)':<12} {'Ticks/s':<18} {'Throughput (MC/s)':<18}")
        print("-" * 80)

        for r in results:
            print(
                f"{r.grid_size:<10} "
                f"{r.n_cells/1e6:>6.2f}M      "
                f"{r.wall_time_s:>6.2f}      "
                f"{r.ticks_per_second:>10.2f}        "
                f"{r.megacells_per_second:>10.2f}"
            )
        self.print_footer()
