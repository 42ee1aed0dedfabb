"""
Base benchmark harness for fluidsim.
"""
import abc
from typing import Any

import taichi as ti

from fluidsim.config import init_taichi


class Benchmark(abc.ABC):
    """Abstract base class for all benchmarks."""

    def __init__(self, profile: bool = False, backend: str | None = None):
        self.profile = profile
        self.backend = backend
        self.init_taichi()

    def init_taichi(self):
        """Initialize Taichi backend (FLUIDSIM_BACKEND or auto-detect)."""
        print(f"Initializing Taichi (Profile: {self.profile})...")
        self.backend = init_taichi(
            backend=self.backend, debug=False, kernel_profiler=self.profile
        )

    @abc.abstractmethod
    def run(self) -> Any:
        """Run the benchmark logic. Returns results."""
        pass

    def teardown(self):
        """Print and clear profiler output."""
        if self.profile:
            print("\nProfiler Output:")
            ti.profiler.print_kernel_profiler_info()
            ti.profiler.clear_kernel_profiler_info()

    def print_header(self, title: str):
        print("\n" + "=" * 80)
        print(f"{title:^80}")
        print("=" * 80)

    def print_footer(self):
        print("=" * 80)
