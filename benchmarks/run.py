import argparse
import traceback

from benchmarks.scaling import ScalingBenchmark
from benchmarks.stages import StageBenchmark

# Registry of available benchmarks
BENCHMARKS = {
    "scaling": ScalingBenchmark,
    "stages": StageBenchmark,
}


def main():
    parser = argparse.ArgumentParser(description="fluidsim Benchmark Harness")
    parser.add_argument(
        "benchmark",
        nargs="?",
        choices=list(BENCHMARKS.keys()) + ["all"],
        default="all",
        help="Benchmark to run (default: all)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable Taichi kernel profiler",
    )
    parser.add_argument("--backend", help="Taichi backend (default: auto)")

    args = parser.parse_args()

    if args.benchmark == "all":
        to_run = list(BENCHMARKS.values())
    else:
        to_run = [BENCHMARKS[args.benchmark]]

    backend = args.backend
    for bench_cls in to_run:
        print(f"\nRunning {bench_cls.__name__}...")
        try:
            # ti.init is global; later benchmarks re-init on the same backend
            b = bench_cls(profile=args.profile, backend=backend)
            backend = b.backend
            b.run()
        except Exception:
            traceback.print_exc()


if __name__ == "__main__":
    main()
