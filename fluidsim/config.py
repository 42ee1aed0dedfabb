"""
Taichi configuration and initialization.

Environment variables:
    FLUIDSIM_BACKEND: 'cuda', 'vulkan', 'metal', 'cpu', or 'auto' (default)
    FLUIDSIM_DEBUG: '1' to enable debug mode (bounds checks)

Falls back to CPU if no CUDA device is found.
"""

import os
import subprocess

import taichi as ti

from fluidsim.core.dtypes import DTYPE

BACKENDS = ("cuda", "vulkan", "metal", "cpu")


def get_backend() -> str:
    """Determine Taichi backend: check env var, then auto-detect."""
    env = os.environ.get("FLUIDSIM_BACKEND", "auto").lower()

    if env in BACKENDS:
        return env
    if env != "auto":
        raise ValueError(f"Invalid FLUIDSIM_BACKEND: {env}")

    # Auto-detect CUDA
    try:
        result = subprocess.run(
            ["nvidia-smi", "-L"], capture_output=True, text=True, timeout=5
        )
        if result.returncode == 0 and "GPU" in result.stdout:
            return "cuda"
    except (FileNotFoundError, subprocess.TimeoutExpired):
        pass

    return "cpu"


def init_taichi(
    backend: str | None = None,
    debug: bool | None = None,
    kernel_profiler: bool = False,
) -> str:
    """Initialize Taichi with specified or auto-detected backend.

    Returns the backend name actually requested. Failure inside ti.init
    propagates; there is no retry.
    """
    if backend is None:
        backend = get_backend()
    if debug is None:
        debug = os.environ.get("FLUIDSIM_DEBUG", "0") == "1"

    archs = {"cuda": ti.cuda, "vulkan": ti.vulkan, "metal": ti.metal, "cpu": ti.cpu}
    arch = archs.get(backend)
    if arch is None:
        raise ValueError(f"Unknown backend: {backend}")

    ti.init(
        arch=arch,
        default_fp=DTYPE,
        debug=debug,
        offline_cache=True,
        random_seed=42,
        kernel_profiler=kernel_profiler,
    )
    return backend
