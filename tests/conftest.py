"""Pytest fixtures and test utilities for fluidsim."""


import numpy as np
import pytest

from fluidsim.config import init_taichi
from fluidsim.core.geometry import GridGeometry
from fluidsim.fields import FluidFields, create_fluid_container


@pytest.fixture(scope="session", autouse=True)
def taichi_init():
    """Initialize Taichi once per test session with CPU backend."""
    init_taichi(backend="cpu", debug=True)
    yield


@pytest.fixture
def fluid_factory():
    """Factory for allocated, zero-filled fluid fields of various sizes."""
    return make_fluid_fields


def make_fluid_fields(n: int = 32) -> FluidFields:
    return FluidFields(create_fluid_container(GridGeometry(n)))


@pytest.fixture
def fields():
    """Small zero-filled fluid field set (N = 32)."""
    return make_fluid_fields(32)


@pytest.fixture
def gaussian():
    """Generate a padded Gaussian bump."""
    return make_gaussian


def make_gaussian(
    n: int,
    center: tuple[float, float] | None = None,
    sigma: float | None = None,
    amplitude: float = 1.0,
) -> np.ndarray:
    """(n+2, n+2) Gaussian with a zero ghost ring, index order [x, y]."""
    if center is None:
        center = ((n + 1) / 2.0, (n + 1) / 2.0)
    if sigma is None:
        sigma = n / 8.0
    coords = np.arange(n + 2, dtype=np.float64)
    dx = coords.reshape(-1, 1) - center[0]
    dy = coords.reshape(1, -1) - center[1]
    data = amplitude * np.exp(-(dx * dx + dy * dy) / (2.0 * sigma * sigma))
    data[0, :] = data[-1, :] = data[:, 0] = data[:, -1] = 0.0
    return data.astype(np.float32)


@pytest.fixture
def swirl():
    """Generate a padded velocity field with divergence."""
    return make_swirl


def make_swirl(n: int, rotation: float = 1.0, expansion: float = 1.0) -> np.ndarray:
    """(n+2, n+2, 2) velocity: Gaussian-weighted rotation plus outward flow.

    The rotational part is divergence-free, the radial part is not.
    """
    c = (n + 1) / 2.0
    sigma = n / 8.0
    coords = np.arange(n + 2, dtype=np.float64)
    dx = coords.reshape(-1, 1) - c
    dy = coords.reshape(1, -1) - c
    g = np.exp(-(dx * dx + dy * dy) / (2.0 * sigma * sigma)) / sigma
    vel = np.zeros((n + 2, n + 2, 2), dtype=np.float64)
    vel[..., 0] = g * (-rotation * dy + expansion * dx)
    vel[..., 1] = g * (rotation * dx + expansion * dy)
    vel[0, :] = vel[-1, :] = vel[:, 0] = vel[:, -1] = 0.0
    return vel.astype(np.float32)
