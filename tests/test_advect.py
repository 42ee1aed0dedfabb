"""Tests for semi-Lagrangian / MacCormack advection."""

import numpy as np
import pytest

from fluidsim.core.errors import ConfigurationError
from fluidsim.fields import FieldSpec, create_field
from fluidsim.kernels import AdvectionScheme, advect, trace_extent

SCHEMES = ["semi_lagrangian", "maccormack"]


def _uniform_velocity(fields, vx, vy):
    vel = np.zeros(fields.velocity.host_shape, dtype=np.float32)
    vel[..., 0] = vx
    vel[..., 1] = vy
    fields.velocity.load(vel)


def _host_bilinear(f, px, py):
    i0 = np.floor(px).astype(int)
    j0 = np.floor(py).astype(int)
    tx = (px - i0)[..., None]
    ty = (py - j0)[..., None]
    return (
        (1.0 - tx) * (1.0 - ty) * f[i0, j0]
        + tx * (1.0 - ty) * f[i0 + 1, j0]
        + (1.0 - tx) * ty * f[i0, j0 + 1]
        + tx * ty * f[i0 + 1, j0 + 1]
    )


def _host_traces(vel, dt, scheme):
    """Sample points used per interior cell, mirroring the advection kernel."""
    n = vel.shape[0] - 2
    dt0 = dt * n
    vel = vel.astype(np.float64)
    ci, cj = np.meshgrid(np.arange(1, n + 1), np.arange(1, n + 1), indexing="ij")
    bx = np.clip(ci - dt0 * vel[1:-1, 1:-1, 0], 0.5, n + 0.5)
    by = np.clip(cj - dt0 * vel[1:-1, 1:-1, 1], 0.5, n + 0.5)
    points = [(bx, by)]
    if scheme == "maccormack":
        u = _host_bilinear(vel, bx, by)
        fx = np.clip(bx + dt0 * u[..., 0], 0.5, n + 0.5)
        fy = np.clip(by + dt0 * u[..., 1], 0.5, n + 0.5)
        points.append((fx, fy))
    return points


def _neighbourhood_bounds(data, points, eps=1e-3):
    """Per-cell min/max of the source over the 2x2 taps of every sample point.

    Taps within eps of a cell boundary on either side are included, so f32
    rounding in the kernel cannot pick a cell outside the bound.
    """
    last = data.shape[0] - 1
    lo = np.full(points[0][0].shape, np.inf)
    hi = np.full(points[0][0].shape, -np.inf)
    for px, py in points:
        i_lo = np.floor(px - eps).astype(int)
        i_hi = np.floor(px + eps).astype(int) + 1
        j_lo = np.floor(py - eps).astype(int)
        j_hi = np.floor(py + eps).astype(int) + 1
        for di in range(3):
            for dj in range(3):
                ii = i_lo + di
                jj = j_lo + dj
                valid = (ii <= i_hi) & (jj <= j_hi)
                values = data[np.clip(ii, 0, last), np.clip(jj, 0, last)]
                lo = np.where(valid, np.minimum(lo, values), lo)
                hi = np.where(valid, np.maximum(hi, values), hi)
    return lo, hi


class TestAdvectionScheme:
    def test_parse(self):
        assert AdvectionScheme.parse("maccormack") is AdvectionScheme.MACCORMACK
        assert (
            AdvectionScheme.parse(AdvectionScheme.SEMI_LAGRANGIAN)
            is AdvectionScheme.SEMI_LAGRANGIAN
        )

    def test_unknown(self, fields):
        with pytest.raises(ConfigurationError, match="Unknown advection scheme"):
            advect(fields.density, fields.velocity.current, 0.01, scheme="upwind")


class TestAdvect:
    @pytest.mark.parametrize("scheme", SCHEMES)
    def test_zero_velocity_is_identity(self, fields, gaussian, scheme):
        data = gaussian(32)
        fields.density.load(data)
        advect(fields.density, fields.velocity.current, 0.01, scheme)
        result = fields.density.to_numpy("scratch")
        np.testing.assert_allclose(result[1:-1, 1:-1], data[1:-1, 1:-1], atol=1e-6)

    def test_integer_shift(self, fields, gaussian):
        """dt * N * u = 2 cells: semi-Lagrangian is an exact shift."""
        data = gaussian(32, sigma=3.0)
        fields.density.load(data)
        n = fields.n
        _uniform_velocity(fields, 2.0 / (n * 0.01), 0.0)
        advect(fields.density, fields.velocity.current, 0.01, "semi_lagrangian")
        result = fields.density.to_numpy("scratch")
        np.testing.assert_allclose(result[3:-1, 1:-1], data[1:-3, 1:-1], atol=1e-5)

    @pytest.mark.parametrize("scheme", SCHEMES)
    def test_bounded(self, fields, gaussian, swirl, scheme):
        data = gaussian(32, sigma=3.0)
        fields.density.load(data)
        fields.velocity.load(swirl(32))
        advect(fields.density, fields.velocity.current, 0.05, scheme)
        result = fields.density.to_numpy("scratch")
        assert np.all(np.isfinite(result))
        assert result.min() >= -1e-6
        assert result.max() <= data.max() + 1e-6

    @pytest.mark.parametrize("scheme", SCHEMES)
    def test_bounded_by_source_neighbourhood(self, fields, gaussian, swirl, scheme):
        """Each cell lies within the 2x2 source taps around its sample points."""
        data = gaussian(32, sigma=3.0)
        vel = swirl(32)
        fields.density.load(data)
        fields.velocity.load(vel)
        advect(fields.density, fields.velocity.current, 0.05, scheme)
        result = fields.density.to_numpy("scratch")[1:-1, 1:-1]

        lo, hi = _neighbourhood_bounds(data, _host_traces(vel, 0.05, scheme))
        assert np.all(result >= lo - 1e-6)
        assert np.all(result <= hi + 1e-6)

    def test_neighbourhood_bound_is_local(self, gaussian, swirl):
        """The per-cell bound is much tighter than the global range."""
        data = gaussian(32, sigma=3.0)
        lo, hi = _neighbourhood_bounds(data, _host_traces(swirl(32), 0.05, "maccormack"))
        assert np.all(lo <= hi)
        assert (hi < 0.5 * data.max()).mean() > 0.5

    @pytest.mark.parametrize("scheme", SCHEMES)
    def test_self_advection(self, fields, swirl, scheme):
        vel = swirl(32)
        fields.velocity.load(vel)
        advect(fields.velocity, fields.velocity.current, 0.01, scheme)
        result = fields.velocity.to_numpy("scratch")
        assert np.all(np.isfinite(result))
        assert np.abs(result).max() <= 2.0 * np.abs(vel).max() + 1e-6

    def test_writes_scratch_only(self, fields, gaussian):
        data = gaussian(32)
        fields.density.load(data)
        cur = fields.density.current
        _uniform_velocity(fields, 1.0, 0.5)
        advect(fields.density, fields.velocity.current, 0.01)
        assert fields.density.current is cur
        np.testing.assert_array_equal(fields.density.to_numpy(), data)

    def test_three_components_rejected(self, fields):
        color = create_field(FieldSpec("color", components=3), fields.geometry)
        with pytest.raises(ConfigurationError, match="components"):
            advect(color, fields.velocity.current, 0.01)

    def test_scalar_velocity_rejected(self, fields):
        with pytest.raises(ConfigurationError):
            advect(fields.density, fields.divergence.current, 0.01)


class TestTraceExtent:
    @pytest.mark.parametrize("scheme", SCHEMES)
    def test_large_velocity_stays_in_domain(self, fields, scheme):
        n = fields.n
        _uniform_velocity(fields, 500.0, -500.0)
        lo, hi = trace_extent(fields.velocity.current, 0.01, scheme)
        assert lo >= 0.5 - 1e-6
        assert hi <= n + 0.5 + 1e-6

    def test_zero_velocity_covers_interior(self, fields):
        lo, hi = trace_extent(fields.velocity.current, 0.01)
        assert lo == pytest.approx(1.0)
        assert hi == pytest.approx(fields.n)
