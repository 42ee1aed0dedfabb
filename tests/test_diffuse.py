"""Tests for Jacobi diffusion."""

import numpy as np
import pytest

from fluidsim.diagnostics import compute_sum_squares, compute_total
from fluidsim.kernels import diffuse, diffusion_factor


class TestDiffusionFactor:
    def test_scaling(self):
        assert diffusion_factor(1e-4, 0.01, 100) == pytest.approx(1e-2)
        assert diffusion_factor(0.0, 0.01, 100) == 0.0


class TestDiffuse:
    def test_zero_is_fixed_point(self, fields):
        diffuse(fields.density, 1e-3, 0.01, 20)
        assert np.all(fields.density.to_numpy() == 0.0)

    def test_energy_non_increasing(self, fields, gaussian):
        fields.density.load(gaussian(32, sigma=3.0))
        before = compute_sum_squares(fields.density.current)
        diffuse(fields.density, 1e-2, 0.01, 20)
        after = compute_sum_squares(fields.density.current)
        assert after < before

    def test_peak_spreads(self, fields, gaussian):
        data = gaussian(32, sigma=2.0)
        fields.density.load(data)
        diffuse(fields.density, 1e-2, 0.01, 20)
        result = fields.density.to_numpy()
        assert result.max() < data.max()
        assert result.min() >= 0.0

    def test_interior_mass_roughly_kept(self, fields, gaussian):
        """A blob far from the edge keeps its total."""
        fields.density.load(gaussian(32, sigma=2.0))
        before = compute_total(fields.density.current)
        diffuse(fields.density, 1e-3, 0.01, 20)
        after = compute_total(fields.density.current)
        assert after == pytest.approx(before, rel=1e-3)

    def test_zero_coefficient_is_identity(self, fields, gaussian):
        data = gaussian(32)
        fields.density.load(data)
        diffuse(fields.density, 0.0, 0.01, 20)
        np.testing.assert_allclose(fields.density.to_numpy(), data, atol=1e-7)

    def test_zero_iterations_noop(self, fields, gaussian):
        fields.density.load(gaussian(32))
        cur, scr, snap = fields.density.current, fields.density.scratch, fields.density.snapshot
        diffuse(fields.density, 1e-2, 0.01, 0)
        assert fields.density.current is cur
        assert fields.density.scratch is scr
        assert fields.density.snapshot is snap

    def test_snapshot_holds_pre_diffusion_field(self, fields, gaussian):
        data = gaussian(32, sigma=2.0)
        fields.density.load(data)
        fields.density.scratch.fill(-1.0)
        diffuse(fields.density, 1e-2, 0.01, 5)
        np.testing.assert_array_equal(fields.density.to_numpy("snapshot"), data)

    def test_vector_field(self, fields, swirl):
        fields.velocity.load(swirl(32))
        before = compute_sum_squares(fields.velocity.current)
        diffuse(fields.velocity, 1e-2, 0.01, 10)
        assert compute_sum_squares(fields.velocity.current) < before

    def test_negative_arguments(self, fields):
        with pytest.raises(ValueError):
            diffuse(fields.density, -1.0, 0.01, 5)
        with pytest.raises(ValueError):
            diffuse(fields.density, 1.0, 0.01, -5)
