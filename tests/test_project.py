"""Tests for pressure projection."""

import numpy as np
import pytest

from fluidsim.core.errors import ConfigurationError
from fluidsim.diagnostics import compute_mean_abs_divergence
from fluidsim.kernels import project


def _project(fields, iterations=100, decay=0.0):
    project(fields.velocity, fields.divergence, fields.pressure_pre, iterations, decay)


def _mean_div(fields):
    return float(compute_mean_abs_divergence(fields.velocity.current))


class TestProject:
    def test_reduces_divergence(self, fields, swirl):
        fields.velocity.load(swirl(32, rotation=0.0, expansion=1.0))
        before = _mean_div(fields)
        assert before > 0.0
        _project(fields)
        after = _mean_div(fields)
        assert after < 0.5 * before

    def test_more_iterations_do_better(self, fields_pair, swirl):
        few, many = fields_pair
        vel = swirl(32, rotation=0.0, expansion=1.0)
        few.velocity.load(vel)
        many.velocity.load(vel)
        _project(few, iterations=5)
        _project(many, iterations=100)
        assert _mean_div(many) < _mean_div(few)

    def test_rotation_mostly_kept(self, fields, swirl):
        vel = swirl(32, rotation=1.0, expansion=0.0)
        fields.velocity.load(vel)
        _project(fields)
        result = fields.velocity.to_numpy()
        err = np.abs(result - vel).max()
        assert err < 0.25 * np.abs(vel).max()

    def test_zero_is_fixed_point(self, fields):
        _project(fields)
        assert np.all(fields.velocity.to_numpy() == 0.0)
        assert np.all(fields.pressure_pre.to_numpy() == 0.0)

    def test_uniform_field_unchanged(self, fields):
        vel = np.zeros(fields.velocity.host_shape, dtype=np.float32)
        vel[..., 0] = 0.3
        vel[..., 1] = -0.1
        fields.velocity.load(vel)
        _project(fields, iterations=20)
        np.testing.assert_allclose(fields.velocity.to_numpy(), vel, atol=1e-7)

    def test_decay_scales_previous_pressure(self, fields):
        fields.pressure_pre.fill(2.0)
        _project(fields, iterations=0, decay=0.5)
        np.testing.assert_allclose(fields.pressure_pre.interior(), 1.0)

    def test_zero_decay_resets_pressure(self, fields):
        fields.pressure_pre.fill(2.0)
        _project(fields, iterations=0, decay=0.0)
        assert np.all(fields.pressure_pre.interior() == 0.0)

    def test_rotations(self, fields):
        vel_scratch = fields.velocity.scratch
        div_scratch = fields.divergence.scratch
        p_cur = fields.pressure_pre.current
        _project(fields, iterations=3)
        assert fields.velocity.current is vel_scratch
        assert fields.divergence.current is div_scratch
        # 1 + 3 pressure rotations
        assert fields.pressure_pre.current is p_cur

    def test_layout_errors(self, fields):
        with pytest.raises(ConfigurationError):
            project(fields.density, fields.divergence, fields.pressure_pre, 10)
        with pytest.raises(ConfigurationError):
            project(fields.velocity, fields.velocity, fields.pressure_pre, 10)

    def test_argument_errors(self, fields):
        with pytest.raises(ValueError):
            _project(fields, iterations=-1)
        with pytest.raises(ValueError):
            _project(fields, decay=1.0)


@pytest.fixture
def fields_pair(fluid_factory):
    return fluid_factory(32), fluid_factory(32)
