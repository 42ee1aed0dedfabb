"""Tests for backend selection and the CLI argument layer."""

import pytest

from fluidsim.config import get_backend, init_taichi
from fluidsim.main import build_parser, cli_overrides
from fluidsim.params import load_config_with_overrides


class TestBackend:
    @pytest.mark.parametrize("name", ["cpu", "CUDA", "vulkan", "metal"])
    def test_env_override(self, monkeypatch, name):
        monkeypatch.setenv("FLUIDSIM_BACKEND", name)
        assert get_backend() == name.lower()

    def test_invalid_env(self, monkeypatch):
        monkeypatch.setenv("FLUIDSIM_BACKEND", "tpu")
        with pytest.raises(ValueError, match="FLUIDSIM_BACKEND"):
            get_backend()

    def test_auto_falls_back(self, monkeypatch):
        monkeypatch.setenv("FLUIDSIM_BACKEND", "auto")
        assert get_backend() in ("cuda", "cpu")

    def test_unknown_backend_rejected_before_init(self):
        with pytest.raises(ValueError, match="Unknown backend"):
            init_taichi(backend="opengl-es")


class TestCli:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.ticks == 200
        assert not args.gui
        assert cli_overrides(args) == {}

    def test_overrides_reach_config(self):
        args = build_parser().parse_args(["--n", "64", "--dt", "0.02", "--ticks", "5"])
        config = load_config_with_overrides(None, cli_overrides(args))
        assert config.n == 64
        assert config.dt == 0.02

    def test_backend_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--backend", "tpu"])
