"""Tests for snapshot output."""

import numpy as np

from fluidsim.output import save_density_snapshot


def test_snapshot_files(fields, gaussian, tmp_path):
    data = gaussian(32)
    fields.density.load(data)

    paths = save_density_snapshot(fields, tmp_path / "snaps", tick=12)

    assert paths["npy"].name == "density_000012.npy"
    assert paths["png"].exists()
    assert paths["png"].stat().st_size > 0
    saved = np.load(paths["npy"])
    assert saved.shape == (32, 32)
    np.testing.assert_array_equal(saved, data[1:-1, 1:-1])


def test_snapshot_prefix(fields, tmp_path):
    paths = save_density_snapshot(fields, tmp_path, tick=0, prefix="dye")
    assert paths["png"].name == "dye_000000.png"
