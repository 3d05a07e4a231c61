import numpy as np
import pytest

from vicsek.model.borders import BorderBounce
from vicsek.model.geometry_utils import rectangle_corners
from vicsek.model.io import APP_VERSION, IOManager
from vicsek.model.particle import particles_to_arrays, populate


def test_snapshot_round_trip(tmp_path):
    path = str(tmp_path / "snapshot.h5")
    particles = populate(25, 4.0, 4.0, seed=11)
    border = BorderBounce(rectangle_corners(4.0, 4.0))

    IOManager.save_snapshot(path, particles, border, attrs={"noise": 12.5, "step": 300})
    snapshot = IOManager.load_snapshot(path)

    expected_pos, expected_vel = particles_to_arrays(particles)
    pos, vel = particles_to_arrays(snapshot.particles)
    np.testing.assert_allclose(pos, expected_pos)
    np.testing.assert_allclose(vel, expected_vel)
    assert [p.id for p in snapshot.particles] == list(range(25))

    assert isinstance(snapshot.border, BorderBounce)
    assert snapshot.border.corners == border.corners
    assert snapshot.attrs == {"noise": 12.5, "step": 300}
    assert snapshot.version == APP_VERSION


def test_snapshot_without_border(tmp_path):
    path = str(tmp_path / "bare.h5")
    IOManager.save_snapshot(path, populate(3, 1.0, 1.0, seed=1))

    snapshot = IOManager.load_snapshot(path)

    assert snapshot.border is None
    assert snapshot.attrs == {}
    assert len(snapshot.particles) == 3


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        IOManager.load_snapshot(str(tmp_path / "missing.h5"))


def test_load_non_hdf5_file(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("Veloc: 0.5 noise: 10")

    with pytest.raises(ValueError, match="not a valid HDF5"):
        IOManager.load_snapshot(str(path))
