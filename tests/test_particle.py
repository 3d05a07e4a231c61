import numpy as np
import pytest

from vicsek.model.geometry_primitives import Point, Vector
from vicsek.model.particle import (
    Particle,
    ParticleState,
    particles_from_arrays,
    particles_to_arrays,
    populate,
)


def test_particle_next_position_and_speed():
    p = Particle(Point(1.0, 1.0), Vector(3.0, 4.0))

    assert p.next_position == Point(4.0, 5.0)
    assert p.speed == pytest.approx(5.0)
    assert p.state == ParticleState(Point(1.0, 1.0), Vector(3.0, 4.0))


def test_particle_update():
    p = Particle(Point(0.0, 0.0), Vector(1.0, 0.0))
    p.update(ParticleState(Point(2.0, 2.0), Vector(0.0, -1.0)))

    assert p.position == Point(2.0, 2.0)
    assert p.velocity == Vector(0.0, -1.0)


def test_populate():
    particles = populate(200, 5.0, 3.0, speed=0.5, seed=42)
    positions, velocities = particles_to_arrays(particles)

    assert len(particles) == 200
    assert [p.id for p in particles] == list(range(200))
    assert np.all((positions[:, 0] >= 0.0) & (positions[:, 0] < 5.0))
    assert np.all((positions[:, 1] >= 0.0) & (positions[:, 1] < 3.0))
    np.testing.assert_allclose(np.linalg.norm(velocities, axis=1), 0.5)


def test_populate_is_reproducible():
    a, _ = particles_to_arrays(populate(10, 1.0, 1.0, seed=7))
    b, _ = particles_to_arrays(populate(10, 1.0, 1.0, seed=7))
    np.testing.assert_array_equal(a, b)


@pytest.mark.parametrize("count, width, height", [(0, 1.0, 1.0), (5, 0.0, 1.0), (5, 1.0, -1.0)])
def test_populate_invalid(count, width, height):
    with pytest.raises(ValueError):
        populate(count, width, height)


def test_arrays_round_trip_shapes():
    particles = particles_from_arrays(np.array([[0.0, 1.0], [2.0, 3.0]]), np.array([[1.0, 0.0], [0.0, 1.0]]))

    assert particles[1].position == Point(2.0, 3.0)
    assert particles[1].velocity == Vector(0.0, 1.0)
    positions, velocities = particles_to_arrays(particles)
    assert positions.shape == velocities.shape == (2, 2)


def test_empty_arrays():
    positions, velocities = particles_to_arrays([])
    assert positions.shape == (0, 2)


def test_from_arrays_shape_mismatch():
    with pytest.raises(ValueError):
        particles_from_arrays(np.zeros((3, 2)), np.zeros((2, 2)))
