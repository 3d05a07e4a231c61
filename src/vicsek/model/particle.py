"""
Particle Data Model
===================
Defines the self-propelled particle and the value object handed back by
border interactions.

Classes:
    ParticleState: Immutable (position, velocity) pair.
    Particle: Mutable particle owned by the caller's simulation.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Tuple, TYPE_CHECKING

import numpy as np

from vicsek.config import DEFAULT_SPEED
from vicsek.model.geometry_primitives import Point, Vector

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParticleState:
    position: Point
    velocity: Vector


@dataclass
class Particle:
    """
    A point particle moving by `velocity` every step.
    The next unobstructed position is `position + velocity`.
    """
    position: Point
    velocity: Vector
    id: Optional[int] = None

    @property
    def next_position(self) -> Point:
        return self.position + self.velocity

    @property
    def speed(self) -> float:
        return self.velocity.magnitude

    @property
    def state(self) -> ParticleState:
        return ParticleState(self.position, self.velocity)

    def update(self, state: ParticleState) -> None:
        """Write a computed state back onto the particle."""
        self.position = state.position
        self.velocity = state.velocity


def populate(
    count: int,
    width: float,
    height: float,
    speed: float = DEFAULT_SPEED,
    seed: Optional[int] = None
) -> List[Particle]:
    """
    Scatter particles uniformly over the rectangle [0, width) x [0, height).

    Velocity components are drawn from [-0.5, 0.5) and the vector is then
    scaled to `speed`, so every heading is possible but all particles move
    equally fast.

    Args:
        count: Number of particles, must be positive.
        width: Domain extent along X.
        height: Domain extent along Y.
        speed: Magnitude of every initial velocity.
        seed: Seed for the random generator, for reproducible ensembles.

    Returns:
        The list of particles, ids 0 .. count-1.
    """
    if count <= 0:
        raise ValueError(f"Particle count must be positive, got {count}.")
    if width <= 0.0 or height <= 0.0:
        raise ValueError(f"Domain needs positive dimensions, got {width} x {height}.")

    rng = np.random.default_rng(seed)
    positions = rng.random((count, 2)) * np.array([width, height])
    velocities = rng.random((count, 2)) - 0.5

    # Redraw the (practically impossible) zero vectors before normalizing
    norms = np.linalg.norm(velocities, axis=1)
    while np.any(norms == 0.0):
        zero = norms == 0.0
        velocities[zero] = rng.random((int(zero.sum()), 2)) - 0.5
        norms = np.linalg.norm(velocities, axis=1)
    velocities = velocities / norms[:, None] * speed

    logger.debug(f"Populated {count} particles in a {width} x {height} domain.")
    return particles_from_arrays(positions, velocities)


def particles_to_arrays(particles: List[Particle]) -> Tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Stack particle positions and velocities into two (N, 2) arrays."""
    positions = np.array([[p.position.x, p.position.y] for p in particles], dtype=np.float64).reshape(-1, 2)
    velocities = np.array([[p.velocity.x, p.velocity.y] for p in particles], dtype=np.float64).reshape(-1, 2)
    return positions, velocities


def particles_from_arrays(
    positions: npt.NDArray[np.float64],
    velocities: npt.NDArray[np.float64]
) -> List[Particle]:
    positions = np.asarray(positions, dtype=np.float64)
    velocities = np.asarray(velocities, dtype=np.float64)
    if positions.shape != velocities.shape or positions.ndim != 2 or positions.shape[1] != 2:
        raise ValueError(f"Expected two arrays of shape (N, 2), got {positions.shape} and {velocities.shape}.")
    return [
        Particle(position=Point(float(p[0]), float(p[1])), velocity=Vector(float(v[0]), float(v[1])), id=i)
        for i, (p, v) in enumerate(zip(positions, velocities))
    ]
