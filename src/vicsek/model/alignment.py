from __future__ import annotations

import logging
from typing import Optional, Tuple, Union, TYPE_CHECKING

import numpy as np
import scipy as sp

from vicsek.config import DEFAULT_DAMPING, DEFAULT_INTERACTION_RADIUS

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def neighbour_matrix(
    positions: npt.NDArray[np.float64],
    radius: float,
    boxsize: Optional[Tuple[float, float]] = None
) -> sp.sparse.csr_matrix:
    """
    Sparse (N, N) adjacency of particles closer than `radius`, self included.

    Args:
        positions: Array of shape (N, 2).
        radius: Interaction radius, must be positive.
        boxsize: Domain size for periodic distances. Positions must then lie
            inside [0, boxsize).

    Returns:
        A symmetric 0/1 matrix with ones on the diagonal.
    """
    if radius <= 0.0:
        raise ValueError(f"Interaction radius must be positive, got {radius}.")
    n = positions.shape[0]
    tree = sp.spatial.cKDTree(positions, boxsize=boxsize)
    pairs = np.asarray(tree.query_pairs(radius, output_type="ndarray"), dtype=np.intp).reshape(-1, 2)

    rows = np.concatenate([pairs[:, 0], pairs[:, 1], np.arange(n)])
    cols = np.concatenate([pairs[:, 1], pairs[:, 0], np.arange(n)])
    data = np.ones(rows.shape[0], dtype=np.float64)
    return sp.sparse.coo_matrix((data, (rows, cols)), shape=(n, n)).tocsr()


def align_velocities(
    positions: npt.NDArray[np.float64],
    velocities: npt.NDArray[np.float64],
    radius: float = DEFAULT_INTERACTION_RADIUS,
    noise: float = 0.0,
    rng: Union[np.random.Generator, int, None] = None,
    damping: float = DEFAULT_DAMPING,
    boxsize: Optional[Tuple[float, float]] = None
) -> npt.NDArray[np.float64]:
    """
    One application of the Vicsek alignment rule.

    Every particle takes the direction of the summed velocities of its
    neighbours (itself included), turned by a uniform random angle from
    [-noise/2, noise/2] degrees. The result is damped and normalized to unit
    speed.

    Args:
        positions: Array of shape (N, 2).
        velocities: Array of shape (N, 2).
        radius: Interaction radius.
        noise: Width of the noise interval in degrees.
        rng: Random generator or seed.
        damping: Factor applied before normalization.
        boxsize: Optional periodic domain size, see `neighbour_matrix`.

    Returns:
        New velocities of shape (N, 2), unit length.
    """
    positions = np.asarray(positions, dtype=np.float64)
    velocities = np.asarray(velocities, dtype=np.float64)
    if positions.shape != velocities.shape or positions.ndim != 2 or positions.shape[1] != 2:
        raise ValueError(f"Expected two arrays of shape (N, 2), got {positions.shape} and {velocities.shape}.")
    n = positions.shape[0]
    if n == 0:
        return velocities.copy()

    generator = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    summed = neighbour_matrix(positions, radius, boxsize) @ velocities

    # Opposite neighbours can cancel out; keep the own heading then
    cancelled = np.linalg.norm(summed, axis=1) < 1e-12
    summed[cancelled] = velocities[cancelled]

    angles = np.deg2rad(noise * (0.5 - generator.random(n)))
    cos_a = np.cos(angles)
    sin_a = np.sin(angles)
    rotated = np.column_stack((
        summed[:, 0] * cos_a - summed[:, 1] * sin_a,
        summed[:, 0] * sin_a + summed[:, 1] * cos_a,
    ))
    rotated *= damping

    norms = np.linalg.norm(rotated, axis=1)
    stalled = norms == 0.0
    if np.any(stalled):
        logger.warning(f"{int(stalled.sum())} particles have no heading; velocity left at zero.")
        norms[stalled] = 1.0
    return rotated / norms[:, None]
