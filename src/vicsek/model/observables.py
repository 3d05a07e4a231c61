"""
Ensemble Observables
====================
Statistics of a particle ensemble: mean velocity, the polar order parameter
and averaged profiles over horizontal slices of the domain.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from vicsek.config import DEFAULT_SLICE_COUNT

if TYPE_CHECKING:
    import numpy.typing as npt


def average_velocity(velocities: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Mean velocity vector of the ensemble, shape (2,)."""
    velocities = np.asarray(velocities, dtype=np.float64).reshape(-1, 2)
    if velocities.shape[0] == 0:
        return np.zeros(2)
    return velocities.mean(axis=0)


def order_parameter(velocities: npt.NDArray[np.float64]) -> float:
    """
    Polar order parameter |<v>| / <|v|>.

    1.0 for a fully aligned ensemble, close to 0.0 for random headings.
    Returns 0.0 for an empty or motionless ensemble.
    """
    velocities = np.asarray(velocities, dtype=np.float64).reshape(-1, 2)
    if velocities.shape[0] == 0:
        return 0.0
    mean_speed = float(np.linalg.norm(velocities, axis=1).mean())
    if mean_speed == 0.0:
        return 0.0
    return float(np.linalg.norm(velocities.mean(axis=0)) / mean_speed)


def slice_indices(
    positions: npt.NDArray[np.float64],
    height: float,
    slices: int = DEFAULT_SLICE_COUNT
) -> npt.NDArray[np.int64]:
    """
    Index of the horizontal slice every particle belongs to.

    Particles on or beyond the top/bottom edge are counted in the last/first slice.
    """
    if slices <= 0:
        raise ValueError(f"Number of slices must be positive, got {slices}.")
    if height <= 0.0:
        raise ValueError(f"Domain height must be positive, got {height}.")
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
    slice_height = height / slices
    idx = np.floor(positions[:, 1] / slice_height).astype(np.int64)
    return np.clip(idx, 0, slices - 1)


def velocity_distribution_y(
    positions: npt.NDArray[np.float64],
    velocities: npt.NDArray[np.float64],
    height: float,
    slices: int = DEFAULT_SLICE_COUNT
) -> npt.NDArray[np.float64]:
    """
    Average velocity in each slice parallel to the X axis.

    Args:
        positions: Array of shape (N, 2).
        velocities: Array of shape (N, 2).
        height: Domain extent along Y.
        slices: Number of slices.

    Returns:
        Array of shape (slices, 2). Empty slices report a zero vector.
    """
    velocities = np.asarray(velocities, dtype=np.float64).reshape(-1, 2)
    idx = slice_indices(positions, height, slices)
    counts = np.bincount(idx, minlength=slices)
    sums = np.column_stack((
        np.bincount(idx, weights=velocities[:, 0], minlength=slices),
        np.bincount(idx, weights=velocities[:, 1], minlength=slices),
    ))
    return sums / np.maximum(counts, 1)[:, None]


def density_distribution_y(
    positions: npt.NDArray[np.float64],
    width: float,
    height: float,
    slices: int = DEFAULT_SLICE_COUNT
) -> npt.NDArray[np.float64]:
    """Number density (particles per unit area) in each slice parallel to the X axis."""
    if width <= 0.0:
        raise ValueError(f"Domain width must be positive, got {width}.")
    idx = slice_indices(positions, height, slices)
    counts = np.bincount(idx, minlength=slices).astype(np.float64)
    slice_area = width * height / slices
    return counts / slice_area
