"""
Configuration & Global Constants
================================
This module serves as the central registry for numerical tolerances and the
default parameters of a Vicsek ensemble.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (tolerances, domain size, damping)
   scattered throughout the geometry and model code.
2. Consistency: Functions take these values as keyword defaults, so a caller
   overriding one of them does it in one obvious place.

Exports:
    GEOMETRY_EPS (float): Tolerance for parallel tests and endpoint checks.
    DEFAULT_DOMAIN_SIZE (float): Side of the square simulation domain.
    DEFAULT_PARTICLE_COUNT (int): Ensemble size.
"""

# Geometry
GEOMETRY_EPS: float = 1e-9

# Ensemble defaults
DEFAULT_DOMAIN_SIZE: float = 31.6
DEFAULT_PARTICLE_COUNT: int = 4096
DEFAULT_SPEED: float = 1.0

# Alignment rule
DEFAULT_INTERACTION_RADIUS: float = 1.0
DEFAULT_DAMPING: float = 0.9995

# Observables
DEFAULT_SLICE_COUNT: int = 10

# Upper limit of successive reflections resolved within one step (corners)
MAX_BOUNCES_PER_STEP: int = 16
