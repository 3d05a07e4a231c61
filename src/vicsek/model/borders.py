"""
Border Interaction Policies
===========================
Defines how a particle behaves when its next step leaves the domain polygon.

Why is this file needed?
------------------------
1. Strategy: every policy (bounce, periodic wrap, absorb) exposes the same
   `interact(particle, index)` call, so the caller only detects the crossing
   and picks the edge index.
2. Purity: `interact` returns the new `ParticleState` and never touches the
   particle. `apply` is the one place that writes the result back.
3. Persistence: `to_dict`/`from_dict` round-trip a border with its policy tag.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import StrEnum
import logging
from typing import Any, Dict, List, Optional, Sequence, Type, Union

from vicsek.config import GEOMETRY_EPS, MAX_BOUNCES_PER_STEP
from vicsek.model.geometry_primitives import Point, Polygon, Segment, Vector
from vicsek.model.geometry_utils import (
    angle_between,
    is_counter_clockwise,
    rotate_point,
    rotate_vector,
    segment_intersection,
    segment_intersection_param,
)
from vicsek.model.particle import Particle, ParticleState

logger = logging.getLogger(__name__)

CornerLike = Union[Point, Sequence[float]]


class BorderPolicy(StrEnum):
    BOUNCE = "bounce"
    WRAP = "wrap"
    ABSORB = "absorb"


@dataclass
class Border(ABC):
    """
    Closed polygonal border of the simulation domain.
    Edge `i` runs from corner `i` to corner `i + 1` (the last edge closes the loop).
    """
    corners: List[CornerLike]
    polygon: Polygon = field(init=False, repr=False)
    edges: List[Segment] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.polygon = Polygon(list(self.corners))
        self.corners = list(self.polygon.corners)
        if len(self.polygon) < 3:
            raise ValueError(f"A border needs at least 3 corners, got {len(self.polygon)}.")
        self.edges = self.polygon.edges

    @property
    @abstractmethod
    def policy(self) -> BorderPolicy:
        pass

    def edge(self, index: int) -> Segment:
        if not 0 <= index < len(self.edges):
            raise IndexError(f"Border edge index {index} out of range (0..{len(self.edges) - 1}).")
        return self.edges[index]

    def find_crossed_edge(self, particle: Particle) -> Optional[int]:
        """
        Index of the edge crossed by the particle's next step, or None.

        When the step crosses several edges (near a corner) the one hit first
        wins. A particle resting on an edge counts as crossing it only when it
        heads outward through that edge.
        """
        start = particle.position
        end = particle.next_position
        if start.distance_to(end) < GEOMETRY_EPS:
            return None

        best_index: Optional[int] = None
        best_t = float("inf")
        for i, edge in enumerate(self.edges):
            t = segment_intersection_param(start, end, edge.first, edge.second)
            if t is None:
                continue
            if t <= GEOMETRY_EPS and particle.velocity.dot(self.polygon.outward_normal(i)) <= 0.0:
                continue
            if t < best_t:
                best_t = t
                best_index = i
        return best_index

    @abstractmethod
    def interact(self, particle: Particle, index: int) -> ParticleState:
        """Compute the particle state after it crosses edge `index`."""

    def apply(self, particle: Particle) -> bool:
        """
        Detect a crossing and write the resulting state onto the particle.

        Returns:
            True if the particle interacted with the border.
        """
        index = self.find_crossed_edge(particle)
        if index is None:
            return False
        state = self.interact(particle, index)
        logger.debug(f"Particle {particle.id} hit edge {index} ({self.policy}): "
                     f"{particle.position} -> {state.position}")
        particle.update(state)
        return True

    def _crossing_point(self, particle: Particle, index: int) -> Point:
        edge = self.edge(index)
        if particle.speed < GEOMETRY_EPS:
            raise ValueError(f"Particle {particle.id} has zero displacement and cannot cross edge {index}.")
        intersection = segment_intersection(particle.position, particle.next_position, edge.first, edge.second)
        if intersection is None:
            raise ValueError(
                f"Step {particle.position} -> {particle.next_position} of particle {particle.id} "
                f"does not cross edge {index} ({edge.first} -> {edge.second})."
            )
        return intersection

    def to_dict(self) -> Dict[str, Any]:
        return {"policy": self.policy.value, "corners": [[c.x, c.y] for c in self.corners]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Border:
        return create_border(data.get("policy", BorderPolicy.BOUNCE), data["corners"])


@dataclass
class BorderBounce(Border):
    """Reflecting border: the particle is mirrored across the edge it crosses."""

    @property
    def policy(self) -> BorderPolicy: return BorderPolicy.BOUNCE

    def interact(self, particle: Particle, index: int) -> ParticleState:
        position_next = particle.next_position
        speed = particle.velocity
        border = self.edge(index).to_vector()

        intersection = self._crossing_point(particle, index)
        angle = angle_between(speed, border)

        # Twice the acute angle between travel and border, clockwise by default
        if angle > 90:
            angle = -2 * (180 - angle)
        else:
            angle = -2 * angle

        # Approaching from the other side turns the reflection the other way
        if is_counter_clockwise(speed, border):
            angle = -angle

        return ParticleState(
            position=rotate_point(intersection, position_next, angle),
            velocity=rotate_vector(speed, angle),
        )

    def apply(self, particle: Particle) -> bool:
        """
        Bounce the particle for its whole step.

        The reflected remainder of the step can hit another edge near a
        corner, so reflections are repeated from each intersection point
        until the remainder stays inside.
        """
        index = self.find_crossed_edge(particle)
        if index is None:
            return False

        speed = particle.speed
        step = Particle(particle.position, particle.velocity, id=particle.id)
        for _ in range(MAX_BOUNCES_PER_STEP):
            intersection = self._crossing_point(step, index)
            state = self.interact(step, index)
            # `step` is parallel to the true velocity, only its length differs
            velocity = state.velocity.normalize() * speed
            logger.debug(f"Particle {particle.id} bounced off edge {index}: "
                         f"{step.position} -> {state.position}")

            remainder = state.position - intersection
            if remainder.magnitude < GEOMETRY_EPS:
                position = state.position
                break
            step = Particle(intersection, remainder, id=particle.id)
            index = self.find_crossed_edge(step)
            if index is None:
                position = state.position
                break
        else:
            logger.warning(f"Particle {particle.id} exceeded {MAX_BOUNCES_PER_STEP} bounces in one step; "
                           f"stopping it on the border.")
            position = intersection

        particle.update(ParticleState(position=position, velocity=velocity))
        return True


@dataclass
class BorderWrap(Border):
    """
    Periodic border of an axis-aligned rectangle.
    A particle leaving through one edge re-enters through the opposite one.
    """

    def __post_init__(self) -> None:
        super().__post_init__()
        if len(self.edges) != 4 or any(
            abs(e.first.x - e.second.x) > GEOMETRY_EPS and abs(e.first.y - e.second.y) > GEOMETRY_EPS
            for e in self.edges
        ):
            raise ValueError("Periodic border requires an axis-aligned rectangle.")
        x_min, y_min, x_max, y_max = self.polygon.bounds
        if x_max - x_min < GEOMETRY_EPS or y_max - y_min < GEOMETRY_EPS:
            raise ValueError("Periodic border requires a rectangle with non-zero area.")

    @property
    def policy(self) -> BorderPolicy: return BorderPolicy.WRAP

    def find_crossed_edge(self, particle: Particle) -> Optional[int]:
        """Edge whose side of the half-open box [x_min, x_max) x [y_min, y_max) the next position leaves by."""
        return self._exit_edge(particle.next_position)

    def interact(self, particle: Particle, index: int) -> ParticleState:
        self.edge(index)
        position_next = particle.next_position
        if self._exit_edge(position_next) is None:
            raise ValueError(
                f"Step {particle.position} -> {position_next} of particle {particle.id} stays inside the border."
            )

        x_min, y_min, x_max, y_max = self.polygon.bounds
        x = x_min + (position_next.x - x_min) % (x_max - x_min)
        y = y_min + (position_next.y - y_min) % (y_max - y_min)
        # Rounding of tiny negative offsets can land exactly on the upper bound
        if x >= x_max:
            x = x_min
        if y >= y_max:
            y = y_min
        return ParticleState(position=Point(x, y), velocity=particle.velocity)

    def _exit_edge(self, point: Point) -> Optional[int]:
        x_min, y_min, x_max, y_max = self.polygon.bounds
        for i, e in enumerate(self.edges):
            if abs(e.first.x - e.second.x) <= GEOMETRY_EPS:
                if abs(e.first.x - x_min) <= GEOMETRY_EPS and point.x < x_min:
                    return i
                if abs(e.first.x - x_max) <= GEOMETRY_EPS and point.x >= x_max:
                    return i
            else:
                if abs(e.first.y - y_min) <= GEOMETRY_EPS and point.y < y_min:
                    return i
                if abs(e.first.y - y_max) <= GEOMETRY_EPS and point.y >= y_max:
                    return i
        return None


@dataclass
class BorderAbsorb(Border):
    """Absorbing border: the particle stops where it meets the edge."""

    @property
    def policy(self) -> BorderPolicy: return BorderPolicy.ABSORB

    def interact(self, particle: Particle, index: int) -> ParticleState:
        return ParticleState(position=self._crossing_point(particle, index), velocity=Vector(0.0, 0.0))


BORDER_TYPES: Dict[BorderPolicy, Type[Border]] = {
    BorderPolicy.BOUNCE: BorderBounce,
    BorderPolicy.WRAP: BorderWrap,
    BorderPolicy.ABSORB: BorderAbsorb,
}


def create_border(policy: Union[BorderPolicy, str], corners: Sequence[CornerLike]) -> Border:
    """Factory for a border with the given policy."""
    try:
        border_cls = BORDER_TYPES[BorderPolicy(policy)]
    except ValueError:
        raise ValueError(f"Unknown border policy: {policy}") from None
    return border_cls(list(corners))
