# particle.py
"""
Manages the state of all particles in the simulation.

This module defines the ParticleSystem class, which is responsible for
spawning a batch of particles on a boundary and storing their state
(position, velocity, color, path) in NumPy arrays.
"""
import logging
import math
import numpy as np
from typing import List, Tuple, TYPE_CHECKING
from constants import PARTICLE_COLORS, PARTICLE_RADIUS, SPAWN_SPACING

if TYPE_CHECKING:
    from boundary import BoundaryShape

# --- Data Contracts ---
#
# class ParticleSystem:
#   - __init__(self, boundary, count, speed, rng, radius, spacing):
#     - Inputs:
#       - boundary: the active BoundaryShape, used to pick the spawn point.
#       - count: int, number of particles in the batch.
#       - speed: float, initial speed of every particle.
#       - rng: np.random.Generator driving the spawn location.
#     - Outputs: None
#     - Side Effects: Initializes internal NumPy arrays for particle state.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#       - self.colors is a NumPy array of shape (N,) of palette indices.
#       - self.paths holds N lists that only ever grow. Each starts with the
#         particle's spawn position.
#       - All particles of a batch share one travel direction.

class ParticleSystem:
    """
    A batch of particles spawned together on the edge of a boundary.
    """
    def __init__(
        self,
        boundary: "BoundaryShape",
        count: int,
        speed: float,
        rng: np.random.Generator,
        radius: float = PARTICLE_RADIUS,
        spacing: float = SPAWN_SPACING,
    ):
        self.particle_count = count
        self.radius = radius
        self.spawn_point = boundary.spawn(rng)

        self.positions = boundary.layout(self.spawn_point, count, spacing)
        direction = np.array([math.cos(self.spawn_point.angle), math.sin(self.spawn_point.angle)])
        self.velocities = np.tile(direction * speed, (count, 1))
        self.colors = np.arange(count, dtype=np.int32) % len(PARTICLE_COLORS)
        self.paths: List[List[Tuple[float, float]]] = [
            [(float(x), float(y))] for x, y in self.positions
        ]

        logging.info(
            f"ParticleSystem spawned {count} particles on {boundary!r} "
            f"at ({self.spawn_point.x:.1f}, {self.spawn_point.y:.1f})."
        )
        logging.debug(
            f"Batch heading {math.degrees(self.spawn_point.angle):.1f} deg at speed {speed}. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}"
        )

    def record_paths(self) -> None:
        """Appends every particle's current position to its path."""
        for path, (x, y) in zip(self.paths, self.positions):
            path.append((float(x), float(y)))

    def set_speed(self, speed: float) -> None:
        """
        Rescales every velocity to `speed`, keeping its direction.

        Particles that are standing still have no direction and are left alone.
        """
        speeds = np.hypot(self.velocities[:, 0], self.velocities[:, 1])
        moving = speeds > 0
        self.velocities[moving] *= (speed / speeds[moving])[:, np.newaxis]

    def speeds(self) -> np.ndarray:
        return np.hypot(self.velocities[:, 0], self.velocities[:, 1])
