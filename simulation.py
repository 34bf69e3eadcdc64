# simulation.py
"""
Handles the per-tick particle update.

This module defines the Simulation class, which is responsible for
advancing the particle batch by one animation frame: moving every particle
in a straight line, bouncing it off the active boundary and extending its
path.
"""
import logging
import numpy as np
from context import SimulationContext

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, context: SimulationContext):
#     - Inputs:
#       - context: The SimulationContext owning the particles and the
#         active boundary. Read afresh on every step, so shape changes and
#         resets take effect on the next tick.
#     - Outputs: None
#
#   - step(self) -> int:
#     - Inputs: None (operates on the context).
#     - Outputs: Number of particles that hit the boundary this tick.
#     - Side Effects: Modifies positions, velocities and paths of the
#       context's ParticleSystem.
#     - Invariants: Particle count remains constant. Each path grows by
#       exactly one point. The timestep is one frame; there is no
#       sub-stepping, so very fast particles can tunnel through thin parts
#       of a boundary.

class Simulation:
    """
    Advances the simulation one frame at a time.
    """
    def __init__(self, context: SimulationContext):
        self.context = context
        self.step_count = 0
        self.collision_count = 0
        logging.info("Simulation logic initialized.")

    def step(self) -> int:
        """
        Executes one time step of the simulation.
        """
        particles = self.context.particles

        # 1. Explicit Euler with a unit timestep
        particles.positions += particles.velocities

        # 2. Collide, reflect and correct against the active boundary
        hit = self.context.boundary.resolve(
            particles.positions, particles.velocities, particles.radius
        )

        # 3. Record the (possibly corrected) positions
        particles.record_paths()

        collisions = int(np.count_nonzero(hit))
        self.step_count += 1
        self.collision_count += collisions
        return collisions
