# editor.py
"""
Generation and pointer editing of the irregular boundary's control points.

Control points start out as a randomly perturbed ellipse drawn from a small
seeded linear congruential generator, so the same seed always reproduces the
same curve. Afterwards the user can grab any handle and drag it; every move
resamples the whole curve.
"""
import logging
import math
import numpy as np
from typing import Optional, Sequence, TYPE_CHECKING
from constants import (
    HIT_RADIUS, IRREGULAR_BASE_RADIUS_X, IRREGULAR_BASE_RADIUS_Y,
    LCG_INCREMENT, LCG_MODULUS, LCG_MULTIPLIER, TWO_PI
)

if TYPE_CHECKING:
    from boundary import IrregularCurve

# --- Data Contracts ---
#
# class ControlPointEditor:
#   - hit_test(point, control_points) -> Optional[int]:
#     - Outputs: index of the nearest control point strictly closer than
#       hit_radius, or None.
#
#   - drag(curve, index, new_position) -> None:
#     - Side Effects: Moves one control point in place and resamples the
#       curve.
#
#   - regenerate(amplitude, count, seed) -> np.ndarray:
#     - Outputs: (count, 2) control points centered on self.center.
#     - Invariants: Deterministic for a given (amplitude, count, seed).
#       amplitude == 0 puts every point at the unperturbed base radius.


class LinearCongruentialGenerator:
    """32-bit LCG producing floats in [0, 1)."""

    def __init__(self, seed: int):
        self.seed = int(seed) % LCG_MODULUS

    def random(self) -> float:
        self.seed = (self.seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.seed / LCG_MODULUS


class ControlPointEditor:
    """
    Builds control points for the irregular boundary and tracks pointer drags.
    """
    def __init__(
        self,
        center: Sequence[float],
        base_radius_x: float = IRREGULAR_BASE_RADIUS_X,
        base_radius_y: float = IRREGULAR_BASE_RADIUS_Y,
        hit_radius: float = HIT_RADIUS,
    ):
        self.center = np.asarray(center, dtype=np.float64)
        self.base_radius_x = base_radius_x
        self.base_radius_y = base_radius_y
        self.hit_radius = hit_radius
        self.dragged_index: Optional[int] = None

    @property
    def dragging(self) -> bool:
        return self.dragged_index is not None

    def base_radius(self, angle: float) -> float:
        return math.sqrt(
            (self.base_radius_x * math.cos(angle)) ** 2
            + (self.base_radius_y * math.sin(angle)) ** 2
        )

    def regenerate(self, amplitude: float, count: int, seed: int) -> np.ndarray:
        """
        Places `count` control points at evenly spaced angles, each pushed in or
        out by up to `amplitude` times its base radius.
        """
        rng = LinearCongruentialGenerator(seed)
        points = np.empty((count, 2), dtype=np.float64)
        for i in range(count):
            angle = i / count * TWO_PI
            perturbation = (rng.random() - 0.5) * 2 * amplitude
            radius = self.base_radius(angle) * (1 + perturbation)
            points[i, 0] = math.cos(angle) * radius + self.center[0]
            points[i, 1] = math.sin(angle) * radius + self.center[1]

        logging.info(
            f"Generated {count} control points (amplitude={amplitude:.2f}, seed={seed})."
        )
        return points

    def hit_test(self, point: Sequence[float], control_points: np.ndarray) -> Optional[int]:
        if len(control_points) == 0:
            return None
        offsets = np.asarray(control_points, dtype=np.float64) - np.asarray(point, dtype=np.float64)
        distances = np.hypot(offsets[:, 0], offsets[:, 1])
        nearest = int(np.argmin(distances))
        if distances[nearest] < self.hit_radius:
            return nearest
        return None

    def hovering(self, point: Sequence[float], control_points: np.ndarray) -> bool:
        return self.hit_test(point, control_points) is not None

    def drag(self, curve: "IrregularCurve", index: int, new_position: Sequence[float]) -> None:
        curve.move_control_point(index, new_position)

    # --- Pointer state machine ---

    def press(self, curve: "IrregularCurve", point: Sequence[float]) -> bool:
        """Starts dragging the handle under `point`. Returns True if one was grabbed."""
        self.dragged_index = self.hit_test(point, curve.control_points)
        if self.dragged_index is not None:
            logging.debug(f"Grabbed control point {self.dragged_index}.")
        return self.dragging

    def move(self, curve: "IrregularCurve", point: Sequence[float]) -> bool:
        """Drags the grabbed handle to `point`. Returns True if the boundary changed."""
        if self.dragged_index is None:
            return False
        self.drag(curve, self.dragged_index, point)
        return True

    def release(self) -> None:
        if self.dragged_index is not None:
            logging.debug(f"Released control point {self.dragged_index}.")
        self.dragged_index = None
