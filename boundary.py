# boundary.py
"""
Boundary shapes that keep particles inside the canvas.

Each shape answers the same three questions for a batch of particle
positions: which particles are at or beyond the boundary, what is the
inward unit normal at the nearest boundary location, and how should a
colliding particle be reflected and pushed back inside. The simulation only
ever talks to the BoundaryShape interface.

Shapes also know how to pick a random spawn location on their edge and how
to lay out a batch of particles around it.
"""
import logging
import math
from abc import ABC, abstractmethod
from typing import NamedTuple, Sequence

import numpy as np
from numba import jit

import spline
from constants import (
    BOUNDARY_SAMPLES, ELLIPSE_PULL_IN, NORMAL_SAMPLE_OFFSET, SHAPE_CIRCLE,
    SHAPE_ELLIPSE, SHAPE_IRREGULAR, SHAPE_RECTANGLE, TWO_PI
)

# --- Data Contracts ---
#
# class BoundaryShape:
#   - colliding(self, positions: np.ndarray, radius: float) -> np.ndarray:
#     - Inputs: positions of shape (N, 2), the particle radius.
#     - Outputs: bool mask of shape (N,), True where the particle is at or
#       outside the boundary.
#
#   - inward_normals(self, positions: np.ndarray) -> np.ndarray:
#     - Outputs: float64 array of shape (N, 2). Unit vectors pointing into
#       the region at the boundary location nearest each particle. Rows are
#       zero where no normal is defined (e.g. a particle at the center).
#
#   - resolve(self, positions, velocities, radius) -> np.ndarray:
#     - Side Effects: Reflects velocities and corrects positions in place for
#       colliding particles.
#     - Outputs: bool mask of the particles that collided.
#     - Invariants: Speed is preserved by every reflection. No NaN is ever
#       written into positions or velocities.
#
#   - spawn(self, rng: np.random.Generator) -> SpawnPoint
#   - layout(self, spawn: SpawnPoint, count: int, spacing: float) -> np.ndarray
#   - outline(self) -> np.ndarray: closed polyline of shape (M, 2).


class SpawnPoint(NamedTuple):
    """A point on the boundary and the direction a new batch travels in."""
    x: float
    y: float
    angle: float


def reflect(velocities: np.ndarray, normals: np.ndarray) -> np.ndarray:
    """Specular reflection v' = v - 2 (v . n) n for unit normals n."""
    dots = np.sum(velocities * normals, axis=1)
    return velocities - 2.0 * dots[:, np.newaxis] * normals


def _inward_angle(rng: np.random.Generator, outward_angle: float) -> float:
    """Points back across the shape, spread over a half-turn."""
    return outward_angle + math.pi + (rng.random() - 0.5) * math.pi


def _centered_offsets(count: int, spacing: float) -> np.ndarray:
    return np.arange(count, dtype=np.float64) * spacing - (count - 1) * spacing / 2.0


class BoundaryShape(ABC):
    """Common interface for all boundary variants."""

    name = ""

    @abstractmethod
    def colliding(self, positions: np.ndarray, radius: float) -> np.ndarray:
        raise NotImplementedError

    @abstractmethod
    def inward_normals(self, positions: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    @abstractmethod
    def resolve(self, positions: np.ndarray, velocities: np.ndarray, radius: float) -> np.ndarray:
        raise NotImplementedError

    @abstractmethod
    def spawn(self, rng: np.random.Generator) -> SpawnPoint:
        raise NotImplementedError

    @abstractmethod
    def layout(self, spawn: SpawnPoint, count: int, spacing: float) -> np.ndarray:
        raise NotImplementedError

    @abstractmethod
    def outline(self) -> np.ndarray:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


class Rectangle(BoundaryShape):
    """The canvas itself: an axis-aligned box from (0, 0) to (width, height)."""

    name = SHAPE_RECTANGLE

    def __init__(self, width: float, height: float):
        self.width = float(width)
        self.height = float(height)

    def _hits(self, positions: np.ndarray, radius: float):
        x = positions[:, 0]
        y = positions[:, 1]
        hit_x = (x - radius <= 0) | (x + radius >= self.width)
        hit_y = (y - radius <= 0) | (y + radius >= self.height)
        return hit_x, hit_y

    def colliding(self, positions, radius):
        hit_x, hit_y = self._hits(positions, radius)
        return hit_x | hit_y

    def inward_normals(self, positions):
        # Distances to the left, right, top and bottom walls.
        gaps = np.column_stack((
            positions[:, 0],
            self.width - positions[:, 0],
            positions[:, 1],
            self.height - positions[:, 1],
        ))
        wall_normals = np.array([[1.0, 0.0], [-1.0, 0.0], [0.0, 1.0], [0.0, -1.0]])
        return wall_normals[np.argmin(gaps, axis=1)]

    def resolve(self, positions, velocities, radius):
        # Each axis is handled independently, so a corner hit flips both.
        hit_x, hit_y = self._hits(positions, radius)
        if np.any(hit_x):
            velocities[hit_x, 0] = -velocities[hit_x, 0]
            positions[hit_x, 0] = np.clip(positions[hit_x, 0], radius, self.width - radius)
        if np.any(hit_y):
            velocities[hit_y, 1] = -velocities[hit_y, 1]
            positions[hit_y, 1] = np.clip(positions[hit_y, 1], radius, self.height - radius)
        return hit_x | hit_y

    def spawn(self, rng):
        edge = int(rng.integers(4))
        if edge == 0:    # top, heading down
            return SpawnPoint(rng.random() * self.width, 0.0, rng.random() * math.pi)
        if edge == 1:    # right, heading left
            return SpawnPoint(self.width, rng.random() * self.height, math.pi / 2 + rng.random() * math.pi)
        if edge == 2:    # bottom, heading up
            return SpawnPoint(rng.random() * self.width, self.height, math.pi + rng.random() * math.pi)
        # left, heading right
        return SpawnPoint(0.0, rng.random() * self.height, -math.pi / 2 + rng.random() * math.pi)

    def layout(self, spawn, count, spacing):
        offsets = _centered_offsets(count, spacing)
        positions = np.empty((count, 2), dtype=np.float64)
        if spawn.y == 0 or spawn.y == self.height:
            positions[:, 0] = spawn.x + offsets
            positions[:, 1] = spawn.y
        else:
            positions[:, 0] = spawn.x
            positions[:, 1] = spawn.y + offsets
        return positions

    def outline(self):
        return np.array([
            [0.0, 0.0], [self.width, 0.0], [self.width, self.height], [0.0, self.height]
        ])

    def __repr__(self):
        return f"Rectangle(width={self.width:g}, height={self.height:g})"


class Circle(BoundaryShape):
    """A circle of `radius` around `center`."""

    name = SHAPE_CIRCLE

    def __init__(self, center: Sequence[float], radius: float):
        self.center = np.asarray(center, dtype=np.float64)
        self.radius = float(radius)

    def _offsets(self, positions):
        offsets = positions - self.center
        return offsets, np.hypot(offsets[:, 0], offsets[:, 1])

    def _hits(self, distances, radius):
        # A particle sitting exactly on the center has no normal; leave it be.
        return (distances + radius >= self.radius) & (distances > 0)

    def colliding(self, positions, radius):
        _, distances = self._offsets(positions)
        return self._hits(distances, radius)

    def inward_normals(self, positions):
        offsets, distances = self._offsets(positions)
        normals = np.zeros_like(offsets)
        defined = distances > 0
        normals[defined] = -offsets[defined] / distances[defined, np.newaxis]
        return normals

    def resolve(self, positions, velocities, radius):
        offsets, distances = self._offsets(positions)
        hit = self._hits(distances, radius)
        if not np.any(hit):
            return hit

        outward = offsets[hit] / distances[hit, np.newaxis]
        velocities[hit] = reflect(velocities[hit], outward)

        overlap = distances[hit] + radius - self.radius
        positions[hit] -= outward * overlap[:, np.newaxis]
        return hit

    def spawn(self, rng):
        angle = rng.random() * TWO_PI
        x = self.center[0] + math.cos(angle) * self.radius
        y = self.center[1] + math.sin(angle) * self.radius
        return SpawnPoint(x, y, _inward_angle(rng, angle))

    def layout(self, spawn, count, spacing):
        base = math.atan2(spawn.y - self.center[1], spawn.x - self.center[0])
        angles = base + _centered_offsets(count, spacing / self.radius)
        return np.column_stack((
            self.center[0] + np.cos(angles) * self.radius,
            self.center[1] + np.sin(angles) * self.radius,
        ))

    def outline(self):
        angles = np.linspace(0.0, TWO_PI, BOUNDARY_SAMPLES, endpoint=False)
        return self.center + self.radius * np.column_stack((np.cos(angles), np.sin(angles)))

    def __repr__(self):
        return f"Circle(center=({self.center[0]:g}, {self.center[1]:g}), radius={self.radius:g})"


class Ellipse(BoundaryShape):
    """
    An axis-aligned ellipse (dx/a)^2 + (dy/b)^2 = 1 around `center`.

    Penetration correction rescales the offset from the center so the
    particle lands just inside the curve. This is a radial projection, not
    the nearest point on the ellipse, which is close enough at the step
    sizes involved.
    """

    name = SHAPE_ELLIPSE

    def __init__(self, center: Sequence[float], radius_x: float, radius_y: float):
        self.center = np.asarray(center, dtype=np.float64)
        self.radius_x = float(radius_x)
        self.radius_y = float(radius_y)

    def _implicit(self, positions):
        offsets = positions - self.center
        values = (offsets[:, 0] / self.radius_x) ** 2 + (offsets[:, 1] / self.radius_y) ** 2
        return offsets, values

    def _gradients(self, offsets):
        return np.column_stack((
            offsets[:, 0] / self.radius_x ** 2,
            offsets[:, 1] / self.radius_y ** 2,
        ))

    def colliding(self, positions, radius):
        _, values = self._implicit(positions)
        return values >= 1.0

    def inward_normals(self, positions):
        offsets, _ = self._implicit(positions)
        gradients = self._gradients(offsets)
        lengths = np.hypot(gradients[:, 0], gradients[:, 1])
        normals = np.zeros_like(gradients)
        defined = lengths > 0
        normals[defined] = -gradients[defined] / lengths[defined, np.newaxis]
        return normals

    def resolve(self, positions, velocities, radius):
        offsets, values = self._implicit(positions)
        hit = values >= 1.0
        if not np.any(hit):
            return hit

        gradients = self._gradients(offsets[hit])
        normals = gradients / np.hypot(gradients[:, 0], gradients[:, 1])[:, np.newaxis]
        velocities[hit] = reflect(velocities[hit], normals)

        scale = np.sqrt(values[hit])
        positions[hit] = self.center + offsets[hit] / scale[:, np.newaxis] * ELLIPSE_PULL_IN
        return hit

    def spawn(self, rng):
        angle = rng.random() * TWO_PI
        x = self.center[0] + math.cos(angle) * self.radius_x
        y = self.center[1] + math.sin(angle) * self.radius_y
        return SpawnPoint(x, y, _inward_angle(rng, angle))

    def layout(self, spawn, count, spacing):
        base = math.atan2(
            (spawn.y - self.center[1]) / self.radius_y,
            (spawn.x - self.center[0]) / self.radius_x,
        )
        mean_radius = (self.radius_x + self.radius_y) / 2.0
        angles = base + _centered_offsets(count, spacing / mean_radius)
        return np.column_stack((
            self.center[0] + np.cos(angles) * self.radius_x,
            self.center[1] + np.sin(angles) * self.radius_y,
        ))

    def outline(self):
        angles = np.linspace(0.0, TWO_PI, BOUNDARY_SAMPLES, endpoint=False)
        return self.center + np.column_stack((
            self.radius_x * np.cos(angles), self.radius_y * np.sin(angles)
        ))

    def __repr__(self):
        return (
            f"Ellipse(center=({self.center[0]:g}, {self.center[1]:g}), "
            f"radius_x={self.radius_x:g}, radius_y={self.radius_y:g})"
        )


@jit(nopython=True)
def _nearest_angle_numba(particle_angles, sample_angles):
    """
    Numba-jitted linear scan for the boundary sample closest in angle.

    Angular distance wraps around at +/- pi. Ties keep the lowest index.
    """
    indices = np.empty(particle_angles.shape[0], dtype=np.int64)
    for p in range(particle_angles.shape[0]):
        best = 0
        min_diff = np.inf
        for i in range(sample_angles.shape[0]):
            diff = abs(particle_angles[p] - sample_angles[i])
            if diff > np.pi:
                diff = 2.0 * np.pi - diff
            if diff < min_diff:
                min_diff = diff
                best = i
        indices[p] = best
    return indices


class IrregularCurve(BoundaryShape):
    """
    A smooth closed curve through editable control points.

    The boundary is the Catmull-Rom polyline sampled from the control points.
    All radial measurements are taken from the canvas center, not from the
    curve's centroid. A particle is matched to the sample whose angle around
    the center is closest to its own, so heavily distorted curves that fold
    back on themselves can be matched to the wrong stretch of boundary.
    """

    name = SHAPE_IRREGULAR

    def __init__(self, control_points, center: Sequence[float], point_count: int = BOUNDARY_SAMPLES):
        self.center = np.asarray(center, dtype=np.float64)
        self.point_count = point_count
        self.control_points = np.array(control_points, dtype=np.float64)
        self._resample()

    @property
    def samples(self) -> np.ndarray:
        """The sampled boundary polyline. Read-only; edit control points instead."""
        return self._samples

    def set_control_points(self, control_points) -> None:
        self.control_points = np.array(control_points, dtype=np.float64)
        self._resample()

    def move_control_point(self, index: int, position: Sequence[float]) -> None:
        self.control_points[index] = position
        self._resample()

    def _resample(self):
        samples = spline.sample(self.control_points, self.point_count)
        offsets = samples - self.center
        self._sample_angles = np.arctan2(offsets[:, 1], offsets[:, 0])
        self._sample_radii = np.hypot(offsets[:, 0], offsets[:, 1])
        samples.flags.writeable = False
        self._samples = samples
        logging.debug(
            f"Irregular boundary resampled from {len(self.control_points)} control points "
            f"into {self.point_count} samples."
        )

    def _match(self, positions):
        offsets = positions - self.center
        distances = np.hypot(offsets[:, 0], offsets[:, 1])
        angles = np.arctan2(offsets[:, 1], offsets[:, 0])
        indices = _nearest_angle_numba(angles, self._sample_angles)
        return offsets, distances, indices

    def _normals_at(self, indices):
        n = self.point_count
        ahead = self._samples[(indices + NORMAL_SAMPLE_OFFSET) % n]
        behind = self._samples[(indices - NORMAL_SAMPLE_OFFSET) % n]
        tangents = ahead - behind
        normals = np.column_stack((-tangents[:, 1], tangents[:, 0]))
        lengths = np.hypot(normals[:, 0], normals[:, 1])

        defined = lengths > 0
        normals[defined] /= lengths[defined, np.newaxis]
        normals[~defined] = 0.0

        towards_center = self.center - self._samples[indices]
        flip = np.sum(normals * towards_center, axis=1) < 0
        normals[flip] = -normals[flip]
        return normals

    def _hits(self, distances, indices, radius):
        """Returns the hit mask and the inward normals of the hit particles."""
        # Zero distance means the particle sits on the center: no direction to push along.
        hit = (distances >= self._sample_radii[indices] - radius) & (distances > 0)
        candidates = np.flatnonzero(hit)
        normals = self._normals_at(indices[candidates])
        defined = np.any(normals != 0.0, axis=1)
        hit[candidates[~defined]] = False
        return hit, normals[defined]

    def colliding(self, positions, radius):
        _, distances, indices = self._match(positions)
        hit, _ = self._hits(distances, indices, radius)
        return hit

    def inward_normals(self, positions):
        _, _, indices = self._match(positions)
        return self._normals_at(indices)

    def resolve(self, positions, velocities, radius):
        offsets, distances, indices = self._match(positions)
        boundary_distances = self._sample_radii[indices]

        hit, normals = self._hits(distances, indices, radius)
        candidates = np.flatnonzero(hit)
        if candidates.size == 0:
            return hit

        velocities[candidates] = reflect(velocities[candidates], normals)

        # Pull in by a full diameter to stay clear of the sampled approximation.
        target = boundary_distances[candidates] - 2.0 * radius
        scale = target / distances[candidates]
        positions[candidates] = self.center + offsets[candidates] * scale[:, np.newaxis]
        return hit

    def spawn(self, rng):
        index = int(rng.integers(self.point_count))
        x, y = self._samples[index]
        angle = math.atan2(y - self.center[1], x - self.center[0])
        return SpawnPoint(float(x), float(y), _inward_angle(rng, angle))

    def layout(self, spawn, count, spacing):
        positions = np.empty((count, 2), dtype=np.float64)
        positions[:, 0] = spawn.x + _centered_offsets(count, spacing)
        positions[:, 1] = spawn.y
        return positions

    def outline(self):
        return self._samples

    def __repr__(self):
        return (
            f"IrregularCurve(control_points={len(self.control_points)}, "
            f"samples={self.point_count})"
        )
