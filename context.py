# context.py
"""
The single owner of all mutable simulation state.

SimulationContext holds the active boundary, the particle batch, the
user-tunable parameters and both random generators. The visualizer calls
its methods when the user changes something; the simulation reads the
active boundary and particles from it every tick.
"""
import logging
import numpy as np
from typing import Dict, Any, Optional, Sequence
from boundary import BoundaryShape, Circle, Ellipse, IrregularCurve, Rectangle
from editor import ControlPointEditor
from particle import ParticleSystem
from utils import parse_finite, parse_float, parse_int
from constants import (
    CIRCLE_MARGIN, DEFAULT_CANVAS_HEIGHT, DEFAULT_CANVAS_WIDTH,
    DEFAULT_CONTROL_POINTS, DEFAULT_ELLIPSE_RADIUS_X, DEFAULT_ELLIPSE_RADIUS_Y,
    DEFAULT_IRREGULAR_AMPLITUDE, DEFAULT_IRREGULAR_SEED, DEFAULT_PARTICLE_COUNT,
    DEFAULT_SPEED, MIN_CONTROL_POINTS, REGENERATE_SEED_RANGE, SHAPE_CIRCLE,
    SHAPE_ELLIPSE, SHAPE_IRREGULAR, SHAPE_RECTANGLE, SHAPES
)

# --- Data Contracts ---
#
# class SimulationContext:
#   - __init__(self, params: Dict[str, Any]):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "canvas_width", "canvas_height": int
#         - "shape": one of SHAPES
#         - "particle_count": int
#         - "speed": float
#         - "seed": int, master seed for spawn randomness
#         - "circle_radius": optional float
#         - "ellipse_radius_x", "ellipse_radius_y": int
#         - "irregular_amplitude": float
#         - "irregular_control_points": int
#         - "irregular_seed": int
#     - Side Effects: Builds every boundary and spawns the first batch.
#     - Raises: ValueError on an unknown shape, a non-positive canvas or
#       circle, or a numeric setting that is not a finite number.
#
#   - Every setter that changes the active boundary or particle count
#     replaces the particle batch wholesale. set_speed keeps the batch.


def _config_error(detail: str):
    msg = f"Configuration error: {detail}"
    logging.critical(msg)
    raise ValueError(msg)


def _config_number(params: Dict[str, Any], key: str, default: float) -> float:
    """Reads a finite number from the config. A missing or null key yields the default."""
    value = params.get(key)
    if value is None:
        return default
    number = parse_finite(value)
    if number is None or isinstance(value, bool):
        _config_error(f"'{key}' must be a finite number, got {value!r}.")
    return number


class SimulationContext:
    """
    Explicit container for everything the frame loop mutates.
    """
    def __init__(self, params: Dict[str, Any]):
        self.canvas_width = _config_number(params, 'canvas_width', DEFAULT_CANVAS_WIDTH)
        self.canvas_height = _config_number(params, 'canvas_height', DEFAULT_CANVAS_HEIGHT)
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            _config_error(
                f"canvas size {self.canvas_width}x{self.canvas_height} "
                f"must be positive in both dimensions."
            )

        shape = params.get('shape', SHAPE_RECTANGLE)
        if shape not in SHAPES:
            _config_error(f"unknown shape '{shape}'. Expected one of {', '.join(SHAPES)}.")

        self.center = np.array([self.canvas_width / 2.0, self.canvas_height / 2.0])
        self.particle_count = parse_int(params.get('particle_count', DEFAULT_PARTICLE_COUNT), DEFAULT_PARTICLE_COUNT)
        self.speed = parse_float(params.get('speed', DEFAULT_SPEED)) or DEFAULT_SPEED
        self.seed = params.get('seed')
        self.rng = np.random.default_rng(self.seed)

        circle_radius = _config_number(
            params, 'circle_radius', min(self.canvas_width, self.canvas_height) / 2 - CIRCLE_MARGIN
        )
        if circle_radius <= 0:
            _config_error(f"circle_radius {circle_radius} must be positive.")
        self.ellipse_radius_x = parse_int(params.get('ellipse_radius_x', DEFAULT_ELLIPSE_RADIUS_X), DEFAULT_ELLIPSE_RADIUS_X)
        self.ellipse_radius_y = parse_int(params.get('ellipse_radius_y', DEFAULT_ELLIPSE_RADIUS_Y), DEFAULT_ELLIPSE_RADIUS_Y)
        self.irregular_amplitude = _config_number(params, 'irregular_amplitude', DEFAULT_IRREGULAR_AMPLITUDE)
        self.control_point_count = parse_int(
            params.get('irregular_control_points', DEFAULT_CONTROL_POINTS),
            DEFAULT_CONTROL_POINTS, minimum=MIN_CONTROL_POINTS
        )
        self.irregular_seed = int(_config_number(params, 'irregular_seed', DEFAULT_IRREGULAR_SEED))

        self.editor = ControlPointEditor(self.center)
        self.boundaries: Dict[str, BoundaryShape] = {
            SHAPE_RECTANGLE: Rectangle(self.canvas_width, self.canvas_height),
            SHAPE_CIRCLE: Circle(self.center, circle_radius),
            SHAPE_ELLIPSE: Ellipse(self.center, self.ellipse_radius_x, self.ellipse_radius_y),
            SHAPE_IRREGULAR: IrregularCurve(self._generate_control_points(), self.center),
        }
        self.shape = shape
        self.playing = True
        self.particles: Optional[ParticleSystem] = None
        self.reset()

        logging.info(
            f"SimulationContext initialized: {self.canvas_width}x{self.canvas_height} canvas, "
            f"shape '{self.shape}', {self.particle_count} particles at speed {self.speed}."
        )

    # --- Queries ---

    @property
    def boundary(self) -> BoundaryShape:
        return self.boundaries[self.shape]

    @property
    def irregular_curve(self) -> IrregularCurve:
        return self.boundaries[SHAPE_IRREGULAR]

    # --- Actions ---

    def reset(self) -> None:
        """Replaces the particle batch with a fresh one on the current boundary."""
        self.particles = ParticleSystem(self.boundary, self.particle_count, self.speed, self.rng)

    def toggle_playing(self) -> bool:
        self.playing = not self.playing
        logging.info("Simulation resumed." if self.playing else "Simulation paused.")
        return self.playing

    def select_shape(self, name: str) -> None:
        if name not in SHAPES:
            msg = f"Unknown shape '{name}'. Expected one of {', '.join(SHAPES)}."
            logging.error(msg)
            raise ValueError(msg)
        self.shape = name
        self.editor.release()
        if name == SHAPE_IRREGULAR:
            self._rebuild_irregular()
        logging.info(f"Boundary shape set to '{name}'.")
        self.reset()

    def set_particle_count(self, value: Any) -> None:
        self.particle_count = parse_int(value, DEFAULT_PARTICLE_COUNT)
        logging.info(f"Particle count set to {self.particle_count}.")
        self.reset()

    def set_speed(self, value: Any) -> None:
        speed = parse_float(value)
        if speed is None:
            logging.warning(f"Ignoring invalid speed {value!r}. Keeping {self.speed}.")
            return
        self.speed = speed
        self.particles.set_speed(speed)
        logging.info(f"Speed set to {speed}.")

    def set_ellipse_radii(self, radius_x: Any, radius_y: Any) -> None:
        self.ellipse_radius_x = parse_int(radius_x, self.ellipse_radius_x)
        self.ellipse_radius_y = parse_int(radius_y, self.ellipse_radius_y)
        self.boundaries[SHAPE_ELLIPSE] = Ellipse(self.center, self.ellipse_radius_x, self.ellipse_radius_y)
        logging.info(f"Ellipse radii set to {self.ellipse_radius_x}x{self.ellipse_radius_y}.")
        if self.shape == SHAPE_ELLIPSE:
            self.reset()

    def set_irregular_amplitude(self, value: Any) -> None:
        amplitude = parse_finite(value)
        if amplitude is None:
            logging.warning(f"Ignoring invalid amplitude {value!r}. Keeping {self.irregular_amplitude}.")
            return
        if not 0.0 <= amplitude <= 1.0:
            logging.warning(f"Amplitude {amplitude} is outside [0, 1]; the curve may fold over itself.")
        self.irregular_amplitude = amplitude
        self._apply_irregular_change()

    def set_control_point_count(self, value: Any) -> None:
        self.control_point_count = parse_int(value, DEFAULT_CONTROL_POINTS, minimum=MIN_CONTROL_POINTS)
        logging.info(f"Irregular control point count set to {self.control_point_count}.")
        self._apply_irregular_change()

    def regenerate(self) -> None:
        """Draws a fresh seed and rebuilds the irregular boundary from it."""
        self.irregular_seed = int(self.rng.integers(REGENERATE_SEED_RANGE))
        logging.info(f"Irregular boundary reseeded with {self.irregular_seed}.")
        self._rebuild_irregular()
        self.reset()

    # --- Pointer editing ---

    def press(self, point: Sequence[float]) -> bool:
        if self.shape != SHAPE_IRREGULAR:
            return False
        return self.editor.press(self.irregular_curve, point)

    def move(self, point: Sequence[float]) -> bool:
        if self.shape != SHAPE_IRREGULAR:
            return False
        return self.editor.move(self.irregular_curve, point)

    def release(self) -> None:
        self.editor.release()

    # --- Internals ---

    def _generate_control_points(self) -> np.ndarray:
        return self.editor.regenerate(self.irregular_amplitude, self.control_point_count, self.irregular_seed)

    def _rebuild_irregular(self) -> None:
        self.editor.release()
        self.irregular_curve.set_control_points(self._generate_control_points())

    def _apply_irregular_change(self) -> None:
        if self.shape == SHAPE_IRREGULAR:
            self._rebuild_irregular()
            self.reset()
