# spline.py
"""
Closed Catmull-Rom spline sampling.

The irregular boundary is a smooth closed curve through an ordered ring of
control points. This module turns that ring into a dense polyline.
"""
import logging
import numpy as np
from constants import BOUNDARY_SAMPLES, MIN_CONTROL_POINTS

# --- Data Contracts ---
#
# sample(control_points, point_count: int = BOUNDARY_SAMPLES) -> np.ndarray:
#   - Inputs:
#     - control_points: array-like of shape (K, 2), K >= 3. Treated as a
#       cycle, so the last point connects back to the first.
#     - point_count: number of output samples.
#   - Outputs: float64 array of shape (point_count, 2).
#   - Invariants: Sample i sits at parameter t = i / point_count * K. Where t
#     is an integer k, the sample equals control point k exactly.

def catmull_rom(p0, p1, p2, p3, u):
    """Evaluates the uniform Catmull-Rom cubic between p1 and p2 at u in [0, 1)."""
    u2 = u * u
    u3 = u2 * u
    return 0.5 * (
        (2 * p1)
        + (-p0 + p2) * u
        + (2 * p0 - 5 * p1 + 4 * p2 - p3) * u2
        + (-p0 + 3 * p1 - 3 * p2 + p3) * u3
    )

def sample(control_points, point_count: int = BOUNDARY_SAMPLES) -> np.ndarray:
    """
    Samples a closed Catmull-Rom curve through `control_points`.

    The whole curve is recomputed on every call; there is no incremental
    update when a single control point moves.
    """
    points = np.asarray(control_points, dtype=np.float64)
    count = points.shape[0]
    if count < MIN_CONTROL_POINTS:
        msg = (
            f"A closed curve needs at least {MIN_CONTROL_POINTS} control points, "
            f"got {count}."
        )
        logging.error(msg)
        raise ValueError(msg)

    t = np.arange(point_count, dtype=np.float64) / point_count * count
    segment = np.floor(t).astype(np.int64)
    local_t = (t - segment)[:, np.newaxis]

    p0 = points[(segment - 1) % count]
    p1 = points[segment % count]
    p2 = points[(segment + 1) % count]
    p3 = points[(segment + 2) % count]

    return catmull_rom(p0, p1, p2, p3, local_t)
