import numpy as np
import pytest

import spline
from constants import BOUNDARY_SAMPLES


def ring(n, radius=100.0, center=(400.0, 300.0)):
    angles = np.arange(n) / n * 2 * np.pi
    return np.column_stack((
        center[0] + radius * np.cos(angles),
        center[1] + radius * np.sin(angles),
    ))


def test_sample_shape_and_dtype():
    samples = spline.sample(ring(12))
    assert samples.shape == (BOUNDARY_SAMPLES, 2)
    assert samples.dtype == np.float64


@pytest.mark.parametrize("n", [4, 8, 16])
def test_curve_passes_through_each_control_point(n):
    rng = np.random.default_rng(3)
    points = rng.uniform(100, 500, size=(n, 2))
    samples = spline.sample(points, 512)
    for k in range(n):
        i = round(k * 512 / n)
        np.testing.assert_allclose(samples[i], points[k], atol=1e-9)


def test_curve_is_closed():
    samples = spline.sample(ring(7, radius=150.0), 256)
    steps = np.linalg.norm(np.diff(samples, axis=0), axis=1)
    closing_gap = np.linalg.norm(samples[0] - samples[-1])
    assert closing_gap <= 2 * steps.max()


def test_identical_control_points_collapse_to_a_point():
    points = np.full((5, 2), 3.0)
    samples = spline.sample(points, 64)
    np.testing.assert_allclose(samples, 3.0)


def test_too_few_control_points_rejected():
    with pytest.raises(ValueError):
        spline.sample([[0.0, 0.0], [1.0, 1.0]])


def test_catmull_rom_endpoints():
    assert spline.catmull_rom(0.0, 1.0, 2.0, 3.0, 0.0) == 1.0
    assert spline.catmull_rom(0.0, 1.0, 2.0, 3.0, 1.0) == pytest.approx(2.0)
    # Evenly spaced points interpolate linearly
    assert spline.catmull_rom(0.0, 1.0, 2.0, 3.0, 0.5) == pytest.approx(1.5)
