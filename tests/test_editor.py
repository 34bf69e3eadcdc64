import math

import numpy as np
import pytest

from boundary import IrregularCurve
from constants import LCG_MODULUS
from editor import ControlPointEditor, LinearCongruentialGenerator

CENTER = np.array([400.0, 300.0])


def test_lcg_first_value():
    rng = LinearCongruentialGenerator(42)
    assert rng.random() == 1083814273 / LCG_MODULUS
    assert rng.seed == 1083814273


def test_lcg_is_deterministic_and_in_unit_interval():
    a = LinearCongruentialGenerator(9876)
    b = LinearCongruentialGenerator(9876)
    values = [a.random() for _ in range(200)]
    assert values == [b.random() for _ in range(200)]
    assert all(0.0 <= v < 1.0 for v in values)


@pytest.mark.parametrize("seed", [0, 42, 9999])
def test_zero_amplitude_reproduces_a_circle(seed):
    editor = ControlPointEditor(CENTER, base_radius_x=250.0, base_radius_y=250.0)
    points = editor.regenerate(0.0, 12, seed)
    offsets = points - CENTER
    np.testing.assert_allclose(np.linalg.norm(offsets, axis=1), 250.0)
    angles = np.mod(np.arctan2(offsets[:, 1], offsets[:, 0]), 2 * np.pi)
    expected = np.arange(12) / 12 * 2 * np.pi
    np.testing.assert_allclose(np.cos(angles), np.cos(expected), atol=1e-12)
    np.testing.assert_allclose(np.sin(angles), np.sin(expected), atol=1e-12)


def test_zero_amplitude_uses_base_radius_per_angle():
    editor = ControlPointEditor(CENTER)
    points = editor.regenerate(0.0, 8, 42)
    for i, point in enumerate(points):
        angle = i / 8 * 2 * math.pi
        assert np.linalg.norm(point - CENTER) == pytest.approx(editor.base_radius(angle))


def test_perturbation_stays_within_amplitude():
    editor = ControlPointEditor(CENTER)
    amplitude = 0.3
    points = editor.regenerate(amplitude, 24, 1234)
    for i, point in enumerate(points):
        ratio = np.linalg.norm(point - CENTER) / editor.base_radius(i / 24 * 2 * math.pi)
        assert abs(ratio - 1.0) <= amplitude + 1e-12


def test_regenerate_is_deterministic_per_seed():
    editor = ControlPointEditor(CENTER)
    np.testing.assert_array_equal(editor.regenerate(0.7, 12, 42), editor.regenerate(0.7, 12, 42))
    assert not np.allclose(editor.regenerate(0.7, 12, 42), editor.regenerate(0.7, 12, 43))


def test_hit_test_picks_nearest_handle_within_radius():
    editor = ControlPointEditor(CENTER)
    points = np.array([[100.0, 100.0], [110.0, 100.0], [300.0, 300.0]])
    assert editor.hit_test((108.0, 100.0), points) == 1
    assert editor.hit_test((101.0, 99.0), points) == 0
    assert editor.hit_test((200.0, 200.0), points) is None
    # The hit radius is exclusive
    assert editor.hit_test((315.0, 300.0), points) is None
    assert editor.hit_test((314.0, 300.0), points) == 2


def test_press_drag_release_cycle():
    editor = ControlPointEditor(CENTER)
    curve = IrregularCurve(editor.regenerate(0.2, 8, 11), CENTER)
    target = curve.control_points[2] + [3.0, 4.0]

    assert editor.press(curve, target)
    assert editor.dragged_index == 2

    assert editor.move(curve, (450.0, 320.0))
    np.testing.assert_array_equal(curve.control_points[2], [450.0, 320.0])
    np.testing.assert_allclose(curve.samples[2 * 64], [450.0, 320.0])

    editor.release()
    assert not editor.dragging
    assert not editor.move(curve, (0.0, 0.0))
    np.testing.assert_array_equal(curve.control_points[2], [450.0, 320.0])


def test_press_on_empty_space_grabs_nothing():
    editor = ControlPointEditor(CENTER)
    curve = IrregularCurve(editor.regenerate(0.2, 8, 11), CENTER)
    assert not editor.press(curve, CENTER)
    assert editor.dragged_index is None


def test_drag_resamples_the_whole_curve():
    editor = ControlPointEditor(CENTER)
    curve = IrregularCurve(editor.regenerate(0.5, 12, 3), CENTER)
    before = curve.samples.copy()
    editor.drag(curve, 0, (700.0, 300.0))
    assert not np.allclose(before, curve.samples)
    assert editor.hovering((702.0, 300.0), curve.control_points)
