import logging

import numpy as np
import pytest

from constants import DEFAULT_CONTROL_POINTS, REGENERATE_SEED_RANGE
from context import SimulationContext
from simulation import Simulation


def make_context(**overrides):
    params = {"canvas_width": 800, "canvas_height": 600, "seed": 7}
    params.update(overrides)
    return SimulationContext(params)


def test_defaults_without_config():
    context = SimulationContext({"seed": 1})
    assert context.shape == "rectangle"
    assert context.particle_count == 1
    assert context.speed == 3.0
    assert context.playing
    np.testing.assert_array_equal(context.center, [400.0, 300.0])
    assert context.boundaries["circle"].radius == 280.0


@pytest.mark.parametrize("params", [
    {"shape": "hexagon"},
    {"canvas_width": 0},
    {"canvas_height": -5},
    {"canvas_width": "wide"},
    {"canvas_height": [600]},
    {"circle_radius": -1},
    {"circle_radius": "big"},
    {"irregular_amplitude": "x"},
    {"irregular_amplitude": float("nan")},
    {"irregular_amplitude": float("inf")},
    {"irregular_seed": "abc"},
    {"irregular_seed": True},
])
def test_invalid_configuration_is_rejected(params, caplog):
    with caplog.at_level(logging.CRITICAL), pytest.raises(ValueError):
        SimulationContext(params)
    assert any(record.levelno == logging.CRITICAL for record in caplog.records)


def test_unknown_shape_selection_raises():
    context = make_context()
    with pytest.raises(ValueError):
        context.select_shape("triangle")
    assert context.shape == "rectangle"


def test_shape_change_replaces_particles():
    context = make_context(particle_count=3)
    old = context.particles
    context.select_shape("ellipse")
    assert context.particles is not old
    assert context.particles.particle_count == 3
    assert context.boundary is context.boundaries["ellipse"]


@pytest.mark.parametrize("value, expected", [
    ("7", 7), (4, 4), ("abc", 1), ("", 1), (None, 1), (0, 1), (-3, 1),
])
def test_particle_count_falls_back_to_one(value, expected):
    context = make_context()
    context.set_particle_count(value)
    assert context.particle_count == expected
    assert context.particles.positions.shape == (expected, 2)


def test_speed_change_keeps_directions():
    context = make_context(particle_count=4)
    directions = context.particles.velocities / context.particles.speeds()[:, np.newaxis]
    context.set_speed(7.5)
    assert context.speed == 7.5
    np.testing.assert_allclose(context.particles.speeds(), 7.5)
    np.testing.assert_allclose(
        context.particles.velocities / context.particles.speeds()[:, np.newaxis], directions
    )


@pytest.mark.parametrize("value", ["fast", 0, -2.0, None])
def test_invalid_speed_is_ignored(value):
    context = make_context(speed=4.0)
    before = context.particles.velocities.copy()
    context.set_speed(value)
    assert context.speed == 4.0
    np.testing.assert_array_equal(context.particles.velocities, before)


def test_ellipse_radii_rebuild_active_ellipse_and_reset():
    context = make_context(shape="ellipse")
    old = context.particles
    context.set_ellipse_radii(250, "150")
    assert context.boundary.radius_x == 250.0
    assert context.boundary.radius_y == 150.0
    assert context.particles is not old


def test_ellipse_radii_change_does_not_reset_other_shapes():
    context = make_context(shape="circle")
    old = context.particles
    context.set_ellipse_radii(250, 120)
    assert context.particles is old
    assert context.boundaries["ellipse"].radius_x == 250.0


@pytest.mark.parametrize("value, expected", [
    ("8", 8), ("x", DEFAULT_CONTROL_POINTS), (2, DEFAULT_CONTROL_POINTS), (None, DEFAULT_CONTROL_POINTS),
])
def test_control_point_count_falls_back_to_twelve(value, expected):
    context = make_context(shape="irregular")
    context.set_control_point_count(value)
    assert context.control_point_count == expected
    assert len(context.irregular_curve.control_points) == expected


def test_amplitude_change_keeps_seed():
    context = make_context(shape="irregular", irregular_seed=42)
    expected = context.editor.regenerate(0.2, context.control_point_count, 42)
    context.set_irregular_amplitude(0.2)
    np.testing.assert_allclose(context.irregular_curve.control_points, expected)


@pytest.mark.parametrize("value", ["nan", "inf", "-inf", float("nan"), "abc", None])
def test_non_finite_amplitude_is_ignored(value):
    context = make_context(shape="irregular", irregular_amplitude=0.5, particle_count=5)
    points = context.irregular_curve.control_points.copy()
    context.set_irregular_amplitude(value)
    assert context.irregular_amplitude == 0.5
    np.testing.assert_array_equal(context.irregular_curve.control_points, points)

    sim = Simulation(context)
    for _ in range(50):
        sim.step()
    assert np.isfinite(context.particles.positions).all()
    assert np.isfinite(context.particles.velocities).all()


def test_irregular_changes_apply_when_shape_is_selected():
    context = make_context(shape="rectangle")
    context.set_control_point_count(6)
    context.set_irregular_amplitude(0.0)
    context.select_shape("irregular")
    points = context.irregular_curve.control_points
    assert len(points) == 6
    expected_radius = context.editor.base_radius(0.0)
    assert np.linalg.norm(points[0] - context.center) == pytest.approx(expected_radius)


def test_regenerate_draws_new_seed_and_rebuilds():
    context = make_context(shape="irregular")
    old = context.particles
    context.regenerate()
    assert 0 <= context.irregular_seed < REGENERATE_SEED_RANGE
    np.testing.assert_allclose(
        context.irregular_curve.control_points,
        context.editor.regenerate(context.irregular_amplitude, context.control_point_count, context.irregular_seed),
    )
    assert context.particles is not old


def test_reset_keeps_boundary():
    context = make_context(shape="irregular")
    points = context.irregular_curve.control_points.copy()
    old = context.particles
    context.reset()
    assert context.particles is not old
    np.testing.assert_array_equal(context.irregular_curve.control_points, points)


def test_toggle_playing():
    context = make_context()
    assert context.toggle_playing() is False
    assert not context.playing
    assert context.toggle_playing() is True


def test_pointer_editing_only_on_irregular_shape():
    context = make_context(shape="circle")
    handle = context.irregular_curve.control_points[0].copy()
    assert not context.press(handle)
    assert not context.move(handle + 10)

    context.select_shape("irregular")
    handle = context.irregular_curve.control_points[0].copy()
    assert context.press(handle)
    assert context.move(handle + [5.0, 5.0])
    np.testing.assert_allclose(context.irregular_curve.control_points[0], handle + [5.0, 5.0])
    context.release()
    assert not context.editor.dragging


def test_shape_change_cancels_drag():
    context = make_context(shape="irregular")
    context.press(context.irregular_curve.control_points[1])
    assert context.editor.dragging
    context.select_shape("rectangle")
    assert not context.editor.dragging
