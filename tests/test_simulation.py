import numpy as np
import pytest

from constants import PARTICLE_RADIUS, SHAPES
from context import SimulationContext
from simulation import Simulation


def make_context(**overrides):
    params = {"canvas_width": 800, "canvas_height": 600, "seed": 2024}
    params.update(overrides)
    return SimulationContext(params)


def test_particle_leaving_circle_is_sent_straight_back():
    context = make_context(shape="circle", circle_radius=100, particle_count=1)
    sim = Simulation(context)
    cx, cy = context.center
    context.particles.positions[:] = [[cx + 100.0, cy]]
    context.particles.velocities[:] = [[3.0, 0.0]]

    collisions = sim.step()

    assert collisions == 1
    np.testing.assert_allclose(context.particles.velocities[0], [-3.0, 0.0])
    distance = np.linalg.norm(context.particles.positions[0] - context.center)
    assert distance <= 100.0


def test_rectangle_wall_hit_through_a_full_step():
    context = make_context(shape="rectangle")
    sim = Simulation(context)
    context.particles.positions[:] = [[-1.0, 300.0]]
    context.particles.velocities[:] = [[-3.0, 0.0]]

    sim.step()

    assert context.particles.positions[0, 0] == PARTICLE_RADIUS
    assert context.particles.velocities[0, 0] == 3.0


@pytest.mark.parametrize("seed", range(6))
def test_rectangle_batch_is_collinear_along_the_spawn_edge(seed):
    context = make_context(shape="rectangle", seed=seed)
    context.set_particle_count(5)
    particles = context.particles
    spawn = particles.spawn_point

    assert particles.positions.shape == (5, 2)
    if spawn.y in (0.0, 600.0):
        along, across = particles.positions[:, 0], particles.positions[:, 1]
        spawn_along, spawn_across = spawn.x, spawn.y
    else:
        along, across = particles.positions[:, 1], particles.positions[:, 0]
        spawn_along, spawn_across = spawn.y, spawn.x

    np.testing.assert_array_equal(across, spawn_across)
    np.testing.assert_allclose(np.diff(along), 2.0)
    assert along.mean() == pytest.approx(spawn_along)


def test_paths_grow_by_one_point_per_step():
    context = make_context(shape="ellipse", particle_count=3)
    sim = Simulation(context)
    start = [list(path) for path in context.particles.paths]
    assert all(len(path) == 1 for path in start)

    for _ in range(10):
        sim.step()

    for before, path, position in zip(start, context.particles.paths, context.particles.positions):
        assert len(path) == 11
        assert path[0] == before[0]
        assert path[-1] == pytest.approx(tuple(position))


@pytest.mark.parametrize("shape", SHAPES)
def test_speed_is_preserved_over_many_steps(shape):
    context = make_context(shape=shape, particle_count=4, speed=5.0)
    sim = Simulation(context)
    for _ in range(600):
        sim.step()
    assert np.isfinite(context.particles.positions).all()
    np.testing.assert_allclose(context.particles.speeds(), 5.0)
    assert sim.step_count == 600


def test_particles_stay_inside_the_circle():
    context = make_context(shape="circle", particle_count=6, speed=4.0)
    sim = Simulation(context)
    for _ in range(400):
        sim.step()
        distances = np.linalg.norm(context.particles.positions - context.center, axis=1)
        assert (distances <= context.boundary.radius + 1e-9).all()


def test_step_reads_boundary_after_shape_change():
    context = make_context(shape="rectangle")
    sim = Simulation(context)
    sim.step()
    context.select_shape("circle")
    cx, cy = context.center
    context.particles.positions[:] = [[cx, cy + context.boundary.radius]]
    context.particles.velocities[:] = [[0.0, 2.0]]
    sim.step()
    np.testing.assert_allclose(context.particles.velocities[0], [0.0, -2.0], atol=1e-12)
    assert sim.collision_count >= 1


def test_irregular_batch_moves_without_nan():
    context = make_context(shape="irregular", particle_count=10, speed=3.0)
    sim = Simulation(context)
    for _ in range(300):
        sim.step()
    assert np.isfinite(context.particles.positions).all()
    assert np.isfinite(context.particles.velocities).all()
