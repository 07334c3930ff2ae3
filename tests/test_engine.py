import random

import pytest

from skyflock.core.config import FlockingParams, SimulationConfig
from skyflock.core.terrain import FlatTerrain, HeightmapTerrain
from skyflock.simulation.engine import FlockSimulation


SCENARIO_CONFIG = dict(worldBound=300.0, boidCount=3)


def test_speed_never_exceeds_max_after_step():
    config = SimulationConfig(boidCount=40, seed=1, terrainSeed=2, spawnHalfWidth=60.0)
    sim = FlockSimulation(config, HeightmapTerrain.from_config(config))

    for _ in range(60):
        sim.step(1.0 / 60.0)
        for boid in sim.agents():
            assert boid.velocity.length() <= boid.max_speed + 1e-9


def test_spawn_is_repeatable_with_a_seed(flat):
    config = SimulationConfig(boidCount=10, seed=5)
    first = FlockSimulation(config, flat)
    second = FlockSimulation(config, flat)

    assert [tuple(b.position) for b in first.agents()] == [tuple(b.position) for b in second.agents()]


def test_spawn_stays_inside_spawn_volume(flat):
    config = SimulationConfig(boidCount=50)
    sim = FlockSimulation(config, flat, rng=random.Random(11))

    for boid in sim.agents():
        assert -200 <= boid.position.x <= 200
        assert -200 <= boid.position.z <= 200
        assert 50 <= boid.position.y <= 100
        assert 2.0 - 1e-9 <= boid.velocity.length() <= 6.0 + 1e-9


def test_agents_view_is_a_copy_of_the_order(flat, scenario_boids):
    sim = FlockSimulation(SimulationConfig(**SCENARIO_CONFIG), flat, boids=scenario_boids())

    view = sim.agents()

    assert isinstance(view, tuple)
    assert len(view) == 3
    assert view[0].position.x == 0


def test_scenario_equal_weights_pair_forces_cancel(flat, scenario_boids, unit_params):
    boids = scenario_boids()
    sim = FlockSimulation(SimulationConfig(**SCENARIO_CONFIG), flat, unit_params, boids=boids)

    sim.step(0.1)

    # separation and cohesion are each clamped to max force and point in
    # opposite directions, so the close pair does not move
    assert boids[0].position.x == pytest.approx(0.0, abs=1e-9)
    assert boids[1].position.x == pytest.approx(5.0, abs=1e-9)
    # the far boid has no neighbor within any radius
    assert boids[2].position.x == pytest.approx(60.0)
    assert boids[2].velocity.length() == 0
    assert boids[2].heading is None


def test_scenario_default_weights_first_boid_repels(flat, scenario_boids):
    boids = scenario_boids()
    params = FlockingParams()
    sim = FlockSimulation(SimulationConfig(**SCENARIO_CONFIG), flat, params, boids=boids)

    sim.step(0.1)

    assert boids[0].position.x == pytest.approx(-0.05)
    assert boids[0].heading.x == pytest.approx(-1.0)
    # boid 1 sees boid 0 already moving away at -0.05: doubled separation
    # (+0.1) is cancelled by alignment (-0.05) and cohesion (-0.05)
    assert boids[1].position.x == pytest.approx(5.0, abs=1e-9)
    assert boids[1].velocity.length() == pytest.approx(0.0, abs=1e-9)
    assert boids[1].position.x - boids[0].position.x > 5.0

    assert boids[2].position.x == pytest.approx(60.0)
    assert boids[2].velocity.length() == 0
    assert sim.last_lift_count == 0
    assert sim.last_wrap_count == 0


def test_scenario_default_weights_double_buffered_pair_repels(flat, scenario_boids):
    boids = scenario_boids()
    config = SimulationConfig(doubleBuffered=True, **SCENARIO_CONFIG)
    sim = FlockSimulation(config, flat, FlockingParams(), boids=boids)

    sim.step(0.1)

    assert boids[0].position.x == pytest.approx(-0.05)
    assert boids[1].position.x == pytest.approx(5.05)
    assert boids[0].heading.x == pytest.approx(-1.0)
    assert boids[1].heading.x == pytest.approx(1.0)

    assert boids[2].position.x == pytest.approx(60.0)
    assert boids[2].velocity.length() == 0
    assert sim.last_lift_count == 0
    assert sim.last_wrap_count == 0


def test_params_are_read_fresh_each_tick(flat, scenario_boids, unit_params):
    boids = scenario_boids()
    sim = FlockSimulation(SimulationConfig(**SCENARIO_CONFIG), flat, unit_params, boids=boids)

    sim.step(0.1)
    assert boids[0].position.x == pytest.approx(0.0, abs=1e-9)

    unit_params.separationWeight = 2.0
    sim.step(0.1)

    assert boids[0].position.x < -0.01


def test_step_accepts_param_override(flat, scenario_boids, unit_params):
    boids = scenario_boids()
    sim = FlockSimulation(SimulationConfig(**SCENARIO_CONFIG), flat, unit_params, boids=boids)

    sim.step(0.1, params=FlockingParams(separationWeight=2.0))

    assert boids[0].position.x == pytest.approx(-0.05)


def _chase_boids(make_boid):
    return [make_boid((0, 50, 0), velocity=(-4, 0, 0)), make_boid((48, 50, 0))]


def test_live_rules_see_earlier_updates_in_same_tick(flat, make_boid):
    boids = _chase_boids(make_boid)
    sim = FlockSimulation(SimulationConfig(boidCount=2), flat, boids=boids)

    sim.step(0.1)

    # the first boid has already moved out of range when the second is evaluated
    assert boids[0].position.x == pytest.approx(-3.9)
    assert boids[1].position.x == pytest.approx(48.0)
    assert boids[1].velocity.length() == 0


def test_double_buffered_rules_see_pre_tick_state(flat, make_boid):
    boids = _chase_boids(make_boid)
    sim = FlockSimulation(SimulationConfig(boidCount=2, doubleBuffered=True), flat, boids=boids)

    sim.step(0.1)

    assert boids[0].position.x == pytest.approx(-3.9)
    assert boids[1].position.x == pytest.approx(47.9)


def test_floor_lift_lags_one_tick_by_default(flat, make_boid):
    boid = make_boid((0, 5, 0))
    sim = FlockSimulation(SimulationConfig(boidCount=1), flat, boids=[boid])

    sim.step(0.1)

    assert boid.velocity.length() == 0
    assert boid.position.y == pytest.approx(5.0)
    assert boid.acceleration.y == pytest.approx(0.8)
    assert sim.last_lift_count == 1

    sim.step(0.1)

    assert boid.velocity.y == pytest.approx(0.8)
    assert boid.position.y == pytest.approx(5.8)


def test_floor_lift_before_integrate_acts_same_tick(flat, make_boid):
    boid = make_boid((0, 5, 0))
    sim = FlockSimulation(SimulationConfig(boidCount=1, liftBeforeIntegrate=True), flat, boids=[boid])

    sim.step(0.1)

    assert boid.velocity.y == pytest.approx(0.8)
    assert boid.position.y == pytest.approx(5.8)
    assert boid.acceleration.length() == 0
    assert sim.last_lift_count == 1


def test_boid_wraps_across_world_edge(flat, make_boid):
    boid = make_boid((299, 100, 0), velocity=(4, 0, 0))
    sim = FlockSimulation(SimulationConfig(boidCount=1), flat, boids=[boid])

    sim.step(0.1)

    assert boid.position.x == -300
    assert sim.last_wrap_count == 1
    assert boid.heading.x == pytest.approx(1.0)


def test_one_oracle_query_per_boid_per_tick(counting_oracle):
    config = SimulationConfig(boidCount=12, seed=3)
    sim = FlockSimulation(config, counting_oracle)

    sim.step(1.0 / 60.0)

    assert counting_oracle.calls == 12


def test_invalid_config_is_rejected(flat):
    with pytest.raises(ValueError):
        FlockSimulation(SimulationConfig(maxSpeed=0), flat)


def test_frame_count_advances(flat):
    sim = FlockSimulation(SimulationConfig(boidCount=3, seed=1), flat)

    sim.step(0.016)
    sim.step(0.016)

    assert sim.frame_count == 2


def test_boundary_tunables_are_read_each_tick(flat, make_boid):
    boid = make_boid((0, 5, 0))
    sim = FlockSimulation(SimulationConfig(boidCount=1), flat, boids=[boid])

    sim.config.floorLift = 2.0
    sim.step(0.1)

    assert boid.acceleration.y == pytest.approx(2.0)

    sim.config.floorClearance = 1.0
    sim.step(0.1)

    # velocity picked up the 2.0 lift; y = 7.0 is now above the lowered floor
    assert boid.position.y == pytest.approx(7.0)
    assert boid.acceleration.length() == 0
    assert sim.last_lift_count == 0


def test_explicit_boids_share_the_simulation_config(flat, make_boid):
    boids = [make_boid((0, 50, 0)), make_boid((100, 50, 0))]
    config = SimulationConfig(boidCount=2)

    sim = FlockSimulation(config, flat, boids=boids)

    assert all(boid.config is sim.config for boid in sim.agents())
