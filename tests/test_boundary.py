import pytest

from skyflock.core.agents.base import Agent, Vector3
from skyflock.core.terrain import FlatTerrain


BOUND = 300.0


def test_update_adds_acceleration_and_scales_position():
    agent = Agent((0, 0, 0), (1, 0, 0), max_speed=4.0, max_force=0.05)
    agent.apply_force(Vector3(0.5, 0, 0))

    agent.update(0.1, distance_scale=10.0)

    assert agent.velocity.x == pytest.approx(1.5)
    assert agent.position.x == pytest.approx(1.5)
    assert agent.acceleration.length() == 0


def test_update_clamps_speed():
    agent = Agent((0, 0, 0), (3, 0, 0), max_speed=4.0, max_force=0.05)
    agent.apply_force(Vector3(3, 0, 0))

    agent.update(0.1, distance_scale=10.0)

    assert agent.velocity.length() == pytest.approx(4.0)
    assert agent.position.x == pytest.approx(4.0)


def test_heading_kept_when_velocity_drops_to_zero():
    agent = Agent((0, 0, 0), (0, 0, 2), max_speed=4.0, max_force=0.05)
    assert agent.heading.z == pytest.approx(1.0)

    agent.velocity *= 0
    agent.update_heading()

    assert agent.heading.z == pytest.approx(1.0)
    assert agent.look_target().z == pytest.approx(1.0)


def test_resting_agent_has_no_heading():
    agent = Agent((1, 2, 3), (0, 0, 0), max_speed=4.0, max_force=0.05)

    assert agent.heading is None
    assert agent.look_target() == agent.position


def test_floor_lift_below_clearance(make_boid, flat):
    boid = make_boid((0, 5, 0))

    lifted, wrapped = boid.constrain(BOUND, flat)

    assert lifted is True
    assert wrapped is False
    assert boid.acceleration.y == pytest.approx(0.8)


def test_floor_lift_adds_to_existing_acceleration(make_boid, flat):
    boid = make_boid((0, 5, 0))
    boid.apply_force(Vector3(0, 0.1, 0))

    boid.constrain(BOUND, flat)

    assert boid.acceleration.y == pytest.approx(0.9)


def test_no_lift_above_clearance(make_boid, flat):
    boid = make_boid((0, 20, 0))

    lifted, _ = boid.constrain(BOUND, flat)

    assert lifted is False
    assert boid.acceleration.y == 0


def test_floor_follows_terrain_height(make_boid):
    boid = make_boid((0, 30, 0))

    lifted, _ = boid.constrain(BOUND, FlatTerrain(25.0))

    assert lifted is True


@pytest.mark.parametrize("axis", ["x", "z"])
def test_wrap_positive_edge(make_boid, flat, axis):
    boid = make_boid((0, 100, 0))
    setattr(boid.position, axis, BOUND + 1)

    _, wrapped = boid.constrain(BOUND, flat)

    assert wrapped is True
    assert getattr(boid.position, axis) == -BOUND


@pytest.mark.parametrize("axis", ["x", "z"])
def test_wrap_negative_edge(make_boid, flat, axis):
    boid = make_boid((0, 100, 0))
    setattr(boid.position, axis, -BOUND - 1)

    boid.constrain(BOUND, flat)

    assert getattr(boid.position, axis) == BOUND


def test_top_edge_drops_to_floor_height(make_boid):
    boid = make_boid((0, BOUND + 51, 0))

    _, wrapped = boid.constrain(BOUND, FlatTerrain(25.0))

    assert wrapped is True
    assert boid.position.y == pytest.approx(35.0)


def test_no_bottom_wrap(make_boid, flat):
    boid = make_boid((0, -BOUND - 100, 0))

    lifted, wrapped = boid.constrain(BOUND, flat)

    assert wrapped is False
    assert lifted is True
    assert boid.position.y == -BOUND - 100


def test_oracle_queried_once_per_constrain(make_boid, counting_oracle):
    boid = make_boid((BOUND + 5, BOUND + 60, 0))

    boid.constrain(BOUND, counting_oracle)

    assert counting_oracle.calls == 1


def test_constrain_without_lift_skips_oracle_below_ceiling(make_boid, counting_oracle):
    boid = make_boid((0, 5, 0))

    lifted, _ = boid.constrain(BOUND, counting_oracle, lift=False)

    assert lifted is False
    assert counting_oracle.calls == 0
    assert boid.acceleration.y == 0


def test_constrain_without_lift_still_drops_from_ceiling(make_boid, counting_oracle):
    boid = make_boid((0, BOUND + 60, 0))

    boid.constrain(BOUND, counting_oracle, lift=False)

    assert counting_oracle.calls == 1
    assert boid.position.y == pytest.approx(10.0)
