import numpy as np
import pytest

from swingby.core.config import (
    FORM_FIELDS,
    RENDER_CFG,
    RenderCfg,
    SimulationConfig,
    TrailCfg,
    parse_form_config,
)
from swingby.core.errors import ConfigError
from swingby.data.scenarios import (
    DEFAULT_SCENARIO_KEY,
    SCENARIO_DEFINITIONS,
    SCENARIOS,
    get_scenario,
    next_scenario_key,
)

FORM = {"x0": "7", "y0": "0", "vx0": "0", "vy0": "7.7", "dt": "0.1", "speed": "10"}


def test_form_values_are_converted_to_si_units():
    config = parse_form_config(FORM)
    np.testing.assert_array_equal(config.position, [7.0e6, 0.0])
    np.testing.assert_allclose(config.velocity, [0.0, 7700.0])
    assert config.dt == 0.1
    assert config.speed == 10


@pytest.mark.parametrize("field", ["x0", "y0", "vx0", "vy0", "dt", "speed"])
def test_missing_field_is_rejected(field):
    fields = dict(FORM)
    del fields[field]
    with pytest.raises(ConfigError, match=field):
        parse_form_config(fields)


@pytest.mark.parametrize(
    "field, value",
    [("x0", "seven"), ("vy0", ""), ("dt", "nan"), ("dt", "0"), ("dt", "-1"), ("speed", "2.5"), ("speed", "0"), ("speed", "101")],
)
def test_bad_field_values_are_rejected(field, value):
    fields = dict(FORM, **{field: value})
    with pytest.raises(ConfigError):
        parse_form_config(fields)


def test_position_at_attractor_is_rejected():
    with pytest.raises(ConfigError):
        parse_form_config(dict(FORM, x0="0", y0="0"))


def test_config_rejects_bad_vectors():
    with pytest.raises(ConfigError):
        SimulationConfig(position=[1.0, 2.0, 3.0])
    with pytest.raises(ConfigError):
        SimulationConfig(velocity=[np.inf, 0.0])
    with pytest.raises(ConfigError):
        SimulationConfig(speed=True)


def test_config_is_immutable():
    config = SimulationConfig()
    with pytest.raises(AttributeError):
        config.dt = 2.0
    with pytest.raises(ValueError):
        config.position[0] = 1.0


def test_with_speed_keeps_everything_else():
    config = SimulationConfig(dt=0.5, speed=4)
    faster = config.with_speed(8)
    assert faster.speed == 8
    assert faster.dt == 0.5
    np.testing.assert_array_equal(faster.position, config.position)
    with pytest.raises(ConfigError):
        config.with_speed(0)


def test_trail_cfg_with_policy():
    cfg = TrailCfg(ring_capacity=7).with_policy("ring")
    assert cfg.policy == "ring"
    assert cfg.ring_capacity == 7


def test_scenarios_build_valid_configs():
    assert DEFAULT_SCENARIO_KEY == "swingby"
    for scenario in SCENARIO_DEFINITIONS:
        config = scenario.config()
        assert config.speed == scenario.speed
        assert config.position[0] == pytest.approx(scenario.position[0] * 1e6)
    np.testing.assert_allclose(SCENARIOS["regression"].config().velocity, [0.0, 7500.0])


def test_render_cfg_is_hashable_and_alpha_lookup_defaults():
    cfg = RenderCfg()
    assert hash(cfg) == hash(RENDER_CFG)
    assert cfg.tier_alpha("recent") == 160
    assert cfg.tier_alpha("sparse") == 70
    assert cfg.tier_alpha("unknown") == cfg.default_trail_alpha


def test_scenario_form_fields_follow_form_order():
    fields = SCENARIOS["leo"].form_fields()
    assert tuple(fields) == FORM_FIELDS
    assert fields["vy0"] == "7.546"


def test_unknown_scenario_is_rejected():
    with pytest.raises(ConfigError, match="unknown scenario"):
        get_scenario("mars")


def test_next_scenario_key_cycles_all_presets():
    seen = [DEFAULT_SCENARIO_KEY]
    while len(seen) <= len(SCENARIO_DEFINITIONS):
        seen.append(next_scenario_key(seen[-1]))
    assert seen[:-1] == [scenario.key for scenario in SCENARIO_DEFINITIONS]
    assert seen[-1] == DEFAULT_SCENARIO_KEY
