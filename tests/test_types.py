"""
Tests for configuration and environment data types.
"""

import math

import numpy as np
import pytest

from StormSim.errors import InvalidConfigError, InvalidInputError
from StormSim.types import (
    EntityConfig,
    EntityKind,
    EnvironmentalConditions,
    SupercellParameters,
    SupercellState,
    WorldBounds,
    is_number,
)


class TestEnvironmentalConditions:

    def test_snapshot_is_read_only(self):
        env = EnvironmentalConditions({"temperature": 300.0})
        with pytest.raises(TypeError):
            env.values["temperature"] = 250.0

    def test_snapshot_decoupled_from_source(self):
        source = {"temperature": 300.0}
        env = EnvironmentalConditions(source)
        source["temperature"] = 250.0
        assert env.get("temperature") == 300.0

    def test_coerce(self):
        env = EnvironmentalConditions({"wind_shear": 5})
        assert EnvironmentalConditions.coerce(env) is env
        assert EnvironmentalConditions.coerce(None).values == {}
        assert EnvironmentalConditions.coerce({"pressure": 1.0}).get("pressure") == 1.0

    def test_steering(self):
        assert EnvironmentalConditions({}).steering is None
        assert EnvironmentalConditions({"steering_u": 3}).steering == (3.0, 0.0)

    def test_landfall_flag(self):
        assert EnvironmentalConditions({}).landfall is False
        assert EnvironmentalConditions({"landfall": True}).landfall is True

    @pytest.mark.parametrize("values", [
        {"temperature": "hot"},
        {"pressure": math.nan},
        {"landfall": 1},
        {"wind_shear": True},
        {3: 1.0},
    ])
    def test_malformed_values_rejected(self, values):
        with pytest.raises(InvalidInputError):
            EnvironmentalConditions(values)

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidInputError):
            EnvironmentalConditions.coerce([1, 2, 3])


class TestEntityConfig:

    def test_from_mapping(self):
        config = EntityConfig.from_mapping({"kind": "supercell", "x": 1, "y": 2, "radius": 90})
        assert config.kind == EntityKind.SUPERCELL
        assert config.radius == 90
        assert config.duration is None

    def test_kind_argument_used_when_absent(self):
        config = EntityConfig.from_mapping({"x": 1, "y": 2}, kind="hurricane")
        assert config.kind == EntityKind.HURRICANE

    def test_unknown_keys_rejected(self):
        with pytest.raises(InvalidConfigError):
            EntityConfig.from_mapping({"x": 1, "y": 2, "colour": "grey"})

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidConfigError):
            EntityConfig.from_mapping([("x", 1)])


class TestWorldBounds:

    def test_coerce_mapping(self):
        assert WorldBounds.coerce({"width": 10, "height": 20}) == WorldBounds(10, 20)

    def test_non_positive_rejected(self):
        with pytest.raises(InvalidConfigError):
            WorldBounds(0, 10)


class TestSupercellTypes:

    def test_state_defaults(self):
        state = SupercellState.from_mapping(None)
        assert state == SupercellState()
        assert state.temperature == 300.0

    def test_parameters_override(self):
        params = SupercellParameters.from_mapping({"deviation": 3.0})
        assert params.deviation == 3.0
        assert params.updraft_gain == SupercellParameters().updraft_gain

    def test_state_is_frozen(self):
        with pytest.raises(AttributeError):
            SupercellState().updraft = 5.0


class TestIsNumber:

    @pytest.mark.parametrize("value", [3, 2.5, np.int64(7), np.float32(1.5)])
    def test_real_numbers_accepted(self, value):
        assert is_number(value)

    @pytest.mark.parametrize("value", [True, np.bool_(True), math.inf, math.nan, "3", None])
    def test_non_numbers_rejected(self, value):
        assert not is_number(value)
