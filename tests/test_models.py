import dataclasses

import pytest

from geopower.distributions import Constant
from geopower.errors import ParameterError
from geopower.models import GeothermalInput, SimulationConfig, physical_warnings


def test_record_round_trip(default_input):
    assert GeothermalInput.from_dict(default_input.to_dict()) == default_input


def test_missing_parameter(default_input):
    d = default_input.to_dict()
    del d["reservoir"]["porosity"]
    del d["powerPlant"]["lifespan"]
    with pytest.raises(ParameterError, match="porosity.*lifespan"):
        GeothermalInput.from_dict(d)


def test_missing_geometry(default_input):
    d = default_input.to_dict()
    del d["reservoir"]["area"]
    with pytest.raises(ParameterError):
        GeothermalInput.from_dict(d)


def test_power_plant_key_alias(default_input):
    d = default_input.to_dict()
    d["power_plant"] = d.pop("powerPlant")
    assert GeothermalInput.from_dict(d).plant == default_input.plant


@pytest.mark.parametrize("kw", [{"iterations": 0}, {"iterations": -5}, {"iterations": 2.5},
                                {"seed": -1}, {"generator": "mt19937"}])
def test_simulation_config_validation(kw):
    with pytest.raises(ParameterError):
        SimulationConfig(**kw)


def test_effective_seed():
    assert SimulationConfig().effective_seed == 42
    assert SimulationConfig(seed=0).effective_seed == 0


def test_physical_warnings(constant_input):
    assert physical_warnings(constant_input) == []
    r = dataclasses.replace(constant_input.reservoir, abandon_temp=Constant(250.0), porosity=Constant(1.5))
    warnings = physical_warnings(dataclasses.replace(constant_input, reservoir=r))
    assert len(warnings) == 2
    assert any("abandon" in w for w in warnings)
