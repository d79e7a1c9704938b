import dataclasses

import matplotlib
matplotlib.use("Agg")

import pytest

from geopower.config import input_from_config, load_config
from geopower.distributions import Constant
from geopower.models import GeothermalInput, PlantSpec, ReservoirSpec, SimulationConfig
from geopower.volumetric import AreaThickness


@pytest.fixture
def default_input():
    """Scientific defaults (config.yaml / DEFAULT_CONFIG), 500 iterations, seed 42."""
    inp, _ = input_from_config(load_config())
    return dataclasses.replace(inp, simulation=SimulationConfig(iterations=500, seed=42))


@pytest.fixture
def constant_input():
    """Every parameter fixed at the scenario-1 values."""
    reservoir = ReservoirSpec(
        geometry=AreaThickness(area=Constant(33.0), thickness=Constant(300.0)),
        reservoir_temp=Constant(230.0),
        abandon_temp=Constant(100.0),
        porosity=Constant(0.04),
        rock_specific_heat=Constant(0.9),
        fluid_specific_heat=Constant(4.18),
        rock_density=Constant(2750.0),
        fluid_density=Constant(855.9),
    )
    plant = PlantSpec(
        recovery_factor=Constant(0.07),
        conversion_efficiency=Constant(0.173),
        plant_capacity_factor=Constant(0.9),
        lifespan=Constant(25.0),
    )
    return GeothermalInput(reservoir=reservoir, plant=plant,
                           simulation=SimulationConfig(iterations=50, seed=42))


@pytest.fixture
def scenario1_power_mw():
    heat_capacity = 2750 * 0.9 * (1 - 0.04) + 855.9 * 4.18 * 0.04
    q_kj = heat_capacity * (33 * 1e6) * 300 * (230 - 100)
    return q_kj * 1000 * 0.07 * 0.173 / (0.9 * (25 * 31557600)) / 1e6
