import dataclasses

import pytest

from geopower.adapter import (
    SPREADS, BasicInput, BasicReservoir, from_scientific, run_basic, to_scientific,
)
from geopower.distributions import Constant, LogNormal, Triangular
from geopower.models import SimulationConfig
from geopower.monte_carlo import run_simulation
from geopower.volumetric import AreaThickness


def test_default_bands():
    sci = to_scientific(BasicInput())
    r, p = sci.reservoir, sci.plant
    assert isinstance(r.geometry, AreaThickness)
    assert r.geometry.area == Constant(33.0)

    th = r.geometry.thickness
    assert isinstance(th, Triangular)
    assert (th.min, th.most_likely, th.max) == pytest.approx((240.0, 300.0, 360.0))
    assert r.reservoir_temp == Triangular(200.0, 230.0, 260.0)
    assert r.abandon_temp == Constant(100.0)
    assert isinstance(r.porosity, LogNormal)
    assert (r.porosity.mean, r.porosity.sd) == pytest.approx((0.04, 0.02))

    rf = p.recovery_factor
    assert (rf.min, rf.max) == pytest.approx((0.049, 0.091))
    pf = p.plant_capacity_factor
    assert (pf.min, pf.most_likely, pf.max) == pytest.approx((0.72, 0.9, 0.9))
    assert p.lifespan == Constant(25.0)
    assert r.rock_density == Constant(2750.0)
    assert p.electricity_price == 0.08


def test_every_band_contains_its_value():
    sci = to_scientific(BasicInput())
    params = [sci.reservoir.geometry.area, sci.reservoir.geometry.thickness]
    params += [getattr(sci.reservoir, n) for n in ("reservoir_temp", "abandon_temp", "rock_specific_heat",
                                                   "fluid_specific_heat", "rock_density", "fluid_density")]
    params += [getattr(sci.plant, n) for n in ("recovery_factor", "conversion_efficiency",
                                               "plant_capacity_factor", "lifespan")]
    assert len(params) == len(SPREADS)
    for prm in params:
        if isinstance(prm, Triangular):
            assert prm.min <= prm.most_likely <= prm.max


def test_simulation_and_project_carried_over():
    basic = BasicInput(simulation=SimulationConfig(iterations=123, seed=7))
    sci = to_scientific(basic)
    assert sci.simulation == basic.simulation
    assert sci.project == basic.project


def test_basic_base_case_matches_scenario1(scenario1_power_mw):
    basic = BasicInput(simulation=SimulationConfig(iterations=20, seed=42))
    res = run_basic(basic)
    assert res.base_case["powerMWe"] == pytest.approx(scenario1_power_mw, rel=1e-12)
    assert res.base_case["powerWatts"] == pytest.approx(scenario1_power_mw * 1e6, rel=1e-12)


def test_from_scientific_shape():
    basic = BasicInput(simulation=SimulationConfig(iterations=50, seed=42))
    sci_res = run_simulation(to_scientific(basic))
    res = from_scientific(sci_res, basic)
    assert set(res.statistics) == {"mean", "std", "min", "max", "percentiles", "probabilities"}
    assert res.monte_carlo_results == sci_res.monte_carlo_results.tolist()
    assert res.executive == sci_res.executive.to_dict()
    d = res.to_dict()
    assert d["input"]["reservoir"]["area"] == 33.0
    assert "skew" not in d["statistics"]


def test_scenario2_default_basic_run():
    res = run_basic(BasicInput(simulation=SimulationConfig(iterations=10000, seed=42)))
    pct = res.statistics["percentiles"]
    assert len(res.monte_carlo_results) == 10000
    assert pct["p5"] < pct["p50"] < pct["p95"]
    assert 30.0 < pct["p5"] < 52.0
    assert 48.0 < pct["p50"] < 70.0
    assert 60.0 < pct["p95"] < 95.0
    assert 0.0 < res.statistics["probabilities"]["aboveBase"] < 1.0


def test_basic_input_record_round_trip():
    basic = BasicInput(reservoir=BasicReservoir(area=10.0, porosity=0.1),
                       simulation=SimulationConfig(iterations=5, seed=3))
    again = BasicInput.from_dict(basic.to_dict())
    assert again == basic


def test_basic_input_from_partial_record():
    b = BasicInput.from_dict({"reservoir": {"area": 12.0}})
    assert b.reservoir.area == 12.0
    assert b.reservoir.thickness == 300.0
    assert b.simulation.iterations == 1000
    assert dataclasses.asdict(b.power_plant)["lifespan"] == 25.0
