import dataclasses
import math

import numpy as np
import pytest

from geopower.config import input_from_config, load_config
from geopower.distributions import Constant, Triangular
from geopower.models import GeothermalInput, SimulationConfig
from geopower.monte_carlo import base_case, run_simulation, sample_point, simulate
from geopower.rng import LegacyLCG
from geopower.volumetric import VolumeGeometry


def _with_sim(inp, **kw):
    return dataclasses.replace(inp, simulation=SimulationConfig(**kw))


def test_same_seed_same_results(default_input):
    a = run_simulation(default_input)
    b = run_simulation(default_input)
    assert np.array_equal(a.monte_carlo_results, b.monte_carlo_results)
    assert a.statistics == b.statistics


def test_different_seed_different_results(default_input):
    a = simulate(default_input)
    b = simulate(_with_sim(default_input, iterations=500, seed=43))
    assert not np.array_equal(a, b)


def test_result_vector_sorted_and_read_only(default_input):
    res = run_simulation(default_input)
    v = res.monte_carlo_results
    assert len(v) == 500
    assert np.all(np.diff(v) >= 0)
    with pytest.raises(ValueError):
        v[0] = 0.0


def test_base_case_consistency(default_input, scenario1_power_mw):
    res = run_simulation(default_input)
    assert res.base_case.power_mwe == pytest.approx(scenario1_power_mw, rel=1e-12)
    assert res.base_case == base_case(default_input)


def test_all_constant_inputs_reproduce_base_case(constant_input):
    res = run_simulation(constant_input)
    assert np.all(res.monte_carlo_results == res.base_case.power_mwe)
    assert res.statistics.std == pytest.approx(0.0, abs=1e-9)
    assert res.statistics.probabilities.above_base == 0.0


def test_constant_inputs_draw_nothing(constant_input):
    g = LegacyLCG(42)
    sample_point(constant_input, g)
    assert g.state == 42


def test_draw_order_reservoir_temp_first(constant_input):
    r = dataclasses.replace(constant_input.reservoir, reservoir_temp=Triangular(200.0, 230.0, 260.0))
    inp = dataclasses.replace(constant_input, reservoir=r)
    p = sample_point(inp, LegacyLCG(42))
    assert p.reservoir_temp == LegacyLCG(42).triangular(200.0, 230.0, 260.0)


def test_draw_order_thickness_last(constant_input):
    geo = dataclasses.replace(constant_input.reservoir.geometry, thickness=Triangular(200.0, 300.0, 400.0))
    r = dataclasses.replace(constant_input.reservoir, geometry=geo,
                            reservoir_temp=Triangular(200.0, 230.0, 260.0))
    inp = dataclasses.replace(constant_input, reservoir=r)
    g = LegacyLCG(42)
    p = sample_point(inp, g)
    ref = LegacyLCG(42)
    ref.next()
    assert p.thickness == ref.triangular(200.0, 300.0, 400.0)
    assert g.state == ref.state


def test_single_iteration(default_input):
    res = run_simulation(_with_sim(default_input, iterations=1, seed=42))
    v = res.monte_carlo_results
    assert len(v) == 1
    s = res.statistics
    assert s.mean == s.min == s.max == v[0]
    assert s.std == 0.0
    assert set(s.percentiles.to_dict().values()) == {v[0]}
    assert math.isnan(s.skew) and math.isnan(s.kurt)


def test_volume_geometry_is_used(constant_input, scenario1_power_mw):
    r = dataclasses.replace(constant_input.reservoir, geometry=VolumeGeometry(volume=Constant(9.9)))
    inp = dataclasses.replace(constant_input, reservoir=r)
    assert base_case(inp).power_mwe == pytest.approx(scenario1_power_mw, rel=1e-12)


def test_volume_record_overrides_area_and_thickness(default_input):
    d = default_input.to_dict()
    d["reservoir"]["volume"] = {"min": 0.0, "most_likely": 19.8, "max": 0.0, "mean": 0.0, "sd": 0.0, "pdf": "C"}
    inp = GeothermalInput.from_dict(d)
    assert isinstance(inp.reservoir.geometry, VolumeGeometry)
    assert base_case(inp).power_mwe == pytest.approx(2 * base_case(default_input).power_mwe, rel=1e-12)


def test_numpy_generator_runs(default_input):
    res = run_simulation(_with_sim(default_input, iterations=200, seed=1, generator="numpy"))
    assert len(res.monte_carlo_results) == 200
    assert res.statistics.percentiles.p5 <= res.statistics.percentiles.p95


def test_non_finite_results_are_kept(constant_input, caplog):
    plant = dataclasses.replace(constant_input.plant, plant_capacity_factor=Triangular(0.0, 0.0, 0.0))
    inp = dataclasses.replace(constant_input, plant=plant)
    res = run_simulation(inp)
    assert np.isinf(res.monte_carlo_results).all()
    assert "non-finite" in caplog.text


def test_results_record_keys(default_input):
    d = run_simulation(_with_sim(default_input, iterations=10, seed=42)).to_dict()
    assert set(d) == {"baseCase", "monteCarloResults", "statistics", "economics", "executive", "input"}
    assert set(d["baseCase"]) == {"energyKJ", "powerMWe"}
    assert len(d["monteCarloResults"]) == 10


# Reference run: scientific defaults, seed 42, 10,000 iterations, legacy generator.
REFERENCE_PERCENTILES = {
    "p5": 40.45122739451259, "p10": 43.40782151683669, "p25": 48.896435720923975,
    "p50": 55.71920989389933, "p75": 63.29755976958622, "p90": 70.23962223570447,
    "p95": 74.67556172837811,
}


def test_default_config_reference_values():
    inp, _ = input_from_config(load_config())
    assert inp.simulation == SimulationConfig(iterations=10000, seed=42)
    res = run_simulation(inp)
    s = res.statistics
    assert s.percentiles.to_dict() == REFERENCE_PERCENTILES
    assert s.min == 25.23871252832286
    assert s.max == 99.31063970981897
    assert s.mean == 56.41326393299059
