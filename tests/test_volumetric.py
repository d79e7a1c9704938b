import math

import numpy as np
import pytest

from geopower.volumetric import (
    SECONDS_PER_YEAR, PointValues, bulk_volume_m3, electrical_power, evaluate, heat_in_place,
)


def _point(**kw):
    values = dict(reservoir_temp=230.0, abandon_temp=100.0, porosity=0.04,
                  rock_specific_heat=0.9, fluid_specific_heat=4.18,
                  rock_density=2750.0, fluid_density=855.9,
                  recovery_factor=0.07, conversion_efficiency=0.173,
                  plant_capacity_factor=0.9, lifespan=25.0, area=33.0, thickness=300.0)
    values.update(kw)
    return PointValues(**values)


def test_scenario1_base_case(scenario1_power_mw):
    energy_kj, power_mw = evaluate(_point())
    assert power_mw == pytest.approx(scenario1_power_mw, rel=1e-12)
    assert power_mw == pytest.approx(55.29, abs=0.01)
    assert energy_kj == pytest.approx(3.24209e15, rel=1e-5)


def test_volume_equivalent_to_area_times_thickness():
    _, p_area = evaluate(_point())
    _, p_vol = evaluate(_point(area=None, thickness=None, volume=9.9))
    assert p_vol == pytest.approx(p_area, rel=1e-12)


def test_volume_takes_precedence():
    _, p = evaluate(_point(volume=19.8))
    _, p_area = evaluate(_point())
    assert p == pytest.approx(2 * p_area, rel=1e-12)


def test_missing_geometry_raises():
    with pytest.raises(ValueError):
        heat_in_place(230.0, 100.0, 0.04, 0.9, 4.18, 2750.0, 855.9, area_km2=33.0)
    with pytest.raises(ValueError):
        bulk_volume_m3(area_km2=33.0)


def test_bulk_volume():
    assert bulk_volume_m3(33.0, 300.0) == pytest.approx(9.9e9)
    assert bulk_volume_m3(33.0, 300.0, volume_km3=2.0) == pytest.approx(2.0e9)


def test_power_scales_linearly():
    base = electrical_power(1.0e15, 0.1, 0.2, 1.0, 30.0)
    assert electrical_power(2.0e15, 0.1, 0.2, 1.0, 30.0) == pytest.approx(2 * base)
    assert base == pytest.approx(1.0e18 * 0.02 / (30.0 * SECONDS_PER_YEAR))


def test_arrays_broadcast():
    q = heat_in_place(np.array([230.0, 200.0]), 100.0, 0.04, 0.9, 4.18, 2750.0, 855.9,
                      area_km2=33.0, thickness_m=300.0)
    assert q.shape == (2,)
    assert q[0] / q[1] == pytest.approx(130.0 / 100.0)


def test_degenerate_inputs_propagate_non_finite():
    _, p = evaluate(_point(plant_capacity_factor=0.0))
    assert math.isinf(p)
    _, p = evaluate(_point(reservoir_temp=100.0, plant_capacity_factor=0.0))
    assert math.isnan(p)
