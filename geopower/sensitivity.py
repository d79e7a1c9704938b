# geopower/sensitivity.py
# One-at-a-time (tornado) sensitivity of the base-case power:
# each uncertain input is moved to its low / high bound while every other input
# stays at its most-likely value.

from __future__ import annotations
from dataclasses import replace
from typing import Iterator, Tuple

import pandas as pd

from .distributions import Constant, LogNormal, UncertainParameter, bounds
from .models import RESERVOIR_FIELDS, GeothermalInput
from .monte_carlo import most_likely_point
from .volumetric import AreaThickness, PointValues, evaluate

PLANT_FIELDS = ("recovery_factor", "conversion_efficiency", "plant_capacity_factor", "lifespan")


def _parameters(inp: GeothermalInput) -> Iterator[Tuple[str, UncertainParameter]]:
    r, p = inp.reservoir, inp.plant
    for name in RESERVOIR_FIELDS:
        yield name, getattr(r, name)
    for name in PLANT_FIELDS:
        yield name, getattr(p, name)
    if isinstance(r.geometry, AreaThickness):
        yield "area", r.geometry.area
        yield "thickness", r.geometry.thickness
    else:
        yield "volume", r.geometry.volume


def _power_with(base: PointValues, name: str, value: float) -> float:
    return evaluate(replace(base, **{name: value}))[1]


def tornado(inp: GeothermalInput) -> pd.DataFrame:
    """
    Columns: parameter, low, high, power_low, power_high, swing (all MW except bounds).
    Constant parameters are skipped; rows sorted by swing, largest first.
    """
    base = most_likely_point(inp)
    base_power = evaluate(base)[1]
    rows = []
    for name, param in _parameters(inp):
        if isinstance(param, Constant):
            continue
        lo, hi = bounds(param, log_adjust=(name == "porosity" and isinstance(param, LogNormal)))
        p_lo, p_hi = _power_with(base, name, lo), _power_with(base, name, hi)
        rows.append({
            "parameter": name,
            "low": lo,
            "high": hi,
            "power_low": p_lo,
            "power_high": p_hi,
            "delta_low": p_lo - base_power,
            "delta_high": p_hi - base_power,
            "swing": abs(p_hi - p_lo),
        })
    cols = ["parameter", "low", "high", "power_low", "power_high", "delta_low", "delta_high", "swing"]
    df = pd.DataFrame(rows, columns=cols)
    return df.sort_values("swing", ascending=False, kind="mergesort").reset_index(drop=True)
