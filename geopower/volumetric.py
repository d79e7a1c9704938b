# geopower/volumetric.py
# Volumetric heat-in-place model for liquid-dominated reservoirs (USGS Circular 790):
#   Q [kJ] = (rho_r*c_r*(1-phi) + rho_f*c_f*phi) * V [m3] * (T_res - T_ab)
#   P [We] = Q*1000 * RF * CE / (PF * lifespan_years * 31_557_600)
# Works on python floats and numpy arrays alike; no validation of physical ranges.

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from .distributions import UncertainParameter

SECONDS_PER_YEAR = 31_557_600.0   # Julian year, 365.25 d
KM2_TO_M2 = 1.0e6
KM3_TO_M3 = 1.0e9
W_PER_MW = 1.0e6

Number = Union[float, np.ndarray]


# ---------------- geometry ----------------

@dataclass(frozen=True)
class AreaThickness:
    area: UncertainParameter        # km2
    thickness: UncertainParameter   # m


@dataclass(frozen=True)
class VolumeGeometry:
    volume: UncertainParameter      # km3


Geometry = Union[AreaThickness, VolumeGeometry]


# ---------------- formulas ----------------

def bulk_volume_m3(area_km2: Optional[Number] = None, thickness_m: Optional[Number] = None,
                   volume_km3: Optional[Number] = None) -> Number:
    """Reservoir bulk volume; a direct volume wins over area x thickness."""
    if volume_km3 is not None:
        return volume_km3 * KM3_TO_M3
    if area_km2 is None or thickness_m is None:
        raise ValueError("either volume_km3 or both area_km2 and thickness_m are required")
    return area_km2 * KM2_TO_M2 * thickness_m


def heat_in_place(tr: Number, ta: Number, phi: Number, cr: Number, cf: Number,
                  rho_r: Number, rho_f: Number, area_km2: Optional[Number] = None,
                  thickness_m: Optional[Number] = None, volume_km3: Optional[Number] = None) -> Number:
    """
    Thermal energy [kJ] stored in rock + fluid between tr and ta.
    Operand order follows the reference formula so results match to the last bit.
    """
    heat_capacity = rho_r * cr * (1.0 - phi) + rho_f * cf * phi   # kJ/(m3 degC)
    if volume_km3 is not None:
        return heat_capacity * (volume_km3 * KM3_TO_M3) * (tr - ta)
    if area_km2 is None or thickness_m is None:
        raise ValueError("either volume_km3 or both area_km2 and thickness_m are required")
    return heat_capacity * (area_km2 * KM2_TO_M2) * thickness_m * (tr - ta)


def electrical_power(q_kj: Number, rf: Number, ce: Number, pf: Number, lifespan_years: Number) -> Number:
    """Average electrical power [We] over the plant lifespan."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.divide(q_kj * 1000.0 * rf * ce, pf * (lifespan_years * SECONDS_PER_YEAR))


# ---------------- point evaluation ----------------

@dataclass(frozen=True)
class PointValues:
    """One realisation of every model input (scalars)."""
    reservoir_temp: float
    abandon_temp: float
    porosity: float
    rock_specific_heat: float
    fluid_specific_heat: float
    rock_density: float
    fluid_density: float
    recovery_factor: float
    conversion_efficiency: float
    plant_capacity_factor: float
    lifespan: float
    area: Optional[float] = None
    thickness: Optional[float] = None
    volume: Optional[float] = None


def evaluate(p: PointValues) -> Tuple[float, float]:
    """Returns (energy_kj, power_mw) for one point."""
    q = heat_in_place(p.reservoir_temp, p.abandon_temp, p.porosity,
                      p.rock_specific_heat, p.fluid_specific_heat,
                      p.rock_density, p.fluid_density,
                      area_km2=p.area, thickness_m=p.thickness, volume_km3=p.volume)
    watts = electrical_power(q, p.recovery_factor, p.conversion_efficiency,
                             p.plant_capacity_factor, p.lifespan)
    return float(q), float(watts) / W_PER_MW
