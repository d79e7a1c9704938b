# geopower/adapter.py
# Basic (single-value) inputs <-> scientific (distribution) inputs.
# The basic form collects one most-likely value per parameter; SPREADS manufactures
# the uncertainty band around it. The multipliers are configuration, not physics:
# edit the table, not the conversion code.

from __future__ import annotations
import copy
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional

from .distributions import Constant, LogNormal, Triangular, UncertainParameter
from .models import (
    GeothermalInput, PlantSpec, ProjectInfo, ReservoirSpec, SimulationConfig,
)
from .monte_carlo import GeothermalResults, run_simulation
from .volumetric import AreaThickness

# name -> (pdf, min rule, max rule); rules are ("mul", k) or ("add", k).
# Porosity is handled separately: lognormal with mean = value, sd = value * POROSITY_SD_RATIO.
SPREADS: Dict[str, tuple] = {
    "area":                  ("C", ("mul", 0.99), ("mul", 1.01)),
    "thickness":             ("T", ("mul", 0.8), ("mul", 1.2)),
    "reservoir_temp":        ("T", ("add", -30.0), ("add", 30.0)),
    "abandon_temp":          ("C", None, None),
    "rock_specific_heat":    ("T", ("mul", 0.9), ("mul", 1.1)),
    "fluid_specific_heat":   ("C", None, None),
    "rock_density":          ("C", None, None),
    "fluid_density":         ("C", None, None),
    "recovery_factor":       ("T", ("mul", 0.7), ("mul", 1.3)),
    "conversion_efficiency": ("T", ("mul", 0.9), ("mul", 1.1)),
    "plant_capacity_factor": ("T", ("mul", 0.8), ("mul", 1.0)),
    "lifespan":              ("C", None, None),
}
POROSITY_SD_RATIO = 0.5


# ---------------- basic input ----------------

@dataclass(frozen=True)
class BasicReservoir:
    area: float = 33.0              # km2
    thickness: float = 300.0        # m
    reservoir_temp: float = 230.0   # degC
    abandon_temp: float = 100.0     # degC
    porosity: float = 0.04
    volume: Optional[float] = None  # km3, informational; the band is built on area x thickness


@dataclass(frozen=True)
class Thermodynamic:
    rock_specific_heat: float = 0.9     # kJ/(kg degC)
    fluid_specific_heat: float = 4.18   # kJ/(kg degC)
    rock_density: float = 2750.0        # kg/m3
    fluid_density: float = 855.9        # kg/m3


@dataclass(frozen=True)
class BasicPowerPlant:
    recovery_factor: float = 0.07
    conversion_efficiency: float = 0.173
    plant_capacity_factor: float = 0.9
    lifespan: float = 25.0              # years
    electricity_price: float = 0.08     # USD/kWh


@dataclass(frozen=True)
class BasicInput:
    project: ProjectInfo = field(default_factory=lambda: ProjectInfo(
        "Executive Feasibility Study", 38.5, 28.1, "Turkey Geothermal Prospect"))
    reservoir: BasicReservoir = field(default_factory=BasicReservoir)
    thermodynamic: Thermodynamic = field(default_factory=Thermodynamic)
    power_plant: BasicPowerPlant = field(default_factory=BasicPowerPlant)
    simulation: SimulationConfig = field(default_factory=lambda: SimulationConfig(iterations=1000))

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "BasicInput":
        proj = d.get("project") or {}
        loc = proj.get("location") or {}
        sim = d.get("simulation") or {}
        default = cls()
        return cls(
            project=ProjectInfo(name=str(proj.get("name", default.project.name)),
                                lat=float(loc.get("lat", default.project.lat)),
                                lon=float(loc.get("lon", default.project.lon)),
                                address=proj.get("address", default.project.address)),
            reservoir=BasicReservoir(**(d.get("reservoir") or {})),
            thermodynamic=Thermodynamic(**(d.get("thermodynamic") or {})),
            power_plant=BasicPowerPlant(**(d.get("power_plant") or {})),
            simulation=SimulationConfig(
                iterations=int(sim.get("iterations", default.simulation.iterations)),
                seed=sim.get("seed"),
                generator=str(sim.get("generator", "legacy"))),
        )

    def to_dict(self) -> Dict[str, Any]:
        p = self.project
        return {
            "project": {"name": p.name, "location": {"lat": p.lat, "lon": p.lon}, "address": p.address},
            "reservoir": asdict(self.reservoir),
            "thermodynamic": asdict(self.thermodynamic),
            "power_plant": asdict(self.power_plant),
            "simulation": {"iterations": self.simulation.iterations, "seed": self.simulation.seed,
                           "generator": self.simulation.generator},
        }


DEFAULT_BASIC_INPUT = BasicInput()


# ---------------- basic -> scientific ----------------

def _apply(rule, value: float) -> float:
    op, k = rule
    return value * k if op == "mul" else value + k


def _band(name: str, value: float) -> UncertainParameter:
    pdf, lo_rule, hi_rule = SPREADS[name]
    if pdf == "C":
        return Constant(value)
    return Triangular(_apply(lo_rule, value), value, _apply(hi_rule, value))


def to_scientific(basic: BasicInput) -> GeothermalInput:
    r, th, pp = basic.reservoir, basic.thermodynamic, basic.power_plant
    reservoir = ReservoirSpec(
        geometry=AreaThickness(area=_band("area", r.area), thickness=_band("thickness", r.thickness)),
        reservoir_temp=_band("reservoir_temp", r.reservoir_temp),
        abandon_temp=_band("abandon_temp", r.abandon_temp),
        porosity=LogNormal(mean=r.porosity, sd=r.porosity * POROSITY_SD_RATIO, most_likely=r.porosity),
        rock_specific_heat=_band("rock_specific_heat", th.rock_specific_heat),
        fluid_specific_heat=_band("fluid_specific_heat", th.fluid_specific_heat),
        rock_density=_band("rock_density", th.rock_density),
        fluid_density=_band("fluid_density", th.fluid_density),
    )
    plant = PlantSpec(
        recovery_factor=_band("recovery_factor", pp.recovery_factor),
        conversion_efficiency=_band("conversion_efficiency", pp.conversion_efficiency),
        plant_capacity_factor=_band("plant_capacity_factor", pp.plant_capacity_factor),
        lifespan=_band("lifespan", pp.lifespan),
        electricity_price=pp.electricity_price,
    )
    return GeothermalInput(reservoir=reservoir, plant=plant,
                           simulation=basic.simulation, project=basic.project)


# ---------------- scientific -> basic ----------------

@dataclass(frozen=True)
class BasicResults:
    """Shape consumed by the basic dashboard; no skew/kurt, base case carries watts."""
    base_case: Dict[str, float]
    monte_carlo_results: list
    statistics: Dict[str, Any]
    economics: Dict[str, float]
    executive: Dict[str, str]
    input: BasicInput

    def to_dict(self) -> Dict[str, Any]:
        return {"baseCase": dict(self.base_case),
                "monteCarloResults": list(self.monte_carlo_results),
                "statistics": copy.deepcopy(self.statistics),
                "economics": dict(self.economics),
                "executive": dict(self.executive),
                "input": self.input.to_dict()}


def from_scientific(results: GeothermalResults, basic: BasicInput) -> BasicResults:
    s = results.statistics.to_dict()
    base = results.base_case.to_dict()
    base["powerWatts"] = results.base_case.power_mwe * 1e6
    return BasicResults(
        base_case=base,
        monte_carlo_results=results.monte_carlo_results.tolist(),
        statistics={k: s[k] for k in ("mean", "std", "min", "max", "percentiles", "probabilities")},
        economics=results.economics.to_dict(),
        executive=results.executive.to_dict(),
        input=basic,
    )


def run_basic(basic: BasicInput) -> BasicResults:
    return from_scientific(run_simulation(to_scientific(basic)), basic)
