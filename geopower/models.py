# geopower/models.py
# Input data model: reservoir / plant / simulation specs and their record (dict) form.
#
# Record layout (same keys the YAML config and result consumers use):
#   project:    {name, location: {lat, lon}, address}
#   reservoir:  {area, thickness, volume, reservoir_temp, abandon_temp, porosity,
#                rock_specific_heat, fluid_specific_heat, rock_density, fluid_density}
#   powerPlant: {recovery_factor, conversion_efficiency, plant_net_capacity_factor,
#                lifespan, electricityPrice}
#   simulation: {iterations, seed[, generator]}
# Each parameter is a {min, most_likely, max, mean, sd, pdf} record.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .distributions import UncertainParameter, from_record, to_record
from .errors import ParameterError
from .rng import DEFAULT_SEED, GENERATORS
from .volumetric import AreaThickness, Geometry, VolumeGeometry

RESERVOIR_FIELDS = (
    "reservoir_temp", "abandon_temp", "porosity",
    "rock_specific_heat", "fluid_specific_heat", "rock_density", "fluid_density",
)


@dataclass(frozen=True)
class ProjectInfo:
    name: str = "Feasibility Study"
    lat: float = 0.0
    lon: float = 0.0
    address: Optional[str] = None


@dataclass(frozen=True)
class ReservoirSpec:
    geometry: Geometry
    reservoir_temp: UncertainParameter
    abandon_temp: UncertainParameter
    porosity: UncertainParameter
    rock_specific_heat: UncertainParameter
    fluid_specific_heat: UncertainParameter
    rock_density: UncertainParameter
    fluid_density: UncertainParameter


@dataclass(frozen=True)
class PlantSpec:
    recovery_factor: UncertainParameter
    conversion_efficiency: UncertainParameter
    plant_capacity_factor: UncertainParameter
    lifespan: UncertainParameter
    electricity_price: float = 0.08   # USD/kWh


@dataclass(frozen=True)
class SimulationConfig:
    """
    seed: None selects DEFAULT_SEED (42). Seed 0 is a real seed here; older
    tools treated 0 like "unset" and ran with 42.
    """
    iterations: int = 10000
    seed: Optional[int] = None
    generator: str = "legacy"

    def __post_init__(self):
        if isinstance(self.iterations, bool) or int(self.iterations) != self.iterations or self.iterations < 1:
            raise ParameterError(f"iterations must be a positive integer, got {self.iterations!r}")
        if self.seed is not None and int(self.seed) < 0:
            raise ParameterError(f"seed must be >= 0, got {self.seed}")
        if self.generator not in GENERATORS:
            raise ParameterError(f"generator must be one of {GENERATORS}, got {self.generator!r}")

    @property
    def effective_seed(self) -> int:
        return DEFAULT_SEED if self.seed is None else int(self.seed)   # 0 stays 0


@dataclass(frozen=True)
class GeothermalInput:
    reservoir: ReservoirSpec
    plant: PlantSpec
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    project: ProjectInfo = field(default_factory=ProjectInfo)

    # ---------------- record form ----------------

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "GeothermalInput":
        res = d.get("reservoir") or {}
        pp = d.get("powerPlant") or d.get("power_plant") or {}
        sim = d.get("simulation") or {}
        proj = d.get("project") or {}

        missing = [k for k in RESERVOIR_FIELDS if k not in res]
        missing += [k for k in ("recovery_factor", "conversion_efficiency",
                                "plant_net_capacity_factor", "lifespan") if k not in pp]
        if missing:
            raise ParameterError(f"missing parameters: {', '.join(missing)}")

        reservoir = ReservoirSpec(
            geometry=_geometry_from_records(res),
            **{k: from_record(res[k], k) for k in RESERVOIR_FIELDS},
        )
        plant = PlantSpec(
            recovery_factor=from_record(pp["recovery_factor"], "recovery_factor"),
            conversion_efficiency=from_record(pp["conversion_efficiency"], "conversion_efficiency"),
            plant_capacity_factor=from_record(pp["plant_net_capacity_factor"], "plant_net_capacity_factor"),
            lifespan=from_record(pp["lifespan"], "lifespan"),
            electricity_price=float(pp.get("electricityPrice", pp.get("electricity_price", 0.08))),
        )
        seed = sim.get("seed")
        simulation = SimulationConfig(
            iterations=int(sim.get("iterations", 10000)),
            seed=None if seed is None else int(seed),
            generator=str(sim.get("generator", "legacy")),
        )
        loc = proj.get("location") or {}
        project = ProjectInfo(
            name=str(proj.get("name", ProjectInfo.name)),
            lat=float(loc.get("lat", 0.0)),
            lon=float(loc.get("lon", 0.0)),
            address=proj.get("address"),
        )
        return cls(reservoir=reservoir, plant=plant, simulation=simulation, project=project)

    def to_dict(self) -> Dict[str, Any]:
        r, p = self.reservoir, self.plant
        reservoir: Dict[str, Any] = {}
        if isinstance(r.geometry, VolumeGeometry):
            reservoir["volume"] = to_record(r.geometry.volume)
        else:
            reservoir["area"] = to_record(r.geometry.area)
            reservoir["thickness"] = to_record(r.geometry.thickness)
        for k in RESERVOIR_FIELDS:
            reservoir[k] = to_record(getattr(r, k))
        project = {"name": self.project.name,
                   "location": {"lat": self.project.lat, "lon": self.project.lon}}
        if self.project.address is not None:
            project["address"] = self.project.address
        return {
            "project": project,
            "reservoir": reservoir,
            "powerPlant": {
                "recovery_factor": to_record(p.recovery_factor),
                "conversion_efficiency": to_record(p.conversion_efficiency),
                "plant_net_capacity_factor": to_record(p.plant_capacity_factor),
                "lifespan": to_record(p.lifespan),
                "electricityPrice": p.electricity_price,
            },
            "simulation": {"iterations": self.simulation.iterations,
                           "seed": self.simulation.seed,
                           "generator": self.simulation.generator},
        }


def _geometry_from_records(res: Mapping[str, Any]) -> Geometry:
    vol = res.get("volume")
    if isinstance(vol, Mapping) and vol.get("pdf") is not None:
        return VolumeGeometry(volume=from_record(vol, "volume"))
    if "area" not in res or "thickness" not in res:
        raise ParameterError("reservoir needs either a volume distribution or area and thickness")
    return AreaThickness(area=from_record(res["area"], "area"),
                         thickness=from_record(res["thickness"], "thickness"))


def physical_warnings(inp: GeothermalInput) -> List[str]:
    """Most-likely values that make the volumetric formula meaningless."""
    r, p = inp.reservoir, inp.plant
    out = []
    if r.reservoir_temp.most_likely <= r.abandon_temp.most_likely:
        out.append("reservoir temperature is not above abandon temperature")
    if not 0.0 <= r.porosity.most_likely <= 1.0:
        out.append("porosity is outside [0, 1]")
    for name in ("rock_density", "fluid_density"):
        if getattr(r, name).most_likely <= 0:
            out.append(f"{name.replace('_', ' ')} is not positive")
    if p.plant_capacity_factor.most_likely <= 0:
        out.append("plant capacity factor is not positive")
    if p.lifespan.most_likely <= 0:
        out.append("lifespan is not positive")
    return out
