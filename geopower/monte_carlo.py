# -*- coding: utf-8 -*-
"""
monte_carlo.py — Monte Carlo driver for the volumetric power model

  - Base case: every parameter at its most-likely value (no draws)
  - N iterations: sample every uncertain input, evaluate the power model
  - Statistics / economics / executive recommendation on the result vector

Per-iteration sampling order (fixed, the reference values depend on it):
  reservoir_temp, abandon_temp, porosity (log-adjusted), rock_specific_heat,
  fluid_specific_heat, rock_density, fluid_density, recovery_factor,
  conversion_efficiency, plant_capacity_factor, lifespan,
  then volume  -or-  area, thickness
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from .distributions import LogNormal, sample
from .models import GeothermalInput
from .rng import create_generator
from .statistics import (
    Economics, ExecutiveRecommendation, Statistics,
    analyze, classify, project_economics,
)
from .volumetric import AreaThickness, PointValues, VolumeGeometry, evaluate

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaseCase:
    energy_kj: float
    power_mwe: float

    def to_dict(self) -> Dict[str, float]:
        return {"energyKJ": self.energy_kj, "powerMWe": self.power_mwe}


@dataclass(frozen=True)
class GeothermalResults:
    base_case: BaseCase
    monte_carlo_results: np.ndarray      # sorted ascending, read-only
    statistics: Statistics
    economics: Economics
    executive: ExecutiveRecommendation
    input: GeothermalInput

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseCase": self.base_case.to_dict(),
            "monteCarloResults": self.monte_carlo_results.tolist(),
            "statistics": self.statistics.to_dict(),
            "economics": self.economics.to_dict(),
            "executive": self.executive.to_dict(),
            "input": self.input.to_dict(),
        }


# ----------------------------- points -----------------------------

def most_likely_point(inp: GeothermalInput) -> PointValues:
    r, p = inp.reservoir, inp.plant
    geo = {}
    if isinstance(r.geometry, VolumeGeometry):
        geo["volume"] = r.geometry.volume.most_likely
    else:
        geo["area"] = r.geometry.area.most_likely
        geo["thickness"] = r.geometry.thickness.most_likely
    return PointValues(
        reservoir_temp=r.reservoir_temp.most_likely,
        abandon_temp=r.abandon_temp.most_likely,
        porosity=r.porosity.most_likely,
        rock_specific_heat=r.rock_specific_heat.most_likely,
        fluid_specific_heat=r.fluid_specific_heat.most_likely,
        rock_density=r.rock_density.most_likely,
        fluid_density=r.fluid_density.most_likely,
        recovery_factor=p.recovery_factor.most_likely,
        conversion_efficiency=p.conversion_efficiency.most_likely,
        plant_capacity_factor=p.plant_capacity_factor.most_likely,
        lifespan=p.lifespan.most_likely,
        **geo,
    )


def sample_point(inp: GeothermalInput, rng) -> PointValues:
    """Draw one realisation; keyword order below is the draw order."""
    r, p = inp.reservoir, inp.plant
    tr = sample(r.reservoir_temp, rng)
    ta = sample(r.abandon_temp, rng)
    phi = sample(r.porosity, rng, log_adjust=isinstance(r.porosity, LogNormal))
    cr = sample(r.rock_specific_heat, rng)
    cf = sample(r.fluid_specific_heat, rng)
    rho_r = sample(r.rock_density, rng)
    rho_f = sample(r.fluid_density, rng)
    rf = sample(p.recovery_factor, rng)
    ce = sample(p.conversion_efficiency, rng)
    pf = sample(p.plant_capacity_factor, rng)
    t = sample(p.lifespan, rng)

    geo = {}
    if isinstance(r.geometry, VolumeGeometry):
        geo["volume"] = sample(r.geometry.volume, rng)
    elif isinstance(r.geometry, AreaThickness):
        geo["area"] = sample(r.geometry.area, rng)
        geo["thickness"] = sample(r.geometry.thickness, rng)

    return PointValues(tr, ta, phi, cr, cf, rho_r, rho_f, rf, ce, pf, t, **geo)


def base_case(inp: GeothermalInput) -> BaseCase:
    energy_kj, power_mw = evaluate(most_likely_point(inp))
    return BaseCase(energy_kj=energy_kj, power_mwe=power_mw)


# ----------------------------- driver -----------------------------

def simulate(inp: GeothermalInput, rng=None) -> np.ndarray:
    """
    Power [MW] per iteration, in iteration order (not sorted).
    NaN/inf from degenerate inputs are kept as-is.
    """
    sim = inp.simulation
    if rng is None:
        rng = create_generator(sim.effective_seed, sim.generator)
    out = np.empty(sim.iterations, dtype=float)
    for i in range(sim.iterations):
        _, out[i] = evaluate(sample_point(inp, rng))
    out.flags.writeable = False
    return out


def run_simulation(inp: GeothermalInput) -> GeothermalResults:
    """Full run: base case, Monte Carlo vector, statistics, economics, recommendation."""
    sim = inp.simulation
    log.info("Running %d iterations (seed=%d, generator=%s) for '%s'",
             sim.iterations, sim.effective_seed, sim.generator, inp.project.name)
    t0 = time.perf_counter()

    base = base_case(inp)
    log.debug("Base case: %.4e kJ, %.3f MWe", base.energy_kj, base.power_mwe)

    raw = simulate(inp)
    ordered = np.sort(raw)
    ordered.flags.writeable = False
    if not np.isfinite(ordered).all():
        log.warning("%d of %d iterations produced non-finite power; check input ranges",
                    int((~np.isfinite(ordered)).sum()), ordered.size)

    stats = analyze(ordered, base.power_mwe)
    econ = project_economics(stats.mean, inp.plant)
    executive = classify(stats.percentiles.p10)

    log.info("Done in %.2fs: P10=%.2f P50=%.2f P90=%.2f MW -> %s",
             time.perf_counter() - t0, stats.percentiles.p10, stats.percentiles.p50,
             stats.percentiles.p90, executive.risk_level.value)
    return GeothermalResults(
        base_case=base,
        monte_carlo_results=ordered,
        statistics=stats,
        economics=econ,
        executive=executive,
        input=inp,
    )
