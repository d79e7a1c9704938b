# geopower/statistics.py
# Statistics & risk engine on the Monte Carlo power vector [MW]:
#   - descriptive stats (population std, skewness, excess kurtosis)
#   - nearest-rank percentiles P5..P95 (sorted[floor(q*N)], no interpolation)
#   - exceedance probabilities (strictly greater than base case / 10 / 25 / 50 MW)
#   - economics (generation & revenue from the mean power)
#   - executive recommendation from P10
#   - chart/table data for report consumers (histogram, cumulative curves, DataFrames)

from __future__ import annotations
import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Sequence

import numpy as np
import pandas as pd

if TYPE_CHECKING:
    from .models import PlantSpec
    from .monte_carlo import GeothermalResults

HOURS_PER_YEAR = 8760.0
KW_PER_MW = 1000.0

PERCENTILE_LEVELS = (("p5", 0.05), ("p10", 0.10), ("p25", 0.25), ("p50", 0.50),
                     ("p75", 0.75), ("p90", 0.90), ("p95", 0.95))


# ---------------- result blocks ----------------

@dataclass(frozen=True)
class Percentiles:
    p5: float
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    p95: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class Probabilities:
    above_base: float
    above_10mw: float
    above_25mw: float
    above_50mw: float

    def to_dict(self) -> Dict[str, float]:
        return {"aboveBase": self.above_base, "above10MW": self.above_10mw,
                "above25MW": self.above_25mw, "above50MW": self.above_50mw}


@dataclass(frozen=True)
class Statistics:
    mean: float
    std: float
    min: float
    max: float
    skew: float
    kurt: float
    percentiles: Percentiles
    probabilities: Probabilities

    @property
    def coefficient_of_variation(self) -> float:
        return coefficient_of_variation(self.mean, self.std)

    def to_dict(self):
        return {"mean": self.mean, "std": self.std, "min": self.min, "max": self.max,
                "skew": self.skew, "kurt": self.kurt,
                "percentiles": self.percentiles.to_dict(),
                "probabilities": self.probabilities.to_dict()}


@dataclass(frozen=True)
class Economics:
    annual_generation: float    # MWh/yr
    lifetime_generation: float  # MWh
    annual_revenue: float       # USD/yr
    lifetime_revenue: float     # USD

    def to_dict(self) -> Dict[str, float]:
        return {"annualGeneration": self.annual_generation,
                "lifetimeGeneration": self.lifetime_generation,
                "annualRevenue": self.annual_revenue,
                "lifetimeRevenue": self.lifetime_revenue}


class RiskLevel(str, Enum):
    HIGH_POTENTIAL = "HIGH_POTENTIAL"
    MODERATE_POTENTIAL = "MODERATE_POTENTIAL"
    LOW_POTENTIAL = "LOW_POTENTIAL"
    INSUFFICIENT_POTENTIAL = "INSUFFICIENT_POTENTIAL"


@dataclass(frozen=True)
class ExecutiveRecommendation:
    risk_level: RiskLevel
    confidence: str
    recommendation: str
    color: str

    def to_dict(self) -> Dict[str, str]:
        return {"riskLevel": self.risk_level.value, "confidence": self.confidence,
                "recommendation": self.recommendation, "color": self.color}


# P10 lower bound (inclusive) -> recommendation, checked top-down
RECOMMENDATIONS = (
    (50.0, ExecutiveRecommendation(RiskLevel.HIGH_POTENTIAL, "High",
                                   "PROCEED TO DETAILED FEASIBILITY STUDY", "green")),
    (25.0, ExecutiveRecommendation(RiskLevel.MODERATE_POTENTIAL, "Moderate",
                                   "CONDUCT ADDITIONAL GEOLOGICAL STUDIES", "yellow")),
    (10.0, ExecutiveRecommendation(RiskLevel.LOW_POTENTIAL, "Low",
                                   "REASSESS PARAMETERS & CONSIDER ALTERNATIVES", "orange")),
)
INSUFFICIENT = ExecutiveRecommendation(RiskLevel.INSUFFICIENT_POTENTIAL, "Very Low",
                                       "NOT RECOMMENDED FOR DEVELOPMENT", "red")


# ---------------- core ----------------

def _running_sum(a: np.ndarray) -> float:
    """Sequential left-to-right sum; np.sum is pairwise."""
    return float(np.add.accumulate(a)[-1])


def describe(values: Sequence[float]) -> Dict[str, float]:
    """mean, population std, min, max, skew, excess kurtosis. N == 1 gives NaN skew/kurt."""
    x = np.asarray(values, dtype=float)
    if x.size == 0:
        raise ValueError("cannot describe an empty result vector")
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        mean = _running_sum(x) / x.size
        std = math.sqrt(_running_sum((x - mean) ** 2) / x.size)
        z = (x - mean) / std
        skew = _running_sum(z ** 3) / x.size
        kurt = _running_sum(z ** 4) / x.size - 3.0
    return {"mean": mean, "std": std, "min": float(np.min(x)), "max": float(np.max(x)),
            "skew": skew, "kurt": kurt}


def nearest_rank(sorted_values: Sequence[float], q: float) -> float:
    """Value at index floor(q*N), clamped to N-1. Input must be sorted ascending."""
    n = len(sorted_values)
    if n == 0:
        raise ValueError("cannot take a percentile of an empty result vector")
    return float(sorted_values[min(int(math.floor(q * n)), n - 1)])


def percentiles(sorted_values: Sequence[float]) -> Percentiles:
    return Percentiles(**{k: nearest_rank(sorted_values, q) for k, q in PERCENTILE_LEVELS})


def exceedance(values: Sequence[float], base_power: float) -> Probabilities:
    x = np.asarray(values, dtype=float)
    frac = lambda thr: float(np.count_nonzero(x > thr) / x.size)
    return Probabilities(above_base=frac(base_power), above_10mw=frac(10.0),
                         above_25mw=frac(25.0), above_50mw=frac(50.0))


def analyze(values: Sequence[float], base_power: float) -> Statistics:
    """Statistics block for one run; `values` need not be sorted."""
    ordered = np.sort(np.asarray(values, dtype=float))
    d = describe(ordered)
    return Statistics(percentiles=percentiles(ordered),
                      probabilities=exceedance(ordered, base_power), **d)


def project_economics(mean_power_mw: float, plant: "PlantSpec") -> Economics:
    """Generation from the mean power at the most-likely capacity factor and lifespan."""
    pf = plant.plant_capacity_factor.most_likely
    years = plant.lifespan.most_likely
    annual = mean_power_mw * HOURS_PER_YEAR * pf
    annual_revenue = annual * KW_PER_MW * plant.electricity_price
    return Economics(annual_generation=annual,
                     lifetime_generation=annual * years,
                     annual_revenue=annual_revenue,
                     lifetime_revenue=annual_revenue * years)


def classify(p10: float) -> ExecutiveRecommendation:
    for lower, rec in RECOMMENDATIONS:
        if p10 >= lower:
            return rec
    return INSUFFICIENT


# ---------------- dashboard helpers ----------------

def coefficient_of_variation(mean: float, std: float) -> float:
    """std/mean in percent."""
    return std / mean * 100.0 if mean != 0 else float("nan")


def histogram(values: Sequence[float], bins: int = 20) -> pd.DataFrame:
    """
    Equal-width bins over [min, max]; the max lands in the last bin.
    Columns: bin_start, bin_end, count.
    """
    x = np.asarray(values, dtype=float)
    x = x[np.isfinite(x)]
    if x.size == 0:
        return pd.DataFrame(columns=["bin_start", "bin_end", "count"])
    lo, hi = float(x.min()), float(x.max())
    width = (hi - lo) / bins
    if width > 0:
        idx = np.minimum(np.floor((x - lo) / width).astype(int), bins - 1)
    else:
        idx = np.zeros(x.size, dtype=int)
    counts = np.bincount(idx, minlength=bins)
    starts = lo + width * np.arange(bins)
    return pd.DataFrame({"bin_start": starts, "bin_end": starts + width, "count": counts})


def cumulative_curve(values: Sequence[float], num_points: int = 100) -> pd.DataFrame:
    """
    P(X <= x) and P(X > x) on num_points+1 evenly spaced x between min and max.
    Columns: power_mw, prob_below, prob_above.
    """
    ordered = np.sort(np.asarray(values, dtype=float))
    ordered = ordered[np.isfinite(ordered)]
    n = ordered.size
    if n == 0:
        return pd.DataFrame(columns=["power_mw", "prob_below", "prob_above"])
    xs = ordered[0] + (ordered[-1] - ordered[0]) * np.arange(num_points + 1) / num_points
    below = np.searchsorted(ordered, xs, side="right") / n
    return pd.DataFrame({"power_mw": xs, "prob_below": below, "prob_above": 1.0 - below})


def summary_table(results: "GeothermalResults") -> pd.DataFrame:
    s = results.statistics
    rows = [
        ("Base case (most likely)", results.base_case.power_mwe, "MW"),
        ("Mean", s.mean, "MW"),
        ("Standard deviation", s.std, "MW"),
        ("Minimum", s.min, "MW"),
        ("Maximum", s.max, "MW"),
        ("Coefficient of variation", s.coefficient_of_variation, "%"),
        ("Skewness", s.skew, "-"),
        ("Excess kurtosis", s.kurt, "-"),
    ]
    return pd.DataFrame(rows, columns=["Statistic", "Value", "Unit"])


def percentile_table(results: "GeothermalResults") -> pd.DataFrame:
    pct = results.statistics.percentiles.to_dict()
    rows = []
    for key, q in PERCENTILE_LEVELS:
        rows.append({"Percentile": key.upper(), "Power_MW": pct[key],
                     "Exceedance": f"exceeded by {100 - round(q * 100)}% of outcomes"})
    return pd.DataFrame(rows)


def probability_table(results: "GeothermalResults") -> pd.DataFrame:
    pr = results.statistics.probabilities
    rows = [(f"> base case ({results.base_case.power_mwe:.1f} MW)", pr.above_base),
            ("> 10 MW", pr.above_10mw), ("> 25 MW", pr.above_25mw), ("> 50 MW", pr.above_50mw)]
    return pd.DataFrame(rows, columns=["Outcome", "Probability"])
