# geopower/distributions.py
# -*- coding: utf-8 -*-
"""
distributions.py — Uncertain parameters and the per-iteration sampler

Each uncertain input is one of five variants, carrying only the fields its
distribution needs plus the `most_likely` value used by the base case:

    Constant(most_likely)                      pdf "C" (also pdf null)
    Triangular(min, most_likely, max)          pdf "T"
    Uniform(min, max[, most_likely])           pdf "U"
    Normal(mean, sd[, most_likely])            pdf "N"
    LogNormal(mean, sd[, most_likely])         pdf "L"  (mean/sd of ln X)

Flat records {min, most_likely, max, mean, sd, pdf} are what config files and
result consumers use; from_record()/to_record() convert both ways.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Union

from .errors import ParameterError


class Distribution(str, Enum):
    CONSTANT = "C"
    TRIANGULAR = "T"
    UNIFORM = "U"
    NORMAL = "N"
    LOGNORMAL = "L"


def _num(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ParameterError(f"{name} must be a number, got {value!r}") from None


@dataclass(frozen=True)
class Constant:
    most_likely: float
    kind: ClassVar[Distribution] = Distribution.CONSTANT


@dataclass(frozen=True)
class Triangular:
    min: float
    most_likely: float
    max: float
    kind: ClassVar[Distribution] = Distribution.TRIANGULAR

    def __post_init__(self):
        if not (self.min <= self.most_likely <= self.max):
            raise ParameterError(
                f"Triangular requires min <= most_likely <= max, "
                f"got ({self.min}, {self.most_likely}, {self.max})"
            )


@dataclass(frozen=True)
class Uniform:
    min: float
    max: float
    most_likely: Optional[float] = None
    kind: ClassVar[Distribution] = Distribution.UNIFORM

    def __post_init__(self):
        if self.min > self.max:
            raise ParameterError(f"Uniform requires min <= max, got ({self.min}, {self.max})")
        if self.most_likely is None:
            object.__setattr__(self, "most_likely", 0.5 * (self.min + self.max))


@dataclass(frozen=True)
class Normal:
    mean: float
    sd: float
    most_likely: Optional[float] = None
    kind: ClassVar[Distribution] = Distribution.NORMAL

    def __post_init__(self):
        if self.sd < 0:
            raise ParameterError(f"Normal sd must be >= 0, got {self.sd}")
        if self.most_likely is None:
            object.__setattr__(self, "most_likely", self.mean)


@dataclass(frozen=True)
class LogNormal:
    mean: float
    sd: float
    most_likely: Optional[float] = None
    kind: ClassVar[Distribution] = Distribution.LOGNORMAL

    def __post_init__(self):
        if self.sd < 0:
            raise ParameterError(f"LogNormal sd must be >= 0, got {self.sd}")
        if self.most_likely is None:
            object.__setattr__(self, "most_likely", self.mean)


UncertainParameter = Union[Constant, Triangular, Uniform, Normal, LogNormal]


# ----------------------------- records -----------------------------

def from_record(rec: Mapping[str, Any], name: str = "parameter") -> UncertainParameter:
    """Parse a flat {min, most_likely, max, mean, sd, pdf} record."""
    if not isinstance(rec, Mapping):
        raise ParameterError(f"{name}: expected a mapping, got {type(rec).__name__}")
    pdf = rec.get("pdf")
    g = lambda key, default=0.0: _num(rec.get(key, default), f"{name}.{key}")

    if pdf is None or str(pdf).upper() == "C":
        return Constant(g("most_likely"))
    code = str(pdf).upper()
    if code == "T":
        return Triangular(g("min"), g("most_likely"), g("max"))
    if code == "U":
        ml = rec.get("most_likely")
        return Uniform(g("min"), g("max"), None if ml is None else _num(ml, f"{name}.most_likely"))
    if code == "N":
        ml = rec.get("most_likely")
        return Normal(g("mean"), g("sd"), None if ml is None else _num(ml, f"{name}.most_likely"))
    if code == "L":
        ml = rec.get("most_likely")
        return LogNormal(g("mean"), g("sd"), None if ml is None else _num(ml, f"{name}.most_likely"))
    raise ParameterError(f"{name}: unsupported pdf {pdf!r} (expected C/T/U/N/L or null)")


def to_record(param: UncertainParameter) -> Dict[str, Any]:
    rec = {"min": 0.0, "most_likely": float(param.most_likely), "max": 0.0,
           "mean": 0.0, "sd": 0.0, "pdf": param.kind.value}
    if isinstance(param, (Triangular, Uniform)):
        rec["min"], rec["max"] = float(param.min), float(param.max)
    elif isinstance(param, (Normal, LogNormal)):
        rec["mean"], rec["sd"] = float(param.mean), float(param.sd)
    return rec


def bounds(param: UncertainParameter, log_adjust: bool = False):
    """
    (low, high) range used for one-at-a-time sensitivity.
    Normal/LogNormal use mean -/+ one sd (in the sampled space).
    """
    if isinstance(param, Constant):
        return param.most_likely, param.most_likely
    if isinstance(param, (Triangular, Uniform)):
        return param.min, param.max
    if isinstance(param, Normal) or (isinstance(param, LogNormal) and log_adjust):
        return param.mean - param.sd, param.mean + param.sd
    return math.exp(param.mean - param.sd), math.exp(param.mean + param.sd)


# ----------------------------- sampler -----------------------------

def sample(param: UncertainParameter, rng, log_adjust: bool = False) -> float:
    """
    One draw for one iteration. Constants return most_likely without touching
    the generator so the draw sequence of the other parameters is unchanged.

    log_adjust: return ln(lognormal(mean, sd)) for LogNormal parameters.
    The driver sets it for porosity only.
    """
    if isinstance(param, Constant):
        return param.most_likely
    if isinstance(param, Triangular):
        return rng.triangular(param.min, param.most_likely, param.max)
    if isinstance(param, Uniform):
        return rng.uniform(param.min, param.max)
    if isinstance(param, Normal):
        return rng.normal(param.mean, param.sd)
    if isinstance(param, LogNormal):
        value = rng.lognormal(param.mean, param.sd)
        # TODO: ln(exp(normal)) collapses porosity back to a normal draw; keep
        # until reference values are re-baselined against a corrected model.
        if log_adjust:
            return math.log(value) if value != 0.0 else -math.inf
        return value
    raise ParameterError(f"Unsupported parameter type: {type(param).__name__}")
