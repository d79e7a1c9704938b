# geopower/rng.py
# -*- coding: utf-8 -*-
"""
rng.py — Random variate generators for the Monte Carlo driver

Two generators share one small interface (next/uniform/normal/triangular/lognormal):

  - LegacyLCG      : linear congruential recurrence
                       seed = (seed * 9301 + 49297) mod 233280
                     kept bit-for-bit so that reference P-values computed by
                     earlier versions of the tool are reproduced exactly.
  - NumpyVariates  : numpy.random.default_rng backed generator, selectable with
                     monte_carlo.generator: "numpy" in config.yaml.

A generator is owned by exactly one simulation run.
"""

from __future__ import annotations
import math
from typing import Optional

import numpy as np

DEFAULT_SEED = 42

LCG_A = 9301
LCG_C = 49297
LCG_M = 233280

GENERATORS = ("legacy", "numpy")


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


class LegacyLCG:
    """Seeded LCG with Box-Muller normals and inverse-CDF triangular draws."""

    def __init__(self, seed: Optional[int] = None):
        self._seed = int(DEFAULT_SEED if seed is None else seed)

    @property
    def state(self) -> int:
        return self._seed

    def next(self) -> float:
        self._seed = (self._seed * LCG_A + LCG_C) % LCG_M
        return self._seed / LCG_M

    def uniform(self, lo: float, hi: float) -> float:
        return lo + self.next() * (hi - lo)

    def normal(self, mean: float = 0.0, std: float = 1.0) -> float:
        u1 = self.next()
        u2 = self.next()
        # u1 == 0 happens once per period; -ln(0) is +inf under IEEE rules
        radius = math.sqrt(-2.0 * math.log(u1)) if u1 > 0.0 else math.inf
        z = radius * math.cos(2.0 * math.pi * u2)
        return z * std + mean

    def triangular(self, lo: float, mode: float, hi: float) -> float:
        u = self.next()
        span = hi - lo
        if span == 0:
            return hi
        f = (mode - lo) / span
        if u < f:
            return lo + math.sqrt(u * span * (mode - lo))
        return hi - math.sqrt((1.0 - u) * span * (hi - mode))

    def lognormal(self, mean: float, std: float) -> float:
        return _exp(self.normal(mean, std))


class NumpyVariates:
    """
    Same interface on top of numpy's PCG64 generator.
    `state` counts calls so callers can still check that nothing was drawn.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = np.random.default_rng(DEFAULT_SEED if seed is None else seed)
        self._draws = 0

    @property
    def state(self) -> int:
        return self._draws

    def next(self) -> float:
        self._draws += 1
        return float(self._rng.random())

    def uniform(self, lo: float, hi: float) -> float:
        self._draws += 1
        return float(self._rng.uniform(lo, hi))

    def normal(self, mean: float = 0.0, std: float = 1.0) -> float:
        self._draws += 1
        return float(self._rng.normal(mean, std))

    def triangular(self, lo: float, mode: float, hi: float) -> float:
        self._draws += 1
        if hi == lo:
            return float(hi)
        return float(self._rng.triangular(lo, mode, hi))

    def lognormal(self, mean: float, std: float) -> float:
        self._draws += 1
        return float(self._rng.lognormal(mean, std))


def create_generator(seed: Optional[int] = None, kind: str = "legacy"):
    """Build a fresh generator; `kind` is "legacy" (default) or "numpy"."""
    kind = (kind or "legacy").lower()
    if kind == "legacy":
        return LegacyLCG(seed)
    if kind == "numpy":
        return NumpyVariates(seed)
    raise ValueError(f"Unsupported generator: {kind} (expected one of {GENERATORS})")
