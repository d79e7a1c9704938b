# geopower/config.py
# YAML configuration -> GeothermalInput.
#
#   mode: scientific | basic
#   project:      {name, location: {lat, lon}, address}
#   reservoir:    parameter records (scientific mode)
#   power_plant:  parameter records + electricityPrice (scientific mode)
#   basic:        {reservoir, thermodynamic, power_plant} single values (basic mode)
#   monte_carlo:  {iterations, random_seed, generator}
#   report:       {out_html, theme, assets_dir}
#
# Anything missing falls back to DEFAULT_CONFIG (deep merge).

from __future__ import annotations
import copy
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .adapter import BasicInput, to_scientific
from .errors import ConfigError, GeoPowerError
from .models import GeothermalInput

log = logging.getLogger(__name__)


def _rec(lo, ml, hi, pdf, mean=0.0, sd=0.0) -> Dict[str, Any]:
    return {"min": lo, "most_likely": ml, "max": hi, "mean": mean, "sd": sd, "pdf": pdf}


DEFAULT_CONFIG: Dict[str, Any] = {
    "mode": "scientific",
    "project": {
        "name": "Feasibility Study 1",
        "location": {"lat": 38.5, "lon": 28.1},
        "address": "Turkey Geothermal Prospect",
    },
    "reservoir": {
        "area": _rec(32.9, 33.0, 33.1, "T"),
        "thickness": _rec(200.0, 300.0, 400.0, "T"),
        "volume": _rec(0.0, 0.0, 0.0, None),   # pdf null -> area x thickness
        "reservoir_temp": _rec(200.0, 230.0, 260.0, "T"),
        "abandon_temp": _rec(0.0, 100.0, 0.0, "C"),
        "porosity": _rec(0.0, 0.04, 0.0, "L", mean=0.04, sd=0.02),
        "rock_specific_heat": _rec(0.85, 0.9, 0.95, "T"),
        "fluid_specific_heat": _rec(0.0, 4.18, 0.0, "C"),
        "rock_density": _rec(2650.0, 2750.0, 2950.0, "C"),
        "fluid_density": _rec(822.78, 855.9, 877.16, "C"),
    },
    "power_plant": {
        "recovery_factor": _rec(0.05, 0.07, 0.09, "C"),
        "conversion_efficiency": _rec(0.154, 0.173, 0.201, "T"),
        "plant_net_capacity_factor": _rec(0.8, 0.9, 1.0, "T"),
        "lifespan": _rec(20.0, 25.0, 30.0, "C"),
        "electricityPrice": 0.08,
    },
    "basic": BasicInput().to_dict(),
    "monte_carlo": {"iterations": 10000, "random_seed": 42, "generator": "legacy"},
    "report": {"out_html": "geothermal_report.html", "theme": "auto", "assets_dir": "report_assets"},
}


def load_yaml_config(path: str | Path) -> Dict[str, Any]:
    """Raw YAML dict ({} for an empty file). Missing file raises FileNotFoundError."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(dict(base))
    for k, v in (override or {}).items():
        if isinstance(v, Mapping) and isinstance(out.get(k), Mapping):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def load_config(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """DEFAULT_CONFIG overlaid with the YAML file at `path` (if given)."""
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    cfg = deep_merge(DEFAULT_CONFIG, load_yaml_config(path))
    log.debug("Loaded config from %s (mode=%s)", path, cfg.get("mode"))
    return cfg


def input_from_config(cfg: Mapping[str, Any]) -> Tuple[GeothermalInput, Optional[BasicInput]]:
    """
    Build the engine input. In basic mode the BasicInput is returned as well so
    callers can project results back onto the basic form.
    """
    mode = str(cfg.get("mode", "scientific")).lower()
    mc = cfg.get("monte_carlo") or {}
    simulation = {
        "iterations": mc.get("iterations", 10000),
        "seed": mc.get("random_seed", mc.get("seed")),
        "generator": mc.get("generator", "legacy"),
    }
    try:
        if mode == "basic":
            b = dict(cfg.get("basic") or {})
            b["project"] = cfg.get("project") or b.get("project") or {}
            b["simulation"] = simulation
            basic = BasicInput.from_dict(b)
            return to_scientific(basic), basic
        if mode == "scientific":
            return GeothermalInput.from_dict({
                "project": cfg.get("project") or {},
                "reservoir": cfg.get("reservoir") or {},
                "powerPlant": cfg.get("power_plant") or {},
                "simulation": simulation,
            }), None
    except (GeoPowerError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid {mode} configuration: {e}") from e
    raise ConfigError(f"unsupported mode {mode!r} (expected 'scientific' or 'basic')")
