# webui/backend_adapter.py
from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional, Tuple

from geopower.adapter import BasicResults, from_scientific
from geopower.config import input_from_config, load_config
from geopower.monte_carlo import GeothermalResults, run_simulation
from geopower.report import write_report

# --------------------------- Public helpers used by app.py ---------------------------

def load_default_config(project_root: str) -> dict:
    root = Path(project_root).resolve()
    cfg_path = root / "config.yaml"
    return load_config(cfg_path if cfg_path.exists() else None)


def make_cfg_for_run(default_cfg: dict,
                     mode: str,
                     reservoir: dict,
                     thermodynamic: dict,
                     power_plant: dict,
                     iterations: int,
                     seed: int,
                     generator: str = "legacy") -> dict:
    """Copy of default_cfg with the form values written into the basic section."""
    cfg = copy.deepcopy(default_cfg if isinstance(default_cfg, dict) else {})
    cfg["mode"] = mode

    b = cfg.setdefault("basic", {})
    b.setdefault("reservoir", {}).update(reservoir)
    b.setdefault("thermodynamic", {}).update(thermodynamic)
    b.setdefault("power_plant", {}).update(power_plant)

    mc = cfg.setdefault("monte_carlo", {})
    mc["iterations"] = int(iterations)
    mc["random_seed"] = int(seed)
    mc["generator"] = generator
    return cfg

# --------------------------- Runner ---------------------------

def run_project_with_config(cfg: dict, out_html: Optional[str] = None
                            ) -> Tuple[GeothermalResults, Optional[BasicResults], Path]:
    """
    Run the engine for the UI. Basic mode also returns the basic-form projection
    of the results (the dashboard's metrics); the HTML report is always written.
    """
    inp, basic = input_from_config(cfg)
    results = run_simulation(inp)
    basic_results = from_scientific(results, basic) if basic is not None else None
    rep = cfg.get("report") or {}
    html_path, _ = write_report(results,
                                out_html=out_html or rep.get("out_html", "geothermal_report.html"),
                                assets_base=rep.get("assets_dir", "report_assets"),
                                theme=rep.get("theme", "auto"))
    return results, basic_results, html_path
