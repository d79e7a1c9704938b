# main.py — Geothermal power potential: config -> Monte Carlo -> executive summary + HTML report
from __future__ import annotations
import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from geopower.config import input_from_config, load_config
from geopower.models import physical_warnings
from geopower.monte_carlo import GeothermalResults, run_simulation
from geopower.report import write_report
from geopower.rng import GENERATORS
from geopower.report_utils import fmt_currency, fmt_energy, fmt_pct

log = logging.getLogger("geopower.main")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def print_summary(results: GeothermalResults) -> None:
    s, e, x = results.statistics, results.economics, results.executive
    pct, pr = s.percentiles, s.probabilities
    print("=== EXECUTIVE SUMMARY ===")
    print(f"Project        : {results.input.project.name}")
    print(f"Iterations     : {len(results.monte_carlo_results)} (seed {results.input.simulation.effective_seed})")
    print(f"Base case      : {results.base_case.power_mwe:.2f} MWe")
    print(f"Mean / Std     : {s.mean:.2f} / {s.std:.2f} MWe")
    print(f"P10 / P50 / P90: {pct.p10:.2f} / {pct.p50:.2f} / {pct.p90:.2f} MWe")
    print(f"P(>base)={fmt_pct(pr.above_base)}  P(>10MW)={fmt_pct(pr.above_10mw)}  "
          f"P(>25MW)={fmt_pct(pr.above_25mw)}  P(>50MW)={fmt_pct(pr.above_50mw)}")
    print(f"Generation     : {fmt_energy(e.annual_generation)} MWh/yr, {fmt_energy(e.lifetime_generation)} MWh lifetime")
    print(f"Revenue        : {fmt_currency(e.annual_revenue)}/yr, {fmt_currency(e.lifetime_revenue)} lifetime")
    print(f"Risk level     : {x.risk_level.value} (confidence {x.confidence})")
    print(f"Recommendation : {x.recommendation}")


def run(cfg: dict, out_html: Optional[str] = None, with_report: bool = True):
    """Run one study from a config dict. Returns (results, html_path or None)."""
    inp, _ = input_from_config(cfg)
    for w in physical_warnings(inp):
        log.warning("Input check: %s", w)

    results = run_simulation(inp)

    html_path = None
    if with_report:
        rep = cfg.get("report") or {}
        html_path, assets_dir = write_report(
            results,
            out_html=out_html or rep.get("out_html", "geothermal_report.html"),
            assets_base=rep.get("assets_dir", "report_assets"),
            theme=rep.get("theme", "auto"),
        )
        print(f"[ok] Report -> {html_path}")
        print(f"[ok] Assets -> {assets_dir}")
    return results, html_path


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Volumetric geothermal power potential with Monte Carlo uncertainty.")
    ap.add_argument("--config", type=str, default=None,
                    help="Path to config.yaml (default: config.yaml next to this script, if present).")
    ap.add_argument("--iterations", type=int, default=None, help="Override monte_carlo.iterations.")
    ap.add_argument("--seed", type=int, default=None, help="Override monte_carlo.random_seed.")
    ap.add_argument("--generator", choices=GENERATORS, default=None, help="Random generator (default: legacy).")
    ap.add_argument("--basic", action="store_true", help="Use the single-value 'basic' inputs section.")
    ap.add_argument("--out-html", type=str, default=None, help="Report path (default: report.out_html).")
    ap.add_argument("--no-report", action="store_true", help="Print the summary only.")
    ap.add_argument("--verbose", action="store_true", help="Debug logging.")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    cfg_path = args.config
    if cfg_path is None and DEFAULT_CONFIG_PATH.exists():
        cfg_path = str(DEFAULT_CONFIG_PATH)
    cfg = load_config(cfg_path)

    mc = cfg.setdefault("monte_carlo", {})
    if args.iterations is not None:
        mc["iterations"] = args.iterations
    if args.seed is not None:
        mc["random_seed"] = args.seed
    if args.generator is not None:
        mc["generator"] = args.generator
    if args.basic:
        cfg["mode"] = "basic"

    results, _ = run(cfg, out_html=args.out_html, with_report=not args.no_report)
    print_summary(results)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
