# -*- coding: utf-8 -*-
"""
report.py — HTML report for one simulation run

Charts (PNG, saved under a timestamped assets dir and embedded as data URIs):
  - power_hist       : histogram of Monte Carlo outcomes + base case / P10 / P50 / P90
  - power_cumulative : P(X <= x) and P(X > x) curves
  - tornado          : one-at-a-time sensitivity of the base case
Tables: statistics summary, percentiles, exceedance probabilities, economics, inputs.
"""

from __future__ import annotations
import datetime
import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .monte_carlo import GeothermalResults, most_likely_point
from .report_utils import fmt_currency, fmt_energy, fmt_pct, save_fig_dual, timestamped_assets_dir
from .sensitivity import tornado
from .statistics import (
    cumulative_curve, histogram, percentile_table, probability_table, summary_table,
)
from .volumetric import KM3_TO_M3, bulk_volume_m3

log = logging.getLogger(__name__)

TEMPLATES = Path(__file__).parent / "templates"

RISK_COLORS = {"green": "#16a34a", "yellow": "#ca8a04", "orange": "#ea580c", "red": "#dc2626"}


# ---------- styles (light/dark/auto) ----------
def _style_block(theme: str = "auto") -> str:
    base = """
:root {--bg:#ffffff;--fg:#0f172a;--muted:#64748b;--card:#f8fafc;--border:#e2e8f0;--accent:#2563eb;}
html,body{background:var(--bg);color:var(--fg);font-family:system-ui,-apple-system,Segoe UI,Roboto,Inter,sans-serif;margin:24px;line-height:1.5}
h1,h2,h3{margin:.6em 0 .3em}
.kpi{display:flex;gap:16px;flex-wrap:wrap;margin:10px 0}
.card{border:1px solid var(--border);border-radius:12px;padding:12px 16px;min-width:200px;background:var(--card)}
.muted{color:var(--muted);font-size:.9em}
.verdict{border-left:6px solid var(--verdict);padding:10px 16px;background:var(--card);border-radius:8px}
img{border:1px solid var(--border);border-radius:10px;margin:10px 0;max-width:100%;height:auto}
table{border-collapse:collapse;margin:10px 0}
td,th{border:1px solid var(--border);padding:6px 10px;text-align:left}
.section{margin-top:28px}
"""
    dark = ":root {--bg:#0b0d10;--fg:#e8eaed;--muted:#a1a1aa;--card:#14181d;--border:#30363d;--accent:#60a5fa;}\n"
    if theme == "dark":
        return dark + base
    if theme == "light":
        return base
    return base + "@media (prefers-color-scheme: dark){" + dark + "}"


# ---------- charts ----------
def _p_lines(ax, results: GeothermalResults):
    pct = results.statistics.percentiles
    ax.axvline(results.base_case.power_mwe, color="k", lw=1.2, ls="--", label="Base case")
    for label, val, ls in (("P10", pct.p10, ":"), ("P50", pct.p50, "-"), ("P90", pct.p90, ":")):
        ax.axvline(val, lw=1.4, ls=ls, alpha=0.8, label=f"{label} {val:.1f} MW")


def plot_histogram(results: GeothermalResults, bins: int = 20):
    h = histogram(results.monte_carlo_results, bins=bins)
    fig, ax = plt.subplots(figsize=(9.5, 3.6))
    width = float(h["bin_end"].iloc[0] - h["bin_start"].iloc[0]) if len(h) else 1.0
    ax.bar(h["bin_start"], h["count"], width=width or 1.0, align="edge", alpha=0.75)
    _p_lines(ax, results)
    ax.set_title("Power Potential — Monte Carlo Outcomes")
    ax.set_xlabel("Power (MWe)"); ax.set_ylabel("Iterations")
    ax.grid(True, alpha=0.25); ax.legend(fontsize=8)
    fig.tight_layout()
    return fig


def plot_cumulative(results: GeothermalResults, num_points: int = 100):
    c = cumulative_curve(results.monte_carlo_results, num_points=num_points)
    fig, ax = plt.subplots(figsize=(9.5, 3.6))
    ax.plot(c["power_mw"], c["prob_below"], lw=2.0, label="P(X ≤ x)")
    ax.plot(c["power_mw"], c["prob_above"], lw=2.0, label="P(X > x)")
    _p_lines(ax, results)
    ax.set_ylim(0.0, 1.0)
    ax.set_title("Cumulative Distribution")
    ax.set_xlabel("Power (MWe)"); ax.set_ylabel("Probability")
    ax.grid(True, alpha=0.25); ax.legend(fontsize=8)
    fig.tight_layout()
    return fig


def plot_tornado(tor: pd.DataFrame):
    tor = tor.iloc[::-1]   # largest swing on top
    fig, ax = plt.subplots(figsize=(9, 0.45 * max(len(tor), 1) + 1.5))
    y_pos = np.arange(len(tor))
    ax.barh(y_pos, tor["delta_low"], align="center", label="low bound")
    ax.barh(y_pos, tor["delta_high"], align="center", label="high bound")
    ax.set_yticks(y_pos)
    ax.set_yticklabels(tor["parameter"].tolist())
    ax.axvline(0.0, color="k", linewidth=1)
    ax.set_title("Tornado: Δ base-case power by parameter bounds")
    ax.set_xlabel("Δ Power (MWe)")
    ax.legend(fontsize=8)
    fig.tight_layout()
    return fig


# ---------- context ----------
def _inputs_table(results: GeothermalResults) -> pd.DataFrame:
    d = results.input.to_dict()
    rows = []
    for group in ("reservoir", "powerPlant"):
        for name, rec in d[group].items():
            if not isinstance(rec, dict):
                continue
            rows.append({"Parameter": name, **rec})
    return pd.DataFrame(rows, columns=["Parameter", "pdf", "min", "most_likely", "max", "mean", "sd"])


def build_context(results: GeothermalResults, charts: Dict[str, Any], theme: str = "auto") -> Dict[str, Any]:
    s, e, x = results.statistics, results.economics, results.executive
    inp = results.input
    ml = most_likely_point(inp)
    volume_km3 = bulk_volume_m3(ml.area, ml.thickness, ml.volume) / KM3_TO_M3
    kpi_cards = [
        {"label": "Base case", "value": f"{results.base_case.power_mwe:.1f} MW", "note": "most-likely inputs"},
        {"label": "P50", "value": f"{s.percentiles.p50:.1f} MW", "note": "median outcome"},
        {"label": "P10", "value": f"{s.percentiles.p10:.1f} MW", "note": "conservative"},
        {"label": "Uncertainty", "value": f"{s.coefficient_of_variation:.0f}%", "note": "std / mean"},
        {"label": "Bulk volume", "value": f"{volume_km3:.2f} km³", "note": "most-likely geometry"},
    ]
    econ = [
        ("Annual generation", fmt_energy(e.annual_generation) + " MWh"),
        ("Lifetime generation", fmt_energy(e.lifetime_generation) + " MWh"),
        ("Annual revenue", fmt_currency(e.annual_revenue)),
        ("Lifetime revenue", fmt_currency(e.lifetime_revenue)),
        ("Electricity price", f"${inp.plant.electricity_price:.3f}/kWh"),
    ]
    prob = probability_table(results)
    prob["Probability"] = prob["Probability"].map(fmt_pct)
    return {
        "title": f"Geothermal Power Potential — {inp.project.name}",
        "generated_at": datetime.datetime.now().strftime("%Y-%m-%d %H:%M"),
        "style_css": _style_block(theme),
        "project": inp.project,
        "simulation": inp.simulation,
        "executive": x.to_dict(),
        "verdict_color": RISK_COLORS.get(x.color, x.color),
        "kpi_cards": kpi_cards,
        "charts": charts,
        "summary_html": summary_table(results).to_html(index=False, float_format=lambda v: f"{v:,.3f}"),
        "percentiles_html": percentile_table(results).to_html(index=False, float_format=lambda v: f"{v:,.3f}"),
        "probabilities_html": prob.to_html(index=False),
        "economics": econ,
        "inputs_html": _inputs_table(results).to_html(index=False, na_rep=""),
    }


# ---------- main entry ----------
def write_report(results: GeothermalResults, out_html: str = "geothermal_report.html",
                 assets_base: str = "report_assets", theme: str = "auto",
                 with_tornado: bool = True) -> Tuple[Path, str]:
    """Render the HTML report; returns (html_path, assets_dir)."""
    assets_dir = timestamped_assets_dir(base_dir=assets_base)
    charts: Dict[str, Dict[str, str]] = {}

    figs = [("power_hist", plot_histogram(results)), ("power_cumulative", plot_cumulative(results))]
    if with_tornado:
        tor = tornado(results.input)
        if len(tor):
            figs.append(("tornado", plot_tornado(tor)))
    for name, fig in figs:
        du, pth = save_fig_dual(fig, assets_dir, name)
        plt.close(fig)
        charts[name] = {"data_uri": du, "png_path": pth}

    env = Environment(loader=FileSystemLoader(str(TEMPLATES)), autoescape=select_autoescape(["html", "xml"]))
    tpl = env.get_template("report.html.j2")
    html = tpl.render(**build_context(results, charts, theme))

    out_path = Path(out_html)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(html, encoding="utf-8")
    log.info("Report written to %s (assets in %s)", out_path, assets_dir)
    return out_path, assets_dir

