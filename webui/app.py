# app.py
import traceback
from pathlib import Path

import pandas as pd
import streamlit as st

from backend_adapter import load_default_config, make_cfg_for_run, run_project_with_config
from geopower.statistics import cumulative_curve, histogram, percentile_table, probability_table, summary_table
from geopower.report_utils import fmt_currency, fmt_energy, fmt_pct

# --------------------------- Page setup ---------------------------
st.set_page_config(page_title="Geothermal Power Potential — Web UI", layout="wide")
st.title("🌋 Geothermal Power Potential")
st.caption("Set the reservoir and plant inputs, then press Run; the dashboard and HTML report appear below.")

# --------------------------- Helpers ---------------------------
def normalize_root(root_str: str) -> Path:
    p = Path(root_str).expanduser().resolve()
    if not p.exists():
        raise FileNotFoundError(f"Path not found: {p}")
    return p

# --------------------------- Sidebar: Project root ---------------------------
with st.sidebar:
    st.header("📁 Project")
    project_root_input = st.text_input("Project root (folder holding config.yaml)", value=str(Path.cwd()))
    mode = st.radio("Input mode", options=["basic", "scientific"], index=0,
                    help="basic: single values with generated uncertainty bands; "
                         "scientific: the distributions in config.yaml")

# --------------------------- Bootstrap config ---------------------------
try:
    root = normalize_root(project_root_input)
    default_cfg = load_default_config(root)
    cfg_ok = True
except Exception as e:
    cfg_ok = False
    st.error(f"Could not prepare the project: {e}")

if not cfg_ok:
    st.stop()

b = default_cfg.get("basic", {})
b_res, b_th, b_pp = b.get("reservoir", {}), b.get("thermodynamic", {}), b.get("power_plant", {})
mc = default_cfg.get("monte_carlo", {})

# --------------------------- Inputs ---------------------------
st.subheader("⚙️ Inputs")
colA, colB, colC = st.columns(3)
scientific_mode = mode != "basic"

with colA:
    st.markdown("**Reservoir**")
    area = st.number_input("Area (km²)", min_value=0.1, value=float(b_res.get("area", 33.0)), disabled=scientific_mode)
    thickness = st.number_input("Thickness (m)", min_value=1.0, value=float(b_res.get("thickness", 300.0)), disabled=scientific_mode)
    t_res = st.number_input("Reservoir temperature (°C)", value=float(b_res.get("reservoir_temp", 230.0)), disabled=scientific_mode)
    t_ab = st.number_input("Abandon temperature (°C)", value=float(b_res.get("abandon_temp", 100.0)), disabled=scientific_mode)
    porosity = st.number_input("Porosity", min_value=0.0, max_value=1.0, value=float(b_res.get("porosity", 0.04)),
                               format="%.3f", disabled=scientific_mode)

with colB:
    st.markdown("**Thermodynamic**")
    cr = st.number_input("Rock specific heat (kJ/kg°C)", value=float(b_th.get("rock_specific_heat", 0.9)), format="%.3f", disabled=scientific_mode)
    cf = st.number_input("Fluid specific heat (kJ/kg°C)", value=float(b_th.get("fluid_specific_heat", 4.18)), format="%.3f", disabled=scientific_mode)
    rho_r = st.number_input("Rock density (kg/m³)", value=float(b_th.get("rock_density", 2750.0)), disabled=scientific_mode)
    rho_f = st.number_input("Fluid density (kg/m³)", value=float(b_th.get("fluid_density", 855.9)), disabled=scientific_mode)

with colC:
    st.markdown("**Power plant**")
    rf = st.number_input("Recovery factor", min_value=0.0, max_value=1.0, value=float(b_pp.get("recovery_factor", 0.07)), format="%.3f", disabled=scientific_mode)
    ce = st.number_input("Conversion efficiency", min_value=0.0, max_value=1.0, value=float(b_pp.get("conversion_efficiency", 0.173)), format="%.3f", disabled=scientific_mode)
    pf = st.number_input("Plant capacity factor", min_value=0.01, max_value=1.0, value=float(b_pp.get("plant_capacity_factor", 0.9)), format="%.2f", disabled=scientific_mode)
    life = st.number_input("Lifespan (years)", min_value=1.0, value=float(b_pp.get("lifespan", 25.0)), disabled=scientific_mode)
    price = st.number_input("Electricity price (USD/kWh)", min_value=0.0, value=float(b_pp.get("electricity_price", 0.08)), format="%.3f", disabled=scientific_mode)

st.divider()
st.subheader("🎲 Monte Carlo")
colD, colE, colF = st.columns(3)
with colD:
    iterations = st.number_input("Iterations", min_value=1, max_value=200000, value=int(mc.get("iterations", 10000)), step=1000)
with colE:
    seed = st.number_input("Seed", min_value=0, value=int(mc.get("random_seed", 42)), step=1)
with colF:
    generator = st.selectbox("Generator", options=["legacy", "numpy"],
                             index=0 if mc.get("generator", "legacy") == "legacy" else 1)

run = st.button("🚀 Run")
if not run:
    st.stop()

# --------------------------- Run ---------------------------
with st.spinner("⏳ Simulating…"):
    try:
        cfg = make_cfg_for_run(
            default_cfg, mode,
            reservoir={"area": area, "thickness": thickness, "reservoir_temp": t_res,
                       "abandon_temp": t_ab, "porosity": porosity},
            thermodynamic={"rock_specific_heat": cr, "fluid_specific_heat": cf,
                           "rock_density": rho_r, "fluid_density": rho_f},
            power_plant={"recovery_factor": rf, "conversion_efficiency": ce,
                         "plant_capacity_factor": pf, "lifespan": life, "electricity_price": price},
            iterations=iterations, seed=seed, generator=generator,
        )
        results, basic_results, html_path = run_project_with_config(cfg, out_html=str(root / "geothermal_report.html"))

        st.success("Simulation complete ✅")

        x = results.executive
        box = {"green": st.success, "yellow": st.warning, "orange": st.warning, "red": st.error}.get(x.color, st.info)
        box(f"**{x.recommendation}** — risk level {x.risk_level.value}, confidence {x.confidence}")

        s, e = results.statistics, results.economics
        k1, k2, k3, k4, k5 = st.columns(5)
        k1.metric("Base case", f"{results.base_case.power_mwe:.1f} MW")
        k2.metric("P10", f"{s.percentiles.p10:.1f} MW")
        k3.metric("P50", f"{s.percentiles.p50:.1f} MW")
        k4.metric("P90", f"{s.percentiles.p90:.1f} MW")
        k5.metric("P(>base)", fmt_pct(s.probabilities.above_base))

        c1, c2 = st.columns(2)
        with c1:
            st.markdown("#### Distribution")
            h = histogram(results.monte_carlo_results)
            h["bin"] = h["bin_start"].map(lambda v: f"{v:.1f}")
            st.bar_chart(h, x="bin", y="count")
        with c2:
            st.markdown("#### Cumulative probability")
            st.line_chart(cumulative_curve(results.monte_carlo_results).set_index("power_mw"))

        t1, t2, t3 = st.columns(3)
        t1.dataframe(summary_table(results), hide_index=True)
        t2.dataframe(percentile_table(results), hide_index=True)
        t3.dataframe(probability_table(results), hide_index=True)

        st.markdown("#### Economics")
        st.table(pd.DataFrame([
            ("Annual generation", fmt_energy(e.annual_generation) + " MWh"),
            ("Lifetime generation", fmt_energy(e.lifetime_generation) + " MWh"),
            ("Annual revenue", fmt_currency(e.annual_revenue)),
            ("Lifetime revenue", fmt_currency(e.lifetime_revenue)),
        ], columns=["Item", "Value"]))

        if basic_results is not None:
            with st.expander("Basic-form result record"):
                d = basic_results.to_dict()
                d.pop("monteCarloResults")
                st.json(d)

        st.markdown(f"### 📄 Report: `{html_path}`")
        try:
            st.components.v1.html(Path(html_path).read_text(encoding="utf-8"), height=900, scrolling=True)
        except OSError as e:
            st.warning(f"Could not display the HTML report ({e}). File: {html_path}")

    except Exception as e:
        st.error(f"💥 Run failed: {e}")
        st.code(traceback.format_exc())
