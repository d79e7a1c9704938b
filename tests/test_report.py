import dataclasses
from pathlib import Path

import pytest

from geopower.models import SimulationConfig
from geopower.monte_carlo import run_simulation
from geopower.report import build_context, write_report
from geopower.report_utils import fmt_currency, fmt_energy, fmt_pct


@pytest.fixture
def results(default_input):
    return run_simulation(dataclasses.replace(default_input, simulation=SimulationConfig(iterations=200, seed=42)))


def test_write_report(results, tmp_path):
    out, assets = write_report(results, out_html=str(tmp_path / "out" / "report.html"),
                               assets_base=str(tmp_path / "assets"))
    html = Path(out).read_text(encoding="utf-8")
    assert "data:image/png;base64," in html
    assert results.executive.recommendation in html
    assert "Feasibility Study 1" in html
    for name in ("power_hist", "power_cumulative", "tornado"):
        assert (Path(assets) / f"{name}.png").exists()


def test_report_without_tornado(constant_input, tmp_path):
    res = run_simulation(constant_input)
    out, assets = write_report(res, out_html=str(tmp_path / "r.html"),
                               assets_base=str(tmp_path / "a"), theme="dark", with_tornado=False)
    assert out.exists()
    assert not (Path(assets) / "tornado.png").exists()


def test_context(results):
    ctx = build_context(results, charts={}, theme="light")
    assert ctx["executive"]["riskLevel"] == results.executive.risk_level.value
    assert ctx["verdict_color"].startswith("#")
    assert "<table" in ctx["summary_html"]
    assert any(card["label"] == "Bulk volume" and card["value"].startswith("9.90") for card in ctx["kpi_cards"])


def test_formatters():
    assert fmt_currency(1.5e9) == "$1.5B"
    assert fmt_currency(35e6) == "$35M"
    assert fmt_currency(12e3) == "$12K"
    assert fmt_currency(950) == "$950"
    assert fmt_energy(2.5e6) == "2.5M"
    assert fmt_pct(0.256) == "26%"
    assert fmt_pct(0.256, digits=1) == "25.6%"
