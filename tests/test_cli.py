from pathlib import Path

import main
from geopower.config import DEFAULT_CONFIG, deep_merge

REPO_CONFIG = str(Path(__file__).resolve().parents[1] / "config.yaml")


def test_cli_summary_only(capsys):
    rc = main.main(["--config", REPO_CONFIG, "--iterations", "100", "--seed", "3", "--no-report"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "=== EXECUTIVE SUMMARY ===" in out
    assert "Iterations     : 100 (seed 3)" in out
    assert "[ok] Report" not in out


def test_cli_basic_mode_writes_report(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    rc = main.main(["--config", REPO_CONFIG, "--basic", "--iterations", "50",
                    "--generator", "numpy", "--out-html", str(tmp_path / "r.html")])
    out = capsys.readouterr().out
    assert rc == 0
    assert (tmp_path / "r.html").exists()
    assert "[ok] Report ->" in out
    assert (tmp_path / "report_assets").is_dir()


def test_run_returns_results_without_report():
    results, html = main.run(deep_merge(DEFAULT_CONFIG, {"monte_carlo": {"iterations": 20}}), with_report=False)
    assert html is None
    assert len(results.monte_carlo_results) == 20
