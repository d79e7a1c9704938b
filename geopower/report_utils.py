# geopower/report_utils.py
from __future__ import annotations
import base64
import datetime
import io
import math
import os
from pathlib import Path
from typing import Tuple


def ensure_dir(path: str | os.PathLike) -> str:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return str(p)


def timestamped_assets_dir(base_dir: str = "report_assets") -> str:
    ts = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    return ensure_dir(os.path.join(base_dir, ts))


def fig_to_datauri(fig, dpi: int = 140) -> str:
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi, bbox_inches="tight")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def save_fig_dual(fig, out_dir: str, name: str, dpi: int = 140) -> Tuple[str, str]:
    """Write <out_dir>/<name>.png and return (data_uri, file_path)."""
    ensure_dir(out_dir)
    fpath = os.path.join(out_dir, f"{name}.png")
    fig.savefig(fpath, format="png", dpi=dpi, bbox_inches="tight")
    return fig_to_datauri(fig, dpi=dpi), fpath


# ---------- number formatting (dashboard style) ----------

def fmt_currency(amount: float) -> str:
    """$1.2B / $35M / $12K / $950"""
    if not math.isfinite(amount):
        return str(amount)
    if amount >= 1e9:
        return f"${amount / 1e9:.1f}B"
    if amount >= 1e6:
        return f"${amount / 1e6:.0f}M"
    if amount >= 1e3:
        return f"${amount / 1e3:.0f}K"
    return f"${amount:.0f}"


def fmt_energy(mwh: float) -> str:
    """MWh with M/K suffixes."""
    if not math.isfinite(mwh):
        return str(mwh)
    if mwh >= 1e6:
        return f"{mwh / 1e6:.1f}M"
    if mwh >= 1e3:
        return f"{mwh / 1e3:.0f}K"
    return f"{mwh:.0f}"


def fmt_pct(x: float, digits: int = 0) -> str:
    return f"{x * 100:.{digits}f}%"
