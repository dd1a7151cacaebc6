from __future__ import annotations
import os
from typing import Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib import gridspec

from . import config
from .data_prep import Records, as_frame
from .metrics import (
    COUNTY_SORT_KEYS, availability_analysis, bedroom_analysis, county_distribution,
    largest_project, most_active_county, price_by_category, rank_counties, summary_stats,
)

COUNTY_SORT_LABELS = {
    "projects": "number of projects",
    "units": "total units",
    "price": "average price",
}


def _ensure_dir(p: Optional[str]) -> None:
    if p:
        d = os.path.dirname(p)
        if d and not os.path.exists(d):
            os.makedirs(d, exist_ok=True)

def _finish(fig: plt.Figure, out_path: Optional[str], show: bool,
            tight: bool = True) -> Optional[str]:
    if tight:
        fig.tight_layout()
    saved = None
    if out_path:
        _ensure_dir(out_path)
        fig.savefig(out_path, dpi=150, bbox_inches="tight")
        saved = out_path
    if show:
        plt.show()
    else:
        plt.close(fig)
    return saved

def _no_data(ax: plt.Axes, title: str) -> None:
    ax.set_title(title)
    ax.axis("off")
    ax.text(0.5, 0.5, "No data", ha="center", va="center", fontsize=11, color="#6B7280")

def format_amount(value, currency: Optional[str] = None) -> str:
    """KES 2.0M / KES 14K style label; NaN or None gives N/A."""
    currency = currency or config.CURRENCY
    if value is None or pd.isna(value):
        return "N/A"
    if value >= 1_000_000:
        return f"{currency} {value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{currency} {value / 1_000:.0f}K"
    return f"{currency} {value:,.0f}"


# --- single charts (draw on a given axes) ---

def draw_price_by_category(ax: plt.Axes, data: pd.DataFrame) -> None:
    title = "Price Distribution by Category"
    if data.empty:
        return _no_data(ax, title)
    y = np.arange(len(data))
    ax.barh(y, data["avg_price"].to_numpy(dtype=float), color=data["color"].tolist())
    ax.set_yticks(y)
    ax.set_yticklabels([f"{c} ({n})" for c, n in zip(data["category"], data["count"])])
    for yi, v in zip(y, data["avg_price"]):
        ax.text(v, yi, " " + format_amount(v), va="center", fontsize=8)
    ax.set_title(title)
    ax.set_xlabel(f"Average price ({config.CURRENCY})")

def draw_availability(ax: plt.Axes, data: pd.DataFrame) -> None:
    title = "Unit Availability Status"
    if data.empty:
        return _no_data(ax, title)
    ax.pie(
        data["count"].to_numpy(dtype=float),
        colors=data["color"].tolist(),
        startangle=90, counterclock=False,
        wedgeprops={"width": 0.35, "edgecolor": "white"},
    )
    labels = [f"{s}: {c:,} ({p:.1f}%)" for s, c, p in
              zip(data["status"], data["count"], data["percentage"])]
    ax.legend(labels, loc="center left", bbox_to_anchor=(1.0, 0.5), fontsize=8, frameon=False)
    ax.set_title(title)
    ax.axis("equal")

def draw_county_distribution(ax: plt.Axes, data: pd.DataFrame,
                             sort_by: str = "projects", top_n: int = 5) -> None:
    title = f"County Distribution (by {COUNTY_SORT_LABELS[sort_by]})"
    if data.empty:
        return _no_data(ax, title)
    top = rank_counties(data, sort_by=sort_by, top_n=top_n)
    key = COUNTY_SORT_KEYS[sort_by]
    vals = top[key].to_numpy(dtype=float)
    y = np.arange(len(top))[::-1]               # largest at the top
    ax.barh(y, vals, color="#2563EB")
    ax.set_yticks(y)
    ax.set_yticklabels(top["county"].tolist())
    for yi, v in zip(y, vals):
        label = format_amount(v) if sort_by == "price" else f"{v:,.0f}"
        ax.text(v, yi, " " + label, va="center", fontsize=8)
    ax.set_title(title)

def draw_bedroom_analysis(ax: plt.Axes, data: pd.DataFrame) -> None:
    title = "Bedroom Analysis"
    if data.empty:
        return _no_data(ax, title)
    x = np.arange(len(data))
    ax.bar(x, data["count"].to_numpy(dtype=float), color="#059669")
    ax.set_xticks(x)
    ax.set_xticklabels(data["bucket"].tolist(), rotation=30, ha="right", fontsize=8)
    for xi, (n, p, m) in enumerate(zip(data["count"], data["avg_price"], data["avg_monthly_payment"])):
        note = format_amount(p)
        if m:
            note += f"\n~{format_amount(m)}/mo"
        ax.text(xi, n, note, ha="center", va="bottom", fontsize=7)
    ax.set_ylabel("Units")
    ax.set_title(title)
    ax.margins(y=0.25)


# --- standalone figures ---

def plot_price_by_category(
    data: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """Horizontal bars of average price per category (price_by_category() output)."""
    fig, ax = plt.subplots(figsize=(8, 4))
    draw_price_by_category(ax, data)
    return fig, ax, _finish(fig, out_path, show)

def plot_availability(
    data: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """Donut of availability shares (availability_analysis() output)."""
    fig, ax = plt.subplots(figsize=(7, 4))
    draw_availability(ax, data)
    return fig, ax, _finish(fig, out_path, show)

def plot_county_distribution(
    data: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
    *,
    sort_by: str = "projects",
    top_n: int = 5,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """Top-N counties by projects, units or average price."""
    if sort_by not in COUNTY_SORT_KEYS:
        raise ValueError(f"sort_by must be one of {sorted(COUNTY_SORT_KEYS)}, got {sort_by!r}")
    fig, ax = plt.subplots(figsize=(8, 4))
    draw_county_distribution(ax, data, sort_by=sort_by, top_n=top_n)
    return fig, ax, _finish(fig, out_path, show)

def plot_bedroom_analysis(
    data: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    fig, ax = plt.subplots(figsize=(8, 4))
    draw_bedroom_analysis(ax, data)
    return fig, ax, _finish(fig, out_path, show)


def stats_table(records: Records) -> pd.DataFrame:
    """Formatted headline figures, one row per stat card."""
    df = as_frame(records)
    stats = summary_stats(df)
    county, n_projects = most_active_county(county_distribution(df))
    largest = largest_project(df)
    rows = [
        ("Total Projects", f"{stats['total_projects']:,}"),
        ("Total Housing Units", f"{stats['total_units']:,} in {stats['total_counties']} counties"),
        ("Average Price", format_amount(stats["average_price"])),
        ("Available Units", f"{stats['available_units']:,} ({stats['sold_out_units']:,} sold out)"),
        ("Average Monthly Payment", format_amount(stats["avg_monthly_payment"])),
        ("Most Active County", f"{county} ({n_projects} projects)" if county else "N/A"),
        ("Largest Project", f"{largest:,} units" if largest is not None else "N/A"),
    ]
    return pd.DataFrame(rows, columns=["Stat", "Value"])

def plot_dashboard(
    records: Records,
    out_path: Optional[str] = None,
    show: bool = False,
    *,
    sort_by: str = "projects",
    top_n: int = 5,
    title: str = "Affordable Housing Projects",
) -> Tuple[plt.Figure, Tuple[plt.Axes, ...], Optional[str]]:
    """
    One figure with the stat table on top and the four charts below:
      price by category | availability
      county ranking    | bedroom analysis
    """
    if sort_by not in COUNTY_SORT_KEYS:
        raise ValueError(f"sort_by must be one of {sorted(COUNTY_SORT_KEYS)}, got {sort_by!r}")
    df = as_frame(records)

    fig = plt.figure(figsize=(14, 12))
    gs = gridspec.GridSpec(
        3, 2,
        height_ratios=[1.0, 1.6, 1.6],
        hspace=0.35, wspace=0.25,
    )
    ax_tbl = fig.add_subplot(gs[0, :]); ax_tbl.axis("off")
    ax_price = fig.add_subplot(gs[1, 0])
    ax_avail = fig.add_subplot(gs[1, 1])
    ax_county = fig.add_subplot(gs[2, 0])
    ax_beds = fig.add_subplot(gs[2, 1])

    tbl = stats_table(df)
    table = ax_tbl.table(cellText=tbl.values, colLabels=list(tbl.columns),
                         loc="center", cellLoc="left", colLoc="left")
    table.auto_set_font_size(False)
    table.set_fontsize(9)
    table.scale(1.0, 1.3)
    ax_tbl.set_title(title, fontsize=14, weight="bold")

    draw_price_by_category(ax_price, price_by_category(df))
    draw_availability(ax_avail, availability_analysis(df))
    draw_county_distribution(ax_county, county_distribution(df), sort_by=sort_by, top_n=top_n)
    draw_bedroom_analysis(ax_beds, bedroom_analysis(df))

    saved = _finish(fig, out_path, show, tight=False)   # gridspec spacing is set above
    return fig, (ax_tbl, ax_price, ax_avail, ax_county, ax_beds), saved
