from __future__ import annotations
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd

from .classify import UNKNOWN_BUCKET, bedroom_bucket
from .data_prep import Records, as_frame
from .records import Availability, availability_color, category_color

COUNTY_SORT_KEYS = {
    "projects": "total_projects",
    "units": "total_units",
    "price": "avg_price",
}


def _mean(s: pd.Series) -> float:
    s = s.dropna()
    return float(s.mean()) if len(s) else np.nan

def _units_or_one(total_units: pd.Series) -> pd.Series:
    # a row without a declared (or a zero) project total counts as one unit
    units = pd.to_numeric(total_units, errors="coerce").fillna(0).astype("int64")
    return units.where(units != 0, 1)

def _payments(monthly_payment: pd.Series) -> pd.Series:
    # zero is treated like "not disclosed"
    return monthly_payment.where(monthly_payment != 0)


def summary_stats(records: Records) -> Dict[str, Any]:
    """
    Headline numbers for the filtered set. Averages are NaN on an empty set.
    """
    df = as_frame(records)
    return {
        "total_projects": int(df["project_name"].nunique()),
        "total_units": int(_units_or_one(df["total_units"]).sum()),
        "average_price": _mean(df["price"]),
        "available_units": int((df["available_units"] == Availability.AVAILABLE.value).sum()),
        "sold_out_units": int((df["available_units"] == Availability.SOLD_OUT.value).sum()),
        "avg_monthly_payment": _mean(_payments(df["monthly_payment"])),
        "total_counties": int(df["county"].nunique()),
    }

def price_by_category(records: Records) -> pd.DataFrame:
    """Average price and row count per category, cheapest first."""
    df = as_frame(records)
    cols = ["category", "avg_price", "count", "color"]
    if df.empty:
        return pd.DataFrame(columns=cols)
    agg = df.groupby("category", sort=False).agg(
        avg_price=("price", "mean"),
        count=("price", "size"),
    ).reset_index()
    agg["color"] = agg["category"].map(category_color)
    return agg.sort_values("avg_price", kind="mergesort").reset_index(drop=True)[cols]

def county_distribution(records: Records) -> pd.DataFrame:
    """
    Per-county projects / units / average price, in first-seen order.
    Ordering and top-N selection are left to rank_counties().
    """
    df = as_frame(records)
    cols = ["county", "total_projects", "total_units", "avg_price"]
    if df.empty:
        return pd.DataFrame(columns=cols)
    agg = (df.assign(_units=_units_or_one(df["total_units"]))
             .groupby("county", sort=False)
             .agg(total_projects=("project_name", "nunique"),
                  total_units=("_units", "sum"),
                  avg_price=("price", "mean"))
             .reset_index())
    agg["total_projects"] = agg["total_projects"].astype(int)
    agg["total_units"] = agg["total_units"].astype(int)
    return agg[cols]

def rank_counties(dist: pd.DataFrame, sort_by: str = "projects", top_n: int = 5) -> pd.DataFrame:
    if sort_by not in COUNTY_SORT_KEYS:
        raise ValueError(f"sort_by must be one of {sorted(COUNTY_SORT_KEYS)}, got {sort_by!r}")
    key = COUNTY_SORT_KEYS[sort_by]
    return (dist.sort_values(key, ascending=False, kind="mergesort")
                .head(top_n)
                .reset_index(drop=True))

def most_active_county(dist: pd.DataFrame) -> Tuple[Optional[str], int]:
    if dist.empty:
        return None, 0
    top = rank_counties(dist, "projects", top_n=1).iloc[0]
    return top["county"], int(top["total_projects"])

def largest_project(records: Records) -> Optional[int]:
    """Largest declared project total; None when no row declares one."""
    units = as_frame(records)["total_units"].dropna()
    return int(units.max()) if len(units) else None

def bedroom_analysis(records: Records) -> pd.DataFrame:
    """
    Count, average price and average monthly payment per bedroom bucket.
    Rows that fit no bucket are left out. Most common bucket first.
    """
    df = as_frame(records)
    cols = ["bucket", "count", "avg_price", "avg_monthly_payment"]
    buckets = [bedroom_bucket(b, u) for b, u in zip(df["bedrooms"], df["unit_type"])]
    tmp = df.assign(bucket=buckets, _payment=_payments(df["monthly_payment"]))
    tmp = tmp[tmp["bucket"] != UNKNOWN_BUCKET]
    if tmp.empty:
        return pd.DataFrame(columns=cols)
    agg = tmp.groupby("bucket", sort=False).agg(
        count=("price", "size"),
        avg_price=("price", "mean"),
        avg_monthly_payment=("_payment", "mean"),
    ).reset_index()
    agg["avg_monthly_payment"] = agg["avg_monthly_payment"].fillna(0.0)
    return agg.sort_values("count", ascending=False, kind="mergesort").reset_index(drop=True)[cols]

def availability_analysis(records: Records) -> pd.DataFrame:
    """Share of rows per availability label; percentages sum to 100."""
    df = as_frame(records)
    cols = ["status", "count", "percentage", "color"]
    if df.empty:
        return pd.DataFrame(columns=cols)
    agg = (df.groupby("available_units", sort=False)
             .size()
             .rename("count")
             .reset_index()
             .rename(columns={"available_units": "status"}))
    agg["percentage"] = agg["count"] / len(df) * 100
    agg["color"] = agg["status"].map(availability_color)
    return agg[cols]
