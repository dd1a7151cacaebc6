from __future__ import annotations
import re, logging
from dataclasses import astuple
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from . import config
from .classify import classify_bedrooms, classify_category
from .records import COLUMNS, HousingRecord

logger = logging.getLogger(__name__)

# source columns, in file order (the header row itself is not interpreted)
RAW_FIELDS = COLUMNS[:9]
TEXT_FIELDS = ["county", "location", "project_name", "project_status",
               "unit_type", "available_units"]

LINE_RX = re.compile(r"\r\n|\r|\n")
CURRENCY_RX = re.compile(r"^[A-Za-z]{2,4}\.?\s*")   # "KES ", "Ksh ", "Kshs."

Records = Union[pd.DataFrame, Sequence[HousingRecord]]


# --- text -> raw rows ---

def split_fields(line: str) -> List[str]:
    """
    Split one CSV line on commas, ignoring commas inside double quotes.
    Quote characters only toggle the quoted state and are dropped.
    """
    fields, cur, in_quotes = [], [], False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(cur)); cur = []
        else:
            cur.append(ch)
    fields.append("".join(cur))
    return fields

def read_listings(text: str) -> pd.DataFrame:
    """
    Raw string frame, one row per non-blank line after the header.
    Values are whitespace-stripped; short rows are padded with "".
    """
    text = (text or "").lstrip("\ufeff")
    lines = [ln for ln in LINE_RX.split(text) if ln.strip()]
    width = len(RAW_FIELDS)
    rows = []
    for ln in lines[1:]:
        fields = [f.strip() for f in split_fields(ln)]
        rows.append((fields + [""] * width)[:width])
    return pd.DataFrame(rows, columns=RAW_FIELDS, dtype=object)


# --- raw rows -> typed listings ---

def parse_amount(s: pd.Series) -> pd.Series:
    """
    Money/count strings -> float. Strips quotes, a currency prefix and
    thousands separators; anything left unparseable ("#", "") is NaN.
    """
    cleaned = (s.fillna("").astype(str)
                .str.replace('"', "", regex=False)
                .str.strip()
                .str.replace(CURRENCY_RX, "", regex=True)
                .str.replace(",", "", regex=False)
                .str.strip())
    return pd.to_numeric(cleaned, errors="coerce").astype(float)

def coerce_listings(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Typed listings frame from read_listings() output:
      price (0 when unparseable), monthly_payment (NaN when absent),
      total_units (nullable Int64, integer part),
      category / bedrooms derived from unit_type
    """
    out = raw.copy()
    for c in TEXT_FIELDS:
        out[c] = out[c].fillna("").astype(str).str.strip()

    out["price"] = parse_amount(out["price"]).fillna(0.0)
    out["monthly_payment"] = parse_amount(out["monthly_payment"])

    units = parse_amount(out["total_units"])
    units = units.where(np.isfinite(units))
    out["total_units"] = np.floor(units).astype("Int64")

    out["category"] = out["unit_type"].map(lambda u: classify_category(u).value).astype(object)
    out["bedrooms"] = out["unit_type"].map(classify_bedrooms).astype("Int64")
    return out[COLUMNS]

def drop_invalid(df: pd.DataFrame) -> pd.DataFrame:
    """Keep rows with a county and a positive price. Returns a new frame."""
    keep = (df["county"] != "") & (df["price"] > 0)
    dropped = int((~keep).sum())
    if dropped:
        logger.debug("dropped %d of %d rows without county or price", dropped, len(df))
    return df.loc[keep].reset_index(drop=True)

def load_listings(text: str) -> pd.DataFrame:
    raw = read_listings(text)
    logger.debug("read %d listing rows", len(raw))
    return drop_invalid(coerce_listings(raw))


# --- frame <-> records ---

def _opt(v, cast):
    return None if pd.isna(v) else cast(v)

def to_records(df: pd.DataFrame) -> List[HousingRecord]:
    out = []
    for r in df[COLUMNS].itertuples(index=False):
        out.append(HousingRecord(
            county=r.county,
            location=r.location,
            project_name=r.project_name,
            project_status=r.project_status,
            total_units=_opt(r.total_units, int),
            unit_type=r.unit_type,
            available_units=r.available_units,
            price=float(r.price),
            monthly_payment=_opt(r.monthly_payment, float),
            category=r.category,
            bedrooms=_opt(r.bedrooms, int),
        ))
    return out

def listings_frame(records: Sequence[HousingRecord]) -> pd.DataFrame:
    df = pd.DataFrame([astuple(r) for r in records], columns=COLUMNS)
    for c in TEXT_FIELDS + ["category"]:
        df[c] = df[c].astype(object)
    df["price"] = df["price"].astype(float)
    df["monthly_payment"] = pd.to_numeric(df["monthly_payment"], errors="coerce").astype(float)
    df["total_units"] = pd.to_numeric(df["total_units"], errors="coerce").astype("Int64")
    df["bedrooms"] = pd.to_numeric(df["bedrooms"], errors="coerce").astype("Int64")
    return df

def as_frame(records: Records) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        return records
    return listings_frame(list(records))

def parse_listings(text: str) -> List[HousingRecord]:
    """Parse CSV text straight to HousingRecord objects (invalid rows dropped)."""
    return to_records(load_listings(text))

def load_seed_text(path: Optional[Union[str, Path]] = None) -> str:
    """
    Read the seed dataset. Defaults to HOUSING_DATA_PATH, else the copy
    bundled with the package. Raises FileNotFoundError if missing.
    """
    p = Path(path) if path else config.DATA_PATH
    return p.read_text(encoding="utf-8-sig")
