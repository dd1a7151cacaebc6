from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List

import pandas as pd

from .data_prep import Records, as_frame
from .records import HousingRecord


@dataclass(frozen=True)
class FilterSpec:
    """
    Active filters; an empty string disables a filter.

    county / category / project_status match exactly, status matches the
    availability label, search is a case-insensitive substring of the
    project name or location.
    """
    county: str = ""
    category: str = ""
    status: str = ""
    search: str = ""
    project_status: str = ""

    def is_empty(self) -> bool:
        return not (self.county or self.category or self.status
                    or self.search or self.project_status)


def matches(record: HousingRecord, spec: FilterSpec) -> bool:
    needle = spec.search.lower()
    return (
        (not spec.county or record.county == spec.county)
        and (not spec.category or record.category == spec.category)
        and (not spec.status or record.available_units == spec.status)
        and (not spec.project_status or record.project_status == spec.project_status)
        and (not needle
             or needle in record.project_name.lower()
             or needle in record.location.lower())
    )

def _frame_mask(df: pd.DataFrame, spec: FilterSpec) -> pd.Series:
    keep = pd.Series(True, index=df.index)
    if spec.county:
        keep &= df["county"] == spec.county
    if spec.category:
        keep &= df["category"] == spec.category
    if spec.status:
        keep &= df["available_units"] == spec.status
    if spec.project_status:
        keep &= df["project_status"] == spec.project_status
    if spec.search:
        needle = spec.search.lower()
        keep &= (
            df["project_name"].str.lower().str.contains(needle, regex=False, na=False)
            | df["location"].str.lower().str.contains(needle, regex=False, na=False)
        )
    return keep

def filter_listings(records: Records, spec: FilterSpec) -> Records:
    """
    Apply `spec` to a listings frame or a list of records.
    Returns a new object of the same kind; the input is left untouched.
    """
    if isinstance(records, pd.DataFrame):
        return records.loc[_frame_mask(records, spec)].copy()
    return [r for r in records if matches(r, spec)]

def filter_options(records: Records) -> Dict[str, List[str]]:
    """Sorted distinct values a filter UI can offer, from the full record set."""
    df = as_frame(records)

    def _uniq(col: str) -> List[str]:
        return sorted(v for v in df[col].dropna().unique() if v)

    return {
        "counties": _uniq("county"),
        "categories": _uniq("category"),
        "statuses": _uniq("available_units"),
        "project_statuses": _uniq("project_status"),
    }
