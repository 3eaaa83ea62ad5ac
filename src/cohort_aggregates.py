"""
cohort_aggregates.py
──────────────────────────────────────────────────────────────
Per-offset delinquency statistics and client-mix counts.

The delinquency table mixes origination cohorts, so sums across rows
sharing a months-since-origination value mean nothing; only the
per-offset mean / min / max are reported.
"""

from typing import Optional

import numpy as np
import pandas as pd

from data_ingestion import EmptyInputError, FormatError


# ───────── Tunables ─────────
EXPECTED_MAX_MONTH = 15       # offsets observed in the source data: 0..15
NONCOLLECTABLE_MONTHS = 6     # age at which debt is written off / sold

KEY = "months_since_origination"
VALUE = "clients_on_default"


# ───────── Utilities ─────────
def _require_columns(df: pd.DataFrame, *cols: str) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise KeyError(f"Expected columns not found: {missing}")


def offset_key(col: pd.Series) -> pd.Series:
    """Integer view of the offset column, whatever its dtype (categorical included)."""
    if isinstance(col.dtype, pd.CategoricalDtype):
        col = col.astype(col.cat.categories.dtype)
    if isinstance(col.dtype, np.dtype) and np.issubdtype(col.dtype, np.integer):
        return col.astype("int64")
    numeric = pd.to_numeric(col)
    fractional = numeric.isna() | (numeric != numeric.round())
    if fractional.any():
        raise FormatError(
            f"{KEY} must hold whole numbers; got {col[fractional].unique().tolist()}"
        )
    return numeric.astype("int64")


# ───────── 1 · delinquency by months since origination ─────────
def summarize_delinquency(delinquency: pd.DataFrame) -> pd.DataFrame:
    """
    Mean / min / max / n_obs of clients_on_default per months_since_origination.

    Offsets are not clamped to 0..EXPECTED_MAX_MONTH. The index is sorted
    numerically, independent of label or insertion order.
    """
    _require_columns(delinquency, KEY, VALUE)
    if delinquency.empty:
        raise EmptyInputError("Delinquency table is empty; nothing to summarize.")

    df = pd.DataFrame({
        KEY: offset_key(delinquency[KEY]),
        VALUE: pd.to_numeric(delinquency[VALUE]),
    })
    summary = (
        df.groupby(KEY, sort=False)[VALUE]
          .agg(mean="mean", min="min", max="max", n_obs="count")
          .sort_index()
    )

    out_of_range = summary.index[(summary.index < 0) | (summary.index > EXPECTED_MAX_MONTH)]
    if len(out_of_range):
        print(f"Note: offsets outside 0..{EXPECTED_MAX_MONTH} kept as-is: "
              f"{out_of_range.tolist()}")
    return summary


def flag_noncollectable(
    summary: pd.DataFrame, threshold: Optional[int] = None
) -> pd.DataFrame:
    """Add a 'noncollectable' flag for offsets at or past the write-off age."""
    threshold = NONCOLLECTABLE_MONTHS if threshold is None else threshold
    out = summary.copy()
    out["noncollectable"] = out.index >= threshold
    return out


# ───────── 2 · client mix ─────────
def summarize_clients(clients: pd.DataFrame) -> pd.DataFrame:
    """Client count and share per score band, ordered by band value."""
    _require_columns(clients, "score_band_v2", "nb_clients")
    counts = (
        clients.groupby("score_band_v2", observed=True)["nb_clients"]
               .nunique()
               .rename("n_clients")
    )
    counts.index = counts.index.astype("int64")
    mix = counts.sort_index().to_frame()
    mix["share"] = mix["n_clients"] / mix["n_clients"].sum()
    return mix


def originations_by_month(clients: pd.DataFrame) -> pd.Series:
    """Number of clients originated per calendar month, chronological."""
    _require_columns(clients, "origination_date", "nb_clients")
    return (
        clients.groupby("origination_date")["nb_clients"]
               .nunique()
               .rename("n_clients")
               .sort_index()
    )
