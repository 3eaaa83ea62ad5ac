"""
visualize_delinquency.py
──────────────────────────────────────────────────────────────
Charts for the delinquency report:
  - violin of clients on default per months since origination
  - ribbon (mean line, min–max band) of the same, with the
    noncollectable threshold marked
  - client mix by score band and by origination month

Every function saves one PNG, closes the figure and returns the path.
"""

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from cohort_aggregates import (
    KEY,
    VALUE,
    offset_key,
    originations_by_month,
    summarize_clients,
)


# ── Params ─────────────────────────────────────────────────
DPI = 150
COLOR_MEAN = "#3498db"
COLOR_BAD = "#e74c3c"


# ── Helpers ────────────────────────────────────────────────
def _save(save_path: Path) -> Path:
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(save_path, dpi=DPI)
    plt.close()
    return save_path


def _require_rows(df: pd.DataFrame, label: str) -> None:
    if len(df) == 0:
        raise ValueError(f"Refusing to plot an empty {label}.")


# ── Delinquency charts ─────────────────────────────────────
def plot_default_violin(delinquency: pd.DataFrame, save_path: Path) -> Path:
    _require_rows(delinquency, "delinquency table")
    df = delinquency.assign(**{KEY: offset_key(delinquency[KEY])})
    order = sorted(df[KEY].unique())

    plt.figure(figsize=(10, 4))
    sns.violinplot(data=df, x=KEY, y=VALUE, order=order, cut=0,
                   inner="quartile", color=COLOR_MEAN)
    plt.xlabel("Months since origination")
    plt.ylabel("Clients on default")
    plt.title("Clients on default by months since origination")
    return _save(save_path)


def plot_default_ribbon(
    summary: pd.DataFrame, save_path: Path, threshold: Optional[int] = None
) -> Path:
    """Mean with a min–max band; expects summarize_delinquency output."""
    _require_rows(summary, "summary table")
    s = summary.sort_index()
    x = s.index.to_numpy()

    plt.figure(figsize=(8, 4))
    plt.fill_between(x, s["min"], s["max"], alpha=0.3, color=COLOR_MEAN,
                     label="min–max")
    plt.plot(x, s["mean"], marker="o", color=COLOR_MEAN, label="mean")
    if threshold is not None:
        plt.axvline(threshold, color=COLOR_BAD, linestyle="--", lw=1,
                    label=f"noncollectable ({threshold} mo)")
    plt.xticks(x)
    plt.xlabel("Months since origination")
    plt.ylabel("Clients on default")
    plt.title("Clients on default: mean and range")
    plt.legend()
    return _save(save_path)


# ── Client-sample charts ───────────────────────────────────
def plot_score_band_hist(clients: pd.DataFrame, save_path: Path) -> Path:
    _require_rows(clients, "client sample")
    mix = summarize_clients(clients)

    plt.figure(figsize=(6, 4))
    plt.bar(mix.index.astype(str), mix["n_clients"], color=COLOR_MEAN)
    plt.xlabel("Score band (v2)")
    plt.ylabel("Clients")
    plt.title("Clients by score band")
    return _save(save_path)


def plot_originations(clients: pd.DataFrame, save_path: Path) -> Path:
    _require_rows(clients, "client sample")
    per_month = originations_by_month(clients)

    plt.figure(figsize=(8, 4))
    plt.bar(per_month.index.strftime("%Y-%m"), per_month.to_numpy(), color=COLOR_MEAN)
    plt.xticks(rotation=45, ha="right")
    plt.xlabel("Origination month")
    plt.ylabel("Clients")
    plt.title("Originations per month")
    return _save(save_path)
