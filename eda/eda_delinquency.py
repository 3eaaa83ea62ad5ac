"""
Delinquency EDA for credit-card originations

Loads the fused origination / delinquency CSV, splits it into a client
sample and a delinquency table, prints the summary tables and saves the
report figures plus the processed tables.

Steps:
- Load + validate raw CSV (fails on malformed or header-only input)
- Client mix: score band and origination month
- Clients on default per months since origination (mean / min / max)
- Violin, ribbon and histogram figures
- Save processed parquet

Run:
    python eda/eda_delinquency.py
"""

# ────────────────── Imports & file paths ─────────────────────────────────────
from pathlib import Path
import warnings

import pandas as pd

from cohort_aggregates import (
    NONCOLLECTABLE_MONTHS,
    flag_noncollectable,
    summarize_clients,
    summarize_delinquency,
)
from data_ingestion import RAW_CSV, load_and_split, save_processed
from visualize_delinquency import (
    plot_default_ribbon,
    plot_default_violin,
    plot_originations,
    plot_score_band_hist,
)

warnings.filterwarnings("ignore", category=FutureWarning)


BASE_DIR = Path(__file__).resolve().parents[1]
DATA_PROCESSED = BASE_DIR / "data" / "processed"
REPORT_FIGS = BASE_DIR / "reports" / "figures"


def main(
    csv_path: Path = RAW_CSV,
    figs_dir: Path = REPORT_FIGS,
    processed_dir: Path = DATA_PROCESSED,
) -> pd.DataFrame:
    # ────────────────── Load once ────────────────────────────────────────────
    clients, delinquency = load_and_split(csv_path)
    figs_dir = Path(figs_dir)
    figs_dir.mkdir(parents=True, exist_ok=True)

    # ────────────────── Client sample ────────────────────────────────────────
    years = clients["origination_year"]
    print(f"\nClient sample: {len(clients):,} clients | "
          f"originated {years.min()}–{years.max()}")
    print("\nClients by score band:")
    print(summarize_clients(clients).round(3).to_string())

    # ────────────────── Delinquency by months since origination ─────────────
    print("\nclients_on_default describe():")
    print(delinquency["clients_on_default"].describe().round(2).to_string())

    summary = flag_noncollectable(summarize_delinquency(delinquency))
    print("\nClients on default per months since origination:")
    print(summary.round(2).to_string())

    # ────────────────── Figures ──────────────────────────────────────────────
    saved = [
        plot_default_violin(delinquency, figs_dir / "default_violin.png"),
        plot_default_ribbon(summary, figs_dir / "default_ribbon.png",
                            threshold=NONCOLLECTABLE_MONTHS),
        plot_score_band_hist(clients, figs_dir / "score_band_hist.png"),
        plot_originations(clients, figs_dir / "originations_per_month.png"),
    ]
    for path in saved:
        print(f"Chart saved -> {path}")

    # ────────────────── Save processed tables ────────────────────────────────
    clients_path, delinquency_path = save_processed(clients, delinquency, processed_dir)
    print(f"\nSaved files -> {clients_path.name}, {delinquency_path.name}")
    return summary


if __name__ == "__main__":
    main()
