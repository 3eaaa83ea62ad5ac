"""
Load the origination / delinquency CSV and split it into two tables.

The raw file fuses two unrelated entities into one row:
- client fields:       origination_month, score_band_v2, nb_clients
- delinquency fields:  months_since_origination, clients_on_default

Behavior:
- Reads from: <project-root>/data/raw/delinquency_by_origination.csv
- Fails the whole load on any malformed row (FormatError) or on a
  header-only file (EmptyInputError); nothing is skipped silently.
- Writes to:  <project-root>/data/processed  (only via save_processed)
    - clients.parquet
    - delinquency.parquet
"""

from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import pandas as pd


# ─────────────────────────── Paths ───────────────────────────
BASE = Path(__file__).resolve().parents[1]
RAW = BASE / "data" / "raw"
PROC = BASE / "data" / "processed"

RAW_CSV = RAW / "delinquency_by_origination.csv"

CLIENTS_PARQUET = "clients.parquet"
DELINQUENCY_PARQUET = "delinquency.parquet"

# ─────────────────────────── Schema ──────────────────────────
RAW_COLUMNS = [
    "origination_month",
    "score_band_v2",
    "nb_clients",
    "months_since_origination",
    "clients_on_default",
]
CLIENT_COLUMNS = ["origination_month", "score_band_v2", "nb_clients"]
DELINQUENCY_COLUMNS = ["months_since_origination", "clients_on_default"]
INT_COLUMNS = ["score_band_v2", "months_since_origination", "clients_on_default"]

MONTH_PATTERN = r"^\d{4}-\d{2}$"
MONTH_FORMAT = "%Y-%m"
MAX_REPORTED_ROWS = 5
INT64_MAX = int(np.iinfo(np.int64).max)


class FormatError(ValueError):
    """A required field does not match its expected format."""


class EmptyInputError(ValueError):
    """The input holds no data rows."""


# ─────────────────────── Helper utilities ─────────────────────
def _require(path: Path, label: Optional[str] = None) -> None:
    """Raise a clear error if a required file is missing."""
    if not path.exists():
        name = f"{label or 'file'}"
        raise FileNotFoundError(
            f"Expected {name} not found:\n  {path}\n"
            "Make sure the raw dataset is present in data/raw."
        )


def _bad_rows(mask: pd.Series) -> str:
    rows = mask[mask].index.tolist()
    shown = ", ".join(str(r) for r in rows[:MAX_REPORTED_ROWS])
    more = f" (+{len(rows) - MAX_REPORTED_ROWS} more)" if len(rows) > MAX_REPORTED_ROWS else ""
    return shown + more


def _as_text(col: pd.Series) -> pd.Series:
    return col.astype(str).str.strip()


# ───────────────────────── Loading ────────────────────────────
def read_raw_csv(path: Path = RAW_CSV) -> pd.DataFrame:
    """Read the raw CSV with every column kept as text."""
    path = Path(path)
    _require(path, "origination CSV")
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as e:
        raise EmptyInputError(f"{path.name} is empty; expected a header row.") from e
    except pd.errors.ParserError as e:
        raise FormatError(f"Could not parse {path.name}: {e}") from e

    if list(df.columns) != RAW_COLUMNS:
        raise FormatError(
            f"Unexpected header in {path.name}: {list(df.columns)}\n"
            f"Expected: {RAW_COLUMNS}"
        )
    if df.empty:
        raise EmptyInputError(f"{path.name} has a header but no data rows.")
    return df


def parse_raw(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Validate raw records and coerce them to typed columns.

    Accepts either the text frame from read_raw_csv or a frame built from
    Python values. Raises FormatError on the first invalid column; no
    partially parsed frame is ever returned.
    """
    missing = [c for c in RAW_COLUMNS if c not in raw.columns]
    if missing:
        raise KeyError(f"Expected columns not found: {missing}")
    if raw.empty:
        raise EmptyInputError("No records to parse.")

    df = raw.loc[:, RAW_COLUMNS].reset_index(drop=True)
    out = pd.DataFrame(index=df.index)

    months = _as_text(df["origination_month"])
    dates = pd.to_datetime(months, format=MONTH_FORMAT, errors="coerce")
    bad = ~months.str.match(MONTH_PATTERN) | dates.isna()
    if bad.any():
        raise FormatError(
            f"origination_month must be formatted YYYY-MM; bad rows: {_bad_rows(bad)}"
        )
    out["origination_month"] = months

    for col in INT_COLUMNS:
        text = _as_text(df[col])
        bad = ~text.str.fullmatch(r"\d+")
        if bad.any():
            raise FormatError(
                f"{col} must be a non-negative integer; bad rows: {_bad_rows(bad)}"
            )
        too_big = text.map(int) > INT64_MAX
        if too_big.any():
            raise FormatError(
                f"{col} exceeds the int64 range; bad rows: {_bad_rows(too_big)}"
            )
        out[col] = text.astype("int64")

    ids = _as_text(df["nb_clients"])
    bad = df["nb_clients"].isna() | (ids == "")
    if bad.any():
        raise FormatError(f"nb_clients must not be blank; bad rows: {_bad_rows(bad)}")
    out["nb_clients"] = ids

    return out.loc[:, RAW_COLUMNS]


# ───────────────────────── Splitting ──────────────────────────
def build_client_sample(records: pd.DataFrame) -> pd.DataFrame:
    """One row per distinct client tuple, with origination year / month derived."""
    clients = (
        records.loc[:, CLIENT_COLUMNS]
        .drop_duplicates()
        .reset_index(drop=True)
    )
    # anchored to day 1 of the month
    clients["origination_date"] = pd.to_datetime(
        clients["origination_month"], format=MONTH_FORMAT
    )
    clients["origination_year"] = clients["origination_date"].dt.year.astype("int16")
    clients["origination_month_num"] = clients["origination_date"].dt.month.astype("int8")
    clients["score_band_v2"] = clients["score_band_v2"].astype("category")
    clients["nb_clients"] = clients["nb_clients"].astype("category")
    return clients


def build_delinquency_table(records: pd.DataFrame) -> pd.DataFrame:
    """Every row's (months_since_origination, clients_on_default) pair."""
    table = records.loc[:, DELINQUENCY_COLUMNS].reset_index(drop=True)
    return table.astype("int64")


def split_records(records: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
    return build_client_sample(records), build_delinquency_table(records)


def load_and_split(path: Path = RAW_CSV) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Full load: read → validate → split into (clients, delinquency)."""
    records = parse_raw(read_raw_csv(path))
    clients, delinquency = split_records(records)
    print(f"Loaded {len(records):,} rows -> {len(clients):,} clients | "
          f"{len(delinquency):,} delinquency observations")
    return clients, delinquency


# ───────────────────────── Export ─────────────────────────────
def save_processed(
    clients: pd.DataFrame,
    delinquency: pd.DataFrame,
    out_dir: Path = PROC,
) -> Tuple[Path, Path]:
    """Write both derived tables to Parquet."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    clients_path = out_dir / CLIENTS_PARQUET
    delinquency_path = out_dir / DELINQUENCY_PARQUET
    try:
        clients.to_parquet(clients_path, index=False)
        delinquency.to_parquet(delinquency_path, index=False)
    except Exception as e:
        # Common case: pyarrow not installed
        raise RuntimeError(
            "Failed to write processed parquet files. "
            "Ensure 'pyarrow' is installed."
        ) from e
    return clients_path, delinquency_path


# ──────────────────────────── CLI ─────────────────────────────
if __name__ == "__main__":
    clients_df, delinquency_df = load_and_split()
    save_processed(clients_df, delinquency_df)
    print("Raw CSV split and written to data/processed.")
