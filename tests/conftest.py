from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from data_ingestion import RAW_COLUMNS


SCENARIO_ROWS = [
    ("2021-01", 3, "c1", 0, 10),
    ("2021-01", 3, "c1", 1, 15),
    ("2021-02", 5, "c2", 0, 8),
]


def write_csv(path: Path, rows) -> Path:
    pd.DataFrame(rows, columns=RAW_COLUMNS).to_csv(path, index=False)
    return path


@pytest.fixture
def csv_writer():
    return write_csv


@pytest.fixture
def scenario_frame() -> pd.DataFrame:
    return pd.DataFrame(SCENARIO_ROWS, columns=RAW_COLUMNS)


@pytest.fixture
def scenario_csv(tmp_path) -> Path:
    return write_csv(tmp_path / "raw.csv", SCENARIO_ROWS)


@pytest.fixture
def cohort_csv(tmp_path) -> Path:
    rows = [
        ("2021-01", 3, "c1", 0, 10),
        ("2021-01", 3, "c1", 1, 15),
        ("2021-02", 5, "c2", 0, 8),
        ("2021-02", 5, "c2", 1, 12),
        ("2021-03", 2, "c3", 0, 4),
        ("2021-03", 2, "c3", 1, 9),
        ("2021-03", 2, "c3", 2, 14),
        ("2022-11", 4, "c4", 0, 6),
        ("2022-11", 4, "c4", 7, 20),
    ]
    return write_csv(tmp_path / "cohorts.csv", rows)
