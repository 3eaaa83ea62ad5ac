import pandas as pd
import pytest

from cohort_aggregates import (
    NONCOLLECTABLE_MONTHS,
    flag_noncollectable,
    originations_by_month,
    summarize_clients,
    summarize_delinquency,
)
from data_ingestion import (
    EmptyInputError,
    FormatError,
    load_and_split,
    parse_raw,
    split_records,
)


def _table(pairs):
    return pd.DataFrame(pairs, columns=["months_since_origination", "clients_on_default"])


def test_scenario_group_zero(scenario_frame):
    _, delinquency = split_records(parse_raw(scenario_frame))
    summary = summarize_delinquency(delinquency)

    row = summary.loc[0]
    assert row["mean"] == pytest.approx(9.0)
    assert row["min"] == 8
    assert row["max"] == 10
    assert row["n_obs"] == 2


def test_single_observation_group():
    summary = summarize_delinquency(_table([(0, 5)]))

    assert summary.loc[0, "mean"] == summary.loc[0, "min"] == summary.loc[0, "max"] == 5
    assert summary.loc[0, "n_obs"] == 1


def test_min_le_mean_le_max(cohort_csv):
    _, delinquency = load_and_split(cohort_csv)
    summary = summarize_delinquency(delinquency)

    assert (summary["min"] <= summary["mean"]).all()
    assert (summary["mean"] <= summary["max"]).all()


def test_keys_round_trip(cohort_csv):
    _, delinquency = load_and_split(cohort_csv)
    summary = summarize_delinquency(delinquency)

    assert set(summary.index) == set(delinquency["months_since_origination"])


def test_out_of_range_offsets_pass_through():
    summary = summarize_delinquency(_table([(0, 1), (17, 40), (15, 3)]))

    assert summary.index.tolist() == [0, 15, 17]
    assert summary.loc[17, "mean"] == 40


def test_sorted_numerically_for_shuffled_input():
    summary = summarize_delinquency(_table([(10, 1), (2, 2), (1, 3), (10, 5)]))

    assert summary.index.tolist() == [1, 2, 10]
    assert summary.loc[10, "mean"] == pytest.approx(3.0)


def test_sorted_numerically_for_string_categories():
    table = _table([("10", 1), ("2", 2), ("1", 3)])
    table["months_since_origination"] = table["months_since_origination"].astype("category")

    summary = summarize_delinquency(table)

    assert summary.index.tolist() == [1, 2, 10]


def test_empty_table_raises():
    with pytest.raises(EmptyInputError):
        summarize_delinquency(_table([]))


def test_missing_column_raises():
    with pytest.raises(KeyError):
        summarize_delinquency(pd.DataFrame({"months_since_origination": [0]}))


def test_flag_noncollectable_default_threshold():
    summary = summarize_delinquency(_table([(m, m) for m in range(16)]))
    flagged = flag_noncollectable(summary)

    assert flagged.loc[NONCOLLECTABLE_MONTHS, "noncollectable"]
    assert not flagged.loc[NONCOLLECTABLE_MONTHS - 1, "noncollectable"]
    pd.testing.assert_frame_equal(flagged.drop(columns="noncollectable"), summary)


def test_flag_noncollectable_custom_threshold():
    summary = summarize_delinquency(_table([(0, 1), (3, 2), (9, 4)]))

    assert flag_noncollectable(summary, threshold=3)["noncollectable"].tolist() == [False, True, True]


def test_client_mix(cohort_csv):
    clients, _ = load_and_split(cohort_csv)
    mix = summarize_clients(clients)

    assert mix.index.tolist() == [2, 3, 4, 5]
    assert mix["n_clients"].tolist() == [1, 1, 1, 1]
    assert mix["share"].sum() == pytest.approx(1.0)


def test_originations_by_month(cohort_csv):
    clients, _ = load_and_split(cohort_csv)
    per_month = originations_by_month(clients)

    assert per_month.index.tolist() == [
        pd.Timestamp("2021-01-01"),
        pd.Timestamp("2021-02-01"),
        pd.Timestamp("2021-03-01"),
        pd.Timestamp("2022-11-01"),
    ]
    assert per_month.tolist() == [1, 1, 1, 1]


def test_fractional_offset_is_rejected():
    with pytest.raises(FormatError, match="months_since_origination"):
        summarize_delinquency(_table([(1, 3), (1.5, 4)]))


def test_whole_float_offsets_are_accepted():
    summary = summarize_delinquency(_table([(1.0, 3), (2.0, 4)]))

    assert summary.index.tolist() == [1, 2]
